from django.urls import path
from . import views

urlpatterns = [
    path('reports/dashboard/', views.dashboard, name='report-dashboard'),

    # Financial reports
    path('reports/financial-summary/', views.financial_summary, name='report-financial-summary'),
    path('reports/income/', views.income_report, name='report-income'),
    path('reports/expense/', views.expense_report, name='report-expense'),
    path('reports/balance/', views.balance_report, name='report-balance'),

    # Sales reports
    path('reports/sales-summary/', views.sales_summary, name='report-sales-summary'),
    path('reports/sales-overview/', views.sales_overview, name='report-sales-overview'),
    path('reports/sales/', views.sales_report, name='report-sales'),
    path('reports/pos-sales-summary/', views.pos_sales_summary, name='report-pos-sales-summary'),
    path('reports/pos-sales/', views.pos_sales_report, name='report-pos-sales'),

    # Service order reports
    path('reports/service-orders-summary/', views.service_order_summary, name='report-service-order-summary'),
    path('reports/service-orders/', views.service_order_report, name='report-service-orders'),
    path('reports/common-services/', views.common_services, name='report-common-services'),
    path('reports/common-services/all/', views.common_services_report, name='report-common-services-all'),

    # Customer and warranty reports
    path('reports/average-ticket/', views.average_ticket, name='report-average-ticket'),
    path('reports/average-ticket/customers/', views.average_ticket_report, name='report-average-ticket-customers'),
    path('reports/warranty-overview/', views.warranty_overview, name='report-warranty-overview'),
    path('reports/warranties/', views.warranty_report, name='report-warranties'),
]
