from django.urls import path
from .views import (
    achievement_list_create, achievement_detail, achievement_award, my_achievements,
    ranking, goal_list_create, goal_detail,
)

urlpatterns = [
    # Achievement endpoints
    path('achievements/', achievement_list_create, name='achievement-list-create'),
    path('achievements/mine/', my_achievements, name='achievement-mine'),
    path('achievements/<int:pk>/', achievement_detail, name='achievement-detail'),
    path('achievements/<int:pk>/award/', achievement_award, name='achievement-award'),
    path('ranking/', ranking, name='ranking'),

    # Goal endpoints
    path('goals/', goal_list_create, name='goal-list-create'),
    path('goals/<int:pk>/', goal_detail, name='goal-detail'),
]
