from django.contrib import admin
from .models import Achievement, UserAchievement, Goal


@admin.register(Achievement)
class AchievementAdmin(admin.ModelAdmin):
    list_display = ['name', 'points_reward', 'icon_name', 'created_at']
    search_fields = ['name', 'description']
    ordering = ['name']


@admin.register(UserAchievement)
class UserAchievementAdmin(admin.ModelAdmin):
    list_display = ['user', 'achievement', 'awarded_at']
    list_filter = ['achievement']
    search_fields = ['user__username', 'achievement__name']
    ordering = ['-awarded_at']


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ['name', 'metric', 'target_value', 'period', 'start_date', 'end_date', 'scope',
                    'is_active', 'created_by']
    list_filter = ['period', 'scope', 'is_active']
    search_fields = ['name']
    ordering = ['-created_at']
