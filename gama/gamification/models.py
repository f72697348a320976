from django.db import models
from gama.core.models import User


class Achievement(models.Model):
    """Badge shared by every user of the installation"""
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField()
    icon_name = models.CharField(max_length=50, blank=True)
    points_reward = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'achievements'
        ordering = ['name']


class UserAchievement(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='achievements')
    achievement = models.ForeignKey(Achievement, on_delete=models.CASCADE, related_name='awards')
    awarded_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user.username} - {self.achievement.name}"

    class Meta:
        db_table = 'user_achievements'
        ordering = ['-awarded_at']
        unique_together = [['user', 'achievement']]


class Goal(models.Model):
    """Target for a metric over a date window"""
    METRIC_REVENUE = 'R$'
    METRIC_SERVICE_ORDERS = 'OS'
    METRIC_ITEMS = 'Itens'

    PERIOD_CHOICES = [
        ('daily', 'Daily'),
        ('weekly', 'Weekly'),
        ('monthly', 'Monthly'),
        ('yearly', 'Yearly'),
        ('total', 'Total'),
    ]

    SCOPE_CHOICES = [
        ('user', 'User'),
        ('global', 'Global'),
    ]

    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='goals')
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    metric = models.CharField(max_length=20)
    target_value = models.DecimalField(max_digits=12, decimal_places=2)
    period = models.CharField(max_length=10, choices=PERIOD_CHOICES, default='monthly')
    start_date = models.DateField()
    end_date = models.DateField()
    scope = models.CharField(max_length=10, choices=SCOPE_CHOICES, default='user')
    reward_description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'goals'
        ordering = ['-created_at']
