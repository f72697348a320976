from decimal import Decimal
from rest_framework import serializers
from gama.core.fields import LocalizedDecimalField, validate_min_length
from gama.core.models import User
from .models import Achievement, UserAchievement, Goal
from .progress import goal_progress


class AchievementSerializer(serializers.ModelSerializer):
    points_reward = serializers.IntegerField(min_value=0, required=False)

    class Meta:
        model = Achievement
        fields = ['id', 'name', 'description', 'icon_name', 'points_reward', 'created_at']
        read_only_fields = ['created_at']

    def validate_name(self, value):
        return validate_min_length(value, 2, 'Name')

    def validate_description(self, value):
        return validate_min_length(value, 10, 'Description')


class UserAchievementSerializer(serializers.ModelSerializer):
    achievement = AchievementSerializer(read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)

    class Meta:
        model = UserAchievement
        fields = ['id', 'user', 'username', 'achievement', 'awarded_at']


class AwardSerializer(serializers.Serializer):
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(is_active=True))


class GoalSerializer(serializers.ModelSerializer):
    target_value = LocalizedDecimalField(max_digits=12, decimal_places=2)
    progress = serializers.SerializerMethodField()

    class Meta:
        model = Goal
        fields = ['id', 'name', 'description', 'metric', 'target_value', 'period', 'start_date', 'end_date',
                  'scope', 'reward_description', 'is_active', 'progress', 'created_by', 'created_at', 'updated_at']
        read_only_fields = ['created_by', 'created_at', 'updated_at']

    def get_progress(self, obj):
        return goal_progress(obj)

    def validate_name(self, value):
        return validate_min_length(value, 2, 'Name')

    def validate_metric(self, value):
        return validate_min_length(value, 1, 'Metric')

    def validate_target_value(self, value):
        if value <= Decimal('0'):
            raise serializers.ValidationError("Target value must be greater than zero.")
        return value

    def validate(self, attrs):
        start_date = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end_date = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({'end_date': "End date must be on or after the start date."})
        return attrs
