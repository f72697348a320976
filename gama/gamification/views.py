from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
import logging

from gama.core.utils import create_audit_log
from .models import Achievement, UserAchievement, Goal
from .progress import points_ranking
from .serializers import AchievementSerializer, UserAchievementSerializer, AwardSerializer, GoalSerializer

logger = logging.getLogger(__name__)


def staff_required_response():
    return Response({'error': 'Only staff members can manage achievements.'}, status=status.HTTP_403_FORBIDDEN)


# Achievement views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def achievement_list_create(request):
    """List achievements or create one (staff only)"""
    if request.method == 'GET':
        serializer = AchievementSerializer(Achievement.objects.all(), many=True)
        return Response(serializer.data)
    if not request.user.is_staff:
        return staff_required_response()
    serializer = AchievementSerializer(data=request.data)
    if serializer.is_valid():
        achievement = serializer.save()
        create_audit_log(
            request=request,
            action='create',
            model_name='Achievement',
            object_id=achievement.id,
            object_name=achievement.name,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def achievement_detail(request, pk):
    """Retrieve an achievement; update or delete it (staff only)"""
    achievement = get_object_or_404(Achievement, pk=pk)

    if request.method == 'GET':
        return Response(AchievementSerializer(achievement).data)
    if not request.user.is_staff:
        return staff_required_response()
    if request.method in ('PUT', 'PATCH'):
        serializer = AchievementSerializer(achievement, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Achievement',
                object_id=achievement.id,
                object_name=achievement.name,
                changes={'fields': sorted(serializer.validated_data.keys())},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        achievement_id, achievement_name = achievement.id, achievement.name
        achievement.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Achievement',
            object_id=achievement_id,
            object_name=achievement_name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def achievement_award(request, pk):
    """Award an achievement to a user (staff only)"""
    if not request.user.is_staff:
        return staff_required_response()
    achievement = get_object_or_404(Achievement, pk=pk)
    serializer = AwardSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    user = serializer.validated_data['user']
    award, created = UserAchievement.objects.get_or_create(user=user, achievement=achievement)
    if not created:
        return Response(
            {'error': f"'{user.username}' already has the achievement '{achievement.name}'."},
            status=status.HTTP_400_BAD_REQUEST
        )
    create_audit_log(
        request=request,
        action='achievement_award',
        model_name='Achievement',
        object_id=achievement.id,
        object_name=achievement.name,
        changes={'user_id': user.id, 'points': achievement.points_reward},
    )
    logger.info(f"Achievement '{achievement.name}' awarded to user {user.id}")
    return Response(UserAchievementSerializer(award).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_achievements(request):
    """Achievements awarded to the current user, with the points total"""
    awards = UserAchievement.objects.filter(user=request.user).select_related('achievement', 'user')
    return Response({
        'total_points': sum(award.achievement.points_reward for award in awards),
        'achievements': UserAchievementSerializer(awards, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def ranking(request):
    """Users by total points, dense-ranked"""
    return Response(points_ranking(current_user=request.user))


# Goal views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def goal_list_create(request):
    """List the user's goals with progress (filter: is_active) or create one"""
    if request.method == 'GET':
        goals = Goal.objects.filter(created_by=request.user)
        is_active = request.query_params.get('is_active', None)
        if is_active is not None:
            goals = goals.filter(is_active=is_active.lower() in ('1', 'true', 'yes'))
        serializer = GoalSerializer(goals, many=True)
        return Response(serializer.data)
    serializer = GoalSerializer(data=request.data)
    if serializer.is_valid():
        goal = serializer.save(created_by=request.user)
        create_audit_log(
            request=request,
            action='create',
            model_name='Goal',
            object_id=goal.id,
            object_name=goal.name,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def goal_detail(request, pk):
    """Retrieve, update or delete a goal"""
    goal = get_object_or_404(Goal, pk=pk, created_by=request.user)

    if request.method == 'GET':
        return Response(GoalSerializer(goal).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = GoalSerializer(goal, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Goal',
                object_id=goal.id,
                object_name=goal.name,
                changes={'fields': sorted(serializer.validated_data.keys())},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        goal_id, goal_name = goal.id, goal.name
        goal.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Goal',
            object_id=goal_id,
            object_name=goal_name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
