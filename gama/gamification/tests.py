"""
Test suite for gamification module
Tests: Achievements, Awards, Ranking, Goals, Goal progress
"""
from datetime import timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from gama.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gama.gamification.models import Achievement, UserAchievement, Goal
from gama.gamification.progress import dense_rank, goal_current_value, progress_percentage
from gama.pos.models import POSSaleItem


class AchievementTests(TestCase):
    """Test achievement management and awards"""

    def setUp(self):
        self.staff = TestDataFactory.create_user(is_staff=True)
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.staff)

    def test_create_achievement(self):
        response = self.client.post('/api/v1/achievements/', {
            'name': 'Primeira venda',
            'description': 'Concluiu a primeira venda no PDV',
            'icon_name': 'trophy',
            'points_reward': 50,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_achievement_validation(self):
        response = self.client.post('/api/v1/achievements/', {
            'name': 'X', 'description': 'short', 'points_reward': -1,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ('name', 'description', 'points_reward'):
            self.assertIn(field, response.data)

    def test_non_staff_cannot_manage(self):
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/v1/achievements/', {
            'name': 'Primeira venda', 'description': 'Concluiu a primeira venda no PDV',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get('/api/v1/achievements/').status_code, status.HTTP_200_OK)

    def test_award_once(self):
        achievement = Achievement.objects.create(name='Técnico', description='Concluiu dez ordens de serviço', points_reward=30)
        url = f'/api/v1/achievements/{achievement.id}/award/'
        response = self.client.post(url, {'user': self.user.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post(url, {'user': self.user.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(UserAchievement.objects.filter(user=self.user).count(), 1)

    def test_my_achievements(self):
        first = Achievement.objects.create(name='A1', description='First achievement here', points_reward=10)
        second = Achievement.objects.create(name='A2', description='Second achievement here', points_reward=15)
        UserAchievement.objects.create(user=self.user, achievement=first)
        UserAchievement.objects.create(user=self.user, achievement=second)
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/achievements/mine/')
        self.assertEqual(response.data['total_points'], 25)
        self.assertEqual(len(response.data['achievements']), 2)


class RankingTests(TestCase):
    """Test points ranking"""

    def test_dense_rank(self):
        rows = [{'points': 50}, {'points': 50}, {'points': 20}, {'points': 0}]
        self.assertEqual([row['rank'] for row in dense_rank(rows, 'points')], [1, 1, 2, 3])

    def test_ranking_endpoint(self):
        alice = TestDataFactory.create_user(username='alice')
        bob = TestDataFactory.create_user(username='bob')
        carol = TestDataFactory.create_user(username='carol')
        big = Achievement.objects.create(name='Big', description='Worth many points', points_reward=40)
        small = Achievement.objects.create(name='Small', description='Worth a few points', points_reward=10)
        UserAchievement.objects.create(user=alice, achievement=big)
        UserAchievement.objects.create(user=bob, achievement=big)
        UserAchievement.objects.create(user=carol, achievement=small)

        client = AuthenticatedAPIClient()
        client.authenticate_user(carol)
        response = client.get('/api/v1/ranking/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        by_name = {row['username']: row for row in response.data}
        self.assertEqual(by_name['alice']['rank'], 1)
        self.assertEqual(by_name['bob']['rank'], 1)
        self.assertEqual(by_name['carol']['rank'], 2)
        self.assertEqual(by_name['carol']['total_points'], 10)
        self.assertTrue(by_name['carol']['is_current_user'])
        self.assertFalse(by_name['alice']['is_current_user'])


class GoalTests(TestCase):
    """Test goals and their progress"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.today = timezone.localdate()

    def goal_payload(self, **extra):
        data = {
            'name': 'Faturamento do mês',
            'metric': 'R$',
            'target_value': '1000,00',
            'period': 'monthly',
            'start_date': str(self.today - timedelta(days=1)),
            'end_date': str(self.today + timedelta(days=1)),
            'scope': 'user',
        }
        data.update(extra)
        return data

    def test_create_goal_with_progress(self):
        TestDataFactory.create_sale(self.user, sale_price=Decimal('300.00'))
        TestDataFactory.create_pos_sale(self.user, total_amount=Decimal('200.00'))
        response = self.client.post('/api/v1/goals/', self.goal_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['progress']['current_value'], '500.00')
        self.assertEqual(response.data['progress']['percentage'], '50.00')

    def test_goal_validation(self):
        response = self.client.post('/api/v1/goals/', self.goal_payload(
            target_value='0',
            start_date=str(self.today),
            end_date=str(self.today - timedelta(days=3)),
        ), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('target_value', response.data)

    def test_end_before_start_rejected(self):
        response = self.client.post('/api/v1/goals/', self.goal_payload(
            start_date=str(self.today), end_date=str(self.today - timedelta(days=3)),
        ), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('end_date', response.data)

    def test_goals_are_scoped_to_creator(self):
        other = TestDataFactory.create_user()
        goal = Goal.objects.create(
            created_by=other, name='Outra', metric='OS', target_value=Decimal('5'),
            start_date=self.today, end_date=self.today,
        )
        self.assertEqual(self.client.get('/api/v1/goals/').data, [])
        self.assertEqual(self.client.get(f'/api/v1/goals/{goal.id}/').status_code, status.HTTP_404_NOT_FOUND)

    def test_service_order_progress_is_capped(self):
        goal = Goal.objects.create(
            created_by=self.user, name='OS', metric='OS', target_value=Decimal('1'),
            start_date=self.today - timedelta(days=1), end_date=self.today + timedelta(days=1),
        )
        for _ in range(3):
            order = TestDataFactory.create_service_order(self.user, status='completed')
            order.finalized_at = timezone.now()
            order.save()
        TestDataFactory.create_service_order(self.user, status='pending')
        self.assertEqual(goal_current_value(goal), Decimal('3'))
        response = self.client.get(f'/api/v1/goals/{goal.id}/')
        self.assertEqual(response.data['progress']['percentage'], '100.00')

    def test_items_progress(self):
        goal = Goal.objects.create(
            created_by=self.user, name='Itens', metric='Itens', target_value=Decimal('10'),
            start_date=self.today - timedelta(days=1), end_date=self.today + timedelta(days=1),
        )
        item = TestDataFactory.create_inventory_item(self.user)
        pos_sale = TestDataFactory.create_pos_sale(self.user)
        POSSaleItem.objects.create(pos_sale=pos_sale, inventory_item=item, quantity=4, price_at_time=Decimal('10.00'))
        self.assertEqual(goal_current_value(goal), Decimal('4'))

    def test_progress_percentage(self):
        self.assertEqual(progress_percentage(Decimal('25'), Decimal('200')), Decimal('12.50'))
        self.assertEqual(progress_percentage(Decimal('500'), Decimal('200')), Decimal('100.00'))
        self.assertEqual(progress_percentage(Decimal('5'), Decimal('0')), Decimal('0.00'))

    def test_filter_active(self):
        Goal.objects.create(created_by=self.user, name='On', metric='OS', target_value=Decimal('1'),
                            start_date=self.today, end_date=self.today)
        Goal.objects.create(created_by=self.user, name='Off', metric='OS', target_value=Decimal('1'),
                            start_date=self.today, end_date=self.today, is_active=False)
        response = self.client.get('/api/v1/goals/?is_active=true')
        self.assertEqual([goal['name'] for goal in response.data], ['On'])
