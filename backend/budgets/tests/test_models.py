"""
Tests for MonthlyBudget figures.
"""
import datetime

import pytest
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.utils import timezone

from budgets.models import DailyTarget, MonthlyBudget, percentage
from planning.models import ScheduleStatus
from tenant.managers import tenant_context

MARCH_2025 = datetime.date(2025, 3, 1)


def month_start(day):
    return day.replace(day=1)


class TestPercentage:

    @pytest.mark.parametrize("numerator, denominator, expected", [
        (9000, 30000, Decimal('30.0')),
        (2, 3, Decimal('66.7')),
        (1, 8, Decimal('12.5')),
        (100, 0, Decimal('0')),
    ])
    def test_percentage(self, numerator, denominator, expected):
        assert percentage(numerator, denominator) == expected


@pytest.mark.django_db
class TestMonthlyBudget:

    def test_budget_month_normalised_to_first_day(self, make_budget):
        budget = make_budget(datetime.date(2025, 3, 15), 300000)

        budget.refresh_from_db()
        assert budget.budget_month == MARCH_2025
        assert (budget.year, budget.month) == (2025, 3)
        assert budget.month_end == datetime.date(2025, 3, 31)

    def test_past_month_figures(self, make_budget, schedule_on):
        budget = make_budget(MARCH_2025, 30000)
        schedule_on(datetime.date(2025, 3, 3), actual_revenue=9000)
        schedule_on(datetime.date(2025, 3, 4))
        schedule_on(datetime.date(2025, 3, 5), status=ScheduleStatus.CANCELLED)
        schedule_on(datetime.date(2025, 4, 1), actual_revenue=50000)

        assert budget.total_planned_revenue == 20000
        assert budget.total_actual_revenue == 9000
        assert budget.remaining_planned_revenue == 0
        assert budget.total_forecast_revenue == 9000
        assert budget.achievement_rate == Decimal('30.0')
        assert budget.budget_variance == -21000

    def test_cancelled_day_actual_still_counted(self, make_budget, schedule_on):
        budget = make_budget(MARCH_2025, 30000)
        schedule_on(datetime.date(2025, 3, 3), actual_revenue=4000, status=ScheduleStatus.CANCELLED)

        assert budget.total_actual_revenue == 4000
        assert budget.total_planned_revenue == 0

    def test_future_days_forecast_from_plan(self, make_budget, schedule_on):
        future_month = month_start(timezone.localdate() + datetime.timedelta(days=60))
        budget = make_budget(future_month, 40000)
        schedule_on(future_month + datetime.timedelta(days=9))
        schedule_on(future_month + datetime.timedelta(days=10))

        assert budget.remaining_planned_revenue == 20000
        assert budget.total_forecast_revenue == 20000
        assert budget.achievement_rate == Decimal('50.0')

    def test_today_counts_as_remaining_until_actual(self, make_budget, schedule_on):
        today = timezone.localdate()
        budget = make_budget(month_start(today), 20000)
        schedule = schedule_on(today)

        assert budget.remaining_planned_revenue == 10000
        assert budget.total_forecast_revenue == 10000

        schedule.actual_revenue = 8000
        schedule.save()

        assert budget.remaining_planned_revenue == 0
        assert budget.total_forecast_revenue == 8000

    def test_store_budget_counts_store_schedules(self, make_budget, make_plan, tamago_nigiri, schedule_on, store):
        store_plan = make_plan('Store Lunch', products=[(tamago_nigiri, 10)], store=store)
        budget = make_budget(MARCH_2025, 30000, store=store)
        schedule_on(datetime.date(2025, 3, 3), plan=store_plan)
        schedule_on(datetime.date(2025, 3, 3))

        assert budget.total_planned_revenue == 2000

    def test_other_tenant_schedules_ignored(self, make_budget, schedule_on, other_tenant):
        schedule_on(datetime.date(2025, 3, 3), actual_revenue=9000)
        with tenant_context(other_tenant):
            budget = MonthlyBudget.objects.create(tenant=other_tenant, budget_month=MARCH_2025, target_amount=1000)

        assert budget.total_actual_revenue == 0
        assert budget.total_planned_revenue == 0

    def test_one_tenant_budget_per_month(self, make_budget):
        make_budget(MARCH_2025, 300000)

        with pytest.raises(IntegrityError), transaction.atomic():
            make_budget(datetime.date(2025, 3, 20), 200000)

        assert MonthlyBudget.objects.count() == 1

    def test_store_budget_alongside_tenant_budget(self, make_budget, store):
        make_budget(MARCH_2025, 300000)
        make_budget(MARCH_2025, 100000, store=store)

        with pytest.raises(IntegrityError), transaction.atomic():
            make_budget(MARCH_2025, 50000, store=store)


@pytest.mark.django_db
class TestDailyTarget:

    def test_tenant_inherited_from_budget(self, tenant, make_budget):
        budget = make_budget(MARCH_2025, 30000)

        target = DailyTarget(monthly_budget=budget, target_date=datetime.date(2025, 3, 3), target_amount=12000)
        target.save()

        assert target.tenant_id == tenant.pk
        assert list(budget.daily_targets.all()) == [target]
