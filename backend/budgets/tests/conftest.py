"""
Pytest fixtures for budget tests.
"""
import pytest

from budgets.models import MonthlyBudget
from planning.services import PlanService


@pytest.fixture
def lunch(make_plan, tamago_nigiri):
    """Plans 10,000 a day."""
    return make_plan('Lunch', products=[(tamago_nigiri, 50)])


@pytest.fixture
def schedule_on(lunch):
    """
    Factory scheduling the lunch plan.

    Usage:
        schedule_on(date(2025, 3, 3), actual_revenue=9000)
    """
    def _schedule(day, actual_revenue=None, status=None, plan=None):
        schedule, _ = PlanService.add_schedule(plan or lunch, day)
        if actual_revenue is not None:
            schedule.actual_revenue = actual_revenue
        if status is not None:
            schedule.status = status
        schedule.save()
        return schedule

    return _schedule


@pytest.fixture
def make_budget(tenant):
    def _make(budget_month, target_amount, **kwargs):
        return MonthlyBudget.objects.create(
            tenant=tenant,
            budget_month=budget_month,
            target_amount=target_amount,
            **kwargs
        )

    return _make
