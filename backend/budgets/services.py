"""
Daily revenue service - target vs. plan vs. actual for each day of a month.
"""
import calendar
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from budgets.models import DailyTarget, MonthlyBudget, percentage
from planning.models import PlanSchedule, ScheduleStatus

logger = logging.getLogger(__name__)


@dataclass
class DailyRevenueRow:
    date: date
    target: int
    actual: int
    plan: int
    forecast: int
    diff: int
    achievement_rate: Decimal


class DailyRevenueService:
    """
    Builds one row per day of a budgeted month.

    The forecast of a day is its actual revenue once one is recorded,
    otherwise its planned revenue. Months without a budget yield no rows.
    """

    def __init__(self, tenant, year, month, store=None):
        self.tenant = tenant
        self.year = int(year)
        self.month = int(month)
        self.store = store
        self.start_date = date(self.year, self.month, 1)
        self.end_date = date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def get_budget(self):
        return MonthlyBudget.all_objects.filter(
            tenant=self.tenant,
            store=self.store,
            budget_month=self.start_date,
        ).first()

    def build(self):
        budget = self.get_budget()
        if budget is None:
            logger.debug(f"No budget for {self.start_date:%Y-%m} (tenant {self.tenant.slug})")
            return []

        targets = dict(
            DailyTarget.all_objects.filter(
                monthly_budget=budget,
                target_date__range=(self.start_date, self.end_date),
            ).values_list('target_date', 'target_amount')
        )

        schedules = PlanSchedule.all_objects.filter(
            tenant=self.tenant,
            scheduled_date__range=(self.start_date, self.end_date),
        ).select_related('plan')
        if self.store is not None:
            schedules = schedules.filter(store=self.store)

        actuals = defaultdict(int)
        plans = defaultdict(int)
        for schedule in schedules:
            actuals[schedule.scheduled_date] += schedule.actual_revenue or 0
            if schedule.status != ScheduleStatus.CANCELLED:
                plans[schedule.scheduled_date] += schedule.current_planned_revenue

        rows = []
        day = self.start_date
        while day <= self.end_date:
            rows.append(self._build_row(day, targets.get(day, 0), actuals[day], plans[day]))
            day += timedelta(days=1)
        return rows

    @staticmethod
    def _build_row(day, target, actual, plan):
        forecast = actual if actual > 0 else plan
        return DailyRevenueRow(
            date=day,
            target=target,
            actual=actual,
            plan=plan,
            forecast=forecast,
            diff=forecast - target,
            achievement_rate=percentage(forecast, target),
        )
