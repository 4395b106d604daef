"""
Budgets - monthly revenue targets and their daily breakdown.

Forecast = revenue already recorded + planned revenue of the days still
ahead (future days, and today while no actual has been entered).
"""
import calendar
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from planning.models import PlanSchedule
from tenant.managers import TenantManager

DESCRIPTION_MAX_LENGTH = 500


def percentage(numerator, denominator):
    """numerator / denominator as a percentage rounded to 0.1; 0 for a zero denominator."""
    if not denominator:
        return Decimal('0')
    rate = Decimal(numerator) / Decimal(denominator) * 100
    return rate.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)


class MonthlyBudget(models.Model):
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='monthly_budgets'
    )
    store = models.ForeignKey(
        'tenant.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='monthly_budgets'
    )
    budget_month = models.DateField(help_text=_("First day of the budgeted month"))
    target_amount = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    description = models.TextField(max_length=DESCRIPTION_MAX_LENGTH, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Monthly Budget")
        verbose_name_plural = _("Monthly Budgets")
        ordering = ['-budget_month']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'store', 'budget_month'],
                name='unique_budget_per_month'
            ),
            models.UniqueConstraint(
                fields=['tenant', 'budget_month'],
                condition=models.Q(store__isnull=True),
                name='unique_budget_per_month_no_store'
            ),
        ]

    def __str__(self):
        return f"{self.budget_month:%Y-%m} ¥{self.target_amount:,}"

    def save(self, *args, **kwargs):
        if self.budget_month:
            self.budget_month = self.budget_month.replace(day=1)
        super().save(*args, **kwargs)

    @property
    def year(self):
        return self.budget_month.year

    @property
    def month(self):
        return self.budget_month.month

    @property
    def month_end(self):
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def plan_schedules(self):
        schedules = PlanSchedule.all_objects.filter(
            tenant_id=self.tenant_id,
            scheduled_date__range=(self.budget_month, self.month_end),
        ).select_related('plan')
        if self.store_id:
            schedules = schedules.filter(store_id=self.store_id)
        return schedules

    @property
    def total_planned_revenue(self):
        return sum(s.expected_revenue for s in self.plan_schedules().not_cancelled())

    @property
    def total_actual_revenue(self):
        total = self.plan_schedules().filter(actual_revenue__isnull=False).aggregate(
            total=models.Sum('actual_revenue')
        )['total']
        return total or 0

    @property
    def remaining_planned_revenue(self):
        today = timezone.localdate()
        upcoming = self.plan_schedules().not_cancelled()
        future = upcoming.filter(scheduled_date__gt=today)
        today_open = upcoming.filter(scheduled_date=today, actual_revenue__isnull=True)
        return (
            sum(s.expected_revenue for s in future)
            + sum(s.expected_revenue for s in today_open)
        )

    @property
    def total_forecast_revenue(self):
        return self.total_actual_revenue + self.remaining_planned_revenue

    @property
    def achievement_rate(self):
        return percentage(self.total_forecast_revenue, self.target_amount)

    @property
    def budget_variance(self):
        return self.total_forecast_revenue - self.target_amount


class DailyTarget(models.Model):
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='daily_targets'
    )
    monthly_budget = models.ForeignKey(
        MonthlyBudget,
        on_delete=models.CASCADE,
        related_name='daily_targets'
    )
    target_date = models.DateField()
    target_amount = models.PositiveIntegerField(default=0)
    note = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Daily Target")
        verbose_name_plural = _("Daily Targets")
        ordering = ['target_date']
        constraints = [
            models.UniqueConstraint(
                fields=['monthly_budget', 'target_date'],
                name='unique_daily_target_per_budget'
            ),
        ]

    def __str__(self):
        return f"{self.target_date} ¥{self.target_amount:,}"

    def save(self, *args, **kwargs):
        if self.monthly_budget_id and not self.tenant_id:
            self.tenant_id = self.monthly_budget.tenant_id
        super().save(*args, **kwargs)
