import logging
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from catalog.models import CategoryKind
from core_backend.utils.archiving import SoftDeleteMixin
from core_backend.utils.numeric import normalize_count
from core_backend.utils.status import StatusChangeRestriction
from tenant.managers import TenantManager, TenantSoftDeleteManager

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_LENGTH = 500


class PlanStatus(models.TextChoices):
    DRAFT = "draft", _("Draft")
    ACTIVE = "active", _("Active")
    COMPLETED = "completed", _("Completed")


class ScheduleStatus(models.TextChoices):
    SCHEDULED = "scheduled", _("Scheduled")
    COMPLETED = "completed", _("Completed")
    CANCELLED = "cancelled", _("Cancelled")


class Plan(SoftDeleteMixin):
    """
    A production plan: which products to make and how many of each.

    Plans are reusable; putting one on the calendar creates a PlanSchedule.
    """
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='plans'
    )
    store = models.ForeignKey(
        'tenant.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='plans'
    )
    category = models.ForeignKey(
        'catalog.Category',
        on_delete=models.PROTECT,
        related_name='plans',
        limit_choices_to={'kind': CategoryKind.PLAN}
    )
    name = models.CharField(max_length=100)
    reading = models.CharField(max_length=200, blank=True)
    status = models.CharField(
        max_length=20,
        choices=PlanStatus.choices,
        default=PlanStatus.DRAFT
    )
    description = models.TextField(max_length=DESCRIPTION_MAX_LENGTH, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_plans'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantSoftDeleteManager()
    all_objects = models.Manager()

    STATUS_RESTRICTION = StatusChangeRestriction(
        related_name='schedules',
        restricted_statuses=(PlanStatus.DRAFT, PlanStatus.COMPLETED),
        message=_("This plan is on the calendar and cannot be set to draft or completed."),
    )

    class Meta:
        verbose_name = _("Plan")
        verbose_name_plural = _("Plans")
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['category', 'store', 'name'],
                name='unique_plan_name_per_category'
            ),
            # NULL stores never collide in a plain unique index
            models.UniqueConstraint(
                fields=['category', 'name'],
                condition=models.Q(store__isnull=True),
                name='unique_plan_name_per_category_no_store'
            ),
            models.UniqueConstraint(
                fields=['category', 'store', 'reading'],
                condition=~models.Q(reading=''),
                name='unique_plan_reading_per_category'
            ),
            models.UniqueConstraint(
                fields=['category', 'reading'],
                condition=models.Q(store__isnull=True) & ~models.Q(reading=''),
                name='unique_plan_reading_per_category_no_store'
            ),
        ]
        indexes = [
            models.Index(fields=['tenant', 'status'], name='plan_tenant_status_idx'),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        super().clean()
        self.STATUS_RESTRICTION.validate(self)

    def _plan_products(self):
        return PlanProduct.all_objects.filter(plan=self).select_related('product')

    @property
    def expected_revenue(self):
        """Sum of price x production count over the plan's products."""
        return sum(
            plan_product.product.price * plan_product.production_count
            for plan_product in self._plan_products()
        )

    @property
    def name_with_total(self):
        return f"{self.name} (¥{self.expected_revenue:,})"

    @property
    def scheduled_days_count(self):
        return PlanSchedule.all_objects.filter(plan=self).values('scheduled_date').distinct().count()

    @property
    def total_actual_revenue(self):
        total = PlanSchedule.all_objects.filter(plan=self).aggregate(
            total=models.Sum('actual_revenue')
        )['total']
        return total or 0


class PlanProduct(models.Model):
    """One product line of a plan."""
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='plan_products'
    )
    plan = models.ForeignKey(
        Plan,
        on_delete=models.CASCADE,
        related_name='plan_products'
    )
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='plan_products'
    )
    production_count = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text=_("How many units of the product the plan makes")
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Plan Product")
        verbose_name_plural = _("Plan Products")
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['plan', 'product'],
                name='unique_product_per_plan'
            ),
        ]

    def __str__(self):
        return f"{self.plan_id}: {self.product_id} x {self.production_count}"

    def save(self, *args, **kwargs):
        if self.plan_id and not self.tenant_id:
            self.tenant_id = self.plan.tenant_id
        if self.production_count not in (None, ''):
            self.production_count = normalize_count(self.production_count)
        super().save(*args, **kwargs)

    @property
    def subtotal(self):
        return self.product.price * self.production_count


class PlanScheduleQuerySet(models.QuerySet):

    def for_date(self, date):
        return self.filter(scheduled_date=date)

    def for_month(self, year, month):
        return self.filter(scheduled_date__year=year, scheduled_date__month=month)

    def not_cancelled(self):
        return self.exclude(status=ScheduleStatus.CANCELLED)


class TenantPlanScheduleManager(TenantManager.from_queryset(PlanScheduleQuerySet)):
    pass


class PlanSchedule(models.Model):
    """
    A plan put on the calendar for one day.

    ``plan_products_snapshot`` freezes the plan's composition and total so
    later edits to the plan leave the day's figures alone. The first time
    an actual revenue is recorded, the planned revenue is frozen too.
    """
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='plan_schedules'
    )
    store = models.ForeignKey(
        'tenant.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='plan_schedules'
    )
    plan = models.ForeignKey(
        Plan,
        on_delete=models.PROTECT,
        related_name='schedules'
    )
    scheduled_date = models.DateField()
    status = models.CharField(
        max_length=20,
        choices=ScheduleStatus.choices,
        default=ScheduleStatus.SCHEDULED
    )
    actual_revenue = models.PositiveIntegerField(null=True, blank=True)
    planned_revenue = models.IntegerField(
        null=True,
        blank=True,
        help_text=_("Planned revenue frozen when the actual revenue was first recorded")
    )
    plan_products_snapshot = models.JSONField(default=dict, blank=True)
    note = models.TextField(max_length=DESCRIPTION_MAX_LENGTH, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_plan_schedules'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantPlanScheduleManager()
    all_objects = PlanScheduleQuerySet.as_manager()

    class Meta:
        verbose_name = _("Plan Schedule")
        verbose_name_plural = _("Plan Schedules")
        ordering = ['-scheduled_date']
        constraints = [
            models.UniqueConstraint(
                fields=['plan', 'scheduled_date'],
                name='unique_plan_per_date'
            ),
        ]
        indexes = [
            models.Index(fields=['tenant', 'scheduled_date'], name='schedule_tenant_date_idx'),
        ]

    def __str__(self):
        return f"{self.scheduled_date} {self.plan}"

    def save(self, *args, **kwargs):
        if self.plan_id and not self.tenant_id:
            self.tenant_id = self.plan.tenant_id
        if self._actual_revenue_first_recorded():
            self._freeze_planned_revenue()
            update_fields = kwargs.get('update_fields')
            if update_fields is not None:
                kwargs['update_fields'] = set(update_fields) | {'planned_revenue', 'plan_products_snapshot'}
        super().save(*args, **kwargs)

    def _actual_revenue_first_recorded(self):
        if self.actual_revenue is None:
            return False
        if self._state.adding or self.pk is None:
            return True
        previous = (
            PlanSchedule.all_objects.filter(pk=self.pk)
            .values_list('actual_revenue', flat=True)
            .first()
        )
        return previous is None

    def _freeze_planned_revenue(self):
        from planning.services.snapshot_service import ScheduleSnapshotService

        if not self.has_snapshot:
            self.plan_products_snapshot = ScheduleSnapshotService.build_snapshot(
                ScheduleSnapshotService.plan_products_data(self.plan),
                tenant=self.plan.tenant,
            )

        self.planned_revenue = self.plan_products_snapshot.get('total_cost') or 0
        logger.info(f"PlanSchedule {self.pk or 'new'}: planned revenue frozen at {self.planned_revenue}")

    @property
    def has_snapshot(self):
        snapshot = self.plan_products_snapshot or {}
        return bool(snapshot.get('products'))

    @property
    def has_actual(self):
        return self.actual_revenue is not None

    @property
    def current_planned_revenue(self):
        if self.has_actual:
            if self.planned_revenue is not None:
                return self.planned_revenue
            return self.plan.expected_revenue if self.plan_id else 0
        if self.has_snapshot:
            return self.plan_products_snapshot.get('total_cost') or 0
        return self.plan.expected_revenue if self.plan_id else 0

    @property
    def expected_revenue(self):
        return self.current_planned_revenue

    @property
    def revenue_variance(self):
        return (self.actual_revenue or 0) - self.expected_revenue

    @property
    def achievement_rate(self):
        """Actual / expected as a percentage rounded to 0.1; None without an actual."""
        if not self.has_actual:
            return None
        expected = self.expected_revenue
        if not expected:
            return 0
        rate = Decimal(self.actual_revenue) / Decimal(expected) * 100
        return rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    @property
    def is_today(self):
        return self.scheduled_date == timezone.localdate()

    @property
    def is_past(self):
        return self.scheduled_date < timezone.localdate()

    @property
    def is_future(self):
        return self.scheduled_date > timezone.localdate()
