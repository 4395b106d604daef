"""
Plan maintenance: product lines, calendar scheduling and copies.
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.db import transaction

from catalog.models import Product
from core_backend.utils.copying import ChildCopy, CopyConfig, RecordCopier
from core_backend.utils.numeric import normalize_count, sanitize_numeric_params
from planning.models import PlanProduct, PlanSchedule, PlanStatus
from planning.services.snapshot_service import ScheduleSnapshotService

logger = logging.getLogger(__name__)

# Monday=0 ... Friday=4
WEEKDAYS = range(0, 5)

PLAN_COPY_CONFIG = CopyConfig(
    uniqueness_scope=('category_id', 'store_id'),
    uniqueness_check_attributes=('name', 'reading'),
    children=(ChildCopy('plan_products', 'plan'),),
    overrides={'status': PlanStatus.DRAFT},
)


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _whole_count(value):
    # Fractional counts are left unset so model validation rejects them
    if value is None:
        return None
    if isinstance(value, Decimal) and value != value.to_integral_value():
        return None
    return normalize_count(value)


class PlanService:

    @staticmethod
    def save_plan_products(plan, lines):
        """
        Replace the product lines of ``plan``.

        ``lines`` is a list of dicts with ``product`` (instance or id) and
        ``production_count`` (int or free-form text such as "１,０００").
        Fractional counts are rejected. Lines with neither are ignored.
        When a product appears more than once the first line is kept and
        the rest are dropped.

        Returns:
            list[PlanProduct]: saved lines in input order.
        """
        seen = set()
        kept = []
        for index, line in enumerate(lines):
            product = line.get('product')
            if _is_blank(product) and _is_blank(line.get('production_count')):
                continue
            product_id = getattr(product, 'pk', product)
            if product_id in seen:
                logger.warning(f"Dropping duplicate product {product_id} (line {index}) on plan {plan.pk}")
                continue
            seen.add(product_id)
            line = sanitize_numeric_params(line, with_comma=('production_count',))
            kept.append((product_id, line.get('production_count')))

        saved = []
        with transaction.atomic():
            PlanProduct.all_objects.filter(plan=plan).exclude(product_id__in=seen).delete()

            for product_id, production_count in kept:
                product = Product.all_objects.get(pk=product_id, tenant=plan.tenant)
                plan_product = (
                    PlanProduct.all_objects.filter(plan=plan, product=product).first()
                    or PlanProduct(tenant=plan.tenant, plan=plan, product=product)
                )
                plan_product.production_count = _whole_count(production_count)
                plan_product.full_clean(exclude=['tenant', 'plan', 'product'])
                plan_product.save()
                saved.append(plan_product)

        return saved

    @staticmethod
    def add_schedule(plan, date, user=None):
        """
        Put ``plan`` on the calendar for ``date``.

        A new schedule is snapshotted straight away. Returns
        ``(schedule, created)``.
        """
        with transaction.atomic():
            schedule, created = PlanSchedule.all_objects.get_or_create(
                plan=plan,
                scheduled_date=date,
                defaults={
                    'tenant': plan.tenant,
                    'store': plan.store,
                    'created_by': user,
                },
            )
            if created:
                ScheduleSnapshotService.create_snapshot_from_plan(schedule)
                logger.info(f"Scheduled plan {plan.pk} on {date}")
        return schedule, created

    @classmethod
    def add_schedules(cls, plan, dates, user=None):
        return [cls.add_schedule(plan, date, user=user)[0] for date in dates]

    @classmethod
    def add_weekday_schedules(cls, plan, start_date, end_date, user=None):
        """Schedule ``plan`` on every Monday to Friday between the two dates, inclusive."""
        dates = []
        current = start_date
        while current <= end_date:
            if current.weekday() in WEEKDAYS:
                dates.append(current)
            current += timedelta(days=1)
        return cls.add_schedules(plan, dates, user=user)

    @staticmethod
    def copy_plan(plan, user=None):
        """Copy a plan with its product lines. The copy starts as a draft."""
        return RecordCopier(PLAN_COPY_CONFIG).copy(plan, user=user)
