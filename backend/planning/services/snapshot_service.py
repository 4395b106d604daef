"""
Schedule snapshots.

A snapshot stores a scheduled day's product composition, its total and
the material requirements derived from it. Reads of the day prefer the
snapshot, so later edits to the plan leave past schedules untouched until
the snapshot is refreshed explicitly.
"""
import logging

from django.db import transaction
from django.utils import timezone

from catalog.models import Product
from core_backend.utils.numeric import normalize_count
from planning.exceptions import SnapshotError
from planning.models import PlanProduct
from planning.services.requirements_service import (
    ORDERING_POLICY,
    PlanLine,
    RequirementsAggregator,
    bom_prefetch,
)

logger = logging.getLogger(__name__)


class ScheduleSnapshotService:

    @staticmethod
    def plan_products_data(plan):
        """The live composition of ``plan`` in snapshot input form."""
        return [
            {'product_id': pp.product_id, 'production_count': pp.production_count}
            for pp in PlanProduct.all_objects.filter(plan=plan).order_by('id')
        ]

    @staticmethod
    def build_snapshot(products_data, tenant=None):
        """
        Build a snapshot blob from ``[{"product_id", "production_count"}]``.

        Raises:
            Product.DoesNotExist: if a product id is unknown (or belongs to
                another tenant when ``tenant`` is given).
            SnapshotError: if a production count is not a positive integer.
        """
        products_qs = Product.all_objects.prefetch_related(bom_prefetch())
        if tenant is not None:
            products_qs = products_qs.filter(tenant=tenant)

        products = []
        lines = []
        total_cost = 0

        for data in products_data:
            product = products_qs.get(pk=data['product_id'])
            production_count = normalize_count(data.get('production_count'))
            if production_count is None or production_count <= 0:
                raise SnapshotError(
                    f"Invalid production count {data.get('production_count')!r} for product {product.pk}"
                )

            subtotal = product.price * production_count
            products.append({
                'product_id': product.pk,
                'name': product.name,
                'item_number': product.item_number,
                'production_count': production_count,
                'price': product.price,
                'subtotal': subtotal,
            })
            lines.append(PlanLine(product, production_count))
            total_cost += subtotal

        materials = RequirementsAggregator(ORDERING_POLICY).aggregate(lines)

        return {
            'products': products,
            'total_cost': total_cost,
            'materials': [requirement.as_json() for requirement in materials],
            'created_at': timezone.now().isoformat(),
        }

    @classmethod
    def update_products_snapshot(cls, schedule, products_data):
        """Replace the schedule's snapshot and planned revenue."""
        snapshot = cls.build_snapshot(products_data, tenant=schedule.tenant)
        with transaction.atomic():
            schedule.plan_products_snapshot = snapshot
            schedule.planned_revenue = snapshot['total_cost']
            schedule.save(update_fields=['plan_products_snapshot', 'planned_revenue', 'updated_at'])

        logger.info(
            f"PlanSchedule {schedule.pk}: snapshot refreshed with {len(snapshot['products'])} products, "
            f"total {snapshot['total_cost']}"
        )
        return schedule

    @classmethod
    def create_snapshot_from_plan(cls, schedule):
        return cls.update_products_snapshot(schedule, cls.plan_products_data(schedule.plan))

    @staticmethod
    def snapshot_products(schedule):
        """Snapshot rows with their Product instances; empty without a snapshot."""
        if not schedule.has_snapshot:
            return []

        rows = schedule.plan_products_snapshot['products']
        result = []
        for row in rows:
            result.append({
                'product': Product.all_objects.get(pk=row['product_id']),
                'production_count': row['production_count'],
                'price': row['price'],
                'subtotal': row['subtotal'],
            })
        return result
