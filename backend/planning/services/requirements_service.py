"""
Material requirements engine.

Expands plans into the raw materials they consume and converts the totals
into supplier order units. Order-grouped materials (two cuts of tuna
bought as one case) are pooled before rounding, so the group is rounded
once and every member reports the group's order quantity.

Two aggregation policies exist side by side:

- ORDERING_POLICY merges materials by id and rounds up to whole order
  units. Used for purchasing and the daily requirements list.
- LEGACY_PLAN_POLICY merges materials by name and rounds to two decimals.
  Materials with the same name in different categories collapse into one
  row under this policy.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from enum import Enum
from typing import Any, List, Optional

from django.db.models import Prefetch

from catalog.models import OrderConversionType, Product, ProductMaterial
from planning.exceptions import InvalidProductionCountError
from planning.models import PlanProduct, PlanSchedule

logger = logging.getLogger(__name__)

ZERO = Decimal('0')
TWO_PLACES = Decimal('0.01')


class MergeKey(str, Enum):
    MATERIAL_NAME = "material_name"
    MATERIAL_ID = "material_id"


class RoundingPolicy(str, Enum):
    CEILING = "ceiling"
    TWO_DECIMALS = "two_decimals"


@dataclass(frozen=True)
class AggregationPolicy:
    merge_key: MergeKey = MergeKey.MATERIAL_ID
    rounding: RoundingPolicy = RoundingPolicy.CEILING


LEGACY_PLAN_POLICY = AggregationPolicy(MergeKey.MATERIAL_NAME, RoundingPolicy.TWO_DECIMALS)
ORDERING_POLICY = AggregationPolicy(MergeKey.MATERIAL_ID, RoundingPolicy.CEILING)


@dataclass(frozen=True)
class PlanLine:
    """A product and how many to make. Built from PlanProduct rows or snapshots."""
    product: Any
    production_count: int


@dataclass
class MaterialContribution:
    """What one product line consumes of one material."""
    material_id: int
    material_name: str
    quantity: Decimal
    unit_weight: Decimal
    weight_per_product: Decimal
    total_quantity: Decimal
    total_weight: Decimal
    unit_name: str
    material: Any = field(default=None, repr=False, compare=False)


@dataclass
class MaterialRequirement:
    material_id: int
    material_name: str
    quantity: Decimal
    unit_weight: Decimal
    weight_per_product: Decimal
    total_quantity: Decimal
    total_weight: Decimal
    required_order_quantity: Decimal
    order_conversion_type: str
    order_unit_name: str
    order_group_name: Optional[str]
    is_grouped: bool
    display_order: int
    plans: List[str] = field(default_factory=list)

    def as_json(self):
        """Plain dict with decimals as strings, safe for JSONField storage."""
        return {
            'material_id': self.material_id,
            'material_name': self.material_name,
            'quantity': str(self.quantity),
            'unit_weight': str(self.unit_weight),
            'weight_per_product': str(self.weight_per_product),
            'total_quantity': str(self.total_quantity),
            'total_weight': str(self.total_weight),
            'required_order_quantity': str(self.required_order_quantity),
            'order_conversion_type': str(self.order_conversion_type),
            'order_unit_name': self.order_unit_name,
            'order_group_name': self.order_group_name,
            'is_grouped': self.is_grouped,
            'display_order': self.display_order,
            'plans': list(self.plans),
        }


@dataclass
class ProductUsage:
    product_name: str
    quantity: Decimal


@dataclass
class MaterialUsageSummary:
    """Per-material usage of a plan with the products that consume it."""
    material_id: int
    material_name: str
    total_quantity: Decimal
    total_weight: Decimal
    weight_per_product: Optional[Decimal]
    required_order_quantity: int
    order_group_name: Optional[str]
    order_unit_name: str
    display_order: int
    products: List[ProductUsage] = field(default_factory=list)


def bom_prefetch(lookup='product_materials'):
    """Prefetch product material lines with everything the engine reads."""
    return Prefetch(
        lookup,
        queryset=ProductMaterial.all_objects.select_related(
            'unit',
            'material__order_group',
            'material__unit_for_order',
        ).order_by('id'),
    )


def _product_material_lines(product):
    prefetched = getattr(product, '_prefetched_objects_cache', {})
    if 'product_materials' in prefetched:
        return list(prefetched['product_materials'])
    return list(
        ProductMaterial.all_objects.filter(product=product)
        .select_related('unit', 'material__order_group', 'material__unit_for_order')
        .order_by('id')
    )


def calculate_product_requirements(product, production_count) -> List[MaterialContribution]:
    """
    Expand one product line into the materials it consumes.

    Raises:
        InvalidProductionCountError: if production_count is missing or <= 0.
    """
    if production_count is None or production_count <= 0:
        raise InvalidProductionCountError(product, production_count)

    contributions = []
    for line in _product_material_lines(product):
        weight_per_product = line.quantity * line.unit_weight
        contributions.append(MaterialContribution(
            material_id=line.material_id,
            material_name=line.material.name,
            quantity=line.quantity,
            unit_weight=line.unit_weight,
            weight_per_product=weight_per_product,
            total_quantity=line.quantity * production_count,
            total_weight=weight_per_product * production_count,
            unit_name=line.unit.name,
            material=line.material,
        ))
    return contributions


def calculate_required_order_quantity(total_weight, total_quantity, material,
                                      rounding=RoundingPolicy.CEILING) -> Decimal:
    """
    Convert a required amount into supplier order units.

    Unconfigured conversions (no order unit weight, no pieces per order
    unit) yield zero instead of raising.
    """
    conversion = material.order_conversion_type
    if conversion in (OrderConversionType.COUNT, OrderConversionType.PIECES):
        numerator, divisor = total_quantity, material.pieces_per_order_unit
    elif conversion == OrderConversionType.WEIGHT:
        numerator, divisor = total_weight, material.unit_weight_for_order
    else:
        return ZERO

    if not divisor or divisor <= 0:
        return ZERO

    raw = Decimal(numerator) / Decimal(divisor)
    if rounding == RoundingPolicy.TWO_DECIMALS:
        return raw.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return raw.to_integral_value(rounding=ROUND_CEILING)


class RequirementsAggregator:
    """
    Rolls plan lines up into one requirement per material.

        aggregator = RequirementsAggregator(ORDERING_POLICY)
        requirements = aggregator.aggregate(plan.plan_products.all())
    """

    def __init__(self, policy: AggregationPolicy = ORDERING_POLICY):
        self.policy = policy

    def merge_key(self, contribution):
        if self.policy.merge_key == MergeKey.MATERIAL_NAME:
            return contribution.material_name
        return contribution.material_id

    def aggregate(self, plan_lines) -> List[MaterialRequirement]:
        merged = OrderedDict()
        for line in plan_lines:
            for contribution in calculate_product_requirements(line.product, line.production_count):
                key = self.merge_key(contribution)
                if key in merged:
                    merged[key].total_quantity += contribution.total_quantity
                    merged[key].total_weight += contribution.total_weight
                else:
                    merged[key] = replace(contribution)

        groups = OrderedDict()
        member_groups = {}
        for key, contribution in merged.items():
            material = contribution.material
            group_key = ('group', material.order_group_id) if material.order_group_id else ('material', key)
            member_groups[key] = group_key
            if group_key in groups:
                groups[group_key]['total_weight'] += contribution.total_weight
                groups[group_key]['total_quantity'] += contribution.total_quantity
            else:
                # The first member decides the group's conversion and order unit
                groups[group_key] = {
                    'total_weight': contribution.total_weight,
                    'total_quantity': contribution.total_quantity,
                    'material': material,
                }

        requirements = []
        for key, contribution in merged.items():
            material = contribution.material
            group = groups[member_groups[key]]
            group_material = group['material']
            requirements.append(MaterialRequirement(
                material_id=contribution.material_id,
                material_name=contribution.material_name,
                quantity=contribution.quantity,
                unit_weight=contribution.unit_weight,
                weight_per_product=contribution.weight_per_product,
                total_quantity=contribution.total_quantity,
                total_weight=contribution.total_weight,
                required_order_quantity=calculate_required_order_quantity(
                    group['total_weight'],
                    group['total_quantity'],
                    group_material,
                    self.policy.rounding,
                ),
                order_conversion_type=group_material.order_conversion_type,
                order_unit_name=group_material.order_unit_name,
                order_group_name=material.order_group_name,
                is_grouped=material.order_group_id is not None,
                display_order=material.effective_display_order,
            ))

        requirements.sort(key=lambda r: (r.display_order, r.material_name))
        return requirements


def plan_lines_for_plan(plan) -> List[PlanLine]:
    plan_products = (
        PlanProduct.all_objects.filter(plan=plan)
        .select_related('product')
        .prefetch_related(bom_prefetch('product__product_materials'))
        .order_by('id')
    )
    return [PlanLine(pp.product, pp.production_count) for pp in plan_products]


def plan_lines_for_schedule(schedule) -> List[PlanLine]:
    """Composition of a scheduled day: the snapshot when one exists, else the live plan."""
    if not schedule.has_snapshot:
        return plan_lines_for_plan(schedule.plan)

    rows = schedule.plan_products_snapshot['products']
    products = Product.all_objects.prefetch_related(bom_prefetch()).in_bulk(
        [row['product_id'] for row in rows]
    )
    lines = []
    for row in rows:
        product = products.get(row['product_id'])
        if product is None:
            raise Product.DoesNotExist(
                f"Product {row['product_id']} in the snapshot of schedule {schedule.pk} no longer exists"
            )
        lines.append(PlanLine(product, row['production_count']))
    return lines


def aggregate_plan_requirements(plan, policy=ORDERING_POLICY) -> List[MaterialRequirement]:
    return RequirementsAggregator(policy).aggregate(plan_lines_for_plan(plan))


def material_requirements_for_date(date, store=None, policy=ORDERING_POLICY) -> List[MaterialRequirement]:
    """
    Material requirements of every plan scheduled on ``date``.

    Reads schedules through the tenant-scoped manager, so a tenant context
    must be active. Cancelled schedules are skipped. Rows are merged by
    material id, each listing the plans that need it.
    """
    schedules = PlanSchedule.objects.for_date(date).not_cancelled().select_related('plan')
    if store is not None:
        schedules = schedules.filter(store=store)

    aggregator = RequirementsAggregator(policy)
    requirements = OrderedDict()
    schedule_count = 0

    for schedule in schedules.order_by('id'):
        schedule_count += 1
        plan_name = schedule.plan.name
        for requirement in aggregator.aggregate(plan_lines_for_schedule(schedule)):
            existing = requirements.get(requirement.material_id)
            if existing is None:
                requirement.plans = [plan_name]
                requirements[requirement.material_id] = requirement
            else:
                existing.total_quantity += requirement.total_quantity
                existing.total_weight += requirement.total_weight
                existing.required_order_quantity += requirement.required_order_quantity
                existing.plans.append(plan_name)

    logger.debug(f"Aggregated {len(requirements)} materials from {schedule_count} schedules on {date}")
    return sorted(requirements.values(), key=lambda r: r.material_name)


def calculate_materials_summary(plan) -> List[MaterialUsageSummary]:
    """
    Per-material usage of a plan, broken down by product.

    Weights come from each material's default unit weight and order
    quantities are rounded up per material, without order grouping.
    """
    summaries = OrderedDict()
    materials = {}

    for line in plan_lines_for_plan(plan):
        for product_material in _product_material_lines(line.product):
            material = product_material.material
            quantity = product_material.quantity * line.production_count

            summary = summaries.get(material.id)
            if summary is None:
                summary = MaterialUsageSummary(
                    material_id=material.id,
                    material_name=material.name,
                    total_quantity=ZERO,
                    total_weight=ZERO,
                    weight_per_product=None,
                    required_order_quantity=0,
                    order_group_name=material.order_group_name,
                    order_unit_name=material.order_unit_name,
                    display_order=material.effective_display_order,
                )
                summaries[material.id] = summary
                materials[material.id] = material

            summary.total_quantity += quantity
            summary.products.append(ProductUsage(line.product.name, quantity))

    for summary_id, summary in summaries.items():
        material = materials[summary_id]
        if material.is_weight_based:
            unit_weight = material.default_unit_weight or ZERO
            summary.weight_per_product = material.default_unit_weight
            summary.total_weight = summary.total_quantity * unit_weight
            summary.required_order_quantity = int(calculate_required_order_quantity(
                summary.total_weight, summary.total_quantity, material,
            ))
        elif material.is_count_based:
            summary.required_order_quantity = int(calculate_required_order_quantity(
                ZERO, summary.total_quantity, material,
            ))

    return sorted(summaries.values(), key=lambda s: (s.display_order, s.material_id))

