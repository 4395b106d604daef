from .requirements_service import (
    LEGACY_PLAN_POLICY,
    ORDERING_POLICY,
    AggregationPolicy,
    MaterialRequirement,
    MergeKey,
    RequirementsAggregator,
    RoundingPolicy,
    aggregate_plan_requirements,
    calculate_materials_summary,
    calculate_product_requirements,
    calculate_required_order_quantity,
    material_requirements_for_date,
)
from .snapshot_service import ScheduleSnapshotService
from .plan_service import PlanService

__all__ = [
    'LEGACY_PLAN_POLICY',
    'ORDERING_POLICY',
    'AggregationPolicy',
    'MaterialRequirement',
    'MergeKey',
    'RequirementsAggregator',
    'RoundingPolicy',
    'aggregate_plan_requirements',
    'calculate_materials_summary',
    'calculate_product_requirements',
    'calculate_required_order_quantity',
    'material_requirements_for_date',
    'ScheduleSnapshotService',
    'PlanService',
]
