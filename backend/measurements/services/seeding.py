"""
Unit seeding service for measurements.

Every new tenant starts with the units a sushi kitchen needs; staff add
their own afterwards.
"""
import logging

from measurements.models import Unit, UnitCategory

logger = logging.getLogger(__name__)

DEFAULT_UNITS = [
    # Production units
    {"name": "g", "reading": "ぐらむ", "category": UnitCategory.PRODUCTION},
    {"name": "個", "reading": "こ", "category": UnitCategory.PRODUCTION},
    {"name": "本", "reading": "ほん", "category": UnitCategory.PRODUCTION},
    {"name": "枚", "reading": "まい", "category": UnitCategory.PRODUCTION},

    # Ordering units
    {"name": "kg", "reading": "きろぐらむ", "category": UnitCategory.ORDERING},
    {"name": "箱", "reading": "はこ", "category": UnitCategory.ORDERING},
    {"name": "袋", "reading": "ふくろ", "category": UnitCategory.ORDERING},
    {"name": "パック", "reading": "ぱっく", "category": UnitCategory.ORDERING},

    # Manufacturing units
    {"name": "カン", "reading": "かん", "category": UnitCategory.MANUFACTURING},
    {"name": "切れ", "reading": "きれ", "category": UnitCategory.MANUFACTURING},
]


def seed_units_for_tenant(tenant):
    """
    Create the default units for a tenant. Safe to run repeatedly.

    Returns:
        dict: (category, name) -> Unit
    """
    unit_map = {}
    created_count = 0

    for unit_data in DEFAULT_UNITS:
        unit, created = Unit.all_objects.get_or_create(
            tenant=tenant,
            store=None,
            category=unit_data["category"],
            name=unit_data["name"],
            defaults={"reading": unit_data["reading"]},
        )
        created_count += int(created)
        unit_map[(unit.category, unit.name)] = unit

    logger.info(f"Seeded {created_count} units for tenant {tenant.slug}")
    return unit_map
