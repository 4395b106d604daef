"""
Measurements services.
"""
from measurements.services.seeding import seed_units_for_tenant, DEFAULT_UNITS

__all__ = ['seed_units_for_tenant', 'DEFAULT_UNITS']
