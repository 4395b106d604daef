"""
Signal handlers for measurements.
"""
from django.db.models.signals import post_save
from django.dispatch import receiver

from tenant.models import Tenant


@receiver(post_save, sender=Tenant)
def seed_default_units_for_tenant(sender, instance, created, **kwargs):
    """
    Seed default units when a new tenant is created.
    """
    if created:
        from measurements.services.seeding import seed_units_for_tenant
        seed_units_for_tenant(instance)
