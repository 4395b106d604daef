"""
Measurements app - units of measure.

Units are tenant data: each company names its own units (g, 本, 箱, 枚...).
A material references three of them:
- production unit: how the kitchen counts the material in a product
- product unit: the unit the per-product quantity is entered in
- order unit: the unit a supplier sells in (case, kg, box)
"""
from django.db import models
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantManager

DESCRIPTION_MAX_LENGTH = 500


class UnitCategory(models.TextChoices):
    """What a unit is used for."""
    PRODUCTION = "production", _("Production")
    ORDERING = "ordering", _("Ordering")
    MANUFACTURING = "manufacturing", _("Manufacturing")


class Unit(models.Model):
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='units'
    )
    store = models.ForeignKey(
        'tenant.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='units'
    )
    name = models.CharField(
        max_length=50,
        help_text=_("Unit label, e.g. 'g', 'kg', '箱', '枚'")
    )
    reading = models.CharField(
        max_length=100,
        blank=True,
        help_text=_("Hiragana reading used for sorting and search")
    )
    category = models.CharField(
        max_length=20,
        choices=UnitCategory.choices,
    )
    description = models.TextField(max_length=DESCRIPTION_MAX_LENGTH, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Unit")
        verbose_name_plural = _("Units")
        ordering = ['category', 'name']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'store', 'category', 'name'],
                name='unique_unit_name_per_category'
            ),
        ]
        indexes = [
            models.Index(fields=['tenant', 'category'], name='unit_tenant_category_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_category_display()})"
