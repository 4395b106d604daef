import math
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from core_backend.utils.archiving import SoftDeleteMixin
from core_backend.utils.numeric import normalize_count, normalize_decimal
from core_backend.utils.status import StatusChangeRestriction
from tenant.managers import TenantManager, TenantSoftDeleteManager

DESCRIPTION_MAX_LENGTH = 500

# Unset display orders sort after every explicit one
DISPLAY_ORDER_SENTINEL = 999999


class CategoryKind(models.TextChoices):
    MATERIAL = "material", _("Material")
    PRODUCT = "product", _("Product")
    PLAN = "plan", _("Plan")


class MeasurementType(models.TextChoices):
    """How a material is measured when it is ordered."""
    WEIGHT = "weight", _("Weight based")
    COUNT = "count", _("Count based")


class OrderConversionType(models.TextChoices):
    """How a required amount is converted into supplier order units."""
    WEIGHT = "weight", _("Weight")
    COUNT = "count", _("Count")
    PIECES = "pieces", _("Pieces")
    NONE = "none", _("Not configured")


class ProductStatus(models.TextChoices):
    DRAFT = "draft", _("Draft")
    SELLING = "selling", _("Selling")
    DISCONTINUED = "discontinued", _("Discontinued")


class Category(models.Model):
    """Grouping for materials, products or plans (one kind per category)."""
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='categories'
    )
    store = models.ForeignKey(
        'tenant.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='categories'
    )
    name = models.CharField(max_length=100)
    reading = models.CharField(max_length=200, blank=True)
    kind = models.CharField(max_length=20, choices=CategoryKind.choices)
    description = models.TextField(max_length=DESCRIPTION_MAX_LENGTH, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Category")
        verbose_name_plural = _("Categories")
        ordering = ['kind', 'name']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'kind', 'name'],
                name='unique_category_name_per_kind'
            ),
        ]
        indexes = [
            models.Index(fields=['tenant', 'kind'], name='category_tenant_kind_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_kind_display()})"


class MaterialOrderGroup(models.Model):
    """
    Materials purchased together as one supplier unit.

    Two cuts of the same fish bought as one case share a group; their
    requirements are pooled before the order quantity is rounded.
    """
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='material_order_groups'
    )
    store = models.ForeignKey(
        'tenant.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='material_order_groups'
    )
    name = models.CharField(max_length=100)
    reading = models.CharField(max_length=200, blank=True)
    description = models.TextField(max_length=DESCRIPTION_MAX_LENGTH, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Material Order Group")
        verbose_name_plural = _("Material Order Groups")
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'name'],
                name='unique_order_group_name_per_tenant'
            ),
        ]

    def __str__(self):
        return self.name

    @property
    def materials_count(self):
        return Material.all_objects.filter(order_group=self, is_active=True).count()


class Material(SoftDeleteMixin):
    """
    A raw material (tuna, rice, nori) consumed by products.

    Weight-based materials are ordered by weight: ``unit_weight_for_order``
    grams make one order unit. Count-based materials are ordered by pieces:
    ``pieces_per_order_unit`` pieces make one order unit. Fields belonging
    to the other mode are ignored in calculations.
    """
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='materials'
    )
    store = models.ForeignKey(
        'tenant.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='materials'
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name='materials',
        limit_choices_to={'kind': CategoryKind.MATERIAL}
    )
    name = models.CharField(max_length=100)
    reading = models.CharField(max_length=200, blank=True)
    measurement_type = models.CharField(
        max_length=10,
        choices=MeasurementType.choices,
        default=MeasurementType.WEIGHT
    )
    production_unit = models.ForeignKey(
        'measurements.Unit',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='production_materials',
        help_text=_("Unit the kitchen counts this material in")
    )
    unit_for_product = models.ForeignKey(
        'measurements.Unit',
        on_delete=models.PROTECT,
        related_name='product_materials_unit',
        help_text=_("Unit the per-product quantity is entered in")
    )
    unit_for_order = models.ForeignKey(
        'measurements.Unit',
        on_delete=models.PROTECT,
        related_name='order_materials',
        help_text=_("Unit the supplier sells in")
    )
    default_unit_weight = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        help_text=_("Grams per product unit, copied onto new product lines")
    )
    unit_weight_for_order = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Grams per order unit (weight based)")
    )
    pieces_per_order_unit = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text=_("Pieces per order unit (count based)")
    )
    order_group = models.ForeignKey(
        MaterialOrderGroup,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='materials'
    )
    display_order = models.PositiveIntegerField(null=True, blank=True)
    description = models.TextField(max_length=DESCRIPTION_MAX_LENGTH, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantSoftDeleteManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Material")
        verbose_name_plural = _("Materials")
        ordering = ['display_order', 'name']
        constraints = [
            models.UniqueConstraint(
                fields=['category', 'name'],
                name='unique_material_name_per_category'
            ),
        ]
        indexes = [
            models.Index(fields=['tenant', 'is_active'], name='material_tenant_active_idx'),
            models.Index(fields=['tenant', 'order_group'], name='material_tenant_group_idx'),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        super().clean()
        errors = {}
        if self.is_weight_based:
            if self.unit_weight_for_order is None or self.unit_weight_for_order <= 0:
                errors['unit_weight_for_order'] = _("Weight based materials need a positive order unit weight.")
        elif self.is_count_based:
            if not self.pieces_per_order_unit:
                errors['pieces_per_order_unit'] = _("Count based materials need a positive number of pieces per order unit.")
        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        for field_name in ('default_unit_weight', 'unit_weight_for_order'):
            value = getattr(self, field_name)
            if value not in (None, ''):
                setattr(self, field_name, normalize_decimal(value))
        if self.pieces_per_order_unit not in (None, ''):
            self.pieces_per_order_unit = normalize_count(self.pieces_per_order_unit)
        super().save(*args, **kwargs)

    @property
    def is_weight_based(self):
        return self.measurement_type == MeasurementType.WEIGHT

    @property
    def is_count_based(self):
        return self.measurement_type == MeasurementType.COUNT

    @property
    def order_conversion_type(self):
        if self.is_weight_based:
            return OrderConversionType.WEIGHT
        if self.is_count_based:
            return OrderConversionType.COUNT
        if self.pieces_per_order_unit and self.pieces_per_order_unit > 0:
            return OrderConversionType.PIECES
        if self.unit_weight_for_order and self.unit_weight_for_order > 0:
            return OrderConversionType.WEIGHT
        return OrderConversionType.NONE

    @property
    def order_group_name(self):
        return self.order_group.name if self.order_group_id else None

    @property
    def order_unit_name(self):
        return self.unit_for_order.name if self.unit_for_order_id else ""

    @property
    def effective_display_order(self):
        return self.display_order if self.display_order is not None else DISPLAY_ORDER_SENTINEL


class Product(SoftDeleteMixin):
    """A sellable item (a nigiri, a roll, a set) with a bill of materials."""
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='products'
    )
    store = models.ForeignKey(
        'tenant.Store',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products'
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name='products',
        limit_choices_to={'kind': CategoryKind.PRODUCT}
    )
    name = models.CharField(max_length=100)
    reading = models.CharField(max_length=200, blank=True)
    item_number = models.CharField(
        max_length=4,
        validators=[RegexValidator(r'^\d{4}$', _("Item numbers are four digits."))],
        help_text=_("Four digit item number, unique within the category")
    )
    price = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text=_("Selling price in yen")
    )
    status = models.CharField(
        max_length=20,
        choices=ProductStatus.choices,
        default=ProductStatus.DRAFT
    )
    display_order = models.PositiveIntegerField(null=True, blank=True)
    description = models.TextField(max_length=DESCRIPTION_MAX_LENGTH, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantSoftDeleteManager()
    all_objects = models.Manager()

    STATUS_RESTRICTION = StatusChangeRestriction(
        related_name='plan_products',
        restricted_statuses=(ProductStatus.DRAFT, ProductStatus.DISCONTINUED),
        message=_("This product is used in plans and cannot be set to draft or discontinued."),
    )

    class Meta:
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ['display_order', 'name']
        constraints = [
            models.UniqueConstraint(
                fields=['category', 'name'],
                name='unique_product_name_per_category'
            ),
            models.UniqueConstraint(
                fields=['category', 'item_number'],
                name='unique_product_item_number_per_category'
            ),
        ]
        indexes = [
            models.Index(fields=['tenant', 'status'], name='product_tenant_status_idx'),
        ]

    def __str__(self):
        return f"{self.item_number} {self.name}"

    def clean(self):
        super().clean()
        self.STATUS_RESTRICTION.validate(self)

    def save(self, *args, **kwargs):
        if isinstance(self.price, str):
            self.price = normalize_count(self.price)
        super().save(*args, **kwargs)


class ProductMaterial(models.Model):
    """
    One line of a product's bill of materials.

    ``unit_weight`` is captured when the line is created so later edits to
    the material do not rewrite historical product compositions.
    """
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='product_materials'
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='product_materials'
    )
    material = models.ForeignKey(
        Material,
        on_delete=models.PROTECT,
        related_name='product_materials'
    )
    unit = models.ForeignKey(
        'measurements.Unit',
        on_delete=models.PROTECT,
        related_name='product_material_lines'
    )
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text=_("Units of material consumed per product")
    )
    unit_weight = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text=_("Grams per unit at the time the line was created")
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Product Material")
        verbose_name_plural = _("Product Materials")
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'material'],
                name='unique_material_per_product'
            ),
        ]

    def __str__(self):
        return f"{self.product_id}: {self.material_id} x {self.quantity}"

    def save(self, *args, **kwargs):
        if self.product_id and not self.tenant_id:
            self.tenant_id = self.product.tenant_id
        if self.quantity not in (None, ''):
            self.quantity = normalize_decimal(self.quantity)
        if self.unit_weight in (None, '') and self.material_id:
            self.unit_weight = self.material.default_unit_weight
        elif self.unit_weight is not None:
            self.unit_weight = normalize_decimal(self.unit_weight)
        super().save(*args, **kwargs)

    @property
    def total_weight(self):
        return self.quantity * self.unit_weight

    @property
    def required_order_quantity(self):
        """Order units needed for one product, rounded up."""
        material = self.material
        conversion = material.order_conversion_type
        if conversion in (OrderConversionType.COUNT, OrderConversionType.PIECES):
            if material.pieces_per_order_unit:
                return math.ceil(self.quantity / material.pieces_per_order_unit)
            return 0
        if conversion == OrderConversionType.WEIGHT:
            if material.unit_weight_for_order and material.unit_weight_for_order > 0:
                return math.ceil(self.total_weight / material.unit_weight_for_order)
            return 0
        return 0

    @property
    def order_unit_name(self):
        return self.material.order_unit_name or _("Not set")

    @property
    def order_quantity_display(self):
        return f"{self.required_order_quantity} {self.order_unit_name}"
