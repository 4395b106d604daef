"""
Catalog services: display ordering, bill of materials maintenance and copies.
"""
import logging

from django.db import transaction

from core_backend.utils.copying import ChildCopy, CopyConfig, RecordCopier
from core_backend.utils.numeric import sanitize_numeric_params
from catalog.exceptions import ItemNumberExhaustedError
from catalog.models import Material, Product, ProductMaterial, ProductStatus

logger = logging.getLogger(__name__)

ITEM_NUMBER_DIGITS = 4
ITEM_NUMBER_MAX = 9999


def _update_display_orders(model, ids):
    with transaction.atomic():
        for position, pk in enumerate(ids, start=1):
            model.all_objects.filter(pk=pk).update(display_order=position)


def generate_unique_item_number(source, new_record=None):
    """Next free item number after ``source.item_number`` in its category."""
    base_number = int(source.item_number)
    for candidate in range(base_number + 1, ITEM_NUMBER_MAX + 1):
        item_number = f"{candidate:0{ITEM_NUMBER_DIGITS}d}"
        taken = Product.all_objects.filter(
            category_id=source.category_id,
            item_number=item_number,
        ).exists()
        if not taken:
            return item_number
    raise ItemNumberExhaustedError(source)


MATERIAL_COPY_CONFIG = CopyConfig(
    uniqueness_scope=('category_id',),
    uniqueness_check_attributes=('name', 'reading'),
)

PRODUCT_COPY_CONFIG = CopyConfig(
    uniqueness_scope=('category_id',),
    uniqueness_check_attributes=('name', 'reading'),
    children=(ChildCopy('product_materials', 'product'),),
    overrides={
        'item_number': generate_unique_item_number,
        'status': ProductStatus.DRAFT,
    },
)


class MaterialService:

    @staticmethod
    def update_display_orders(material_ids):
        """Assign display orders 1..n following ``material_ids``."""
        _update_display_orders(Material, material_ids)
        logger.info(f"Reordered {len(material_ids)} materials")

    @staticmethod
    def copy_material(material, user=None):
        # Materials are master data; their product lines stay with the source
        return RecordCopier(MATERIAL_COPY_CONFIG).copy(material, user=user)


class ProductService:

    @staticmethod
    def update_display_orders(product_ids):
        _update_display_orders(Product, product_ids)
        logger.info(f"Reordered {len(product_ids)} products")

    @staticmethod
    def copy_product(product, user=None):
        """Copy a product with its material lines. The copy starts as a draft."""
        return RecordCopier(PRODUCT_COPY_CONFIG).copy(product, user=user)

    @staticmethod
    def save_product_materials(product, lines):
        """
        Replace a product's bill of materials.

        Each line is a dict with ``material`` (instance or id), ``unit``
        (instance or id, defaults to the material's product unit),
        ``quantity`` and optionally ``unit_weight``. Blank lines are
        skipped. When a material appears twice the first line wins.
        Quantities and weights may be typed full width; a comma makes
        them invalid.

        Returns:
            list[ProductMaterial]: the saved lines, in input order.

        Raises:
            ValidationError: if a line has a non-positive quantity or no
                unit weight to fall back on.
        """
        seen = set()
        kept = []
        for index, line in enumerate(lines):
            material = line.get('material')
            if material in (None, '') and line.get('quantity') in (None, ''):
                continue
            material_id = getattr(material, 'pk', material)
            if material_id in seen:
                logger.warning(
                    f"Dropping duplicate material {material_id} (line {index}) on product {product.pk}"
                )
                continue
            seen.add(material_id)
            kept.append((material_id, line))

        saved = []
        with transaction.atomic():
            ProductMaterial.all_objects.filter(product=product).exclude(
                material_id__in=seen
            ).delete()

            for material_id, line in kept:
                material = Material.all_objects.get(pk=material_id, tenant=product.tenant)
                unit = line.get('unit')
                unit_id = getattr(unit, 'pk', unit) or material.unit_for_product_id

                product_material = (
                    ProductMaterial.all_objects.filter(product=product, material=material).first()
                    or ProductMaterial(tenant=product.tenant, product=product, material=material)
                )
                line = sanitize_numeric_params(line, without_comma=('quantity', 'unit_weight'))
                product_material.unit_id = unit_id
                product_material.quantity = line.get('quantity')
                unit_weight = line.get('unit_weight')
                if unit_weight not in (None, ''):
                    product_material.unit_weight = unit_weight
                elif product_material._state.adding:
                    product_material.unit_weight = material.default_unit_weight
                product_material.full_clean(exclude=['tenant', 'product', 'material'])
                product_material.save()
                saved.append(product_material)

        return saved
