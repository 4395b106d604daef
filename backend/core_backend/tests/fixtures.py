"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like tenants, users, units, materials, products and plans.
"""
import pytest
from decimal import Decimal

from django.contrib.auth import get_user_model

from catalog.models import Category, CategoryKind, Material, MeasurementType, Product, ProductMaterial, ProductStatus
from measurements.models import UnitCategory
from measurements.services import seed_units_for_tenant
from planning.models import Plan, PlanProduct, PlanStatus
from tenant.managers import set_current_tenant
from tenant.models import Store, Tenant


# ============================================================================
# TENANT FIXTURES
# ============================================================================

@pytest.fixture
def tenant(db):
    """Create the test tenant and make it the current tenant."""
    tenant = Tenant.objects.create(
        name='Sushi Taro',
        slug='sushi-taro',
        is_active=True
    )
    set_current_tenant(tenant)
    return tenant


@pytest.fixture
def other_tenant(db):
    """A second tenant, never made current."""
    return Tenant.objects.create(
        name='Sushi Jiro',
        slug='sushi-jiro',
        is_active=True
    )


@pytest.fixture
def inactive_tenant(db):
    return Tenant.objects.create(
        name='Closed Sushi',
        slug='closed-sushi',
        is_active=False
    )


@pytest.fixture
def store(tenant):
    return Store.objects.create(tenant=tenant, name='Main Store', code='main')


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(
        username='chef',
        email='chef@sushi-taro.example.com',
        password='password123'
    )


# ============================================================================
# CATALOG FIXTURES
# ============================================================================

@pytest.fixture
def units(tenant):
    """Default units keyed by (category, name)."""
    return seed_units_for_tenant(tenant)


@pytest.fixture
def material_category(tenant):
    return Category.objects.create(tenant=tenant, name='Fish', kind=CategoryKind.MATERIAL)


@pytest.fixture
def product_category(tenant):
    return Category.objects.create(tenant=tenant, name='Nigiri', kind=CategoryKind.PRODUCT)


@pytest.fixture
def plan_category(tenant):
    return Category.objects.create(tenant=tenant, name='Weekday', kind=CategoryKind.PLAN)


@pytest.fixture
def make_material(tenant, units, material_category):
    """
    Factory for materials. Weight based by default.

    Usage:
        egg = make_material('Egg', unit_weight_for_order=Decimal('200'))
        nori = make_material('Nori', measurement_type=MeasurementType.COUNT, pieces_per_order_unit=100)
    """
    def _make(name, measurement_type=MeasurementType.WEIGHT, **kwargs):
        defaults = {
            'tenant': tenant,
            'category': material_category,
            'unit_for_product': units[(UnitCategory.PRODUCTION, 'g')],
            'unit_for_order': units[(UnitCategory.ORDERING, 'パック')],
            'default_unit_weight': Decimal('10'),
        }
        if measurement_type == MeasurementType.WEIGHT:
            defaults['unit_weight_for_order'] = Decimal('1000')
        else:
            defaults['unit_for_product'] = units[(UnitCategory.PRODUCTION, '枚')]
            defaults['unit_for_order'] = units[(UnitCategory.ORDERING, '袋')]
            defaults['pieces_per_order_unit'] = 100
        defaults.update(kwargs)
        return Material.objects.create(name=name, measurement_type=measurement_type, **defaults)

    return _make


@pytest.fixture
def make_product(tenant, product_category):
    """
    Factory for products with their material lines.

    Usage:
        make_product('Tamago', '0001', price=200, materials=[(egg, '2', '15')])
    """
    counter = {'next': 1001}

    def _make(name, item_number=None, price=300, materials=(), **kwargs):
        if item_number is None:
            item_number = f"{counter['next']:04d}"
            counter['next'] += 1
        product = Product.objects.create(
            tenant=tenant,
            category=kwargs.pop('category', product_category),
            name=name,
            item_number=item_number,
            price=price,
            status=kwargs.pop('status', ProductStatus.SELLING),
            **kwargs
        )
        for material, quantity, unit_weight in materials:
            ProductMaterial.objects.create(
                tenant=tenant,
                product=product,
                material=material,
                unit=material.unit_for_product,
                quantity=Decimal(str(quantity)),
                unit_weight=Decimal(str(unit_weight)),
            )
        return product

    return _make


@pytest.fixture
def make_plan(tenant, plan_category):
    """
    Factory for plans.

    Usage:
        plan = make_plan('Lunch', products=[(tamago, 50)])
    """
    def _make(name, products=(), **kwargs):
        plan = Plan.objects.create(
            tenant=tenant,
            category=kwargs.pop('category', plan_category),
            name=name,
            status=kwargs.pop('status', PlanStatus.ACTIVE),
            **kwargs
        )
        for product, production_count in products:
            PlanProduct.objects.create(
                tenant=tenant,
                plan=plan,
                product=product,
                production_count=production_count,
            )
        return plan

    return _make


# ============================================================================
# SUSHI KITCHEN SCENARIO
# ============================================================================

@pytest.fixture
def egg(make_material):
    """Weight based: 200 g per pack."""
    return make_material('Egg', unit_weight_for_order=Decimal('200'), default_unit_weight=Decimal('15'))


@pytest.fixture
def nori(make_material):
    """Count based: 100 sheets per bag."""
    return make_material('Nori', measurement_type=MeasurementType.COUNT, pieces_per_order_unit=100)


@pytest.fixture
def tamago_nigiri(make_product, egg):
    """Two 15 g egg slices per piece."""
    return make_product('Tamago Nigiri', '0001', price=200, materials=[(egg, 2, 15)])
