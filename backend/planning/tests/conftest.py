"""
Pytest fixtures for planning tests.
"""
import pytest
from decimal import Decimal

from catalog.models import MaterialOrderGroup


@pytest.fixture
def kappa_maki(make_product, nori):
    """One nori sheet per roll."""
    return make_product('Kappa Maki', '0002', price=150, materials=[(nori, 1, 3)])


@pytest.fixture
def futomaki(make_product, nori):
    """Two nori sheets per roll."""
    return make_product('Futomaki', '0003', price=600, materials=[(nori, 2, 3)])


@pytest.fixture
def tuna_case(tenant):
    return MaterialOrderGroup.objects.create(tenant=tenant, name='Tuna case')


@pytest.fixture
def akami(make_material, tuna_case):
    return make_material('Akami', unit_weight_for_order=Decimal('1000'), order_group=tuna_case)


@pytest.fixture
def toro(make_material, tuna_case):
    return make_material('Toro', unit_weight_for_order=Decimal('1000'), order_group=tuna_case)


@pytest.fixture
def akami_nigiri(make_product, akami):
    return make_product('Akami Nigiri', '0010', price=250, materials=[(akami, 1, 15)])


@pytest.fixture
def toro_nigiri(make_product, toro):
    return make_product('Toro Nigiri', '0011', price=500, materials=[(toro, 1, 15)])
