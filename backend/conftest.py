"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from tenant.managers import set_current_tenant


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(scope='session', autouse=True)
def default_tenant(django_db_setup, django_db_blocker):
    """
    Create default tenant for development/test fallback.

    The TenantMiddleware uses DEFAULT_TENANT_SLUG for localhost/testserver requests.
    This fixture ensures that tenant exists for all tests.
    """
    with django_db_blocker.unblock():
        from tenant.models import Tenant
        from django.conf import settings

        default_slug = getattr(settings, 'DEFAULT_TENANT_SLUG', 'myrestaurant')

        tenant, _ = Tenant.objects.get_or_create(
            slug=default_slug,
            defaults={
                'name': 'Test Restaurant',
                'is_active': True
            }
        )
        return tenant


@pytest.fixture(autouse=True)
def reset_tenant_context():
    """
    Reset tenant context after each test.

    CRITICAL: This prevents tenant context from leaking between tests.
    If tenant context leaks, tests may pass when they should fail.
    """
    yield
    set_current_tenant(None)


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/health/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, user, tenant):
    """
    Provide an authenticated API client bound to ``tenant`` through the
    X-Tenant header.

    Usage:
        def test_protected_endpoint(authenticated_client):
            response = authenticated_client.get('/api/budgets/daily/?year=2025&month=1')
            assert response.status_code == 200
    """
    api_client.force_authenticate(user=user)
    api_client.credentials(HTTP_X_TENANT=tenant.slug)
    return api_client


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "tenant_isolation: mark test as tenant isolation test (critical)"
    )


# ============================================================================
# IMPORT ALL FIXTURES FROM core_backend/tests/fixtures.py
# ============================================================================
from core_backend.tests.fixtures import *  # noqa: E402,F401,F403
