"""
Tenant Resolution Tests - TenantMiddleware

Verifies how a request is bound to a tenant and that the thread-local
tenant never outlives the request.
"""
import json

import pytest
from django.conf import settings
from django.http import HttpResponse
from django.test import RequestFactory

from tenant.managers import get_current_tenant, set_current_tenant
from tenant.middleware import TenantMiddleware

pytestmark = pytest.mark.tenant_isolation


@pytest.fixture
def captured():
    return {}


@pytest.fixture
def middleware(captured):
    def get_response(request):
        captured['tenant'] = get_current_tenant()
        captured['request_tenant'] = request.tenant
        return HttpResponse("ok")

    return TenantMiddleware(get_response)


@pytest.fixture
def rf():
    return RequestFactory()


@pytest.mark.django_db
class TestTenantResolution:

    def test_header_resolves_tenant(self, middleware, captured, rf, tenant):
        set_current_tenant(None)
        request = rf.get('/api/health/', HTTP_X_TENANT=tenant.slug)

        response = middleware(request)

        assert response.status_code == 200
        assert captured['tenant'] == tenant
        assert captured['request_tenant'] == tenant

    def test_context_cleared_after_response(self, middleware, rf, tenant):
        request = rf.get('/api/health/', HTTP_X_TENANT=tenant.slug)

        middleware(request)

        assert get_current_tenant() is None

    def test_unknown_header_is_400(self, middleware, rf):
        request = rf.get('/api/health/', HTTP_X_TENANT='nobody')

        response = middleware(request)

        assert response.status_code == 400
        assert json.loads(response.content)['code'] == 'TENANT_NOT_FOUND'

    def test_inactive_tenant_is_403(self, middleware, rf, inactive_tenant):
        request = rf.get('/api/health/', HTTP_X_TENANT=inactive_tenant.slug)

        response = middleware(request)

        assert response.status_code == 403
        assert json.loads(response.content)['code'] == 'TENANT_INACTIVE'

    def test_subdomain_resolves_tenant(self, middleware, captured, rf, tenant):
        request = rf.get('/api/health/', HTTP_HOST='sushi-taro.localhost')

        response = middleware(request)

        assert response.status_code == 200
        assert captured['tenant'] == tenant

    def test_testserver_falls_back_to_default_tenant(self, middleware, captured, rf):
        request = rf.get('/api/health/')

        middleware(request)

        assert captured['tenant'].slug == settings.DEFAULT_TENANT_SLUG

    def test_admin_runs_without_tenant(self, middleware, captured, rf, tenant):
        request = rf.get('/admin/', HTTP_X_TENANT=tenant.slug)

        middleware(request)

        assert captured['tenant'] is None
        assert captured['request_tenant'] is None


class TestExtractSubdomain:

    @pytest.mark.parametrize("host, expected", [
        ('sushi-taro.example.com', 'sushi-taro'),
        ('sushi-taro.localhost', 'sushi-taro'),
        ('example.com', None),
        ('localhost', None),
        ('testserver', None),
    ])
    def test_extract_subdomain(self, host, expected):
        assert TenantMiddleware.extract_subdomain(host) == expected
