import logging

from django.conf import settings
from django.http import JsonResponse

from .models import Tenant
from .managers import set_current_tenant

logger = logging.getLogger(__name__)


class TenantNotFoundError(Exception):
    """Raised when tenant cannot be resolved from request."""
    pass


class TenantMiddleware:
    """
    Resolves tenant from request and attaches to request.tenant.

    Resolution precedence (highest to lowest):
    1. X-Tenant header - API clients sharing one API host
    2. Subdomain - sushi-taro.example.com
    3. Session tenant - set by an earlier request
    4. Development fallback - DEFAULT_TENANT_SLUG on localhost
    5. Fail with 400

    The thread-local tenant is always cleared after the response so that
    TenantManager querysets never leak into the next request.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        # Django admin operates across tenants
        if request.path.startswith('/admin/'):
            request.tenant = None
            set_current_tenant(None)
            return self.get_response(request)

        try:
            tenant = self.get_tenant_from_request(request)
            request.tenant = tenant
            set_current_tenant(tenant)

            if not tenant.is_active:
                return JsonResponse({
                    'error': 'Tenant account is inactive',
                    'code': 'TENANT_INACTIVE'
                }, status=403)

            return self.get_response(request)

        except TenantNotFoundError as e:
            logger.warning(f"Tenant resolution failed for host {request.get_host()}: {e}")
            return JsonResponse({
                'error': str(e),
                'code': 'TENANT_NOT_FOUND'
            }, status=400)

        finally:
            set_current_tenant(None)

    def get_tenant_from_request(self, request):
        host = request.get_host().split(':')[0]
        subdomain = self.extract_subdomain(host)

        tenant_header = request.META.get(settings.TENANT_HEADER)
        if tenant_header:
            try:
                tenant = Tenant.objects.get(slug=tenant_header)
            except Tenant.DoesNotExist:
                raise TenantNotFoundError(
                    f"Tenant '{tenant_header}' not found. Check X-Tenant header value."
                )
            self._remember(request, tenant)
            return tenant

        if subdomain and subdomain not in ('www', 'api'):
            try:
                tenant = Tenant.objects.get(slug=subdomain)
            except Tenant.DoesNotExist:
                raise TenantNotFoundError(f"Tenant '{subdomain}' not found.")
            self._remember(request, tenant)
            return tenant

        session = getattr(request, 'session', None)
        tenant_id = session.get('tenant_id') if session is not None else None
        if tenant_id:
            try:
                return Tenant.objects.get(id=tenant_id)
            except Tenant.DoesNotExist:
                pass

        if host in ('localhost', '127.0.0.1', 'testserver'):
            try:
                return Tenant.objects.get(slug=settings.DEFAULT_TENANT_SLUG)
            except Tenant.DoesNotExist:
                raise TenantNotFoundError(
                    f"Fallback tenant '{settings.DEFAULT_TENANT_SLUG}' not found."
                )

        raise TenantNotFoundError(f"No tenant found for host: {host}.")

    @staticmethod
    def _remember(request, tenant):
        session = getattr(request, 'session', None)
        if session is not None:
            session['tenant_id'] = str(tenant.id)

    @staticmethod
    def extract_subdomain(host):
        """
        Extract subdomain from host.

            sushi-taro.example.com -> sushi-taro
            sushi-taro.localhost   -> sushi-taro (development)
            example.com            -> None
            localhost              -> None
        """
        if host in ('localhost', '127.0.0.1', 'testserver'):
            return None

        parts = host.split('.')
        if len(parts) == 2 and parts[1] in ('localhost', 'local'):
            return parts[0]
        if len(parts) >= 3:
            return parts[0]
        return None
