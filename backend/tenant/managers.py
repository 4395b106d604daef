from contextlib import contextmanager
from threading import local

from django.db import models

# Thread-local storage for the current tenant
_thread_locals = local()


def set_current_tenant(tenant):
    """
    Set the current tenant for this thread.

    Called by TenantMiddleware at the start of every request and cleared
    again when the response leaves.
    """
    _thread_locals.tenant = tenant


def get_current_tenant():
    """Return the current tenant, or None when no tenant context is set."""
    return getattr(_thread_locals, 'tenant', None)


@contextmanager
def tenant_context(tenant):
    """
    Run a block with ``tenant`` as the current tenant.

    The previous tenant is restored afterwards, so contexts can nest:

        with tenant_context(company):
            plans = Plan.objects.all()
    """
    previous = get_current_tenant()
    set_current_tenant(tenant)
    try:
        yield tenant
    finally:
        set_current_tenant(previous)


class TenantManager(models.Manager):
    """
    Filters every queryset by the current tenant.

    FAILS CLOSED: without a tenant context the queryset is empty, so a
    missing context can never expose another company's data.

        class Store(models.Model):
            tenant = models.ForeignKey('tenant.Tenant', on_delete=models.CASCADE)

            objects = TenantManager()        # tenant filtered
            all_objects = models.Manager()   # unfiltered, admin and scripts only
    """

    def get_queryset(self):
        tenant = get_current_tenant()
        if tenant:
            return super().get_queryset().filter(tenant=tenant)
        return super().get_queryset().none()


class TenantSoftDeleteManager(models.Manager):
    """
    Manager for models with both tenant scoping and soft delete.

    The default queryset is tenant filtered and hides archived rows;
    with_archived() and archived_only() widen or invert the archive filter.
    """

    def _tenant_queryset(self):
        from core_backend.utils.archiving import SoftDeleteQuerySet

        qs = SoftDeleteQuerySet(self.model, using=self._db)
        tenant = get_current_tenant()
        if tenant:
            return qs.filter(tenant=tenant)
        return qs.none()

    def get_queryset(self):
        return self._tenant_queryset().active()

    def active(self):
        return self.get_queryset()

    def with_archived(self):
        return self._tenant_queryset()

    def archived_only(self):
        return self._tenant_queryset().archived()
