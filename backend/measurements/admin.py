"""
Django admin configuration for measurements models.
"""
from django.contrib import admin
from measurements.models import Unit


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    """
    Units are tenant-scoped; the admin uses the unfiltered manager so
    staff can inspect every company's units.
    """
    list_display = ['name', 'category', 'tenant', 'store']
    list_filter = ['category', 'tenant']
    search_fields = ['name', 'reading']
    ordering = ['tenant', 'category', 'name']

    def get_queryset(self, request):
        return Unit.all_objects.select_related('tenant', 'store')
