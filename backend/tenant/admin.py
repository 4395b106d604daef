from django.contrib import admin

from .models import Tenant, Store


class StoreInline(admin.TabularInline):
    model = Store
    extra = 0
    fields = ['name', 'code', 'invitation_code', 'is_active']
    readonly_fields = ['invitation_code']

    def get_queryset(self, request):
        # Admin runs without a tenant context
        return Store.all_objects.all()


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'slug', 'contact_email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [StoreInline]
