from django.contrib import admin

from catalog.models import Category, Material, MaterialOrderGroup, Product, ProductMaterial


class TenantAdminMixin:
    """Admin runs outside a tenant context, so read through the unfiltered manager."""

    list_select_related = ['tenant']

    def get_queryset(self, request):
        return self.model.all_objects.select_related(*self.list_select_related)


@admin.register(Category)
class CategoryAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ['name', 'kind', 'tenant']
    list_filter = ['kind', 'tenant']
    search_fields = ['name', 'reading']


@admin.register(MaterialOrderGroup)
class MaterialOrderGroupAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ['name', 'tenant', 'materials_count']
    search_fields = ['name', 'reading']


@admin.register(Material)
class MaterialAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = [
        'name', 'category', 'measurement_type', 'unit_weight_for_order',
        'pieces_per_order_unit', 'order_group', 'display_order', 'is_active',
    ]
    list_filter = ['measurement_type', 'is_active', 'tenant']
    search_fields = ['name', 'reading']
    list_select_related = ['tenant', 'category', 'order_group']


class ProductMaterialInline(admin.TabularInline):
    model = ProductMaterial
    extra = 0
    fields = ['material', 'unit', 'quantity', 'unit_weight']

    def get_queryset(self, request):
        return ProductMaterial.all_objects.select_related('material', 'unit')


@admin.register(Product)
class ProductAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ['item_number', 'name', 'category', 'price', 'status', 'is_active']
    list_filter = ['status', 'is_active', 'tenant']
    search_fields = ['name', 'reading', 'item_number']
    list_select_related = ['tenant', 'category']
    inlines = [ProductMaterialInline]
