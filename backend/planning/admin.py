from django.contrib import admin

from planning.models import Plan, PlanProduct, PlanSchedule


class PlanProductInline(admin.TabularInline):
    model = PlanProduct
    extra = 0
    fields = ['product', 'production_count']

    def get_queryset(self, request):
        return PlanProduct.all_objects.select_related('product')


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'status', 'tenant', 'is_active']
    list_filter = ['status', 'is_active', 'tenant']
    search_fields = ['name', 'reading']
    inlines = [PlanProductInline]

    def get_queryset(self, request):
        return Plan.all_objects.select_related('tenant', 'category')


@admin.register(PlanSchedule)
class PlanScheduleAdmin(admin.ModelAdmin):
    list_display = ['scheduled_date', 'plan', 'status', 'actual_revenue', 'planned_revenue', 'tenant']
    list_filter = ['status', 'tenant']
    date_hierarchy = 'scheduled_date'
    readonly_fields = ['planned_revenue', 'plan_products_snapshot']

    def get_queryset(self, request):
        return PlanSchedule.all_objects.select_related('tenant', 'plan')
