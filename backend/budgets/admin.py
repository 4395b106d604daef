from django.contrib import admin

from budgets.models import DailyTarget, MonthlyBudget


class DailyTargetInline(admin.TabularInline):
    model = DailyTarget
    extra = 0
    fields = ['target_date', 'target_amount', 'note']

    def get_queryset(self, request):
        return DailyTarget.all_objects.all()


@admin.register(MonthlyBudget)
class MonthlyBudgetAdmin(admin.ModelAdmin):
    list_display = ['budget_month', 'target_amount', 'store', 'tenant']
    list_filter = ['tenant']
    inlines = [DailyTargetInline]

    def get_queryset(self, request):
        return MonthlyBudget.all_objects.select_related('tenant', 'store')
