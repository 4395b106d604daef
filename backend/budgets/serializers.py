from rest_framework import serializers


class DailyRevenueRowSerializer(serializers.Serializer):
    date = serializers.DateField()
    target = serializers.IntegerField()
    actual = serializers.IntegerField()
    plan = serializers.IntegerField()
    forecast = serializers.IntegerField()
    diff = serializers.IntegerField()
    achievement_rate = serializers.DecimalField(max_digits=7, decimal_places=1)


class MonthlyBudgetSummarySerializer(serializers.Serializer):
    budget_month = serializers.DateField()
    target_amount = serializers.IntegerField()
    total_planned_revenue = serializers.IntegerField()
    total_actual_revenue = serializers.IntegerField()
    remaining_planned_revenue = serializers.IntegerField()
    total_forecast_revenue = serializers.IntegerField()
    achievement_rate = serializers.DecimalField(max_digits=7, decimal_places=1)
    budget_variance = serializers.IntegerField()
