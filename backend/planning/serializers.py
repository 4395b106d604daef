"""
Planning serializers - requirement listings and schedule snapshots.
"""
from rest_framework import serializers

from core_backend.utils.numeric import sanitize_numeric_params
from planning.models import PlanSchedule


class MaterialRequirementSerializer(serializers.Serializer):
    """
    One material's rollup.

    Used in GET /api/planning/plans/:id/material-requirements/ and
    GET /api/planning/material-requirements/
    """
    material_id = serializers.IntegerField()
    material_name = serializers.CharField()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2)
    unit_weight = serializers.DecimalField(max_digits=12, decimal_places=2)
    weight_per_product = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_quantity = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_weight = serializers.DecimalField(max_digits=16, decimal_places=2)
    required_order_quantity = serializers.DecimalField(max_digits=14, decimal_places=2)
    order_conversion_type = serializers.CharField()
    order_unit_name = serializers.CharField(allow_blank=True)
    order_group_name = serializers.CharField(allow_null=True)
    is_grouped = serializers.BooleanField()
    display_order = serializers.IntegerField()
    plans = serializers.ListField(child=serializers.CharField(), required=False)


class ProductUsageSerializer(serializers.Serializer):
    product_name = serializers.CharField()
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2)


class MaterialUsageSummarySerializer(serializers.Serializer):
    material_id = serializers.IntegerField()
    material_name = serializers.CharField()
    total_quantity = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_weight = serializers.DecimalField(max_digits=16, decimal_places=2)
    weight_per_product = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    required_order_quantity = serializers.IntegerField()
    order_group_name = serializers.CharField(allow_null=True)
    order_unit_name = serializers.CharField(allow_blank=True)
    display_order = serializers.IntegerField()
    products = ProductUsageSerializer(many=True)


class SnapshotProductSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    # Free-form counts such as "１,０００"
    production_count = serializers.CharField()

    def validate(self, attrs):
        attrs = sanitize_numeric_params(attrs, with_comma=('production_count',))
        if not isinstance(attrs['production_count'], int):
            raise serializers.ValidationError({
                'production_count': 'Production count must be a whole number.'
            })
        return attrs


class SnapshotRequestSerializer(serializers.Serializer):
    """
    Body of POST /api/planning/schedules/:id/snapshot/

    Without ``products`` the snapshot is taken from the live plan.
    """
    products = SnapshotProductSerializer(many=True, required=False)


class PlanScheduleSerializer(serializers.ModelSerializer):
    plan_name = serializers.CharField(source='plan.name', read_only=True)
    has_snapshot = serializers.BooleanField(read_only=True)
    current_planned_revenue = serializers.IntegerField(read_only=True)
    achievement_rate = serializers.DecimalField(max_digits=7, decimal_places=1, read_only=True, allow_null=True)

    class Meta:
        model = PlanSchedule
        fields = [
            'id',
            'plan',
            'plan_name',
            'scheduled_date',
            'status',
            'actual_revenue',
            'planned_revenue',
            'current_planned_revenue',
            'achievement_rate',
            'has_snapshot',
            'plan_products_snapshot',
        ]
        read_only_fields = fields
