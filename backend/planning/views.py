"""
Planning views - material requirements and schedule snapshots.
"""
import logging

from django.utils.dateparse import parse_date
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from catalog.models import Product
from planning.exceptions import PlanningError
from planning.models import Plan, PlanSchedule
from planning.serializers import (
    MaterialRequirementSerializer,
    MaterialUsageSummarySerializer,
    PlanScheduleSerializer,
    SnapshotRequestSerializer,
)
from planning.services import (
    LEGACY_PLAN_POLICY,
    ORDERING_POLICY,
    ScheduleSnapshotService,
    aggregate_plan_requirements,
    calculate_materials_summary,
    material_requirements_for_date,
)
from tenant.models import Store

logger = logging.getLogger(__name__)

POLICIES = {
    'ordering': ORDERING_POLICY,
    'legacy': LEGACY_PLAN_POLICY,
}


class PlanMaterialRequirementsView(APIView):
    """
    Material requirements of one plan.

    GET /api/planning/plans/:id/material-requirements/
    Query params:
    - policy: "ordering" (default, merge by material, round up) or
      "legacy" (merge by material name, two decimals)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        policy_name = request.query_params.get('policy', 'ordering')
        policy = POLICIES.get(policy_name)
        if policy is None:
            return Response(
                {'error': f"Unknown policy '{policy_name}'. Use one of: {', '.join(POLICIES)}."},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            plan = Plan.objects.get(pk=pk)
        except Plan.DoesNotExist:
            return Response({'error': 'Plan not found.'}, status=status.HTTP_404_NOT_FOUND)

        try:
            requirements = aggregate_plan_requirements(plan, policy)
        except PlanningError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'plan_id': plan.pk,
            'plan_name': plan.name,
            'policy': policy_name,
            'materials': MaterialRequirementSerializer(requirements, many=True).data,
        })


class PlanMaterialsSummaryView(APIView):
    """
    Per-material usage of a plan, broken down by product.

    GET /api/planning/plans/:id/materials-summary/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        try:
            plan = Plan.objects.get(pk=pk)
        except Plan.DoesNotExist:
            return Response({'error': 'Plan not found.'}, status=status.HTTP_404_NOT_FOUND)

        summaries = calculate_materials_summary(plan)
        return Response({
            'plan_id': plan.pk,
            'plan_name': plan.name,
            'materials': MaterialUsageSummarySerializer(summaries, many=True).data,
        })


class DailyMaterialRequirementsView(APIView):
    """
    Material requirements of every plan scheduled on one day.

    GET /api/planning/material-requirements/
    Query params:
    - date: YYYY-MM-DD (required)
    - store: Store ID (optional)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        date_param = request.query_params.get('date')
        if not date_param:
            return Response({'error': 'date is required.'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            date = parse_date(date_param)
        except ValueError:
            date = None
        if date is None:
            return Response(
                {'error': 'date must be formatted as YYYY-MM-DD.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        store = None
        store_id = request.query_params.get('store')
        if store_id:
            try:
                store = Store.objects.get(pk=store_id)
            except (Store.DoesNotExist, ValueError):
                return Response({'error': 'Store not found.'}, status=status.HTTP_404_NOT_FOUND)

        try:
            requirements = material_requirements_for_date(date, store=store)
        except Product.DoesNotExist as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PlanningError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'date': date.isoformat(),
            'store': store.pk if store else None,
            'materials': MaterialRequirementSerializer(requirements, many=True).data,
        })


class ScheduleSnapshotView(APIView):
    """
    Refresh the snapshot of a scheduled day.

    POST /api/planning/schedules/:id/snapshot/
    Body: {"products": [{"product_id": 1, "production_count": 10}, ...]}
    Without "products" the snapshot is rebuilt from the live plan.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        try:
            schedule = PlanSchedule.objects.select_related('plan').get(pk=pk)
        except PlanSchedule.DoesNotExist:
            return Response({'error': 'Schedule not found.'}, status=status.HTTP_404_NOT_FOUND)

        serializer = SnapshotRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        products = serializer.validated_data.get('products')

        try:
            if products is None:
                ScheduleSnapshotService.create_snapshot_from_plan(schedule)
            else:
                ScheduleSnapshotService.update_products_snapshot(schedule, products)
        except Product.DoesNotExist:
            return Response({'error': 'Product not found.'}, status=status.HTTP_404_NOT_FOUND)
        except PlanningError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"Schedule {schedule.pk} snapshot refreshed by user {request.user.pk}")
        return Response(PlanScheduleSerializer(schedule).data)
