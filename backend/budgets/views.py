"""
Budget views - daily revenue figures for a month.
"""
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from budgets.serializers import DailyRevenueRowSerializer, MonthlyBudgetSummarySerializer
from budgets.services import DailyRevenueService
from tenant.models import Store


class DailyRevenueView(APIView):
    """
    Target, plan, actual and forecast for each day of a month.

    GET /api/budgets/daily/
    Query params:
    - year: e.g. 2025 (required)
    - month: 1-12 (required)
    - store: Store ID (optional)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            year = int(request.query_params['year'])
            month = int(request.query_params['month'])
        except (KeyError, ValueError):
            return Response(
                {'error': 'year and month are required integers.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        if not 1 <= month <= 12 or not 1 <= year <= 9999:
            return Response({'error': 'year or month out of range.'}, status=status.HTTP_400_BAD_REQUEST)

        store = None
        store_id = request.query_params.get('store')
        if store_id:
            try:
                store = Store.objects.get(pk=store_id)
            except (Store.DoesNotExist, ValueError):
                return Response({'error': 'Store not found.'}, status=status.HTTP_404_NOT_FOUND)

        service = DailyRevenueService(request.tenant, year, month, store=store)
        budget = service.get_budget()
        rows = service.build()

        return Response({
            'year': year,
            'month': month,
            'store': store.pk if store else None,
            'budget': MonthlyBudgetSummarySerializer(budget).data if budget else None,
            'days': DailyRevenueRowSerializer(rows, many=True).data,
        })
