from django.urls import path

from budgets.views import DailyRevenueView

urlpatterns = [
    path('daily/', DailyRevenueView.as_view(), name='budget-daily-revenue'),
]
