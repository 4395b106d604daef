"""
URL configuration for the planning app.
"""
from django.urls import path

from planning.views import (
    DailyMaterialRequirementsView,
    PlanMaterialRequirementsView,
    PlanMaterialsSummaryView,
    ScheduleSnapshotView,
)

urlpatterns = [
    path(
        'plans/<int:pk>/material-requirements/',
        PlanMaterialRequirementsView.as_view(),
        name='plan-material-requirements'
    ),
    path(
        'plans/<int:pk>/materials-summary/',
        PlanMaterialsSummaryView.as_view(),
        name='plan-materials-summary'
    ),
    path(
        'material-requirements/',
        DailyMaterialRequirementsView.as_view(),
        name='daily-material-requirements'
    ),
    path(
        'schedules/<int:pk>/snapshot/',
        ScheduleSnapshotView.as_view(),
        name='schedule-snapshot'
    ),
]
