"""
Status change restrictions.

Master records that are already referenced elsewhere must not be moved
back to an inactive status (a product used in a plan cannot become a
draft again). Each model declares its restriction explicitly:

    STATUS_RESTRICTION = StatusChangeRestriction(
        related_name='plan_products',
        restricted_statuses=('draft', 'discontinued'),
        message="This product is used in plans and cannot be withdrawn.",
    )

and calls ``STATUS_RESTRICTION.validate(self)`` from ``clean()``.
"""
from dataclasses import dataclass
from typing import Tuple

from django.core.exceptions import ValidationError


@dataclass(frozen=True)
class StatusChangeRestriction:
    related_name: str
    restricted_statuses: Tuple[str, ...]
    message: str
    status_field: str = 'status'

    def validate(self, instance):
        """Raise ValidationError when a restricted status change is attempted."""
        if instance._state.adding or instance.pk is None:
            return

        new_status = getattr(instance, self.status_field)
        if new_status not in self.restricted_statuses:
            return

        previous = (
            type(instance)._base_manager
            .filter(pk=instance.pk)
            .values_list(self.status_field, flat=True)
            .first()
        )
        if previous == new_status:
            return

        related = getattr(instance, self.related_name)
        if related.model._base_manager.filter(**{related.field.name: instance}).exists():
            raise ValidationError({self.status_field: self.message})
