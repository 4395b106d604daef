"""
Record copying.

A copy gets a fresh, unique name (and reading, when the model has one)
inside its uniqueness scope, optional attribute overrides, and clones of
selected child rows. Behaviour is configured per model with an explicit
CopyConfig instead of class-level settings:

    PRODUCT_COPY_CONFIG = CopyConfig(
        uniqueness_scope=('tenant_id', 'category_id'),
        uniqueness_check_attributes=('name', 'reading'),
        children=(ChildCopy('product_materials', 'product'),),
        overrides={'status': 'draft'},
    )
    RecordCopier(PRODUCT_COPY_CONFIG).copy(product)
"""
import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from django.db import transaction

logger = logging.getLogger(__name__)

COPY_SUFFIX_RE = re.compile(r"\s*\(コピー\d+\).*\Z")
READING_SUFFIX_RE = re.compile(r"こぴー.*\Z")
READING_NUMBERS = ["", "いち", "に", "さん", "よん", "ご", "ろく", "なな", "はち", "きゅう", "じゅう"]

# Give up instead of looping forever on a pathological scope
MAX_COPY_ATTEMPTS = 1000


class CopyError(Exception):
    """Raised when a unique copy cannot be produced."""
    pass


def default_name_format(original_name: str, copy_count: int) -> str:
    return f"{original_name} (コピー{copy_count})"


def default_reading_format(original_reading: str, copy_count: int) -> str:
    # Readings must stay hiragana only, so numbers past ten repeat the marker
    if copy_count < len(READING_NUMBERS):
        return f"{original_reading}こぴー{READING_NUMBERS[copy_count]}"
    return f"{original_reading}こぴー{'こぴー' * (copy_count - 10)}"


@dataclass(frozen=True)
class ChildCopy:
    """A reverse relation whose rows are cloned onto the copy."""
    related_name: str
    parent_field: str


@dataclass(frozen=True)
class CopyConfig:
    name_format: Callable[[str, int], str] = default_name_format
    reading_format: Callable[[str, int], str] = default_reading_format
    uniqueness_scope: Tuple[str, ...] = ()
    uniqueness_check_attributes: Tuple[str, ...] = ('name',)
    children: Tuple[ChildCopy, ...] = ()
    # Plain values are assigned as-is; callables receive (source, new_record)
    overrides: Dict[str, Any] = field(default_factory=dict)


class RecordCopier:
    """Creates uniquely-named copies of model instances."""

    def __init__(self, config: CopyConfig):
        self.config = config

    def copy(self, record, user=None):
        """
        Copy ``record`` and the configured child rows in one transaction.

        Args:
            record: The model instance to copy.
            user: Optional user recorded as the copy's creator when the
                model has a ``created_by`` field.

        Returns:
            The saved copy.
        """
        with transaction.atomic():
            name, reading = self.unique_name_and_reading(record)

            new_record = self._clone(record)
            new_record.name = name
            if reading is not None and hasattr(new_record, 'reading'):
                new_record.reading = reading
            if user is not None and hasattr(new_record, 'created_by'):
                new_record.created_by = user

            for attr, value in self.config.overrides.items():
                if callable(value):
                    value = value(record, new_record)
                setattr(new_record, attr, value)

            new_record.save()

            for child in self.config.children:
                self._copy_children(record, new_record, child)

        logger.info(f"Copied {type(record).__name__} {record.pk} -> {new_record.pk} ('{new_record.name}')")
        return new_record

    def unique_name_and_reading(self, record) -> Tuple[str, Optional[str]]:
        original_name = COPY_SUFFIX_RE.sub("", record.name)
        base_reading = getattr(record, 'reading', None)
        original_reading = READING_SUFFIX_RE.sub("", base_reading) if base_reading else None

        for copy_count in range(1, MAX_COPY_ATTEMPTS + 1):
            name = self.config.name_format(original_name, copy_count)
            reading = (
                self.config.reading_format(original_reading, copy_count)
                if original_reading else None
            )
            if not self._exists(record, name, reading):
                return name, reading

        raise CopyError(f"Could not find a free copy name for '{record.name}'")

    def _exists(self, record, name, reading) -> bool:
        conditions = {}
        for attr in self.config.uniqueness_check_attributes:
            if attr == 'name':
                conditions['name'] = name
            elif attr == 'reading':
                if reading:
                    conditions['reading'] = reading
            else:
                conditions[attr] = getattr(record, attr)
        for attr in self.config.uniqueness_scope:
            conditions[attr] = getattr(record, attr)

        # Archived rows still hold their names, so bypass the default manager
        return type(record)._base_manager.filter(**conditions).exists()

    @staticmethod
    def _clone(instance):
        clone = copy.copy(instance)
        clone.pk = None
        clone.id = None
        clone._state = copy.copy(instance._state)
        clone._state.adding = True
        clone._state.fields_cache = {}
        clone.__dict__.pop('_prefetched_objects_cache', None)
        return clone

    def _copy_children(self, record, new_record, child: ChildCopy):
        related_model = getattr(record, child.related_name).model
        originals = list(
            related_model._base_manager.filter(**{child.parent_field: record}).order_by('pk')
        )
        for original in originals:
            clone = self._clone(original)
            setattr(clone, child.parent_field, new_record)
            clone.save()
        logger.debug(f"Copied {len(originals)} {child.related_name} rows onto {new_record.pk}")
