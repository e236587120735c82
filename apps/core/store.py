"""
Owner-scoped storage adapter.

Every ledger entity belongs to exactly one user. ``OwnerScopedStore`` wraps a
Django model and exposes the small document-store contract the services are
written against (create / get / list / update / delete / query by field), with
every query filtered by owner. Services never touch ``Model.objects`` for
owner data directly, so a missing owner or a foreign id can only surface as
:class:`NotAuthenticatedError` or the store's own not-found exception.

Example::

    projects = OwnerScopedStore(Project, not_found=ProjectNotFoundError)

    project = projects.create(user.id, {'name': 'Website', 'budget': 1000})
    project = projects.update(user.id, project.id, {'status': 'completed'})
    projects.delete(user.id, project.id)
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models

from .exceptions import NotAuthenticatedError, NotFoundError


class OwnerScopedStore:
    """Document-store style access to one model, partitioned by owner."""

    def __init__(
        self,
        model: type[models.Model],
        *,
        not_found: type[NotFoundError] = NotFoundError,
        owner_field: str = 'user',
    ):
        self.model = model
        self.not_found = not_found
        self.owner_field = owner_field

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def scoped(self, owner_id) -> models.QuerySet:
        """Return the owner's queryset, refusing anonymous access."""
        if owner_id is None:
            raise NotAuthenticatedError("Authentication required")
        return self.model.objects.filter(**{f'{self.owner_field}_id': owner_id})

    def get(self, owner_id, pk) -> models.Model:
        """Fetch one record or raise the store's not-found exception."""
        return self._get(self.scoped(owner_id), pk)

    def lock(self, owner_id, pk) -> models.Model:
        """Fetch one record with a row lock; must run inside a transaction."""
        return self._get(self.scoped(owner_id).select_for_update(), pk)

    def list(self, owner_id, order_by: str = 'updated_at', direction: str = 'desc') -> list:
        """List all of the owner's records ordered by one field."""
        prefix = '-' if direction == 'desc' else ''
        return list(self.scoped(owner_id).order_by(f'{prefix}{order_by}'))

    def query_by_field(self, owner_id, field: str, value: Any) -> list:
        """Return the owner's records whose ``field`` equals ``value``."""
        return list(self.scoped(owner_id).filter(**{field: value}))

    def exists(self, owner_id, **lookup) -> bool:
        return self.scoped(owner_id).filter(**lookup).exists()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, owner_id, data: dict) -> models.Model:
        """Insert a record for the owner; timestamps are set by the model."""
        if owner_id is None:
            raise NotAuthenticatedError("Authentication required")
        instance = self.model(**{f'{self.owner_field}_id': owner_id}, **data)
        instance.save()
        return instance

    def update(self, owner_id, pk, data: dict) -> models.Model:
        """Merge ``data`` into an existing record and stamp ``updated_at``."""
        instance = self.get(owner_id, pk)
        return self.save_fields(instance, data)

    def save_fields(self, instance: models.Model, data: dict) -> models.Model:
        """Apply ``data`` to an already loaded (possibly locked) instance."""
        for field, value in data.items():
            setattr(instance, field, value)
        instance.save(update_fields=self._update_fields(data.keys()))
        return instance

    def delete(self, owner_id, pk) -> bool:
        instance = self.get(owner_id, pk)
        instance.delete()
        return True

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get(self, queryset: models.QuerySet, pk) -> models.Model:
        try:
            return queryset.get(pk=pk)
        except (self.model.DoesNotExist, DjangoValidationError, ValueError):
            raise self.not_found(
                f"{self.model._meta.verbose_name.capitalize()} with ID {pk} not found"
            )

    def _update_fields(self, fields: Iterable[str]) -> Optional[list[str]]:
        update_fields = list(fields)
        if any(f.name == 'updated_at' for f in self.model._meta.concrete_fields):
            update_fields.append('updated_at')
        return update_fields
