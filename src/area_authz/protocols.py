"""Protocols for the persistence collaborator the engine reads from."""

from collections.abc import Hashable
from typing import Protocol, runtime_checkable

from area_authz.core.roles import Role
from area_authz.models.area import Area, UserAreaAssignment


@runtime_checkable
class AreaRepositoryProtocol(Protocol):
    """Source of area, assignment and delegation data."""

    def list_areas(self) -> list[Area]:
        """Return every active area, in no particular order."""
        ...

    def list_user_area_assignments(self, user_id: Hashable) -> list[UserAreaAssignment]:
        """Return the active area grants of a user."""
        ...

    def list_assignable_roles(self, user_id: Hashable) -> list[Role]:
        """Return the roles a user may grant to others."""
        ...

    async def check_cross_user_edit_authority(
        self, acting_user_id: Hashable, target_user_id: Hashable
    ) -> bool:
        """Decide, from current data, whether one user may edit another."""
        ...
