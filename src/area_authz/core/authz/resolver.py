"""Per-user authorization view: editable, capturable and delegation checks."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Hashable, Iterable
from typing import TYPE_CHECKING

from loguru import logger

from area_authz.core.roles import (
    Role,
    RoleLike,
    capabilities_for,
    is_more_senior_than,
    is_unrestricted,
    parse_role,
)
from area_authz.models.area import AreaId, RoleCapabilities, UserAreaAssignment

if TYPE_CHECKING:
    from area_authz.protocols import AreaRepositoryProtocol

AuthorityCheck = Callable[[Hashable, Hashable], Awaitable[bool]]


class UserAuthorization:
    """Point permission queries for one authenticated user.

    Area sets come from the user's assignments; an unrestricted role (ADMIN)
    additionally covers every known area. Assignable roles are taken as given
    by the persistence collaborator and only indexed here.
    """

    def __init__(
        self,
        user_id: Hashable | None,
        role: RoleLike,
        assignments: Iterable[UserAreaAssignment] = (),
        assignable_roles: Iterable[RoleLike] = (),
        *,
        all_area_ids: Iterable[AreaId] = (),
        authority: AuthorityCheck | None = None,
        authority_timeout: float | None = None,
    ) -> None:
        self.user_id = user_id
        self.role = parse_role(role)
        self.assignments = tuple(assignments)
        self.assignable_roles = frozenset(
            r for r in (parse_role(value) for value in assignable_roles) if r is not None
        )
        self.authority = authority
        self.authority_timeout = authority_timeout
        self.unrestricted = is_unrestricted(self.role)

        everything = frozenset(all_area_ids) if self.unrestricted else frozenset()
        self.editable_area_ids: frozenset[AreaId] = everything | {
            a.area_id for a in self.assignments if a.can_edit
        }
        self.capturable_area_ids: frozenset[AreaId] = everything | {
            a.area_id for a in self.assignments if a.can_capture
        }
        self.deletable_area_ids: frozenset[AreaId] = everything | {
            a.area_id for a in self.assignments if a.can_delete
        }

    @classmethod
    def load(
        cls,
        repository: AreaRepositoryProtocol,
        user_id: Hashable,
        role: RoleLike,
        *,
        authority_timeout: float | None = None,
    ) -> UserAuthorization:
        """Fetch everything the view needs from the persistence collaborator."""
        assignments = repository.list_user_area_assignments(user_id)
        assignable = repository.list_assignable_roles(user_id)
        all_area_ids: list[AreaId] = []
        if is_unrestricted(role):
            all_area_ids = [area.id for area in repository.list_areas()]
        logger.debug(
            "Loaded authorization for {}: role {}, {} assignments, {} assignable roles",
            user_id, role, len(assignments), len(assignable),
        )
        return cls(
            user_id,
            role,
            assignments,
            assignable,
            all_area_ids=all_area_ids,
            authority=repository.check_cross_user_edit_authority,
            authority_timeout=authority_timeout,
        )

    @property
    def capabilities(self) -> RoleCapabilities:
        return capabilities_for(self.role)

    @property
    def has_assigned_areas(self) -> bool:
        return bool(self.assignments)

    def can_edit_area(self, area_id: AreaId | None) -> bool:
        if area_id is None:
            return False
        return self.unrestricted or area_id in self.editable_area_ids

    def can_capture_in_area(self, area_id: AreaId | None) -> bool:
        if area_id is None:
            return False
        return self.unrestricted or area_id in self.capturable_area_ids

    def can_delete_in_area(self, area_id: AreaId | None) -> bool:
        if area_id is None:
            return False
        return self.unrestricted or area_id in self.deletable_area_ids

    def can_assign_role(self, role: RoleLike) -> bool:
        parsed = parse_role(role)
        return parsed is not None and parsed in self.assignable_roles

    def has_higher_role_than(self, other_role: RoleLike) -> bool:
        return is_more_senior_than(self.role, other_role)

    async def can_edit_user(
        self, acting_user_id: Hashable | None, target_user_id: Hashable | None
    ) -> bool:
        """Whether the acting user may edit the target user.

        Self-edits are refused and ADMIN is allowed outright. Anything else is
        asked of the external authority; errors and timeouts deny. Cancellation
        is left to propagate to the caller.
        """
        if acting_user_id is None or target_user_id is None:
            return False
        if acting_user_id == target_user_id:
            return False
        if self.role is Role.ADMIN:
            return True
        if self.authority is None:
            logger.warning("No edit authority configured; denying edit of {}", target_user_id)
            return False

        try:
            check = self.authority(acting_user_id, target_user_id)
            if self.authority_timeout is not None:
                allowed = await asyncio.wait_for(check, timeout=self.authority_timeout)
            else:
                allowed = await check
        except TimeoutError:
            logger.warning(
                "Edit authority check timed out for {} -> {}; denying",
                acting_user_id, target_user_id,
            )
            return False
        except Exception:
            logger.opt(exception=True).warning(
                "Edit authority check failed for {} -> {}; denying",
                acting_user_id, target_user_id,
            )
            return False
        return bool(allowed)
