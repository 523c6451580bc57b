"""Domain models for the area hierarchy and per-user grants."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from area_authz.core.roles import Role

AreaId = Hashable


@dataclass(frozen=True)
class Area:
    """A single organizational area (directorate, subdirectorate, management unit)."""

    id: AreaId
    name: str
    level: int
    parent_area_id: AreaId | None = None
    code: str | None = None
    display_order: int | None = None
    color_hex: str | None = None
    path: str | None = None


@dataclass
class AreaNode:
    """An Area placed in a built forest.

    Nodes only point down to their children; ancestors are found by searching
    the forest, never through stored parent links.
    """

    area: Area
    children: list[AreaNode] = field(default_factory=list)

    @property
    def id(self) -> AreaId:
        return self.area.id

    @property
    def name(self) -> str:
        return self.area.name

    @property
    def code(self) -> str | None:
        return self.area.code

    @property
    def level(self) -> int:
        return self.area.level

    @property
    def parent_area_id(self) -> AreaId | None:
        return self.area.parent_area_id

    @property
    def display_order(self) -> int | None:
        return self.area.display_order

    @property
    def color_hex(self) -> str | None:
        return self.area.color_hex

    @property
    def path(self) -> str | None:
        return self.area.path


@dataclass(frozen=True)
class UserAreaAssignment:
    """A user's grant on one area, with the role context it was granted under."""

    user_id: Hashable
    area_id: AreaId
    can_capture: bool = False
    can_edit: bool = False
    can_delete: bool = False
    role: Role | None = None


@dataclass(frozen=True)
class CapabilityFlags:
    """Capture/edit/delete switches for one role in one area."""

    can_capture: bool = False
    can_edit: bool = False
    can_delete: bool = False


@dataclass(frozen=True)
class RoleCapabilities:
    """Global capabilities that follow from a role alone."""

    is_admin: bool = False
    is_director: bool = False
    is_subdirector: bool = False
    is_capturista: bool = False
    can_see_all_areas: bool = False
    can_edit_all_areas: bool = False
    can_capture_in_all_areas: bool = False
    can_manage_users: bool = False
    can_manage_areas: bool = False
    can_manage_indicators: bool = False


@dataclass(frozen=True)
class SearchStats:
    """Counters describing a search controller's current state."""

    total: int
    filtered: int
    roots: int
    selected: int
    expanded: int
