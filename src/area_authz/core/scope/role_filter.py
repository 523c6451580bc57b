"""Restrict area collections to what a role may act on."""

from collections.abc import Iterable
from typing import Any, TypeVar

from loguru import logger

from area_authz.core.roles import RoleLike, minimum_area_level_for, parse_role
from area_authz.models.area import Area, AreaId, AreaNode

AreaT = TypeVar("AreaT", Area, AreaNode)


def is_area_valid_for_role(area: Area | AreaNode | None, role: RoleLike) -> bool:
    """Whether ``role`` may act on ``area`` given the role's minimum level."""
    if not isinstance(area, (Area, AreaNode)) or parse_role(role) is None:
        return False
    min_level = minimum_area_level_for(role)
    if min_level is None:
        return True
    return area.level >= min_level


def filter_areas_by_role(areas: Any, role: RoleLike, *, fail_closed: bool = False) -> list[Any]:
    """Keep the areas at or below the role's minimum level.

    Unrestricted roles get the input back unchanged. So do unrecognized roles,
    unless ``fail_closed`` is set, in which case they get nothing.
    """
    if isinstance(areas, tuple):
        areas = list(areas)
    if not isinstance(areas, list):
        return []
    if not all(isinstance(area, (Area, AreaNode)) for area in areas):
        logger.debug("Dropping non-area records before role filtering")
        areas = [area for area in areas if isinstance(area, (Area, AreaNode))]
    if parse_role(role) is None:
        logger.warning("Unrecognized role {!r} while filtering areas", role)
        return [] if fail_closed else areas
    min_level = minimum_area_level_for(role)
    if min_level is None:
        return areas
    return [area for area in areas if area.level >= min_level]


def filter_areas_by_ids(areas: list[AreaT], area_ids: Iterable[AreaId] | None) -> list[AreaT]:
    """Keep only areas whose id is in ``area_ids``. None means no restriction."""
    if area_ids is None:
        return areas
    wanted = set(area_ids)
    return [area for area in areas if area.id in wanted]
