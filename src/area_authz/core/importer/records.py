"""Parse raw area and assignment records into domain models.

Records may use English field names or the data store's Spanish column
names (``nombre``, ``nivel``, ``puede_editar``, ...).
"""

from collections.abc import Hashable
from typing import Any

from loguru import logger

from area_authz.core.roles import parse_role
from area_authz.models.area import Area, UserAreaAssignment


def _pick(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_area(record: dict[str, Any]) -> Area | None:
    """Build an Area from a raw record, or None if it has no id."""
    area_id = record.get("id")
    if area_id is None:
        return None
    code = _pick(record, "code", "clave")
    return Area(
        id=area_id,
        name=str(_pick(record, "name", "nombre") or ""),
        level=_as_int(_pick(record, "level", "nivel")) or 1,
        parent_area_id=_pick(record, "parent_area_id", "parentAreaId"),
        code=str(code).upper() if code else None,
        display_order=_as_int(_pick(record, "display_order", "orden_visualizacion")),
        color_hex=_pick(record, "color_hex", "colorHex"),
        path=_pick(record, "path"),
    )


def parse_areas(records: Any) -> list[Area]:
    """Parse a list of raw records, skipping anything unusable."""
    if not isinstance(records, list):
        return []
    areas: list[Area] = []
    for record in records:
        area = parse_area(record) if isinstance(record, dict) else None
        if area is None:
            logger.warning("Skipping area record without id: {!r}", record)
            continue
        areas.append(area)
    return areas


def parse_assignment(
    record: dict[str, Any], *, user_id: Hashable | None = None
) -> UserAreaAssignment | None:
    """Build a UserAreaAssignment, or None if no area id can be found."""
    area_id = _pick(record, "area_id", "areaId")
    if area_id is None:
        nested = record.get("areas") or record.get("area")
        if isinstance(nested, dict):
            area_id = nested.get("id")
    if area_id is None:
        return None
    return UserAreaAssignment(
        user_id=user_id if user_id is not None else _pick(record, "user_id", "usuario_id"),
        area_id=area_id,
        can_capture=bool(_pick(record, "can_capture", "puede_capturar")),
        can_edit=bool(_pick(record, "can_edit", "puede_editar")),
        can_delete=bool(_pick(record, "can_delete", "puede_eliminar")),
        role=parse_role(_pick(record, "role", "rol")),
    )


def parse_assignments(
    records: Any, *, user_id: Hashable | None = None
) -> list[UserAreaAssignment]:
    if not isinstance(records, list):
        return []
    assignments: list[UserAreaAssignment] = []
    for record in records:
        assignment = parse_assignment(record, user_id=user_id) if isinstance(record, dict) else None
        if assignment is None:
            logger.warning("Skipping assignment record without area: {!r}", record)
            continue
        assignments.append(assignment)
    return assignments
