"""Role model: seniority order, level cutoffs and delegation rules.

Every table here is an explicit constant. Delegation is deliberately not
derived from seniority: a DIRECTOR outranks nobody at its own rank, yet the
rank comparison alone would not forbid DIRECTOR editing DIRECTOR.
"""

from enum import Enum

from area_authz.models.area import CapabilityFlags, RoleCapabilities


class Role(str, Enum):
    """Authority levels, most senior first."""

    ADMIN = "ADMIN"
    DIRECTOR = "DIRECTOR"
    SUBDIRECTOR = "SUBDIRECTOR"
    CAPTURISTA = "CAPTURISTA"


RoleLike = Role | str | None

_SENIORITY: dict[Role, int] = {
    Role.ADMIN: 0,
    Role.DIRECTOR: 1,
    Role.SUBDIRECTOR: 2,
    Role.CAPTURISTA: 3,
}

# None means no level restriction.
_MIN_AREA_LEVEL: dict[Role, int | None] = {
    Role.ADMIN: None,
    Role.DIRECTOR: 1,
    Role.SUBDIRECTOR: 2,
    Role.CAPTURISTA: 3,
}

_EDITABLE_TARGETS: dict[Role, frozenset[Role]] = {
    Role.ADMIN: frozenset({Role.DIRECTOR, Role.SUBDIRECTOR, Role.CAPTURISTA}),
    Role.DIRECTOR: frozenset({Role.SUBDIRECTOR, Role.CAPTURISTA}),
    Role.SUBDIRECTOR: frozenset({Role.CAPTURISTA}),
    Role.CAPTURISTA: frozenset(),
}

_ASSIGNABLE_ROLES: dict[Role, tuple[Role, ...]] = {
    Role.ADMIN: (Role.ADMIN, Role.DIRECTOR, Role.SUBDIRECTOR, Role.CAPTURISTA),
    Role.DIRECTOR: (Role.SUBDIRECTOR, Role.CAPTURISTA),
    Role.SUBDIRECTOR: (Role.CAPTURISTA,),
    Role.CAPTURISTA: (),
}

ROLE_LABELS: dict[Role, str] = {
    Role.ADMIN: "Administrador",
    Role.DIRECTOR: "Director",
    Role.SUBDIRECTOR: "Subdirector",
    Role.CAPTURISTA: "Capturista",
}

_ROLE_DESCRIPTIONS: dict[Role, str] = {
    Role.ADMIN: (
        "Acceso total al sistema. Puede gestionar todos los usuarios, áreas e indicadores."
    ),
    Role.DIRECTOR: (
        "Puede ver y gestionar indicadores de su dirección y todas las áreas subordinadas."
    ),
    Role.SUBDIRECTOR: (
        "Puede ver todas las áreas pero solo gestionar su subdirección y gerencias subordinadas."
    ),
    Role.CAPTURISTA: (
        "Puede ver todas las áreas pero solo capturar indicadores en gerencias asignadas."
    ),
}

_ROUTES_BY_ROLE: dict[Role, tuple[str, ...]] = {
    Role.DIRECTOR: ("dashboard", "visualizacion", "airport-info"),
    Role.SUBDIRECTOR: ("dashboard", "visualizacion", "airport-info", "indicators", "capture"),
    Role.CAPTURISTA: ("visualizacion", "capture"),
    Role.ADMIN: ("dashboard", "visualizacion", "airport-info", "indicators", "capture", "users"),
}

_FALLBACK_ROUTES: tuple[str, ...] = ("dashboard",)


def parse_role(value: object) -> Role | None:
    """Return the Role named by ``value``, or None if it names no role."""
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Role(value.strip().upper())
    except ValueError:
        return None


def seniority_rank(role: RoleLike) -> int | None:
    """Rank of a role, 0 being the most senior. None if the role is unknown."""
    parsed = parse_role(role)
    if parsed is None:
        return None
    return _SENIORITY[parsed]


def is_more_senior_than(role_a: RoleLike, role_b: RoleLike) -> bool:
    """True iff ``role_a`` strictly outranks ``role_b``; False when either is unknown."""
    rank_a = seniority_rank(role_a)
    rank_b = seniority_rank(role_b)
    if rank_a is None or rank_b is None:
        return False
    return rank_a < rank_b


def minimum_area_level_for(role: RoleLike) -> int | None:
    """Shallowest area level the role may act on. None means unrestricted."""
    parsed = parse_role(role)
    if parsed is None:
        return None
    return _MIN_AREA_LEVEL[parsed]


def is_unrestricted(role: RoleLike) -> bool:
    return parse_role(role) is Role.ADMIN


def can_delegate_edit(current_role: RoleLike, target_role: RoleLike) -> bool:
    """Whether a user holding ``current_role`` may edit a user holding ``target_role``."""
    current = parse_role(current_role)
    target = parse_role(target_role)
    if current is None or target is None:
        return False
    return target in _EDITABLE_TARGETS[current]


def assignable_roles_for(role: RoleLike) -> tuple[Role, ...]:
    """Roles a user holding ``role`` may grant to others."""
    parsed = parse_role(role)
    if parsed is None:
        return ()
    return _ASSIGNABLE_ROLES[parsed]


def role_label(role: RoleLike) -> str:
    parsed = parse_role(role)
    if parsed is None:
        return str(role) if role else ""
    return ROLE_LABELS[parsed]


def role_description(role: RoleLike) -> str:
    parsed = parse_role(role)
    if parsed is None:
        return "Rol no definido."
    return _ROLE_DESCRIPTIONS[parsed]


def default_capabilities_for(role: RoleLike, area_level: int | None) -> CapabilityFlags:
    """Default capture/edit/delete grants when assigning ``role`` to an area."""
    parsed = parse_role(role)
    if parsed is Role.ADMIN:
        return CapabilityFlags(can_capture=True, can_edit=True, can_delete=True)
    if parsed in (Role.DIRECTOR, Role.SUBDIRECTOR):
        return CapabilityFlags(can_capture=True, can_edit=True)
    if parsed is Role.CAPTURISTA:
        # Capture only in management units
        return CapabilityFlags(can_capture=area_level is not None and area_level >= 3)
    return CapabilityFlags()


def capabilities_for(role: RoleLike) -> RoleCapabilities:
    """Global flags for a role. An unknown role gets nothing."""
    parsed = parse_role(role)
    if parsed is None:
        return RoleCapabilities()
    managers = (Role.ADMIN, Role.DIRECTOR, Role.SUBDIRECTOR)
    return RoleCapabilities(
        is_admin=parsed is Role.ADMIN,
        is_director=parsed is Role.DIRECTOR,
        is_subdirector=parsed is Role.SUBDIRECTOR,
        is_capturista=parsed is Role.CAPTURISTA,
        can_see_all_areas=True,
        can_edit_all_areas=parsed is Role.ADMIN,
        can_capture_in_all_areas=parsed is Role.ADMIN,
        can_manage_users=parsed in managers,
        can_manage_areas=parsed is Role.ADMIN,
        can_manage_indicators=parsed in managers,
    )


def routes_for_role(role: RoleLike) -> tuple[str, ...]:
    """Application sections reachable by a role."""
    parsed = parse_role(role)
    if parsed is None:
        return _FALLBACK_ROUTES
    return _ROUTES_BY_ROLE[parsed]


def default_route_for_role(role: RoleLike) -> str:
    routes = routes_for_role(role)
    if not routes:
        return _FALLBACK_ROUTES[0]
    if parse_role(role) is Role.CAPTURISTA and "capture" in routes:
        return "capture"
    return routes[0]


def is_route_allowed_for_role(route: str, role: RoleLike) -> bool:
    return route in routes_for_role(role)
