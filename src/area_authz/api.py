"""Area repository over the data store's PostgREST (Supabase) HTTP API."""

import asyncio
import logging
import os
from collections.abc import Hashable
from typing import Any

import requests

from area_authz.config import (
    MATERIALIZED_PATH_SEPARATOR,
    REQUEST_TIMEOUT,
    SUPABASE_KEY_FILES,
    SUPABASE_URL_ENV,
)
from area_authz.core.importer.records import parse_areas, parse_assignments
from area_authz.core.roles import Role, assignable_roles_for, can_delegate_edit, parse_role
from area_authz.models.area import Area, UserAreaAssignment

_AREA_COLUMNS = "id,nombre,clave,color_hex,parent_area_id,nivel,path,orden_visualizacion,estado"
_ASSIGNMENT_COLUMNS = "area_id,rol,puede_capturar,puede_editar,puede_eliminar,areas(id,path)"


class SupabaseAreaRepository:
    """Reads areas, users and grants from the data store."""

    def __init__(self, base_url: str | None = None) -> None:
        self.sess = requests.Session()
        self.logger = logging.getLogger("api")

        url = base_url or os.environ.get(SUPABASE_URL_ENV)
        if not url:
            msg = f"No data store URL given and {SUPABASE_URL_ENV} is not set"
            raise RuntimeError(msg)
        self.base_url = url.rstrip("/")

        api_key_name: str | None = None
        for key_path in SUPABASE_KEY_FILES:
            try:
                self.api_key = key_path.read_text(encoding="utf-8").strip()
                api_key_name = str(key_path)
                break
            except FileNotFoundError:
                pass
        else:
            msg = f"Cannot find data store API key file, was looking at {SUPABASE_KEY_FILES!r}"
            raise RuntimeError(msg)

        self.sess.headers.update(
            {"apikey": self.api_key, "Authorization": f"Bearer {self.api_key}"}
        )
        self.logger.debug(f"API ready: key from {api_key_name!r}, base_url {self.base_url!r}")

    def fetch(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        """GET rows from a table, return the decoded JSON list."""
        self.logger.debug(f"Making request: {table!r} {repr(params)[:48]}")
        r = self.sess.get(
            f"{self.base_url}/rest/v1/{table}", params=params, timeout=REQUEST_TIMEOUT
        )
        r.raise_for_status()
        rows = r.json()
        if not isinstance(rows, list):
            msg = f"Unexpected response for {table!r}: {rows!r}"
            raise RuntimeError(msg)
        return rows

    def _user_role(self, user_id: Hashable) -> Role | None:
        rows = self.fetch("usuarios", {"select": "id,rol_principal", "id": f"eq.{user_id}"})
        if not rows:
            return None
        return parse_role(rows[0].get("rol_principal"))

    def _assignment_rows(self, user_id: Hashable) -> list[dict[str, Any]]:
        return self.fetch(
            "usuario_areas",
            {
                "select": _ASSIGNMENT_COLUMNS,
                "usuario_id": f"eq.{user_id}",
                "estado": "eq.ACTIVO",
            },
        )

    def list_areas(self) -> list[Area]:
        rows = self.fetch(
            "areas", {"select": _AREA_COLUMNS, "estado": "eq.ACTIVO", "order": "path.asc"}
        )
        return parse_areas(rows)

    def list_user_area_assignments(self, user_id: Hashable) -> list[UserAreaAssignment]:
        return parse_assignments(self._assignment_rows(user_id), user_id=user_id)

    def list_assignable_roles(self, user_id: Hashable) -> list[Role]:
        return list(assignable_roles_for(self._user_role(user_id)))

    async def check_cross_user_edit_authority(
        self, acting_user_id: Hashable, target_user_id: Hashable
    ) -> bool:
        return await asyncio.to_thread(self.user_can_edit_user, acting_user_id, target_user_id)

    def user_can_edit_user(self, acting_user_id: Hashable, target_user_id: Hashable) -> bool:
        """Decide from current data whether one user may edit another.

        Directors and subdirectors may only edit users holding an area inside
        one of their own areas.
        """
        if acting_user_id == target_user_id:
            return False

        acting_role = self._user_role(acting_user_id)
        if acting_role is None:
            return False
        if acting_role is Role.ADMIN:
            return True

        target_role = self._user_role(target_user_id)
        if target_role is None or not can_delegate_edit(acting_role, target_role):
            return False

        target_paths = _area_paths(self._assignment_rows(target_user_id))
        if not target_paths:
            return False
        acting_paths = _area_paths(self._assignment_rows(acting_user_id))
        return any(
            target == own or target.startswith(own + MATERIALIZED_PATH_SEPARATOR)
            for target in target_paths
            for own in acting_paths
        )


def _area_paths(rows: list[dict[str, Any]]) -> list[str]:
    paths: list[str] = []
    for row in rows:
        area = row.get("areas")
        if isinstance(area, dict) and area.get("path"):
            paths.append(str(area["path"]))
    return paths
