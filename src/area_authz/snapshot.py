"""Area repository backed by a JSON snapshot file."""

import json
from collections.abc import Hashable
from pathlib import Path
from typing import Any

from loguru import logger

from area_authz.core.importer.records import parse_areas, parse_assignments
from area_authz.core.roles import Role, assignable_roles_for, can_delegate_edit, parse_role
from area_authz.models.area import Area, UserAreaAssignment


class SnapshotRepository:
    """Read-only repository over a snapshot of the data store.

    The file holds ``{"areas": [...], "users": [{"id", "role", "assignments"}]}``.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        try:
            data: Any = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            msg = f"Snapshot file not found: {self.path}"
            raise RuntimeError(msg) from None
        except json.JSONDecodeError as e:
            msg = f"Snapshot file {self.path} is not valid JSON: {e}"
            raise RuntimeError(msg) from e
        if not isinstance(data, dict):
            msg = f"Snapshot file {self.path} must contain a JSON object"
            raise RuntimeError(msg)

        self.areas = parse_areas(data.get("areas", []))
        self.users: dict[Hashable, dict[str, Any]] = {}
        for user in data.get("users", []):
            if isinstance(user, dict) and user.get("id") is not None:
                self.users[user["id"]] = user
        logger.debug(
            "Loaded snapshot {}: {} areas, {} users", self.path, len(self.areas), len(self.users)
        )

    def user_role(self, user_id: Hashable) -> Role | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        return parse_role(user.get("role", user.get("rol_principal")))

    def list_areas(self) -> list[Area]:
        return list(self.areas)

    def list_user_area_assignments(self, user_id: Hashable) -> list[UserAreaAssignment]:
        user = self.users.get(user_id)
        if user is None:
            return []
        return parse_assignments(user.get("assignments", []), user_id=user_id)

    def list_assignable_roles(self, user_id: Hashable) -> list[Role]:
        return list(assignable_roles_for(self.user_role(user_id)))

    async def check_cross_user_edit_authority(
        self, acting_user_id: Hashable, target_user_id: Hashable
    ) -> bool:
        if acting_user_id == target_user_id:
            return False
        return can_delegate_edit(self.user_role(acting_user_id), self.user_role(target_user_id))
