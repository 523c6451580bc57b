"""Configuration constants for area-authz."""

import os
from pathlib import Path

# Separator used when joining breadcrumb names.
DEFAULT_PATH_SEPARATOR: str = " > "

# Separator inside an area's materialized path ("1.4.12").
MATERIALIZED_PATH_SEPARATOR: str = "."

# Snapshot files for the CLI. First file found is used.
SNAPSHOT_FILES: list[Path] = [
    Path("area-snapshot.json"),
    Path("~/.config/area-authz/snapshot.json").expanduser(),
    Path("~/.local/share/area-authz/snapshot.json").expanduser(),
]

# PostgREST endpoint of the data store, e.g. https://xyz.supabase.co
SUPABASE_URL_ENV: str = "AREA_AUTHZ_SUPABASE_URL"

# API key location. First file found is used.
SUPABASE_KEY_FILES: list[Path] = [
    Path("~/.config/area-authz-supabase-key.txt").expanduser(),
    Path("~/.config/secret/area-authz-supabase-key.txt").expanduser(),
    Path(f"/run/user/{os.getuid()}/area-authz-supabase-key"),
]

# Seconds before an HTTP request to the data store is abandoned.
REQUEST_TIMEOUT: float = 15.0


def resolve_snapshot_file() -> Path:
    """Return the first existing snapshot file, or the first candidate if none exist."""
    for candidate in SNAPSHOT_FILES:
        if candidate.is_file():
            return candidate
    return SNAPSHOT_FILES[0]
