"""CLI for inspecting an area snapshot (tree, search, breadcrumbs, access)."""

import asyncio
import json
from collections.abc import Hashable, Iterable
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from area_authz.config import DEFAULT_PATH_SEPARATOR, resolve_snapshot_file
from area_authz.core.authz.resolver import UserAuthorization
from area_authz.core.roles import parse_role, role_label
from area_authz.core.scope.role_filter import filter_areas_by_role
from area_authz.core.search.controller import HierarchicalSearchController
from area_authz.core.tree.builder import build_area_tree, flatten_area_tree
from area_authz.core.tree.navigation import full_name, level_mismatches, path_to
from area_authz.core.tree.render import render_forest_as_text
from area_authz.logging_config import configure_logging
from area_authz.snapshot import SnapshotRepository

app = typer.Typer(help="Area authorization: browse the area hierarchy and check permissions.")

SnapshotOption = Annotated[
    Path | None,
    typer.Option("--snapshot", "-s", help="JSON snapshot with areas and users"),
]
RoleOption = Annotated[
    str | None,
    typer.Option("--role", "-r", help="Only show areas this role may act on"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write debug logs here"),
) -> None:
    configure_logging(verbose=verbose, log_file=log_file)


def _open_snapshot(snapshot: Path | None) -> SnapshotRepository:
    """Load the snapshot, exiting with an error if it cannot be read."""
    path = snapshot or resolve_snapshot_file()
    try:
        return SnapshotRepository(path)
    except RuntimeError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from None


def _check_role(role: str | None) -> None:
    if role is not None and parse_role(role) is None:
        typer.echo(f"Unknown role '{role}'.")
        raise typer.Exit(1)


def _resolve_id(raw: str, candidates: Iterable[Hashable]) -> Hashable | None:
    """Match a command-line id against ids that may be ints or strings."""
    for candidate in candidates:
        if str(candidate) == raw:
            return candidate
    return None


@app.command()
def tree(
    snapshot: SnapshotOption = None,
    role: RoleOption = None,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Max depth levels to render"),
    ] = None,
    show_ids: bool = typer.Option(False, "--ids", help="Show area ids"),
    check_levels: bool = typer.Option(
        False, "--check-levels", help="Report areas whose level does not follow their parent"
    ),
) -> None:
    """Print the area hierarchy."""
    _check_role(role)
    repo = _open_snapshot(snapshot)
    areas = repo.list_areas()
    if role is not None:
        areas = filter_areas_by_role(areas, role)
    forest = build_area_tree(areas)
    typer.echo(render_forest_as_text(forest, max_depth=max_depth, show_ids=show_ids), nl=False)

    if check_levels:
        mismatches = level_mismatches(forest)
        typer.echo(f"\n{len(mismatches)} level mismatches")
        for parent, child in mismatches:
            typer.echo(
                f"  {child.name} (level {child.level}) under {parent.name} (level {parent.level})"
            )


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to look for in area names and codes"),
    snapshot: SnapshotOption = None,
    role: RoleOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show areas matching a query together with their ancestors."""
    _check_role(role)
    repo = _open_snapshot(snapshot)
    controller = HierarchicalSearchController(repo.list_areas(), role=role)
    controller.set_query(query)
    visible = controller.visible_tree

    if output_json:
        data = {
            "query": controller.query,
            "areas": [
                {
                    "id": area.id,
                    "name": area.name,
                    "code": area.code,
                    "level": area.level,
                    "full_name": full_name(visible, area.id),
                }
                for area in flatten_area_tree(visible)
            ],
        }
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        return

    if not visible:
        typer.echo(f"No areas match '{controller.query}'.")
        return
    typer.echo(render_forest_as_text(visible), nl=False)


@app.command()
def path(
    area_id: str = typer.Argument(..., help="Area id"),
    snapshot: SnapshotOption = None,
    separator: str = typer.Option(DEFAULT_PATH_SEPARATOR, "--separator", help="Name separator"),
) -> None:
    """Print the breadcrumb of an area."""
    repo = _open_snapshot(snapshot)
    areas = repo.list_areas()
    resolved = _resolve_id(area_id, (area.id for area in areas))
    forest = build_area_tree(areas)
    if resolved is None or not path_to(forest, resolved):
        typer.echo(f"Area '{area_id}' not found.")
        raise typer.Exit(1)
    typer.echo(full_name(forest, resolved, separator))


@app.command()
def access(
    user_id: str = typer.Argument(..., help="Acting user id"),
    snapshot: SnapshotOption = None,
    target: Annotated[
        str | None,
        typer.Option("--target", "-t", help="Check whether the user may edit this user"),
    ] = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Summarize what a user may edit, capture and assign."""
    repo = _open_snapshot(snapshot)
    resolved = _resolve_id(user_id, repo.users)
    if resolved is None:
        typer.echo(f"User '{user_id}' not found.")
        raise typer.Exit(1)

    authz = UserAuthorization.load(repo, resolved, repo.user_role(resolved))
    areas = repo.list_areas()
    data: dict[str, Any] = {
        "user_id": resolved,
        "role": authz.role.value if authz.role else None,
        "editable": sorted(str(a.id) for a in areas if authz.can_edit_area(a.id)),
        "capturable": sorted(str(a.id) for a in areas if authz.can_capture_in_area(a.id)),
        "assignable_roles": sorted(r.value for r in authz.assignable_roles),
    }
    if target is not None:
        target_id = _resolve_id(target, repo.users)
        data["target"] = target
        data["can_edit_target"] = asyncio.run(authz.can_edit_user(resolved, target_id))

    if output_json:
        typer.echo(json.dumps(data, indent=2, default=str))
        return

    typer.echo(f"User {resolved} ({role_label(authz.role) or 'no role'})")
    typer.echo(f"  editable areas:   {', '.join(data['editable']) or '-'}")
    typer.echo(f"  capturable areas: {', '.join(data['capturable']) or '-'}")
    typer.echo(f"  assignable roles: {', '.join(data['assignable_roles']) or '-'}")
    if target is not None:
        verdict = "yes" if data["can_edit_target"] else "no"
        typer.echo(f"  may edit {target}: {verdict}")
