"""Tests for SupabaseAreaRepository — HTTP repository over PostgREST."""

import asyncio
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from area_authz.api import SupabaseAreaRepository
from area_authz.core.roles import Role

USERS = {
    "admin": "ADMIN",
    "dir": "DIRECTOR",
    "dir2": "DIRECTOR",
    "sub": "SUBDIRECTOR",
    "cap": "CAPTURISTA",
    "cap_other": "CAPTURISTA",
    "cap_none": "CAPTURISTA",
}

ASSIGNMENT_PATHS = {
    "dir": ["1"],
    "dir2": ["5"],
    "sub": ["1.2"],
    "cap": ["1.2.3"],
    "cap_other": ["5.6.7"],
    "cap_none": [],
}


@pytest.fixture
def repo_with_mock_session(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> tuple[SupabaseAreaRepository, MagicMock]:
    """Create a repository with a real key file and mocked requests.Session."""
    key_file = tmp_path / "key.txt"
    key_file.write_text("test-key\n")
    monkeypatch.setattr("area_authz.api.SUPABASE_KEY_FILES", [key_file])

    with patch("area_authz.api.requests.Session") as mock_session_cls:
        mock_session = MagicMock()
        mock_session.headers = {}
        mock_session_cls.return_value = mock_session
        repo = SupabaseAreaRepository("https://store.example/")

    return repo, mock_session


def _make_response(data: Any) -> MagicMock:
    """Create a mock HTTP response with given JSON data."""
    response = MagicMock()
    response.json.return_value = data
    return response


def _fake_store(url: str, params: dict[str, str], timeout: float) -> MagicMock:
    """Answer usuarios/usuario_areas queries from the tables above."""
    user_id = (params.get("id") or params.get("usuario_id", "")).removeprefix("eq.")
    if url.endswith("/usuarios"):
        role = USERS.get(user_id)
        return _make_response([{"id": user_id, "rol_principal": role}] if role else [])
    if url.endswith("/usuario_areas"):
        rows = [
            {"area_id": path.split(".")[-1], "areas": {"id": path.split(".")[-1], "path": path}}
            for path in ASSIGNMENT_PATHS.get(user_id, [])
        ]
        return _make_response(rows)
    raise AssertionError(f"unexpected url {url}")


def test_init_reads_key_from_first_found_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    key_file = tmp_path / "key.txt"
    key_file.write_text("my-secret-key\n")
    monkeypatch.setattr(
        "area_authz.api.SUPABASE_KEY_FILES", [tmp_path / "missing.txt", key_file]
    )

    with patch("area_authz.api.requests.Session") as mock_session_cls:
        mock_session_cls.return_value.headers = {}
        repo = SupabaseAreaRepository("https://store.example")

    assert repo.api_key == "my-secret-key"
    assert repo.sess.headers["Authorization"] == "Bearer my-secret-key"


def test_init_raises_when_no_key_file_exists(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("area_authz.api.SUPABASE_KEY_FILES", [tmp_path / "a.txt"])

    with pytest.raises(RuntimeError, match="Cannot find data store API key"):
        SupabaseAreaRepository("https://store.example")


def test_init_raises_without_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AREA_AUTHZ_SUPABASE_URL", raising=False)

    with pytest.raises(RuntimeError, match="No data store URL"):
        SupabaseAreaRepository()


def test_list_areas_queries_active_areas(
    repo_with_mock_session: tuple[SupabaseAreaRepository, MagicMock],
) -> None:
    repo, mock_session = repo_with_mock_session
    mock_session.get.return_value = _make_response(
        [
            {"id": 1, "nombre": "Dirección", "nivel": 1, "path": "1"},
            {"id": 2, "nombre": "Gerencia", "nivel": 3, "parent_area_id": 1, "path": "1.2"},
        ]
    )

    areas = repo.list_areas()

    assert [a.name for a in areas] == ["Dirección", "Gerencia"]
    url = mock_session.get.call_args[0][0]
    params = mock_session.get.call_args[1]["params"]
    assert url == "https://store.example/rest/v1/areas"
    assert params["estado"] == "eq.ACTIVO"
    assert params["order"] == "path.asc"


def test_list_user_area_assignments(
    repo_with_mock_session: tuple[SupabaseAreaRepository, MagicMock],
) -> None:
    repo, mock_session = repo_with_mock_session
    mock_session.get.return_value = _make_response(
        [{"area_id": 2, "puede_editar": True, "rol": "SUBDIRECTOR", "areas": {"path": "1.2"}}]
    )

    (assignment,) = repo.list_user_area_assignments("u1")

    assert assignment.user_id == "u1"
    assert assignment.can_edit
    assert assignment.role is Role.SUBDIRECTOR
    assert mock_session.get.call_args[1]["params"]["usuario_id"] == "eq.u1"


def test_list_assignable_roles_uses_role_policy(
    repo_with_mock_session: tuple[SupabaseAreaRepository, MagicMock],
) -> None:
    repo, mock_session = repo_with_mock_session
    mock_session.get.side_effect = _fake_store

    assert repo.list_assignable_roles("dir") == [Role.SUBDIRECTOR, Role.CAPTURISTA]
    assert repo.list_assignable_roles("ghost") == []


def test_http_errors_propagate(
    repo_with_mock_session: tuple[SupabaseAreaRepository, MagicMock],
) -> None:
    repo, mock_session = repo_with_mock_session
    response = _make_response([])
    response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    mock_session.get.return_value = response

    with pytest.raises(requests.HTTPError):
        repo.list_areas()


def test_non_list_payload_raises(
    repo_with_mock_session: tuple[SupabaseAreaRepository, MagicMock],
) -> None:
    repo, mock_session = repo_with_mock_session
    mock_session.get.return_value = _make_response({"message": "boom"})

    with pytest.raises(RuntimeError, match="Unexpected response"):
        repo.list_areas()


@pytest.mark.parametrize(
    ("acting", "target", "expected"),
    [
        ("admin", "dir", True),
        ("dir", "dir", False),
        ("dir", "dir2", False),
        ("dir", "sub", True),
        ("dir", "cap", True),
        ("dir", "cap_other", False),
        ("sub", "cap", True),
        ("sub", "dir", False),
        ("dir", "cap_none", False),
        ("dir", "admin", False),
        ("cap", "cap_other", False),
        ("ghost", "cap", False),
    ],
)
def test_user_can_edit_user(
    repo_with_mock_session: tuple[SupabaseAreaRepository, MagicMock],
    acting: str,
    target: str,
    expected: bool,
) -> None:
    repo, mock_session = repo_with_mock_session
    mock_session.get.side_effect = _fake_store

    assert repo.user_can_edit_user(acting, target) is expected


def test_authority_check_runs_in_thread(
    repo_with_mock_session: tuple[SupabaseAreaRepository, MagicMock],
) -> None:
    repo, mock_session = repo_with_mock_session
    mock_session.get.side_effect = _fake_store

    assert asyncio.run(repo.check_cross_user_edit_authority("sub", "cap")) is True
