"""Tests for the per-user authorization resolver."""

import asyncio

import pytest

from area_authz.core.authz.resolver import UserAuthorization
from area_authz.core.roles import Role
from area_authz.models.area import Area, UserAreaAssignment
from tests.unit.fakes import FakeRepository


def _assignment(area_id: object, **flags: bool) -> UserAreaAssignment:
    return UserAreaAssignment(user_id="u", area_id=area_id, **flags)


def test_subdirector_edits_only_assigned_area() -> None:
    authz = UserAuthorization("u", Role.SUBDIRECTOR, [_assignment(2, can_edit=True)])
    assert authz.can_edit_area(2)
    assert not authz.can_edit_area(3)
    assert not authz.can_edit_area(None)


def test_admin_edits_any_area_regardless_of_assignments() -> None:
    authz = UserAuthorization("u", Role.ADMIN, [], all_area_ids=[1, 2, 3])
    assert authz.can_edit_area(3)
    assert authz.can_edit_area("never-seen")
    assert authz.editable_area_ids == {1, 2, 3}
    assert authz.capturable_area_ids == {1, 2, 3}


def test_area_sets_follow_flags() -> None:
    authz = UserAuthorization(
        "u",
        Role.CAPTURISTA,
        [
            _assignment(1, can_capture=True),
            _assignment(2, can_edit=True, can_delete=True),
            _assignment(3),
        ],
    )
    assert authz.capturable_area_ids == {1}
    assert authz.editable_area_ids == {2}
    assert authz.deletable_area_ids == {2}
    assert authz.can_capture_in_area(1)
    assert not authz.can_capture_in_area(2)
    assert authz.can_delete_in_area(2)
    assert authz.has_assigned_areas


def test_non_admin_ignores_all_area_ids() -> None:
    authz = UserAuthorization("u", Role.DIRECTOR, [], all_area_ids=[1, 2])
    assert authz.editable_area_ids == frozenset()
    assert not authz.can_edit_area(1)
    assert not authz.has_assigned_areas


def test_can_assign_role_indexes_given_list() -> None:
    authz = UserAuthorization("u", Role.DIRECTOR, [], ["SUBDIRECTOR", Role.CAPTURISTA, "bogus"])
    assert authz.can_assign_role(Role.SUBDIRECTOR)
    assert authz.can_assign_role("capturista")
    assert not authz.can_assign_role(Role.DIRECTOR)
    assert not authz.can_assign_role(None)


def test_has_higher_role_than() -> None:
    authz = UserAuthorization("u", "DIRECTOR")
    assert authz.has_higher_role_than(Role.CAPTURISTA)
    assert not authz.has_higher_role_than(Role.DIRECTOR)
    assert authz.capabilities.is_director


def test_can_edit_user_refuses_missing_and_self() -> None:
    repo = FakeRepository()
    repo.authority_answer = True
    authz = UserAuthorization(
        "u", Role.DIRECTOR, authority=repo.check_cross_user_edit_authority
    )
    assert asyncio.run(authz.can_edit_user(None, "t")) is False
    assert asyncio.run(authz.can_edit_user("u", None)) is False
    assert asyncio.run(authz.can_edit_user("u", "u")) is False
    assert repo.authority_calls == []


def test_admin_can_edit_user_without_asking() -> None:
    repo = FakeRepository()
    authz = UserAuthorization("a", Role.ADMIN, authority=repo.check_cross_user_edit_authority)
    assert asyncio.run(authz.can_edit_user("a", "t")) is True
    assert repo.authority_calls == []


@pytest.mark.parametrize("answer", [True, False])
def test_non_admin_delegates_to_authority(answer: bool) -> None:
    repo = FakeRepository()
    repo.authority_answer = answer
    authz = UserAuthorization("d", Role.DIRECTOR, authority=repo.check_cross_user_edit_authority)
    assert asyncio.run(authz.can_edit_user("d", "t")) is answer
    assert repo.authority_calls == [("d", "t")]


def test_authority_error_denies() -> None:
    repo = FakeRepository()
    repo.authority_error = ConnectionError("store unreachable")
    authz = UserAuthorization("d", Role.DIRECTOR, authority=repo.check_cross_user_edit_authority)
    assert asyncio.run(authz.can_edit_user("d", "t")) is False


def test_authority_timeout_denies() -> None:
    repo = FakeRepository()
    repo.authority_answer = True
    repo.authority_delay = 1.0
    authz = UserAuthorization(
        "d",
        Role.DIRECTOR,
        authority=repo.check_cross_user_edit_authority,
        authority_timeout=0.01,
    )
    assert asyncio.run(authz.can_edit_user("d", "t")) is False


def test_missing_authority_denies() -> None:
    authz = UserAuthorization("d", Role.SUBDIRECTOR)
    assert asyncio.run(authz.can_edit_user("d", "t")) is False


def test_cancellation_reaches_the_caller() -> None:
    repo = FakeRepository()
    repo.authority_delay = 10.0
    authz = UserAuthorization("d", Role.DIRECTOR, authority=repo.check_cross_user_edit_authority)

    async def scenario() -> bool:
        task = asyncio.create_task(authz.can_edit_user("d", "t"))
        await asyncio.sleep(0)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            return True
        return False

    assert asyncio.run(scenario()) is True
    assert repo.authority_calls == [("d", "t")]


def test_load_reads_from_repository() -> None:
    repo = FakeRepository(
        areas=[Area(id=1, name="A", level=1), Area(id=2, name="B", level=2, parent_area_id=1)],
        assignments={"sub": [UserAreaAssignment(user_id="sub", area_id=2, can_edit=True)]},
        assignable={"sub": [Role.CAPTURISTA], "admin": list(Role)},
    )
    repo.authority_answer = True

    sub = UserAuthorization.load(repo, "sub", Role.SUBDIRECTOR)
    assert sub.editable_area_ids == {2}
    assert sub.can_assign_role(Role.CAPTURISTA)
    assert asyncio.run(sub.can_edit_user("sub", "cap")) is True

    admin = UserAuthorization.load(repo, "admin", "ADMIN")
    assert admin.editable_area_ids == {1, 2}
    assert admin.can_assign_role(Role.ADMIN)
