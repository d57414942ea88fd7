from __future__ import annotations

import pytest

from app.db.workspace import PlannerWorkspace
from app.models.entities import MemberType
from app.repositories.directory_repository import EntityNotFoundError
from app.services.allocation_edit_service import CellRef, GesturePhase
from sample_directory import DEC, JAN, NOV, Directory


def test_catalogs_resolve_or_return_none(workspace: PlannerWorkspace, directory: Directory) -> None:
    repo = workspace.directory

    assert repo.roles.resolve(directory.developer.id) is directory.developer
    assert repo.roles.resolve("missing") is None
    assert repo.members.resolve(directory.alice.id) is directory.alice
    assert repo.members.resolve("missing") is None
    assert repo.get_project("missing") is None


def test_list_members_filters_by_type(workspace: PlannerWorkspace, directory: Directory) -> None:
    assert [member.name for member in workspace.directory.list_members()] == ["Alice", "Bob", "Carol"]
    assert [member.name for member in workspace.directory.list_members(MemberType.CONSULTANT)] == ["Carol"]


def test_delete_role_leaves_member_with_dangling_reference(workspace: PlannerWorkspace, directory: Directory) -> None:
    workspace.directory.delete_role(directory.designer.id)

    assert workspace.directory.get_member(directory.bob.id) is not None
    assert workspace.directory.roles.resolve(directory.bob.role_id) is None

    with pytest.raises(EntityNotFoundError):
        workspace.directory.delete_role(directory.designer.id)


def test_delete_member_cascades_to_allocations_and_rosters(workspace: PlannerWorkspace, directory: Directory) -> None:
    engine = workspace.engine
    engine.set_value(CellRef(directory.apollo.id, directory.alice.id, NOV), "100")
    engine.set_value(CellRef(directory.zephyr.id, directory.alice.id, DEC), "50")
    engine.set_value(CellRef(directory.apollo.id, directory.bob.id, NOV), "50")
    workspace.directory.add_member_to_project(directory.zephyr.id, directory.alice.id)

    removed = workspace.directory.delete_member(directory.alice.id)

    assert removed == 2
    assert workspace.store.all_for(lambda row: row.member_id == directory.alice.id) == []
    assert len(workspace.store) == 1
    assert workspace.directory.project_rows(directory.zephyr.id) == []

    with pytest.raises(EntityNotFoundError):
        workspace.directory.delete_member(directory.alice.id)


def test_roster_rows_and_available_members(workspace: PlannerWorkspace, directory: Directory) -> None:
    repo = workspace.directory
    workspace.engine.set_value(CellRef(directory.apollo.id, directory.carol.id, NOV), "40")
    repo.add_member_to_project(directory.apollo.id, directory.alice.id)
    repo.add_member_to_project(directory.apollo.id, directory.alice.id)

    assert [member.name for member in repo.project_rows(directory.apollo.id)] == ["Alice", "Carol"]
    assert [member.name for member in repo.available_for_project(directory.apollo.id)] == ["Bob"]

    with pytest.raises(EntityNotFoundError):
        repo.add_member_to_project("missing", directory.alice.id)
    with pytest.raises(EntityNotFoundError):
        repo.add_member_to_project(directory.apollo.id, "missing")


def test_remove_member_from_project_drops_roster_row(workspace: PlannerWorkspace, directory: Directory) -> None:
    repo = workspace.directory
    repo.add_member_to_project(directory.apollo.id, directory.alice.id)
    workspace.engine.set_value(CellRef(directory.apollo.id, directory.alice.id, NOV), "100")
    workspace.engine.set_value(CellRef(directory.zephyr.id, directory.alice.id, NOV), "20")

    removed = workspace.engine.remove_member_from_project(directory.apollo.id, directory.alice.id)

    assert removed == 1
    assert repo.project_rows(directory.apollo.id) == []
    assert [member.name for member in repo.project_rows(directory.zephyr.id)] == ["Alice"]


def test_delete_member_ends_drag_on_their_row(workspace: PlannerWorkspace, directory: Directory) -> None:
    engine = workspace.engine
    engine.pointer_down(CellRef(directory.apollo.id, directory.alice.id, NOV))
    engine.pointer_enter(CellRef(directory.apollo.id, directory.alice.id, DEC))

    workspace.directory.delete_member(directory.alice.id)

    assert engine.phase is GesturePhase.IDLE
    assert engine.pointer_enter(CellRef(directory.apollo.id, directory.alice.id, JAN)).writes == []
    assert engine.pointer_up(CellRef(directory.apollo.id, directory.alice.id, JAN)).writes == []
    assert workspace.store.all_for(lambda row: row.member_id == directory.alice.id) == []


def test_delete_member_closes_their_open_editor(workspace: PlannerWorkspace, directory: Directory) -> None:
    engine = workspace.engine
    engine.open_editor(CellRef(directory.apollo.id, directory.alice.id, NOV))

    workspace.directory.delete_member(directory.alice.id)

    assert engine.editor is None
    assert engine.commit_editor("150").applied is False
    assert len(workspace.store) == 0
    assert workspace.aggregation.over_allocations() == []


def test_delete_member_keeps_gestures_on_other_members(workspace: PlannerWorkspace, directory: Directory) -> None:
    engine = workspace.engine
    engine.pointer_down(CellRef(directory.apollo.id, directory.bob.id, NOV))

    workspace.directory.delete_member(directory.alice.id)

    assert engine.phase is GesturePhase.DRAGGING
    engine.pointer_enter(CellRef(directory.apollo.id, directory.bob.id, DEC))
    assert workspace.store.percentage(directory.apollo.id, directory.bob.id, DEC) == 100
