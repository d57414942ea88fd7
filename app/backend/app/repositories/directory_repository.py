"""In-memory directory of roles, team members and projects."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

from app.models.entities import MemberType, Project, Role, TeamMember
from app.repositories.allocation_repository import AllocationStore

logger = logging.getLogger(__name__)


class EntityNotFoundError(LookupError):
    """Raised by directory edits that target an id which does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} {entity_id} not found.")
        self.kind = kind
        self.entity_id = entity_id


class RoleCatalog(Protocol):
    def resolve(self, role_id: str) -> Role | None: ...


class MemberCatalog(Protocol):
    def resolve(self, member_id: str) -> TeamMember | None: ...


class _RoleView:
    def __init__(self, roles: dict[str, Role]) -> None:
        self._roles = roles

    def resolve(self, role_id: str) -> Role | None:
        return self._roles.get(role_id)


class _MemberView:
    def __init__(self, members: dict[str, TeamMember]) -> None:
        self._members = members

    def resolve(self, member_id: str) -> TeamMember | None:
        return self._members.get(member_id)


class DirectoryRepository:
    """Roles, members and projects, plus the per-project roster of grid rows.

    Dicts preserve insertion order, which is the directory order used for
    listings and grid rows. Referential integrity is kept here rather than by
    a database: deleting a member cascades to its allocations and roster
    entries, deleting a role leaves members with a dangling ``role_id``.
    """

    def __init__(self, allocations: AllocationStore, lock: threading.RLock | None = None) -> None:
        self._lock = lock or threading.RLock()
        self._allocations = allocations
        self._roles: dict[str, Role] = {}
        self._members: dict[str, TeamMember] = {}
        self._projects: dict[str, Project] = {}
        # project_id -> member ids added to the grid before any allocation exists
        self._rosters: dict[str, list[str]] = {}
        self._member_deleted_hooks: list[Callable[[str], None]] = []

        self.roles: RoleCatalog = _RoleView(self._roles)
        self.members: MemberCatalog = _MemberView(self._members)

    # ---------- Roles ----------
    def list_roles(self) -> list[Role]:
        with self._lock:
            return list(self._roles.values())

    def get_role(self, role_id: str) -> Role | None:
        with self._lock:
            return self._roles.get(role_id)

    def add_role(self, role: Role) -> Role:
        with self._lock:
            self._roles[role.id] = role
            return role

    def delete_role(self, role_id: str) -> None:
        with self._lock:
            if self._roles.pop(role_id, None) is None:
                raise EntityNotFoundError("Role", role_id)

    # ---------- Members ----------
    def list_members(self, member_type: MemberType | None = None) -> list[TeamMember]:
        with self._lock:
            return [
                member
                for member in self._members.values()
                if member_type is None or member.member_type is member_type
            ]

    def on_member_deleted(self, hook: Callable[[str], None]) -> None:
        """Run ``hook(member_id)`` inside the lock before a deleted member's rows are purged."""

        self._member_deleted_hooks.append(hook)

    def get_member(self, member_id: str) -> TeamMember | None:
        with self._lock:
            return self._members.get(member_id)

    def add_member(self, member: TeamMember) -> TeamMember:
        with self._lock:
            self._members[member.id] = member
            return member

    def delete_member(self, member_id: str) -> int:
        """Delete a member and everything that references it; returns allocations removed."""

        with self._lock:
            if self._members.pop(member_id, None) is None:
                raise EntityNotFoundError("Team member", member_id)
            for hook in self._member_deleted_hooks:
                hook(member_id)
            for roster in self._rosters.values():
                if member_id in roster:
                    roster.remove(member_id)
            removed = self._allocations.delete_where(lambda row: row.member_id == member_id)
        logger.info("Deleted team member %s and %s allocation(s)", member_id, removed)
        return removed

    # ---------- Projects ----------
    def list_projects(self) -> list[Project]:
        with self._lock:
            return list(self._projects.values())

    def get_project(self, project_id: str) -> Project | None:
        with self._lock:
            return self._projects.get(project_id)

    def add_project(self, project: Project) -> Project:
        with self._lock:
            self._projects[project.id] = project
            return project

    # ---------- Project rosters ----------
    def add_member_to_project(self, project_id: str, member_id: str) -> None:
        with self._lock:
            if project_id not in self._projects:
                raise EntityNotFoundError("Project", project_id)
            if member_id not in self._members:
                raise EntityNotFoundError("Team member", member_id)
            roster = self._rosters.setdefault(project_id, [])
            if member_id not in roster:
                roster.append(member_id)

    def drop_from_roster(self, project_id: str, member_id: str) -> None:
        with self._lock:
            roster = self._rosters.get(project_id, [])
            if member_id in roster:
                roster.remove(member_id)

    def project_rows(self, project_id: str) -> list[TeamMember]:
        """Members shown on a project's grid: allocated on it or added by hand."""

        with self._lock:
            visible = set(self._rosters.get(project_id, []))
            visible.update(
                row.member_id for row in self._allocations.all_for(lambda row: row.project_id == project_id)
            )
            return [member for member in self._members.values() if member.id in visible]

    def available_for_project(self, project_id: str) -> list[TeamMember]:
        with self._lock:
            shown = {member.id for member in self.project_rows(project_id)}
            return [member for member in self._members.values() if member.id not in shown]
