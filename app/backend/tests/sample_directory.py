from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from app.core.months import Month
from app.db.workspace import PlannerWorkspace
from app.models.entities import MemberType, Project, Role, TeamMember

FIXED_TODAY = date(2024, 11, 15)

NOV = Month(2024, 11)
DEC = Month(2024, 12)
JAN = Month(2025, 1)


@dataclass(slots=True)
class Directory:
    developer: Role
    designer: Role
    alice: TeamMember
    bob: TeamMember
    carol: TeamMember
    apollo: Project
    zephyr: Project


def build_directory(workspace: PlannerWorkspace) -> Directory:
    repo = workspace.directory
    developer = repo.add_role(Role(title="Developer", default_hourly_rate=Decimal("150")))
    designer = repo.add_role(Role(title="Designer", default_hourly_rate=Decimal("100")))
    return Directory(
        developer=developer,
        designer=designer,
        alice=repo.add_member(TeamMember(name="Alice", role_id=developer.id)),
        bob=repo.add_member(TeamMember(name="Bob", role_id=designer.id, member_type=MemberType.CONTRACTOR)),
        carol=repo.add_member(TeamMember(name="Carol", role_id=developer.id, member_type=MemberType.CONSULTANT)),
        apollo=repo.add_project(Project(name="Apollo", client="Acme")),
        zephyr=repo.add_project(Project(name="Zephyr")),
    )
