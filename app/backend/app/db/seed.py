"""Demo roster used for local runs."""

from __future__ import annotations

import logging
from decimal import Decimal

from app.core.months import next_months
from app.db.workspace import PlannerWorkspace
from app.models.entities import MemberType, Project, ProjectStatus, Role, TeamMember

logger = logging.getLogger(__name__)

DEMO_MONTH_COUNT = 3


def seed_demo_data(workspace: PlannerWorkspace) -> None:
    directory = workspace.directory
    with workspace.lock:
        senior_dev = directory.add_role(Role(title="Senior Developer", default_hourly_rate=Decimal("150")))
        designer = directory.add_role(Role(title="UI/UX Designer", default_hourly_rate=Decimal("135")))
        manager = directory.add_role(Role(title="Project Manager", default_hourly_rate=Decimal("160")))
        directory.add_role(Role(title="QA Engineer", default_hourly_rate=Decimal("110")))

        sarah = directory.add_member(TeamMember(name="Sarah Jenkins", role_id=senior_dev.id))
        mike = directory.add_member(
            TeamMember(name="Mike Ross", role_id=manager.id, member_type=MemberType.CONTRACTOR)
        )
        jessica = directory.add_member(TeamMember(name="Jessica Lee", role_id=designer.id))
        david = directory.add_member(
            TeamMember(name="David Kim", role_id=senior_dev.id, member_type=MemberType.CONSULTANT)
        )

        revamp = directory.add_project(
            Project(name="E-Commerce Revamp", client="Acme Corp", status=ProjectStatus.ACTIVE, color="indigo")
        )
        mvp = directory.add_project(
            Project(name="Mobile App MVP", client="Startup Inc", status=ProjectStatus.PLANNING, color="emerald")
        )

        plan = [
            (revamp, sarah, 100),
            (revamp, mike, 50),
            (mvp, jessica, 100),
            (mvp, david, 80),
        ]
        for month in next_months(DEMO_MONTH_COUNT, clock=workspace.clock):
            for project, member, percentage in plan:
                workspace.store.upsert(project.id, member.id, month, percentage)

    logger.info("Seeded demo workspace with %s allocation(s)", len(workspace.store))
