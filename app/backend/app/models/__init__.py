"""Domain model package."""

from app.models.entities import (
    Allocation,
    MemberType,
    Project,
    ProjectStatus,
    Role,
    TeamMember,
)

__all__ = [
    "Allocation",
    "MemberType",
    "Project",
    "ProjectStatus",
    "Role",
    "TeamMember",
]
