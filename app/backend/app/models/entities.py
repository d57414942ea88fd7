"""Domain entities for the staffing planner."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from decimal import Decimal

from app.core.months import Month


class MemberType(str, enum.Enum):
    FULL_TIME = "full_time"
    CONTRACTOR = "contractor"
    CONSULTANT = "consultant"

    @property
    def label(self) -> str:
        return MEMBER_TYPE_LABELS[self]

    @property
    def short_label(self) -> str:
        return MEMBER_TYPE_SHORT_LABELS[self]


MEMBER_TYPE_LABELS = {
    MemberType.FULL_TIME: "Full Time",
    MemberType.CONTRACTOR: "Contract (Fieldglass)",
    MemberType.CONSULTANT: "Consultant (SOW)",
}

MEMBER_TYPE_SHORT_LABELS = {
    MemberType.FULL_TIME: "FT",
    MemberType.CONTRACTOR: "Contr.",
    MemberType.CONSULTANT: "SOW",
}


class ProjectStatus(str, enum.Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"


DEFAULT_PROJECT_CLIENT = "Internal"
DEFAULT_PROJECT_COLOR = "indigo"


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class Role:
    title: str
    default_hourly_rate: Decimal
    id: str = field(default_factory=new_id)


@dataclass(slots=True)
class TeamMember:
    name: str
    role_id: str
    member_type: MemberType = MemberType.FULL_TIME
    id: str = field(default_factory=new_id)


@dataclass(slots=True)
class Project:
    name: str
    client: str = DEFAULT_PROJECT_CLIENT
    status: ProjectStatus = ProjectStatus.PLANNING
    color: str = DEFAULT_PROJECT_COLOR
    id: str = field(default_factory=new_id)


@dataclass(slots=True)
class Allocation:
    """Percentage of one member's monthly capacity booked on one project."""

    project_id: str
    member_id: str
    month: Month
    percentage: int
    id: str = field(default_factory=new_id)

    @property
    def key(self) -> tuple[str, str, Month]:
        return (self.project_id, self.member_id, self.month)
