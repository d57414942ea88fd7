"""Derived cost, utilization and FTE figures over the allocation store."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from app.core.config import Settings
from app.core.months import DEFAULT_HOURS_PER_DAY, Month, business_hours_in_month, display_label
from app.models.entities import Allocation, MemberType, TeamMember
from app.repositories.allocation_repository import AllocationStore
from app.repositories.directory_repository import DirectoryRepository

ZERO = Decimal("0")
HUNDRED = Decimal("100")
Q2 = Decimal("0.01")


def q2(value: Decimal) -> Decimal:
    return value.quantize(Q2, rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class AggregationRules:
    capacity_ceiling_percent: int = 100
    revenue_markup: Decimal = Decimal("1.3")
    hours_per_day: int = DEFAULT_HOURS_PER_DAY
    fte_display_places: int = 1

    @classmethod
    def from_settings(cls, settings: Settings) -> AggregationRules:
        return cls(
            capacity_ceiling_percent=settings.capacity_ceiling_percent,
            revenue_markup=settings.revenue_markup,
            hours_per_day=settings.hours_per_business_day,
            fte_display_places=settings.fte_display_places,
        )


@dataclass(frozen=True, slots=True)
class OverAllocation:
    member_id: str
    member_name: str | None
    month: Month
    total: int


@dataclass(frozen=True, slots=True)
class MonthlyFinancial:
    month: Month
    hours: int
    cost: Decimal
    revenue: Decimal

    @property
    def margin(self) -> Decimal:
        return self.revenue - self.cost


@dataclass(frozen=True, slots=True)
class MonthlyFte:
    month: Month
    total_percent: int

    @property
    def fte(self) -> Decimal:
        return Decimal(self.total_percent) / HUNDRED


class AggregationService:
    """Read-side computations; every figure is recomputed from the store on demand."""

    def __init__(
        self,
        store: AllocationStore,
        directory: DirectoryRepository,
        *,
        rules: AggregationRules | None = None,
    ) -> None:
        self.store = store
        self.directory = directory
        self.rules = rules or AggregationRules()

    # ---------- Cost ----------
    def hours_in_month(self, month: Month) -> int:
        return business_hours_in_month(month, self.rules.hours_per_day)

    def allocation_cost(self, allocation: Allocation) -> Decimal:
        """Hours booked times the role's hourly rate; zero when member or role is gone."""

        member = self.directory.members.resolve(allocation.member_id)
        if member is None:
            return ZERO
        role = self.directory.roles.resolve(member.role_id)
        if role is None:
            return ZERO
        hours = Decimal(self.hours_in_month(allocation.month)) * Decimal(allocation.percentage) / HUNDRED
        return hours * Decimal(role.default_hourly_rate)

    def project_total_cost(self, project_id: str) -> Decimal:
        return sum(
            (self.allocation_cost(row) for row in self.store.all_for(lambda row: row.project_id == project_id)),
            ZERO,
        )

    def project_totals(self) -> dict[str, Decimal]:
        totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for project in self.directory.list_projects():
            totals[project.id] = ZERO
        for row in self.store.all_for():
            totals[row.project_id] += self.allocation_cost(row)
        return dict(totals)

    def monthly_financials(self) -> list[MonthlyFinancial]:
        cost_by_month: dict[Month, Decimal] = defaultdict(lambda: ZERO)
        for row in self.store.all_for():
            cost_by_month[row.month] += self.allocation_cost(row)

        series: list[MonthlyFinancial] = []
        for month in sorted(cost_by_month):
            cost = cost_by_month[month]
            series.append(
                MonthlyFinancial(
                    month=month,
                    hours=self.hours_in_month(month),
                    cost=cost,
                    revenue=cost * self.rules.revenue_markup,
                )
            )
        return series

    def total_forecast_cost(self) -> Decimal:
        return sum((row.cost for row in self.monthly_financials()), ZERO)

    # ---------- Utilization ----------
    def person_month_totals(self) -> dict[tuple[str, Month], int]:
        totals: dict[tuple[str, Month], int] = defaultdict(int)
        for row in self.store.all_for():
            totals[(row.member_id, row.month)] += row.percentage
        return dict(totals)

    def person_month_total(self, member_id: str, month: Month) -> int:
        return sum(
            row.percentage
            for row in self.store.all_for(lambda row: row.member_id == member_id and row.month == month)
        )

    def bench_percent(self, member_id: str, month: Month) -> int:
        return max(0, self.rules.capacity_ceiling_percent - self.person_month_total(member_id, month))

    def is_over_allocated(self, total: int) -> bool:
        return total > self.rules.capacity_ceiling_percent

    def over_allocations(self) -> list[OverAllocation]:
        """Every (member, month) pair above the ceiling, over all months present."""

        findings: list[OverAllocation] = []
        for (member_id, month), total in self.person_month_totals().items():
            if not self.is_over_allocated(total):
                continue
            member = self.directory.members.resolve(member_id)
            findings.append(
                OverAllocation(
                    member_id=member_id,
                    member_name=member.name if member is not None else None,
                    month=month,
                    total=total,
                )
            )
        findings.sort(key=lambda item: (item.month, item.member_name or item.member_id))
        return findings

    def monthly_fte(self, months: list[Month], member_type: MemberType | None = None) -> list[MonthlyFte]:
        member_ids = {member.id for member in self.directory.list_members(member_type)}
        totals: dict[Month, int] = defaultdict(int)
        wanted = set(months)
        for row in self.store.all_for(lambda row: row.month in wanted and row.member_id in member_ids):
            totals[row.month] += row.percentage
        return [MonthlyFte(month=month, total_percent=totals.get(month, 0)) for month in months]

    def display_fte(self, value: Decimal) -> str:
        exponent = Decimal(1).scaleb(-self.rules.fte_display_places)
        return str(value.quantize(exponent, rounding=ROUND_HALF_UP))

    def utilization_status(self, total: int) -> str:
        if total == 0:
            return "empty"
        if self.is_over_allocated(total):
            return "over"
        if total == self.rules.capacity_ceiling_percent:
            return "full"
        return "partial"

    # ---------- Views ----------
    def project_grid(self, project_id: str, months: list[Month]) -> dict[str, object]:
        rows = []
        for member in self.directory.project_rows(project_id):
            role = self.directory.roles.resolve(member.role_id)
            rows.append(
                {
                    "member": serialize_member(member),
                    "role_title": role.title if role is not None else None,
                    "cells": [
                        {
                            "month": str(month),
                            "percentage": self.store.percentage(project_id, member.id, month),
                        }
                        for month in months
                    ],
                }
            )
        return {
            "project_id": project_id,
            "months": [serialize_month(month) for month in months],
            "rows": rows,
            "available_members": [
                serialize_member(member) for member in self.directory.available_for_project(project_id)
            ],
            "total_cost": str(q2(self.project_total_cost(project_id))),
        }

    def capacity_plan(self, months: list[Month], member_type: MemberType | None = None) -> dict[str, object]:
        wanted = set(months)
        rows = []
        for member in self.directory.list_members(member_type):
            role = self.directory.roles.resolve(member.role_id)
            member_rows = self.store.all_for(lambda row: row.member_id == member.id and row.month in wanted)

            totals = {month: 0 for month in months}
            by_project: dict[str, dict[Month, int]] = {}
            for row in member_rows:
                totals[row.month] += row.percentage
                by_project.setdefault(row.project_id, {})[row.month] = row.percentage

            projects = []
            for project_id, cells in by_project.items():
                project = self.directory.get_project(project_id)
                projects.append(
                    {
                        "project_id": project_id,
                        "project_name": project.name if project is not None else None,
                        "months": [{"month": str(month), "percentage": cells.get(month, 0)} for month in months],
                    }
                )

            rows.append(
                {
                    "member": serialize_member(member),
                    "role_title": role.title if role is not None else None,
                    "months": [
                        {
                            "month": str(month),
                            "total": totals[month],
                            "status": self.utilization_status(totals[month]),
                            "bench": max(0, self.rules.capacity_ceiling_percent - totals[month]),
                        }
                        for month in months
                    ],
                    "projects": projects,
                }
            )

        return {
            "months": [serialize_month(month) for month in months],
            "member_type": member_type.value if member_type is not None else None,
            "members": rows,
            "fte": [
                {
                    "month": str(item.month),
                    "fte": str(item.fte),
                    "display": self.display_fte(item.fte),
                }
                for item in self.monthly_fte(months, member_type)
            ],
        }

    def dashboard(self) -> dict[str, object]:
        series = self.monthly_financials()
        return {
            "total_forecast_cost": str(q2(self.total_forecast_cost())),
            "project_count": len(self.directory.list_projects()),
            "member_count": len(self.directory.list_members()),
            "revenue_markup": str(self.rules.revenue_markup),
            "monthly_financials": [serialize_financial(row) for row in series],
        }


def serialize_month(month: Month) -> dict[str, str]:
    return {"month": str(month), "label": display_label(month)}


def serialize_member(member: TeamMember) -> dict[str, object]:
    return {
        "id": member.id,
        "name": member.name,
        "role_id": member.role_id,
        "member_type": member.member_type.value,
        "member_type_name": member.member_type.label,
        "member_type_label": member.member_type.short_label,
    }


def serialize_financial(row: MonthlyFinancial) -> dict[str, object]:
    return {
        "month": str(row.month),
        "label": display_label(row.month),
        "hours": row.hours,
        "cost": str(q2(row.cost)),
        "revenue": str(q2(row.revenue)),
        "margin": str(q2(row.margin)),
    }


def serialize_over_allocation(item: OverAllocation) -> dict[str, object]:
    return {
        "member_id": item.member_id,
        "member_name": item.member_name,
        "month": str(item.month),
        "total": item.total,
    }
