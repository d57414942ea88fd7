"""Forecast summary payload and the narrative-analysis call built on top of it."""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Protocol

from openai import AsyncOpenAI

from app.core.config import Settings
from app.repositories.directory_repository import DirectoryRepository
from app.services.aggregation_service import AggregationService, OverAllocation

logger = logging.getLogger(__name__)

NO_OVER_ALLOCATIONS = "No direct over-allocations (>100%) detected."
EMPTY_RESPONSE = "Unable to generate analysis."
FAILED_RESPONSE = "Error generating analysis. Please ensure your API key is configured correctly."
UNAVAILABLE_RESPONSE = "Analysis unavailable: OPENAI_API_KEY not configured."

ANALYSIS_PROMPT = """You are a Senior Project Manager and Resource Planner. Analyze the following project resource data and provide a concise strategic assessment.

**Context:**
- Roles: {roles}
- Active Projects: {projects}
- Timeline: {months}

**Detected Issues:**
{issues}

**Request:**
1. Identify potential risks (burnout, under-utilization, budget risks).
2. Suggest optimization strategies.
3. Comment on the role mix vs project needs if apparent.

Keep the tone professional, helpful, and concise (max 300 words). Use bullet points.
"""


@dataclass(slots=True)
class SummaryPayload:
    total_projects: int
    total_members: int
    roles: list[str] = field(default_factory=list)
    months: list[str] = field(default_factory=list)
    project_names: list[str] = field(default_factory=list)
    over_allocations: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, object]:
        return asdict(self)


def _format_rate(rate: Decimal) -> str:
    normalized = Decimal(rate).normalize()
    if normalized == normalized.to_integral():
        return f"{normalized:.0f}"
    return f"{Decimal(rate):.2f}"


def describe_over_allocation(item: OverAllocation) -> str:
    return f"{item.member_name or item.member_id} is at {item.total}% in {item.month}"


def build_summary(directory: DirectoryRepository, aggregation: AggregationService) -> SummaryPayload:
    return SummaryPayload(
        total_projects=len(directory.list_projects()),
        total_members=len(directory.list_members()),
        roles=[f"{role.title} (${_format_rate(role.default_hourly_rate)}/hr)" for role in directory.list_roles()],
        months=[str(month) for month in aggregation.store.list_months()],
        project_names=[project.name for project in directory.list_projects()],
        over_allocations=[describe_over_allocation(item) for item in aggregation.over_allocations()],
    )


def render_prompt(payload: SummaryPayload) -> str:
    return ANALYSIS_PROMPT.format(
        roles=", ".join(payload.roles),
        projects=", ".join(payload.project_names),
        months=", ".join(payload.months),
        issues="\n".join(payload.over_allocations) if payload.over_allocations else NO_OVER_ALLOCATIONS,
    )


class NarrativeClient(Protocol):
    async def complete(self, prompt: str) -> str: ...


class OpenAINarrativeClient:
    def __init__(self, *, api_key: str, model: str, temperature: float) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature

    async def complete(self, prompt: str) -> str:
        client = AsyncOpenAI(api_key=self.api_key)
        response = await client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
        )
        return response.choices[0].message.content or ""


class NarrativeService:
    """Builds the summary under the workspace lock, then calls the narrative client without it.

    The call is a single attempt. Failures come back as a message string and
    never touch allocation state.
    """

    def __init__(
        self,
        directory: DirectoryRepository,
        aggregation: AggregationService,
        *,
        client: NarrativeClient | None,
        lock: threading.RLock | None = None,
    ) -> None:
        self.directory = directory
        self.aggregation = aggregation
        self.client = client
        self._lock = lock or threading.RLock()

    @classmethod
    def client_from_settings(cls, settings: Settings) -> NarrativeClient | None:
        if not settings.openai_api_key:
            return None
        return OpenAINarrativeClient(
            api_key=settings.openai_api_key,
            model=settings.narrative_model,
            temperature=settings.narrative_temperature,
        )

    def payload(self) -> SummaryPayload:
        with self._lock:
            return build_summary(self.directory, self.aggregation)

    async def analyze(self) -> str:
        prompt = render_prompt(self.payload())
        if self.client is None:
            return UNAVAILABLE_RESPONSE
        try:
            text = await self.client.complete(prompt)
        except Exception:
            logger.warning("Narrative analysis failed", exc_info=True)
            return FAILED_RESPONSE
        return text.strip() or EMPTY_RESPONSE
