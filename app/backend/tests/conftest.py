from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.dependencies import get_workspace
from app.db.workspace import PlannerWorkspace
from app.main import create_app
from sample_directory import FIXED_TODAY, Directory, build_directory


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None, openai_api_key="")


@pytest.fixture()
def workspace(settings: Settings) -> PlannerWorkspace:
    return PlannerWorkspace(settings, clock=lambda: FIXED_TODAY)


@pytest.fixture()
def directory(workspace: PlannerWorkspace) -> Directory:
    return build_directory(workspace)


@pytest.fixture()
def client(workspace: PlannerWorkspace) -> Generator[TestClient, None, None]:
    app = create_app()
    app.dependency_overrides[get_workspace] = lambda: workspace
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
