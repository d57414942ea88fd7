from fastapi.testclient import TestClient

from app.db.workspace import PlannerWorkspace
from sample_directory import NOV, Directory


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_root_endpoint(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"service": "Staffplan Backend", "status": "running"}


def test_workspace_health_counts(client: TestClient, workspace: PlannerWorkspace, directory: Directory) -> None:
    workspace.store.upsert(directory.apollo.id, directory.alice.id, NOV, 100)

    response = client.get("/api/v1/health/workspace")

    assert response.status_code == 200
    body = response.json()
    assert (body["roles"], body["members"], body["projects"], body["allocations"]) == (2, 3, 2, 1)
    assert body["narrative_configured"] is False
