from __future__ import annotations

from fastapi.testclient import TestClient

from app.db.workspace import PlannerWorkspace
from app.services.allocation_edit_service import CellRef
from app.services.summary_service import UNAVAILABLE_RESPONSE
from sample_directory import DEC, NOV, Directory


def _seed_plan(workspace: PlannerWorkspace, directory: Directory) -> None:
    engine = workspace.engine
    engine.set_value(CellRef(directory.apollo.id, directory.alice.id, NOV), "100")
    engine.set_value(CellRef(directory.apollo.id, directory.alice.id, DEC), "50")
    engine.set_value(CellRef(directory.apollo.id, directory.bob.id, NOV), "50")
    engine.set_value(CellRef(directory.zephyr.id, directory.alice.id, NOV), "20")


def test_capacity_view(client: TestClient, workspace: PlannerWorkspace, directory: Directory) -> None:
    _seed_plan(workspace, directory)

    response = client.get("/api/v1/capacity", params={"count": 3})

    assert response.status_code == 200
    body = response.json()
    assert [month["month"] for month in body["months"]] == ["2024-11", "2024-12", "2025-01"]
    assert [row["member"]["name"] for row in body["members"]] == ["Alice", "Bob", "Carol"]
    alice = body["members"][0]
    assert [month["status"] for month in alice["months"]] == ["over", "partial", "empty"]
    assert [item["display"] for item in body["fte"]] == ["1.7", "0.5", "0.0"]

    contractors = client.get("/api/v1/capacity", params={"count": 2, "member_type": "contractor"}).json()
    assert [row["member"]["name"] for row in contractors["members"]] == ["Bob"]
    assert [item["fte"] for item in contractors["fte"]] == ["0.5", "0"]


def test_capacity_rejects_unknown_member_type(client: TestClient) -> None:
    response = client.get("/api/v1/capacity", params={"member_type": "intern"})

    assert response.status_code == 422


def test_dashboard_and_over_allocations(client: TestClient, workspace: PlannerWorkspace, directory: Directory) -> None:
    _seed_plan(workspace, directory)

    dashboard = client.get("/api/v1/dashboard").json()
    # Nov: 168h * 150 * 1.2 + 84h * 100; Dec: 88h * 150
    assert dashboard["total_forecast_cost"] == "51840.00"
    assert dashboard["project_count"] == 2
    assert dashboard["member_count"] == 3
    assert [row["month"] for row in dashboard["monthly_financials"]] == ["2024-11", "2024-12"]
    assert dashboard["monthly_financials"][0]["cost"] == "38640.00"
    assert dashboard["monthly_financials"][0]["revenue"] == "50232.00"
    assert dashboard["monthly_financials"][0]["margin"] == "11592.00"

    findings = client.get("/api/v1/over-allocations").json()["items"]
    assert findings == [
        {"member_id": directory.alice.id, "member_name": "Alice", "month": "2024-11", "total": 120}
    ]


def test_project_cost(client: TestClient, workspace: PlannerWorkspace, directory: Directory) -> None:
    _seed_plan(workspace, directory)

    response = client.get(f"/api/v1/projects/{directory.apollo.id}/cost")

    assert response.status_code == 200
    assert response.json() == {"project_id": directory.apollo.id, "total_cost": "46800.00"}
    assert client.get("/api/v1/projects/missing/cost").status_code == 404


def test_analysis_payload_and_unconfigured_narrative(
    client: TestClient, workspace: PlannerWorkspace, directory: Directory
) -> None:
    _seed_plan(workspace, directory)

    payload = client.get("/api/v1/analysis/payload").json()
    assert payload["total_projects"] == 2
    assert payload["total_members"] == 3
    assert payload["roles"] == ["Developer ($150/hr)", "Designer ($100/hr)"]
    assert payload["months"] == ["2024-11", "2024-12"]
    assert payload["over_allocations"] == ["Alice is at 120% in 2024-11"]
    assert "Alice is at 120% in 2024-11" in payload["prompt"]

    response = client.post("/api/v1/analysis")
    assert response.status_code == 200
    assert response.json() == {"analysis": UNAVAILABLE_RESPONSE}


def test_export_monthly_financials_csv(client: TestClient, workspace: PlannerWorkspace, directory: Directory) -> None:
    _seed_plan(workspace, directory)

    response = client.get("/api/v1/exports/monthly-financials", params={"format": "csv"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="monthly-financials.csv"' in response.headers["content-disposition"]
    lines = response.text.splitlines()
    assert lines[0] == "month,label,hours,cost,revenue,margin"
    assert lines[1] == "2024-11,Nov 2024,168,38640.00,50232.00,11592.00"
    assert len(lines) == 3


def test_export_capacity_xlsx(client: TestClient, workspace: PlannerWorkspace, directory: Directory) -> None:
    _seed_plan(workspace, directory)

    response = client.get("/api/v1/exports/capacity", params={"format": "xlsx", "count": 2})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert response.content[:2] == b"PK"


def test_export_errors(client: TestClient) -> None:
    assert client.get("/api/v1/exports/capacity", params={"format": "pdf"}).status_code == 422
    assert client.get("/api/v1/exports/unknown", params={"format": "csv"}).status_code == 404


def test_export_windows(client: TestClient, workspace: PlannerWorkspace, directory: Directory) -> None:
    _seed_plan(workspace, directory)

    financials = client.get("/api/v1/exports/monthly-financials", params={"format": "csv", "count": 1})
    assert [line.split(",")[0] for line in financials.text.splitlines()[1:]] == ["2024-11", "2024-12"]

    capacity = client.get(
        "/api/v1/exports/capacity",
        params={"format": "csv", "count": 2, "member_type": "contractor"},
    )
    rows = capacity.text.splitlines()
    assert rows[0] == "member_id,member_name,member_type,role_title,month,total,bench,status"
    assert [row.split(",")[1] for row in rows[1:]] == ["Bob", "Bob"]
    assert [row.split(",")[4] for row in rows[1:]] == ["2024-11", "2024-12"]
