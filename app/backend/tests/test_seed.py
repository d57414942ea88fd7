from app.db.seed import seed_demo_data
from app.db.workspace import PlannerWorkspace
from sample_directory import JAN, NOV


def test_seed_demo_data_books_three_months(workspace: PlannerWorkspace) -> None:
    seed_demo_data(workspace)

    assert [role.title for role in workspace.directory.list_roles()] == [
        "Senior Developer",
        "UI/UX Designer",
        "Project Manager",
        "QA Engineer",
    ]
    assert len(workspace.directory.list_members()) == 4
    assert len(workspace.store) == 12
    assert workspace.store.list_months()[0] == NOV
    assert workspace.store.list_months()[-1] == JAN
    assert workspace.aggregation.over_allocations() == []
