import pytest

from tests.conftest import error_text, payload


class TestProjects:
    @pytest.mark.asyncio
    async def test_list(self, registry, harvest):
        harvest.add("GET", "/projects", json_body={"projects": [{"id": 1}, {"id": 2}]})

        result = await registry.call("list_projects", {"client_id": 5, "is_active": True})

        assert len(payload(result)["projects"]) == 2
        assert harvest.last_params == {"client_id": "5", "is_active": "true", "per_page": "2000"}

    @pytest.mark.asyncio
    async def test_create_fills_defaults(self, registry, harvest):
        await registry.call("create_project", {"name": "Website", "client_id": 5})

        assert harvest.last_path == "/projects"
        assert harvest.last_json == {
            "name": "Website",
            "client_id": 5,
            "is_active": True,
            "is_billable": True,
            "is_fixed_fee": False,
            "bill_by": "none",
            "budget_is_monthly": False,
            "notify_when_over_budget": False,
            "show_budget_to_all": False,
            "cost_budget_include_expenses": False,
        }

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_bill_by(self, registry, harvest):
        result = await registry.call("create_project", {"name": "Website", "client_id": 5, "bill_by": "Hours"})

        assert error_text(result).startswith("Invalid parameters: bill_by:")
        assert harvest.requests == []

    @pytest.mark.asyncio
    async def test_update(self, registry, harvest):
        await registry.call("update_project", {"id": 8, "budget": 120, "budget_by": "project"})

        assert harvest.last.method == "PATCH"
        assert harvest.last_path == "/projects/8"
        assert harvest.last_json == {"budget": 120.0, "budget_by": "project"}

    @pytest.mark.asyncio
    async def test_delete(self, registry, harvest):
        harvest.add("DELETE", "/projects/8", 200)

        result = await registry.call("delete_project", {"project_id": 8})

        assert payload(result) == {"message": "Project 8 deleted successfully"}


class TestTaskAssignments:
    @pytest.mark.asyncio
    async def test_list_requires_project(self, registry, harvest):
        result = await registry.call("list_project_task_assignments", {})

        assert "project_id" in error_text(result)
        assert harvest.requests == []

    @pytest.mark.asyncio
    async def test_list(self, registry, harvest):
        harvest.add("GET", "/projects/8/task_assignments", json_body={"task_assignments": []})

        await registry.call("list_project_task_assignments", {"project_id": 8, "is_active": True})

        assert harvest.last_params == {"is_active": "true", "per_page": "2000"}

    @pytest.mark.asyncio
    async def test_create(self, registry, harvest):
        await registry.call("create_project_task_assignment", {"project_id": 8, "task_id": 3, "hourly_rate": 90})

        assert harvest.last.method == "POST"
        assert harvest.last_path == "/projects/8/task_assignments"
        assert harvest.last_json == {"task_id": 3, "is_active": True, "billable": True, "hourly_rate": 90.0}

    @pytest.mark.asyncio
    async def test_update(self, registry, harvest):
        await registry.call("update_project_task_assignment", {"project_id": 8, "id": 21, "billable": False})

        assert harvest.last.method == "PATCH"
        assert harvest.last_path == "/projects/8/task_assignments/21"
        assert harvest.last_json == {"billable": False}

    @pytest.mark.asyncio
    async def test_delete(self, registry, harvest):
        harvest.add("DELETE", "/projects/8/task_assignments/21", 200)

        result = await registry.call("delete_project_task_assignment", {"project_id": 8, "task_assignment_id": 21})

        assert payload(result) == {"message": "Task assignment 21 deleted successfully"}


@pytest.mark.asyncio
@pytest.mark.parametrize("project_id", [True, "8", 8.0])
async def test_delete_rejects_non_integer_id(registry, harvest, project_id):
    result = await registry.call("delete_project", {"project_id": project_id})

    assert error_text(result).startswith("Invalid parameters: project_id:")
    assert harvest.requests == []
