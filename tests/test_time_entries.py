import re
from datetime import date

import pytest

from tests.conftest import error_text, payload


class TestListAndGet:
    @pytest.mark.asyncio
    async def test_list_forwards_filters(self, registry, harvest):
        harvest.add("GET", "/time_entries", json_body={"time_entries": [{"id": 1}], "total_entries": 1})

        result = await registry.call("list_time_entries", {
            "project_id": 10,
            "is_running": False,
            "from": "2024-01-01",
            "to": "2024-01-31",
        })

        assert payload(result)["total_entries"] == 1
        assert harvest.last_params == {
            "project_id": "10",
            "is_running": "false",
            "from": "2024-01-01",
            "to": "2024-01-31",
            "per_page": "2000",
        }

    @pytest.mark.asyncio
    async def test_get_by_id(self, registry, harvest):
        harvest.add("GET", "/time_entries/636709355", json_body={"id": 636709355, "hours": 2.5})

        result = await registry.call("get_time_entry", {"time_entry_id": 636709355})

        assert payload(result) == {"id": 636709355, "hours": 2.5}

    @pytest.mark.asyncio
    async def test_get_not_found(self, registry, harvest):
        harvest.add("GET", "/time_entries/1", 404, json_body={"error": "not_found"})

        result = await registry.call("get_time_entry", {"time_entry_id": 1})

        assert error_text(result) == "Resource not found"


class TestCreateAndUpdate:
    @pytest.mark.asyncio
    async def test_create_with_hours(self, registry, harvest):
        harvest.add("POST", "/time_entries", 201, json_body={"id": 5, "hours": 1.5})

        result = await registry.call("create_time_entry", {
            "project_id": 1,
            "task_id": 2,
            "spent_date": "2024-03-01",
            "hours": 1.5,
            "notes": "Standup",
        })

        assert payload(result)["id"] == 5
        assert harvest.last.method == "POST"
        assert harvest.last_json == {
            "project_id": 1,
            "task_id": 2,
            "spent_date": "2024-03-01",
            "hours": 1.5,
            "notes": "Standup",
        }

    @pytest.mark.asyncio
    async def test_create_with_times_and_external_reference(self, registry, harvest):
        await registry.call("create_time_entry", {
            "project_id": 1,
            "task_id": 2,
            "spent_date": "2024-03-01",
            "started_time": "9:00",
            "ended_time": "10:30",
            "external_reference": {"id": "PR-1", "permalink": "https://github.com/acme/app/pull/1"},
        })

        body = harvest.last_json
        assert body["started_time"] == "9:00"
        assert body["external_reference"] == {"id": "PR-1", "permalink": "https://github.com/acme/app/pull/1"}

    @pytest.mark.asyncio
    async def test_create_without_duration_makes_no_request(self, registry, harvest):
        result = await registry.call("create_time_entry", {
            "project_id": 1,
            "task_id": 2,
            "spent_date": "2024-03-01",
        })

        assert "Must provide either 'hours' or both 'started_time' and 'ended_time'" in error_text(result)
        assert harvest.requests == []

    @pytest.mark.asyncio
    async def test_update_sends_only_provided_fields(self, registry, harvest):
        await registry.call("update_time_entry", {"id": 7, "notes": "Reviewed"})

        assert harvest.last.method == "PATCH"
        assert harvest.last_path == "/time_entries/7"
        assert harvest.last_json == {"notes": "Reviewed"}

    @pytest.mark.asyncio
    async def test_notes_length_limit(self, registry, harvest):
        result = await registry.call("update_time_entry", {"id": 7, "notes": "x" * 2001})

        assert error_text(result).startswith("Invalid parameters: notes:")


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete(self, registry, harvest):
        harvest.add("DELETE", "/time_entries/9", 200)

        result = await registry.call("delete_time_entry", {"time_entry_id": 9})

        assert payload(result) == {"message": "Time entry 9 deleted successfully"}

    @pytest.mark.asyncio
    async def test_delete_external_reference(self, registry, harvest):
        harvest.add("DELETE", "/time_entries/9/external_reference", 200)

        result = await registry.call("delete_time_entry_external_reference", {"time_entry_id": 9})

        assert harvest.last.method == "DELETE"
        assert payload(result) == {"message": "External reference for time entry 9 deleted successfully"}


class TestTimers:
    @pytest.mark.asyncio
    async def test_start_timer_defaults_to_today(self, registry, harvest):
        harvest.add("POST", "/time_entries", 201, json_body={"id": 11, "is_running": True})

        result = await registry.call("start_timer", {"project_id": 1, "task_id": 2})

        assert payload(result)["is_running"] is True
        body = harvest.last_json
        assert body["spent_date"] == date.today().isoformat()
        assert re.fullmatch(r"\d{2}:\d{2}", body["started_time"])
        assert "ended_time" not in body
        assert "hours" not in body

    @pytest.mark.asyncio
    async def test_start_timer_keeps_given_date(self, registry, harvest):
        await registry.call("start_timer", {"project_id": 1, "task_id": 2, "spent_date": "2024-02-29"})

        assert harvest.last_json["spent_date"] == "2024-02-29"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool,action", [("stop_timer", "stop"), ("restart_timer", "restart")])
    async def test_stop_and_restart(self, registry, harvest, tool, action):
        harvest.add("PATCH", f"/time_entries/3/{action}", json_body={"id": 3})

        result = await registry.call(tool, {"id": 3})

        assert payload(result) == {"id": 3}
        assert harvest.last.method == "PATCH"
        assert harvest.last_path == f"/time_entries/3/{action}"


class TestStrictArguments:
    @pytest.mark.asyncio
    async def test_create_rejects_coercible_values(self, registry, harvest):
        result = await registry.call("create_time_entry", {
            "project_id": "7",
            "task_id": 1.0,
            "spent_date": "2024-03-01",
            "hours": True,
        })

        text = error_text(result)
        assert "project_id:" in text
        assert "task_id:" in text
        assert "hours:" in text
        assert harvest.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("permalink", ["https://example.com", "https://example.com/issues?id=4#top"])
    async def test_permalink_forwarded_as_given(self, registry, harvest, permalink):
        await registry.call("update_time_entry", {"id": 7, "external_reference": {"permalink": permalink}})

        assert harvest.last_json == {"external_reference": {"permalink": permalink}}

    @pytest.mark.asyncio
    async def test_permalink_must_be_a_url(self, registry, harvest):
        result = await registry.call("update_time_entry", {"id": 7, "external_reference": {"permalink": "not a url"}})

        assert error_text(result).startswith("Invalid parameters: external_reference.permalink:")
        assert harvest.requests == []
