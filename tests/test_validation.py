import pytest

from harvest_mcp.errors import ToolInputError
from harvest_mcp.tools.projects import CreateProject
from harvest_mcp.tools.time_entries import CreateTimeEntry, TimeEntryQuery
from harvest_mcp.validation import EmptyInput, PaginatedQuery, input_schema, validate_input


class TestValidateInput:
    def test_none_arguments_mean_empty(self):
        assert isinstance(validate_input(EmptyInput, None, "get_company"), EmptyInput)

    def test_unknown_argument_rejected(self):
        with pytest.raises(ToolInputError) as exc_info:
            validate_input(EmptyInput, {"bogus": 1}, "get_company")

        assert exc_info.value.message.startswith("Invalid parameters: bogus:")
        assert exc_info.value.errors == ["bogus: Extra inputs are not permitted"]

    def test_lists_every_failing_field(self):
        with pytest.raises(ToolInputError) as exc_info:
            validate_input(CreateProject, {"name": "", "client_id": 0}, "create_project")

        fields = [error.split(":")[0] for error in exc_info.value.errors]
        assert fields == ["name", "client_id"]

    @pytest.mark.parametrize("value", ["2024-13-01", "2024-02-30", "01/02/2024", "yesterday"])
    def test_rejects_bad_dates(self, value):
        with pytest.raises(ToolInputError, match="from"):
            validate_input(TimeEntryQuery, {"from": value}, "list_time_entries")

    def test_updated_since_needs_offset(self):
        validate_input(TimeEntryQuery, {"updated_since": "2024-01-31T09:00:00Z"}, "list_time_entries")
        with pytest.raises(ToolInputError, match="updated_since"):
            validate_input(TimeEntryQuery, {"updated_since": "2024-01-31T09:00:00"}, "list_time_entries")

    @pytest.mark.parametrize("per_page", [0, 2001])
    def test_per_page_bounds(self, per_page):
        with pytest.raises(ToolInputError, match="per_page"):
            validate_input(PaginatedQuery, {"per_page": per_page}, "list")


class TestCreateTimeEntryDuration:
    base = {"project_id": 1, "task_id": 2, "spent_date": "2024-03-01"}

    def test_hours_is_enough(self):
        validate_input(CreateTimeEntry, {**self.base, "hours": 1.5}, "create_time_entry")

    def test_start_and_end_is_enough(self):
        validate_input(
            CreateTimeEntry,
            {**self.base, "started_time": "09:00", "ended_time": "17:30"},
            "create_time_entry",
        )

    @pytest.mark.parametrize("extra", [{}, {"hours": 0}, {"started_time": "09:00"}])
    def test_duration_required(self, extra):
        with pytest.raises(ToolInputError, match="Must provide either 'hours' or both"):
            validate_input(CreateTimeEntry, {**self.base, **extra}, "create_time_entry")

    @pytest.mark.parametrize("value", ["24:00", "9", "12:60"])
    def test_clock_time_format(self, value):
        with pytest.raises(ToolInputError, match="started_time"):
            validate_input(
                CreateTimeEntry,
                {**self.base, "started_time": value, "ended_time": "10:00"},
                "create_time_entry",
            )


class TestInputSchema:
    def test_schema_matches_model(self):
        schema = input_schema(CreateTimeEntry)

        assert schema["type"] == "object"
        assert schema["additionalProperties"] is False
        assert set(schema["required"]) == {"project_id", "task_id", "spent_date"}
        assert schema["properties"]["hours"]["anyOf"][0]["maximum"] == 24
        assert "title" not in schema

    def test_alias_is_published(self):
        properties = input_schema(TimeEntryQuery)["properties"]

        assert "from" in properties
        assert "from_" not in properties
        assert properties["per_page"]["default"] == 2000

    def test_empty_model_has_properties(self):
        assert input_schema(EmptyInput)["properties"] == {}


class TestStrictTypes:
    @pytest.mark.parametrize("value", [True, "7", 1.0])
    def test_ids_must_be_integers(self, value):
        with pytest.raises(ToolInputError, match="client_id"):
            validate_input(CreateProject, {"name": "Website", "client_id": value}, "create_project")

    @pytest.mark.parametrize("value", [True, "1.5"])
    def test_hours_must_be_a_number(self, value):
        base = {"project_id": 1, "task_id": 2, "spent_date": "2024-03-01"}
        with pytest.raises(ToolInputError, match="hours"):
            validate_input(CreateTimeEntry, {**base, "hours": value}, "create_time_entry")

    def test_integer_accepted_for_decimal(self):
        params = validate_input(
            CreateProject, {"name": "Website", "client_id": 5, "budget": 120}, "create_project"
        )
        assert params.budget == 120

    @pytest.mark.parametrize("value", ["true", 1])
    def test_flags_must_be_booleans(self, value):
        with pytest.raises(ToolInputError, match="is_active"):
            validate_input(CreateProject, {"name": "Website", "client_id": 5, "is_active": value}, "create_project")

    def test_per_page_must_be_an_integer(self):
        with pytest.raises(ToolInputError, match="per_page"):
            validate_input(PaginatedQuery, {"per_page": "100"}, "list")


@pytest.mark.parametrize("value", [
    "2024-01-01T00:00:00.12Z",
    "2024-01-01T00:00:00+02:00",
    "2024-01-01T00:00:00.123456-05:00",
])
def test_updated_since_accepts_rfc3339(value):
    params = validate_input(TimeEntryQuery, {"updated_since": value}, "list_time_entries")

    assert params.to_params()["updated_since"] == value
