import pytest

from timesheet_api.common.errors import UpstreamError, ValidationError
from timesheet_api.services.ai_composer import NO_CHANGES, OpenAISuggester, compose, filter_suggestions

ALLOWED = ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04", "2024-01-05"]
EXPECTED = [8, 8, 8, 8, 8, 0, 0]


def test_hours_are_clamped_and_foreign_dates_dropped():
    out = filter_suggestions([
        {"date": "2024-01-01", "entries": [{"hours": 30, "type": "work"}]},
        {"date": "2024-01-06", "entries": [{"hours": 8, "type": "work"}]},
    ], ALLOWED)
    assert out == [{"date": "2024-01-01", "entries": [{"hours": 24.0, "type": "work"}]}]


def test_malformed_items_are_dropped_one_by_one():
    out = filter_suggestions([
        "junk",
        {"entries": [{"hours": 8}]},
        {"date": "2024-01-02", "entries": [
            {"hours": "lots"},
            {"hours": 4, "type": "party"},
            {"hours": 0, "type": "work"},
            {"hours": -3, "type": "sick"},
            {"hours": 4},
            {"hours": 2, "type": "sick"},
        ]},
    ], ALLOWED)
    assert out == [{"date": "2024-01-02", "entries": [
        {"hours": 4.0, "type": "work"},
        {"hours": 2.0, "type": "sick"},
    ]}]


def test_non_list_output_yields_nothing():
    assert filter_suggestions({"date": "2024-01-01"}, ALLOWED) == []
    assert filter_suggestions(None, ALLOWED) == []


def test_all_dropped_reports_no_applicable_changes():
    def suggester(command, context):
        return {"suggestions": [{"date": "2030-01-01", "entries": [{"hours": 8}]}], "rationale": "guess"}

    res = compose("work all week", "2024-01-01", ALLOWED, EXPECTED, suggester)
    assert res["applicable"] is False
    assert res["suggestions"] == []
    assert res["message"] == NO_CHANGES
    assert res["rationale"] == "guess"


def test_suggester_receives_week_context():
    seen = {}

    def suggester(command, context):
        seen.update(context, command=command)
        return [{"date": "2024-01-03", "entries": [{"hours": 8, "type": "time_off"}]}]

    res = compose("  day off on wednesday ", "2024-01-03", ALLOWED, EXPECTED, suggester)
    assert seen["command"] == "day off on wednesday"
    assert seen["week_start"] == "2024-01-01"
    assert seen["expected_by_day"] == [8.0, 8.0, 8.0, 8.0, 8.0, 0.0, 0.0]
    assert res["applicable"] is True
    assert res["message"] is None
    assert res["suggestions"][0]["entries"] == [{"hours": 8.0, "type": "time_off"}]


def test_suggester_failure_becomes_upstream_error():
    def suggester(command, context):
        raise RuntimeError("boom")

    with pytest.raises(UpstreamError):
        compose("work", "2024-01-01", ALLOWED, EXPECTED, suggester)


@pytest.mark.parametrize("command,week_start,allowed", [
    ("", "2024-01-01", ALLOWED),
    ("work", "2024-13-01", ALLOWED),
    ("work", "2024-01-01", []),
    ("work", "2024-01-01", ["01/01/2024"]),
])
def test_request_is_validated(command, week_start, allowed):
    with pytest.raises(ValidationError):
        compose(command, week_start, allowed, EXPECTED, lambda c, ctx: [])


def test_unconfigured_client_raises_upstream():
    with pytest.raises(UpstreamError):
        OpenAISuggester(api_key=None)("work", {"week_start": "2024-01-01", "expected_by_day": EXPECTED})
