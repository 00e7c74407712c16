# tests/test_task_models.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from task_central.tasks.task_models import Category, Priority, Task, parse_ts, validate_task

NOW = datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=UTC)


def test_validate_accepts_valid_input() -> None:
    res = validate_task("Buy milk", "", "low", "personal")
    assert res.valid
    assert res.errors == {}


def test_validate_reports_every_failing_field() -> None:
    res = validate_task("", "", "", "")
    assert not res.valid
    assert set(res.errors) == {"title", "priority", "category"}
    assert res.errors["title"] == "Task title is required"


def test_validate_title_and_priority_together() -> None:
    res = validate_task("", "fine", "", "work")
    assert set(res.errors) == {"title", "priority"}


@pytest.mark.parametrize(
    ("title", "ok"),
    [("Hi", False), ("Hey", True), ("   Hi   ", False), ("x" * 100, True), ("x" * 101, False)],
)
def test_validate_title_length(title: str, ok: bool) -> None:
    res = validate_task(title, "", "medium", "work")
    assert res.valid is ok
    if not ok:
        assert res.errors == {"title": "Title must be 3-100 chars"}


def test_validate_description_length() -> None:
    assert validate_task("Task", "d" * 500, "low", "work").valid
    res = validate_task("Task", "d" * 501, "low", "work")
    assert res.errors == {"description": "Description max 500 chars"}


def test_validate_rejects_unknown_enums() -> None:
    res = validate_task("Task", "", "critical", "home")
    assert res.errors == {
        "priority": "Please select a valid priority",
        "category": "Please select a valid category",
    }


def test_validate_accepts_enum_members() -> None:
    assert validate_task("Task", None, Priority.HIGH, Category.URGENT).valid


def test_create_sanitizes_and_sets_timestamps() -> None:
    task = Task.create("  <i>Read</i> book ", " <script>x</script> ", "high", "personal", now=NOW)
    assert task.title == "iRead/i book"
    assert task.description == "scriptx/script"
    assert task.priority is Priority.HIGH
    assert task.category is Category.PERSONAL
    assert task.completed is False
    assert task.created_at == task.updated_at == NOW
    assert task.id


def test_apply_update_keeps_id_and_created_at() -> None:
    task = Task.create("Read book", "", "low", "personal", now=NOW)
    later = NOW + timedelta(minutes=5)
    task.apply_update("Read two books", "ch. 1", "medium", "work", now=later)
    assert task.title == "Read two books"
    assert task.priority is Priority.MEDIUM
    assert task.category is Category.WORK
    assert task.created_at == NOW
    assert task.updated_at == later


def test_snapshot_restore() -> None:
    task = Task.create("Read book", "", "low", "personal", now=NOW)
    snap = task.snapshot()
    task.apply_update("Other", "x", "high", "urgent", now=NOW + timedelta(seconds=1))
    task.set_completed(True, now=NOW + timedelta(seconds=2))
    task.restore(snap)
    assert (task.title, task.description, task.priority, task.category) == (
        "Read book",
        "",
        Priority.LOW,
        Category.PERSONAL,
    )
    assert task.completed is False
    assert task.updated_at == NOW


def test_matches_search_is_case_insensitive_over_title_and_description() -> None:
    task = Task.create("Quarterly Report", "send to Finance", "low", "work", now=NOW)
    assert task.matches_search("")
    assert task.matches_search("REPORT")
    assert task.matches_search("finance")
    assert not task.matches_search("marketing")


def test_dict_layout_and_round_trip() -> None:
    task = Task.create("Round trip", "all fields", "medium", "urgent", now=NOW)
    task.set_completed(True, now=NOW + timedelta(hours=1))

    data = task.to_dict()
    assert set(data) == {
        "id",
        "title",
        "description",
        "priority",
        "category",
        "completed",
        "createdAt",
        "updatedAt",
    }
    assert isinstance(data["createdAt"], str)

    again = Task.from_dict(data)
    assert again == task


def test_from_dict_accepts_js_style_timestamps() -> None:
    task = Task.from_dict(
        {
            "id": "lx1abc",
            "title": "Legacy",
            "description": "",
            "priority": "low",
            "category": "work",
            "completed": 1,
            "createdAt": "2024-01-02T03:04:05.678Z",
            "updatedAt": "2024-01-02T03:04:05.678Z",
        }
    )
    assert task.completed is True
    assert task.created_at == datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=UTC)


def test_from_dict_rejects_broken_entries() -> None:
    with pytest.raises(KeyError):
        Task.from_dict({"title": "no id", "priority": "low", "category": "work"})
    with pytest.raises(ValueError):
        Task.from_dict(
            {
                "id": "a",
                "priority": "critical",
                "category": "work",
                "createdAt": "2024-01-01T00:00:00Z",
                "updatedAt": "2024-01-01T00:00:00Z",
            }
        )


def test_parse_ts_normalizes_to_utc() -> None:
    plus2 = timezone(timedelta(hours=2))
    assert parse_ts("2024-01-01T02:00:00+02:00") == datetime(2024, 1, 1, tzinfo=UTC)
    assert parse_ts("2024-01-01T00:00:00").tzinfo is UTC
    assert parse_ts(datetime(2024, 1, 1, 2, tzinfo=plus2)) == datetime(2024, 1, 1, tzinfo=UTC)
    with pytest.raises(ValueError):
        parse_ts("")


@pytest.mark.parametrize("raw", [1e300, -1e300, float("inf"), float("nan")])
def test_parse_ts_rejects_out_of_range_epochs(raw: float) -> None:
    with pytest.raises(ValueError):
        parse_ts(raw)
