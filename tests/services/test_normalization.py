"""Tests for event validation and normalization."""

import re

import pytest

from app.exceptions import EventValidationError, ValidationError
from app.services.normalization import (
    changed_fields,
    check_event_fields,
    clean_event_fields,
    generate_slug,
    normalize_date,
    normalize_time,
    prepare_event,
    text_length,
)

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


# ---------------------------------------------------------------------
# Slug generation
# ---------------------------------------------------------------------

@pytest.mark.parametrize("title,expected", [
    ("My Awesome Event!!", "my-awesome-event"),
    ("  React   Summit  2025 ", "react-summit-2025"),
    ("Rust -- Meetup", "rust-meetup"),
    ("-Edge- Hyphens-", "edge-hyphens"),
    ("C++ & Go: Systems Day", "c-go-systems-day"),
    ("Café Hack Night", "caf-hack-night"),
    ("AI/ML\tWorkshop\nPart 2", "aiml-workshop-part-2"),
])
def test_generate_slug(title, expected):
    assert generate_slug(title) == expected


@pytest.mark.parametrize("title", [
    "My Awesome Event!!",
    "   spaces   everywhere   ",
    "--- Dashes --- and ___ underscores ---",
    "UPPER lower 123",
])
def test_generate_slug_is_url_safe(title):
    assert SLUG_PATTERN.match(generate_slug(title))


def test_generate_slug_is_idempotent():
    slug = generate_slug("PyData Berlin: Day 2 (Sprints)")
    assert generate_slug(slug) == slug


def test_generate_slug_without_letters_or_digits():
    assert generate_slug("!!! ???") == ""


# ---------------------------------------------------------------------
# Date normalization
# ---------------------------------------------------------------------

@pytest.mark.parametrize("value,expected", [
    ("2024-03-05T10:00:00Z", "2024-03-05"),
    ("2024-03-05", "2024-03-05"),
    ("March 5, 2024", "2024-03-05"),
    ("03/05/2024", "2024-03-05"),
    ("2024-03-05 18:30", "2024-03-05"),
    (" 2024-03-05 ", "2024-03-05"),
])
def test_normalize_date(value, expected):
    assert normalize_date(value) == expected


def test_normalize_date_converts_offsets_to_utc():
    assert normalize_date("2024-03-05T23:30:00-05:00") == "2024-03-06"


@pytest.mark.parametrize("value", ["not-a-date", "2024-13-45", ""])
def test_normalize_date_rejects_garbage(value):
    with pytest.raises(ValidationError) as exc_info:
        normalize_date(value)
    assert exc_info.value.field == "date"
    assert exc_info.value.message == "Invalid date format"


@pytest.mark.parametrize("value", ["10:00", "9:30 AM", "Monday", "5", "March"])
def test_normalize_date_rejects_values_without_year_or_month(value):
    with pytest.raises(ValidationError) as exc_info:
        normalize_date(value)
    assert exc_info.value.message == "Invalid date format"


def test_normalize_date_year_and_month_means_first_day():
    assert normalize_date("2024-03") == "2024-03-01"


@pytest.mark.parametrize("value", ["9999-12-31T23:00:00-05:00", "0001-01-01T00:30:00+01:00"])
def test_normalize_date_rejects_offsets_past_the_calendar_range(value):
    with pytest.raises(ValidationError) as exc_info:
        normalize_date(value)
    assert exc_info.value.field == "date"


def test_prepare_event_reports_out_of_range_date(event_payload):
    event_payload["date"] = "9999-12-31T23:00:00-05:00"
    with pytest.raises(EventValidationError) as exc_info:
        prepare_event(event_payload)
    assert exc_info.value.to_list() == [{"field": "date", "message": "Invalid date format"}]


# ---------------------------------------------------------------------
# Time normalization
# ---------------------------------------------------------------------

@pytest.mark.parametrize("value,expected", [
    ("2:30 PM", "14:30"),
    ("12:00 AM", "00:00"),
    ("12:15 PM", "12:15"),
    ("9:05", "09:05"),
    ("09:05", "09:05"),
    ("23:59", "23:59"),
    ("11:45pm", "23:45"),
    ("7:00 am", "07:00"),
    (" 8:00 AM ", "08:00"),
])
def test_normalize_time(value, expected):
    assert normalize_time(value) == expected


@pytest.mark.parametrize("value", ["13:00 PM", "25:00", "10:60", "24:00"])
def test_normalize_time_rejects_out_of_range(value):
    with pytest.raises(ValidationError) as exc_info:
        normalize_time(value)
    assert exc_info.value.field == "time"
    assert exc_info.value.message == "Invalid time values"


@pytest.mark.parametrize("value", ["noon", "9", "9:5", "9:05:00", "123:00", "9.05 PM", "9:05 XM"])
def test_normalize_time_rejects_bad_format(value):
    with pytest.raises(ValidationError) as exc_info:
        normalize_time(value)
    assert exc_info.value.message.startswith("Invalid time format")


# ---------------------------------------------------------------------
# Field constraints
# ---------------------------------------------------------------------

def test_check_event_fields_accepts_valid_payload(event_payload):
    assert check_event_fields(event_payload) == []


def test_check_event_fields_reports_every_error(event_payload):
    event_payload.update({
        "title": "",
        "description": "x" * 1001,
        "overview": "y" * 501,
        "mode": "virtual",
        "agenda": [],
        "tags": [],
    })
    del event_payload["venue"]

    errors = check_event_fields(event_payload)

    assert sorted(e.field for e in errors) == sorted([
        "title", "description", "overview", "venue", "mode", "agenda", "tags",
    ])


def test_check_event_fields_length_limits_are_inclusive(event_payload):
    event_payload.update({"title": "t" * 100, "description": "d" * 1000, "overview": "o" * 500})
    assert check_event_fields(event_payload) == []


def test_check_event_fields_counts_utf16_length(event_payload):
    # each emoji is two UTF-16 code units
    event_payload["title"] = "\U0001F680" * 50
    assert check_event_fields(event_payload) == []

    event_payload["title"] = "\U0001F680" * 60
    errors = check_event_fields(event_payload)
    assert [(e.field, e.message) for e in errors] == [("title", "Title cannot exceed 100 characters")]


def test_text_length():
    assert text_length("Café") == 4
    assert text_length("\U0001F680 launch") == 9


def test_check_event_fields_messages(event_payload):
    event_payload.update({"title": "t" * 101, "mode": "virtual", "tags": []})
    messages = {e.field: e.message for e in check_event_fields(event_payload)}
    assert messages == {
        "title": "Title cannot exceed 100 characters",
        "mode": "Mode must be online, offline or hybrid",
        "tags": "At least one tag is required",
    }


def test_check_event_fields_empty_agenda(event_payload):
    event_payload["agenda"] = []
    errors = check_event_fields(event_payload)
    assert [e.field for e in errors] == ["agenda"]
    assert errors[0].message == "At least one agenda item is required"


def test_check_event_fields_blank_text_is_missing(event_payload):
    event_payload["organizer"] = "   "
    errors = check_event_fields(event_payload)
    assert [(e.field, e.message) for e in errors] == [("organizer", "Organizer is required")]


def test_clean_event_fields_trims_and_dedupes(event_payload):
    event_payload.update({
        "title": "  Padded Title  ",
        "agenda": [" Intro ", "", "Talks"],
        "tags": ["python", " python", "web", "  "],
    })
    cleaned = clean_event_fields(event_payload)

    assert cleaned["title"] == "Padded Title"
    assert cleaned["agenda"] == ["Intro", "Talks"]
    assert cleaned["tags"] == ["python", "web"]
    # the input is left untouched
    assert event_payload["title"] == "  Padded Title  "


def test_changed_fields():
    previous = {"title": "A", "date": "2025-01-01", "time": "10:00"}
    assert changed_fields({"title": "A", "date": "2025-01-02", "time": "10:00"}, previous) == {"date"}
    assert changed_fields({"title": "A"}, None) == {"title"}


# ---------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------

def test_prepare_event_new_record(event_payload):
    event_payload.update({"title": "My Awesome Event!!", "date": "2025-10-22T08:00:00Z", "time": "2:30 PM"})

    record = prepare_event(event_payload)

    assert record["slug"] == "my-awesome-event"
    assert record["date"] == "2025-10-22"
    assert record["time"] == "14:30"
    assert event_payload["time"] == "2:30 PM"


def test_prepare_event_unchanged_fields_are_not_renormalized(event_payload):
    previous = prepare_event(event_payload)
    # A stored value that a normalizer would reject proves the normalizer did not run
    previous["time"] = "legacy"
    candidate = {**previous, "overview": "A new overview."}

    record = prepare_event(candidate, previous=previous)

    assert record["time"] == "legacy"
    assert record["slug"] == previous["slug"]
    assert record["overview"] == "A new overview."


def test_prepare_event_title_change_recomputes_slug(event_payload):
    previous = prepare_event(event_payload)
    record = prepare_event({**previous, "title": "Renamed Conf"}, previous=previous)
    assert record["slug"] == "renamed-conf"


def test_prepare_event_changed_date_and_time_are_normalized(event_payload):
    previous = prepare_event(event_payload)
    record = prepare_event({**previous, "date": "Nov 1, 2025", "time": "6:00 PM"}, previous=previous)
    assert (record["date"], record["time"]) == ("2025-11-01", "18:00")


def test_prepare_event_collects_normalizer_errors(event_payload):
    event_payload.update({"date": "not-a-date", "time": "25:00"})

    with pytest.raises(EventValidationError) as exc_info:
        prepare_event(event_payload)

    assert exc_info.value.to_list() == [
        {"field": "date", "message": "Invalid date format"},
        {"field": "time", "message": "Invalid time values"},
    ]


def test_prepare_event_rejects_constraint_violations(event_payload):
    event_payload["mode"] = "virtual"
    with pytest.raises(EventValidationError) as exc_info:
        prepare_event(event_payload)
    assert exc_info.value.fields == ["mode"]


def test_prepare_event_rejects_title_without_slug(event_payload):
    event_payload["title"] = "!!!"
    with pytest.raises(EventValidationError) as exc_info:
        prepare_event(event_payload)
    assert exc_info.value.fields == ["title"]
