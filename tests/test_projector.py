"""Unit tests for the week grid projector."""
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from calendar_grid.classifier import PALETTE
from calendar_grid.models import RawEvent
from calendar_grid.projector import (
    day_index,
    generate_event_id,
    project_events,
    week_anchor,
)


CHICAGO = ZoneInfo('America/Chicago')


def make_event(title, start, end, calendar_name="Schedule", url=None):
    return RawEvent(
        title=title,
        start=start,
        end=end,
        calendar_name=calendar_name,
        url=url
    )


class TestWeekAnchor:
    """Test cases for week_anchor."""

    def test_monday_is_its_own_anchor(self):
        """Test that a Monday anchors its own week."""
        assert week_anchor(date(2024, 1, 15)) == date(2024, 1, 15)

    def test_sunday_belongs_to_previous_monday(self):
        """Test that Sunday belongs to the preceding Monday."""
        assert week_anchor(date(2024, 1, 21)) == date(2024, 1, 15)

    def test_datetime_reference(self):
        """Test that a datetime reference is reduced to its date."""
        assert week_anchor(datetime(2024, 1, 17, 13, 45)) == date(2024, 1, 15)


class TestDayIndex:
    """Test cases for day_index."""

    def test_last_minute_of_week_is_included(self):
        """Test Sunday 23:59 is the last grid day."""
        start = datetime(2024, 1, 21, 23, 59, tzinfo=CHICAGO)

        assert day_index(start, date(2024, 1, 15), CHICAGO) == 6

    def test_next_monday_is_day_seven(self):
        """Test the following Monday falls outside the week."""
        start = datetime(2024, 1, 22, 0, 0, tzinfo=CHICAGO)

        assert day_index(start, date(2024, 1, 15), CHICAGO) == 7

    def test_before_anchor_is_negative(self):
        """Test events before the anchor get a negative index."""
        start = datetime(2024, 1, 14, 23, 0, tzinfo=CHICAGO)

        assert day_index(start, date(2024, 1, 15), CHICAGO) == -1

    def test_instant_converted_to_grid_timezone(self):
        """Test a UTC instant lands on its local Chicago day."""
        start = datetime(2024, 1, 16, 3, 0, tzinfo=timezone.utc)

        assert day_index(start, date(2024, 1, 15), CHICAGO) == 0

    def test_daylight_saving_week(self):
        """Test local day numbering across the fall-back change."""
        start = datetime(2024, 11, 3, 23, 30, tzinfo=CHICAGO)

        assert day_index(start, date(2024, 10, 28), CHICAGO) == 6


class TestProjectEvents:
    """Test cases for project_events."""

    def test_grid_positions(self):
        """Test day index, minutes, color and id of a projected event."""
        events = [
            make_event(
                "Lap Swim",
                datetime(2024, 1, 16, 6, 30, tzinfo=CHICAGO),
                datetime(2024, 1, 16, 8, 0, tzinfo=CHICAGO),
                calendar_name="Aquatics",
                url="https://rec.example.org/detail/1"
            )
        ]

        buckets = project_events(events, date(2024, 1, 15), CHICAGO)

        assert list(buckets.keys()) == ["aquatics"]
        bucket = buckets["aquatics"]
        assert bucket.label == "Aquatics"
        grid_event = bucket.events[0]
        assert grid_event.name == "Lap Swim"
        assert grid_event.day_index == 1
        assert grid_event.start_minutes == 390
        assert grid_event.end_minutes == 480
        assert grid_event.url == "https://rec.example.org/detail/1"
        assert grid_event.color == PALETTE['blue']
        assert grid_event.id == generate_event_id(
            "Lap Swim", datetime(2024, 1, 16, 6, 30, tzinfo=CHICAGO)
        )

    def test_anchor_normalized_to_monday(self):
        """Test a mid-week anchor is moved back to Monday."""
        events = [
            make_event(
                "Open Gym",
                datetime(2024, 1, 15, 9, 0, tzinfo=CHICAGO),
                datetime(2024, 1, 15, 10, 0, tzinfo=CHICAGO)
            )
        ]

        buckets = project_events(events, date(2024, 1, 18), CHICAGO)

        assert buckets["schedule"].events[0].day_index == 0

    def test_out_of_week_events_dropped(self):
        """Test that events outside the week are dropped."""
        events = [
            make_event(
                "Sunday Late",
                datetime(2024, 1, 21, 23, 59, tzinfo=CHICAGO),
                datetime(2024, 1, 21, 23, 59, tzinfo=CHICAGO)
            ),
            make_event(
                "Next Monday",
                datetime(2024, 1, 22, 0, 0, tzinfo=CHICAGO),
                datetime(2024, 1, 22, 1, 0, tzinfo=CHICAGO)
            ),
            make_event(
                "Last Sunday",
                datetime(2024, 1, 14, 12, 0, tzinfo=CHICAGO),
                datetime(2024, 1, 14, 13, 0, tzinfo=CHICAGO)
            ),
        ]

        buckets = project_events(events, date(2024, 1, 15), CHICAGO)

        assert [e.name for e in buckets["schedule"].events] == ["Sunday Late"]
        assert buckets["schedule"].events[0].day_index == 6

    def test_midnight_crossing_keeps_clock_minutes(self):
        """Test end minutes come from the clock, not the duration."""
        events = [
            make_event(
                "Lock-in",
                datetime(2024, 1, 19, 22, 0, tzinfo=CHICAGO),
                datetime(2024, 1, 20, 1, 0, tzinfo=CHICAGO)
            )
        ]

        grid_event = project_events(events, date(2024, 1, 15), CHICAGO)["schedule"].events[0]

        assert grid_event.start_minutes == 1320
        assert grid_event.end_minutes == 60

    def test_buckets_keep_first_label_and_row_order(self):
        """Test bucket labels and event order follow the source rows."""
        start = datetime(2024, 1, 17, 9, 0, tzinfo=CHICAGO)
        end = datetime(2024, 1, 17, 10, 0, tzinfo=CHICAGO)
        events = [
            make_event("B", start, end, calendar_name="Court Sports"),
            make_event("A", start, end, calendar_name="court sports"),
            make_event("C", start, end, calendar_name="Aquatics"),
        ]

        buckets = project_events(events, date(2024, 1, 15), CHICAGO)

        assert list(buckets.keys()) == ["courtsports", "aquatics"]
        assert buckets["courtsports"].label == "Court Sports"
        assert [e.name for e in buckets["courtsports"].events] == ["B", "A"]

    def test_duplicate_ids_get_suffix(self):
        """Test repeated ids are made unique with numeric suffixes."""
        start = datetime(2024, 1, 17, 9, 0, tzinfo=CHICAGO)
        end = datetime(2024, 1, 17, 10, 0, tzinfo=CHICAGO)
        events = [
            make_event("Open Gym", start, end),
            make_event("Open Gym", start, end),
            make_event("Open Gym", start, end),
        ]

        ids = [e.id for e in project_events(events, date(2024, 1, 15), CHICAGO)["schedule"].events]

        base = generate_event_id("Open Gym", start)
        assert ids == [base, f"{base}-2", f"{base}-3"]

    def test_serialization(self):
        """Test the front-end dictionary shape of a bucket."""
        events = [
            make_event(
                "Chair Yoga",
                datetime(2024, 1, 15, 9, 0, tzinfo=CHICAGO),
                datetime(2024, 1, 15, 10, 0, tzinfo=CHICAGO),
                calendar_name="Community"
            )
        ]

        bucket = project_events(events, date(2024, 1, 15), CHICAGO)["community"]

        assert bucket.to_dict() == {
            'label': 'Community',
            'events': [{
                'id': generate_event_id(
                    "Chair Yoga", datetime(2024, 1, 15, 9, 0, tzinfo=CHICAGO)
                ),
                'name': 'Chair Yoga',
                'dayIndex': 0,
                'startMinutes': 540,
                'endMinutes': 600,
                'url': None,
                'color': {
                    'bg': 'bg-pink-100',
                    'text': 'text-pink-800',
                    'border': 'border-pink-500'
                }
            }]
        }


def test_generate_event_id_consistency():
    """Test ids are stable and distinguish start times."""
    start = datetime(2024, 1, 15, 9, 0, tzinfo=CHICAGO)
    later = datetime(2024, 1, 15, 10, 0, tzinfo=CHICAGO)

    assert generate_event_id("Yoga", start) == generate_event_id("Yoga", start)
    assert generate_event_id("Yoga", start) != generate_event_id("Yoga", later)
    assert len(generate_event_id("Yoga", start)) == 64
