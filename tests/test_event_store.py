"""Tests for EventStore."""

from datetime import date, datetime, time

import pytest

from daybook.event_store import EventStore


class TestMembership:
    def test_add_keeps_insertion_order(self, store, make_event):
        a = make_event(start="11:00", end="12:00")
        b = make_event(start="08:00", end="09:00")
        store.add_event(a)
        store.add_event(b)
        assert store.get_all_events() == [a, b]
        assert list(store) == [a, b]
        assert len(store) == 2

    def test_duplicate_reference_rejected(self, store, make_event):
        event = make_event()
        store.add_event(event)
        with pytest.raises(ValueError):
            store.add_event(event)
        assert len(store) == 1

    def test_equal_valued_events_are_both_kept(self, store, make_event):
        store.add_event(make_event())
        store.add_event(make_event())
        assert len(store) == 2

    def test_non_event_rejected(self, store):
        with pytest.raises(TypeError):
            store.add_event("not an event")

    def test_contains_is_by_identity(self, store, make_event):
        event = make_event()
        twin = make_event()
        store.add_event(event)
        assert event in store
        assert twin not in store


class TestRemoval:
    def test_remove_by_identity(self, store, make_event):
        a = make_event()
        twin = make_event()
        store.add_event(a)
        store.add_event(twin)
        assert store.remove_event(a) is True
        assert store.get_all_events() == [twin]

    def test_remove_equal_valued_stranger_is_noop(self, store, make_event):
        store.add_event(make_event())
        assert store.remove_event(make_event()) is False
        assert len(store) == 1


class TestReplace:
    def test_replace_keeps_position(self, store, make_event):
        a, b, c = make_event(title="A"), make_event(title="B"), make_event(title="C")
        store.add_event(a)
        store.add_event(b)
        store.replace_event(a, c)
        assert store.get_all_events() == [c, b]

    def test_replace_missing_raises(self, store, make_event):
        with pytest.raises(ValueError):
            store.replace_event(make_event(), make_event())

    def test_replace_with_present_event_raises(self, store, make_event):
        a, b = make_event(), make_event()
        store.add_event(a)
        store.add_event(b)
        with pytest.raises(ValueError):
            store.replace_event(a, b)


class TestSnapshot:
    def test_iteration_is_unaffected_by_mutation(self, store, make_event):
        a, b = make_event(), make_event()
        store.add_event(a)
        store.add_event(b)
        seen = []
        for event in store:
            seen.append(event)
            store.remove_event(event)
            store.add_event(make_event(title="Added during iteration"))
        assert seen == [a, b]

    def test_snapshot_is_immutable(self, store, make_event):
        store.add_event(make_event())
        snap = store.snapshot()
        assert isinstance(snap, tuple)
        store.add_event(make_event())
        assert len(snap) == 1

    def test_get_all_events_returns_copy(self, store, make_event):
        store.add_event(make_event())
        events = store.get_all_events()
        events.clear()
        assert len(store) == 1


class TestChangeCallback:
    def test_callback_fires_on_changes(self, store, make_event):
        calls = []
        store.set_on_change_callback(lambda s, e: calls.append((s, e)))
        a, b = make_event(), make_event()

        store.add_event(a)
        store.mark_modified(a)
        store.replace_event(a, b)
        store.remove_event(b)

        assert calls == [(store, a), (store, a), (store, b), (store, None)]

    def test_mark_modified_unknown_event_raises(self, store, make_event):
        with pytest.raises(ValueError):
            store.mark_modified(make_event())


class TestQueries:
    def test_queries_delegate_to_engine(self, store, make_event):
        morning = make_event(day="2024-03-05", start="09:00", end="10:00")
        next_month = make_event(day="2024-04-01", start="00:00", end="01:00")
        store.add_event(morning)
        store.add_event(next_month)

        assert store.get_events_in_year(2024) == [morning, next_month]
        assert store.get_events_in_month(2024, 3) == [morning]
        assert store.get_events_in_day(2024, 3, 5) == [morning]
        assert store.get_events_in_day(date(2024, 4, 1)) == [next_month]
        assert store.get_events_in_hour(2024, 3, 5, 9) == [morning]
        assert store.get_events_in_hour(datetime(2024, 3, 5, 10, 30)) == []
        assert store.get_events_in_week(date(2024, 3, 7)) == [morning]
        assert store.get_events_in_range(datetime(2024, 3, 5, 8), datetime(2024, 3, 5, 9, 1)) == [morning]

    def test_empty_store_returns_empty_list(self):
        assert EventStore("Empty").get_events_in_year(2024) == []

    def test_query_sees_in_place_edit(self, store, make_event):
        event = make_event(day="2024-03-05")
        store.add_event(event)
        event.update(date=date(2024, 5, 1), start_time=time(8), end_time=time(9))
        assert store.get_events_in_month(2024, 3) == []
        assert store.get_events_in_month(2024, 5) == [event]
