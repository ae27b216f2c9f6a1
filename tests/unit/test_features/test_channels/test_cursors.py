"""Unit tests for CursorManager."""
from __future__ import annotations

import pytest

from channel_explorer.core.pagination import CursorData, RawPage, compute_fingerprint
from channel_explorer.features.channels.cursors import CursorManager
from channel_explorer.features.channels.schemas import DEFAULT_FILTERS, DEFAULT_SORT, ChannelFilters


def _page(fingerprint: str, *, has_next: bool = True, has_prev: bool = False) -> RawPage:
    return RawPage(
        items=[],
        has_next=has_next,
        has_prev=has_prev,
        first=CursorData(values={"subscribers": 10, "id": "a"}, boundary="first", fingerprint=fingerprint),
        last=CursorData(values={"subscribers": 5, "id": "b"}, boundary="last", fingerprint=fingerprint),
    )


@pytest.mark.unit
class TestCursorManager:
    """Tests for cursor bookkeeping."""

    def test_initial_state(self):
        manager = CursorManager(DEFAULT_FILTERS, DEFAULT_SORT)

        assert manager.current_page == 1
        assert manager.next_cursor() is None
        assert manager.prev_cursor() is None
        assert manager.fingerprint == compute_fingerprint(DEFAULT_FILTERS, DEFAULT_SORT)

    def test_record_next_and_prev_move_counter(self):
        manager = CursorManager(DEFAULT_FILTERS, DEFAULT_SORT)
        fp = manager.fingerprint

        manager.record(_page(fp), "first")
        manager.record(_page(fp, has_prev=True), "next")
        assert manager.current_page == 2
        assert manager.prev_cursor().record_id == "a"
        assert manager.next_cursor().record_id == "b"

        manager.record(_page(fp), "prev")
        assert manager.current_page == 1

    def test_counter_never_drops_below_one(self):
        manager = CursorManager(DEFAULT_FILTERS, DEFAULT_SORT)

        manager.record(_page(manager.fingerprint), "prev")

        assert manager.current_page == 1

    def test_next_cursor_requires_has_next(self):
        manager = CursorManager(DEFAULT_FILTERS, DEFAULT_SORT)

        manager.record(_page(manager.fingerprint, has_next=False))

        assert manager.next_cursor() is None

    def test_bind_clears_cursors(self):
        manager = CursorManager(DEFAULT_FILTERS, DEFAULT_SORT)
        manager.record(_page(manager.fingerprint, has_prev=True), "next")

        fingerprint = manager.bind(ChannelFilters(search="x"), DEFAULT_SORT)

        assert fingerprint != compute_fingerprint(DEFAULT_FILTERS, DEFAULT_SORT)
        assert manager.current_page == 1
        assert manager.first is None
        assert manager.last is None
        assert not manager.has_next

    def test_page_from_stale_specs_is_ignored(self):
        manager = CursorManager(DEFAULT_FILTERS, DEFAULT_SORT)
        old = manager.fingerprint
        manager.bind(ChannelFilters(search="x"), DEFAULT_SORT)

        manager.record(_page(old), "next")

        assert manager.last is None
        assert manager.current_page == 1

    def test_fingerprint_tracks_spec_values(self):
        assert compute_fingerprint(ChannelFilters(search="a"), DEFAULT_SORT) == compute_fingerprint(
            ChannelFilters(search="a"), DEFAULT_SORT
        )
