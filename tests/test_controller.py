"""
Tests for the selection controller.
"""

import asyncio
from datetime import date

import pytest

from git_heatmap.commit_parser import CommitDetail
from git_heatmap.controller import DetailRequest, HeatmapController, InputSurface, KeyEvent
from git_heatmap.detail_panel import DetailPanel
from git_heatmap.errors import DetailFetchFailed
from git_heatmap.layout import build_layout


@pytest.fixture
def layout():
    """Mon 2024-01-01 .. Sun 2024-01-07 with commits on the 1st and 3rd."""
    return build_layout(7, date(2024, 1, 7), {"2024-01-01": 2, "2024-01-03": 5})


@pytest.fixture
def controller(layout):
    return HeatmapController(layout, DetailPanel())


def _commit(hash_, day):
    return CommitDetail(hash=hash_, message=f"commit {hash_}", author="Alice", date=f"{day}T10:00:00")


class TestSelect:
    """Tests for select()."""

    def test_no_selection_before_render(self, controller):
        assert controller.position is None
        assert controller.active_cell is None

    def test_select_populated_cell(self, controller):
        request = controller.select(3, 0)

        assert controller.position == (3, 0)
        assert controller.active_cell.date_str == "2024-01-03"
        assert request == DetailRequest(generation=1, date="2024-01-03")
        assert controller.panel.state == "loading"
        assert controller.scroll_target == (3, 0)

    def test_select_zero_count_needs_no_fetch(self, controller):
        request = controller.select(2, 0)

        assert request is None
        assert controller.position == (2, 0)
        assert controller.panel.state == "empty"
        assert controller.panel.badge_class == "info-count-badge zero"

    def test_select_unpopulated_is_noop(self, controller):
        controller.select(3, 0)
        request = controller.select(0, 0)

        assert request is None
        assert controller.position == (3, 0)
        assert controller.panel.date == "2024-01-03"
        assert controller.scroll_target == (3, 0)

    def test_select_default_is_most_recent_day(self, controller):
        controller.select_default()

        assert controller.position == (0, 1)
        assert controller.active_cell.date_str == "2024-01-07"

    def test_scroll_target_tracks_latest_selection(self, controller):
        for _ in range(50):
            controller.select(1, 0)
            controller.select(3, 0)

        assert controller.scroll_target == (3, 0)

    def test_generation_increases(self, controller):
        controller.select(1, 0)
        controller.select(3, 0)
        assert controller.generation == 2


class TestMove:
    """Tests for arrow key navigation."""

    def test_move_without_selection(self, controller):
        assert controller.move("up") is None
        assert controller.position is None

    def test_move_up(self, controller):
        controller.select(3, 0)
        controller.move("up")
        assert controller.position == (2, 0)

    def test_move_down(self, controller):
        controller.select(3, 0)
        controller.move("down")
        assert controller.position == (4, 0)

    def test_move_right_into_unpopulated_is_rejected(self, controller):
        controller.select(3, 0)
        assert controller.move("right") is None
        assert controller.position == (3, 0)

    def test_move_left_at_edge_is_noop(self, controller):
        controller.select(3, 0)
        controller.move("left")
        assert controller.position == (3, 0)
        assert controller.generation == 1

    @pytest.mark.parametrize("direction", ["up", "down", "left", "right"])
    def test_default_cell_cannot_leave_to_unpopulated(self, controller, direction):
        """Every neighbour of Sunday 2024-01-07 is outside the window."""
        controller.select_default()
        controller.move(direction)

        assert controller.position == (0, 1)
        assert controller.panel.date == "2024-01-07"

    def test_never_lands_on_unpopulated_cell(self, layout, controller):
        controller.select(1, 0)
        for direction in ["up", "left", "down", "down", "right", "down", "down", "down", "down", "up"]:
            controller.move(direction)
            assert layout.is_populated(*controller.position)


class TestHandleKey:
    """Tests for the keyboard listener."""

    def test_arrow_key_moves(self, controller):
        controller.select(3, 0)
        event = KeyEvent("ArrowUp")
        controller.handle_key(event)

        assert controller.position == (2, 0)
        assert event.default_prevented

    def test_other_keys_ignored(self, controller):
        controller.select(3, 0)
        event = KeyEvent("Enter")

        assert controller.handle_key(event) is None
        assert not event.default_prevented
        assert controller.position == (3, 0)

    @pytest.mark.parametrize(
        "event",
        [
            KeyEvent("ArrowUp", target_tag="INPUT"),
            KeyEvent("ArrowUp", target_tag="textarea"),
            KeyEvent("ArrowUp", target_tag="div", editable=True),
        ],
    )
    def test_ignored_while_typing(self, controller, event):
        controller.select(3, 0)
        controller.handle_key(event)

        assert controller.position == (3, 0)
        assert not event.default_prevented

    def test_returns_detail_request(self, controller):
        controller.select(2, 0)
        request = controller.handle_key(KeyEvent("ArrowDown"))
        assert request == DetailRequest(generation=2, date="2024-01-03")


class TestBinding:
    """Tests for listener attachment."""

    def test_bind_attaches_one_listener(self, controller):
        surface = InputSurface()
        controller.bind(surface)
        controller.bind(surface)

        assert surface.listener_count == 1
        assert controller.is_bound

    def test_unbind_releases_listener(self, controller):
        surface = InputSurface()
        controller.bind(surface)
        controller.unbind()

        assert surface.listener_count == 0
        assert not controller.is_bound

    def test_rebinding_moves_listener(self, controller):
        first, second = InputSurface(), InputSurface()
        controller.bind(first)
        controller.bind(second)

        assert first.listener_count == 0
        assert second.listener_count == 1

    def test_replaced_controller_does_not_handle_keys(self, layout):
        surface = InputSurface()
        old = HeatmapController(layout)
        old.bind(surface)
        old.select(3, 0)

        new = HeatmapController(layout)
        old.unbind()
        new.bind(surface)
        new.select(3, 0)

        surface.dispatch(KeyEvent("ArrowUp"))

        assert old.position == (3, 0)
        assert new.position == (2, 0)

    def test_surfaces_are_independent(self, layout):
        a, b = InputSurface(), InputSurface()
        first, second = HeatmapController(layout), HeatmapController(layout)
        first.bind(a)
        second.bind(b)
        first.select(3, 0)
        second.select(3, 0)

        a.dispatch(KeyEvent("ArrowDown"))

        assert first.position == (4, 0)
        assert second.position == (3, 0)


class TestLoadDetails:
    """Tests for asynchronous detail loading."""

    def test_loads_commits(self, layout):
        async def fetch(day):
            return [_commit("abc", day)]

        controller = HeatmapController(layout, DetailPanel(), fetch)
        applied = asyncio.run(controller.select_and_load(3, 0))

        assert applied
        assert controller.panel.state == "loaded"
        assert [c.hash for c in controller.panel.commits] == ["abc"]

    def test_zero_count_day_skips_fetch(self, layout):
        calls = []

        async def fetch(day):
            calls.append(day)
            return []

        controller = HeatmapController(layout, DetailPanel(), fetch)
        asyncio.run(controller.select_and_load(2, 0))

        assert calls == []
        assert controller.panel.state == "empty"

    def test_fetch_failure_shows_error(self, layout):
        async def fetch(day):
            raise DetailFetchFailed("boom")

        controller = HeatmapController(layout, DetailPanel(), fetch)
        asyncio.run(controller.select_and_load(3, 0))

        assert controller.panel.state == "error"
        assert controller.panel.message == "Error loading details"
        assert controller.position == (3, 0)

    def test_stale_response_is_discarded(self, layout):
        """A slow fetch for an earlier selection must not overwrite the newer one."""

        async def scenario():
            gate = asyncio.Event()

            async def fetch(day):
                if day == "2024-01-01":
                    await gate.wait()
                return [_commit(day, day)]

            controller = HeatmapController(layout, DetailPanel(), fetch)
            first = controller.select(1, 0)
            slow = asyncio.create_task(controller.load_details(first))
            await asyncio.sleep(0)

            second = controller.select(3, 0)
            fresh_applied = await controller.load_details(second)

            gate.set()
            stale_applied = await slow
            return controller, fresh_applied, stale_applied

        controller, fresh_applied, stale_applied = asyncio.run(scenario())

        assert fresh_applied is True
        assert stale_applied is False
        assert controller.panel.date == "2024-01-03"
        assert [c.hash for c in controller.panel.commits] == ["2024-01-03"]

    def test_without_fetcher(self, controller):
        request = controller.select(3, 0)
        assert asyncio.run(controller.load_details(request)) is False
        assert controller.panel.state == "loading"
