"""Tests for Store and the state reducer."""

from datetime import timedelta

import pytest

from conftest import PERIOD
from querypanel.models import DisplayMode
from querypanel.state import Action, ActionType, PanelState, Slice, Store, reduce


class TestReduce:
    """Tests for the reducer."""

    def test_set_display_type(self):
        """Test switching display type by value."""
        state = reduce(PanelState(), Action(ActionType.SET_DISPLAY_TYPE, {"display_type": "table"}))
        assert state.display_type is DisplayMode.TABLE

    def test_set_display_type_invalid(self):
        """Test that unknown modes are rejected."""
        with pytest.raises(ValueError):
            reduce(PanelState(), Action(ActionType.SET_DISPLAY_TYPE, {"display_type": "heatmap"}))

    def test_set_period(self):
        """Test setting the period."""
        state = reduce(
            PanelState(),
            Action(ActionType.SET_PERIOD, {"start": PERIOD.start, "end": PERIOD.end}),
        )
        assert state.period == PERIOD

    def test_set_period_reversed(self):
        """Test that end before start is rejected."""
        with pytest.raises(ValueError):
            reduce(
                PanelState(),
                Action(ActionType.SET_PERIOD, {"start": PERIOD.end, "end": PERIOD.start}),
            )

    def test_set_query_is_tuple(self):
        """Test that queries are stored immutably."""
        state = reduce(PanelState(), Action(ActionType.SET_QUERY, {"query": ["up", "down"]}))
        assert state.query == ("up", "down")

    def test_set_custom_step_non_positive(self):
        """Test that a zero step is rejected."""
        with pytest.raises(ValueError, match="positive"):
            reduce(PanelState(), Action(ActionType.SET_CUSTOM_STEP, {"enabled": True, "value": 0}))

    def test_yaxis_limits_and_toggle(self):
        """Test setting and enabling y-axis limits."""
        state = reduce(PanelState(), Action(ActionType.SET_YAXIS_LIMITS, {"min": -1, "max": 5}))
        assert state.yaxis.range.min == -1
        assert state.yaxis.range.max == 5
        assert state.yaxis.enabled is False

        state = reduce(state, Action(ActionType.TOGGLE_ENABLE_YAXIS_LIMITS))
        assert state.yaxis.enabled is True
        assert state.yaxis.range.max == 5

    def test_tracing_toggle_and_set(self):
        """Test tracing flag actions."""
        state = reduce(PanelState(), Action(ActionType.TOGGLE_QUERY_TRACING))
        assert state.tracing_enabled is True
        state = reduce(state, Action(ActionType.SET_QUERY_TRACING, {"enabled": False}))
        assert state.tracing_enabled is False

    def test_toggle_nocache(self):
        """Test the nocache flag."""
        state = reduce(PanelState(), Action(ActionType.TOGGLE_NO_CACHE))
        assert state.nocache is True


class TestStoreDispatch:
    """Tests for Store notifications."""

    @pytest.mark.asyncio
    async def test_notifies_changed_slice(self):
        """Test that a subscriber of the changed slice is called."""
        store = Store()
        calls = []

        async def handler(old, new):
            calls.append((old.display_type, new.display_type))

        store.subscribe([Slice.DISPLAY_TYPE], handler)
        await store.dispatch(Action(ActionType.SET_DISPLAY_TYPE, {"display_type": DisplayMode.CODE}))

        assert calls == [(DisplayMode.CHART, DisplayMode.CODE)]

    @pytest.mark.asyncio
    async def test_does_not_notify_other_slices(self):
        """Test that subscribers are keyed narrowly."""
        store = Store()
        calls = []

        async def handler(old, new):
            calls.append(new)

        store.subscribe([Slice.PERIOD, Slice.QUERY], handler)
        await store.dispatch(Action(ActionType.SET_YAXIS_LIMITS, {"min": 0, "max": 1}))
        await store.dispatch(Action(ActionType.TOGGLE_QUERY_TRACING))

        assert calls == []

    @pytest.mark.asyncio
    async def test_unchanged_value_not_notified(self):
        """Test that dispatching the current value notifies nobody."""
        store = Store(PanelState(query=("up",)))
        calls = []

        async def handler(old, new):
            calls.append(new)

        store.subscribe([Slice.QUERY], handler)
        await store.dispatch(Action(ActionType.SET_QUERY, {"query": ["up"]}))

        assert calls == []

    @pytest.mark.asyncio
    async def test_handler_called_once_per_dispatch(self):
        """Test that a handler watching several slices runs once."""
        store = Store(PanelState(period=PERIOD))
        calls = []

        async def handler(old, new):
            calls.append(new)

        store.subscribe([Slice.PERIOD, Slice.QUERY], handler)
        await store.dispatch(
            Action(
                ActionType.SET_PERIOD,
                {"start": PERIOD.start, "end": PERIOD.end + timedelta(minutes=5)},
            )
        )

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_handler_error_does_not_propagate(self):
        """Test that errors in one handler don't affect others."""
        store = Store()
        calls = []

        async def failing_handler(old, new):
            calls.append("failing")
            raise RuntimeError("Test error")

        async def normal_handler(old, new):
            calls.append("normal")

        store.subscribe([Slice.NOCACHE], failing_handler)
        store.subscribe([Slice.NOCACHE], normal_handler)

        await store.dispatch(Action(ActionType.TOGGLE_NO_CACHE))

        assert "failing" in calls
        assert "normal" in calls
        assert store.state.nocache is True

    @pytest.mark.asyncio
    async def test_invalid_action_leaves_state(self):
        """Test that a rejected action changes nothing."""
        store = Store(PanelState(period=PERIOD))

        with pytest.raises(ValueError):
            await store.dispatch(
                Action(ActionType.SET_PERIOD, {"start": PERIOD.end, "end": PERIOD.start})
            )

        assert store.state.period == PERIOD
