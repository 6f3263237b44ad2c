"""Tests for view selection."""

import itertools

import pytest

from conftest import PERIOD, make_trace
from querypanel.models import DisplayMode, QueryResultBundle
from querypanel.views import (
    MAIN_VIEW_BUILDERS,
    TRACING_EMPTY_MESSAGE,
    ChartView,
    CodeView,
    TableView,
    ViewInputs,
    select_view,
)


def inputs(**overrides) -> ViewInputs:
    defaults = dict(
        display_mode=DisplayMode.CHART,
        bundle=QueryResultBundle(),
        period=PERIOD,
        tracing_enabled=False,
        tracing_visible=False,
        tracing_history=[],
    )
    defaults.update(overrides)
    return ViewInputs(**defaults)


class TestMainView:
    """Tests for main view gating."""

    def test_every_mode_has_builder(self):
        """Test that the mode mapping is total."""
        assert set(MAIN_VIEW_BUILDERS) == set(DisplayMode)

    def test_loading_chart_without_data(self):
        """Test that only the loading indicator shows while the first fetch runs."""
        view = select_view(inputs(bundle=QueryResultBundle(is_loading=True)))

        assert view.loading is True
        assert view.error is None
        assert view.main is None
        assert view.tracing is None

    def test_chart_requires_period(self):
        """Test that graph data alone is not enough for the chart."""
        bundle = QueryResultBundle(graph_data=[{"values": []}])

        assert select_view(inputs(bundle=bundle, period=None)).main is None
        assert isinstance(select_view(inputs(bundle=bundle)).main, ChartView)

    def test_chart_ignores_live_data(self):
        """Test that chart mode needs graph data, not live data."""
        view = select_view(inputs(bundle=QueryResultBundle(live_data=[{"a": 1}])))
        assert view.main is None

    def test_table_and_code_use_live_data(self):
        """Test that table and code render live data."""
        bundle = QueryResultBundle(live_data=[{"a": 1}])

        table = select_view(inputs(display_mode=DisplayMode.TABLE, bundle=bundle)).main
        code = select_view(inputs(display_mode=DisplayMode.CODE, bundle=bundle)).main

        assert isinstance(table, TableView)
        assert table.data == [{"a": 1}]
        assert isinstance(code, CodeView)
        assert code.data == [{"a": 1}]

    def test_loading_keeps_main_view(self):
        """Test that stale content stays mounted under the loading indicator."""
        bundle = QueryResultBundle(is_loading=True, live_data=[{"a": 1}])
        view = select_view(inputs(display_mode=DisplayMode.TABLE, bundle=bundle))

        assert view.loading is True
        assert isinstance(view.main, TableView)

    def test_error_is_additive(self):
        """Test that an error banner does not suppress the main view."""
        bundle = QueryResultBundle(error="timeout", live_data=[])
        view = select_view(inputs(display_mode=DisplayMode.CODE, bundle=bundle))

        assert view.error == "timeout"
        assert isinstance(view.main, CodeView)

    def test_at_most_one_main_view(self):
        """Test that every mode/data combination mounts the expected single view."""
        expected = {
            DisplayMode.CHART: ChartView,
            DisplayMode.TABLE: TableView,
            DisplayMode.CODE: CodeView,
        }
        for mode, graph, live, period in itertools.product(
            DisplayMode, [None, []], [None, []], [None, PERIOD]
        ):
            bundle = QueryResultBundle(graph_data=graph, live_data=live)
            main = select_view(inputs(display_mode=mode, bundle=bundle, period=period)).main
            if mode is DisplayMode.CHART:
                available = graph is not None and period is not None
            else:
                available = live is not None
            if available:
                assert type(main) is expected[mode]
                assert main.kind is mode
            else:
                assert main is None


class TestTracingView:
    """Tests for the tracing view."""

    def test_table_with_tracing(self):
        """Test table view with visible tracing shows the history."""
        record = make_trace("record1")
        view = select_view(
            inputs(
                display_mode=DisplayMode.TABLE,
                bundle=QueryResultBundle(live_data=[{"rows": [{"a": 1}]}]),
                tracing_enabled=True,
                tracing_visible=True,
                tracing_history=[record],
            )
        )

        assert isinstance(view.main, TableView)
        assert view.main.data == [{"rows": [{"a": 1}]}]
        assert view.tracing is not None
        assert view.tracing.records == [record]

    def test_empty_history_shows_message(self):
        """Test that an empty history still mounts the tracing view."""
        view = select_view(
            inputs(
                bundle=QueryResultBundle(graph_data=[]),
                tracing_enabled=True,
                tracing_visible=True,
            )
        )

        assert view.tracing is not None
        assert view.tracing.is_empty
        assert view.tracing.empty_message == TRACING_EMPTY_MESSAGE

    def test_code_mode_never_traces(self):
        """Test that code mode hides tracing and its button."""
        view = select_view(
            inputs(
                display_mode=DisplayMode.CODE,
                bundle=QueryResultBundle(live_data=[]),
                tracing_enabled=True,
                tracing_visible=True,
                tracing_history=[make_trace("r")],
            )
        )

        assert view.tracing is None
        assert view.show_tracing_button is False

    @pytest.mark.parametrize("enabled,visible", [(True, False), (False, True), (False, False)])
    def test_tracing_needs_enabled_and_visible(self, enabled, visible):
        """Test that tracing shows only when enabled and visible."""
        view = select_view(
            inputs(
                bundle=QueryResultBundle(graph_data=[]),
                tracing_enabled=enabled,
                tracing_visible=visible,
                tracing_history=[make_trace("r")],
            )
        )
        assert view.tracing is None

    def test_toolbar_flags(self):
        """Test tracing button and graph settings visibility."""
        chart = select_view(inputs(tracing_enabled=True))
        table = select_view(inputs(display_mode=DisplayMode.TABLE, tracing_enabled=True))

        assert chart.show_tracing_button is True
        assert chart.show_graph_settings is True
        assert table.show_tracing_button is True
        assert table.show_graph_settings is False
        assert select_view(inputs()).show_tracing_button is False
