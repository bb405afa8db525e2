"""Tests for the click-to-connect state machine."""

from unittest.mock import MagicMock

import pytest

from onemap.connection_mode import (
    AWAITING_SOURCE,
    IDLE,
    ConnectionModeController,
    ConnectionPhase,
    awaiting_target,
)


@pytest.fixture
def connect():
    return MagicMock()


@pytest.fixture
def controller(connect):
    return ConnectionModeController(connect)


class TestConnectionModeController:

    def test_starts_idle(self, controller):
        assert controller.state == IDLE
        assert controller.is_active is False

    def test_toggle_on_and_off(self, controller):
        assert controller.toggle() == AWAITING_SOURCE
        assert controller.toggle() == IDLE

    def test_toggle_cancels_pending_target(self, controller, connect):
        controller.toggle()
        controller.node_clicked("a")
        assert controller.toggle() == IDLE
        connect.assert_not_called()

    def test_click_in_idle_is_ignored(self, controller, connect):
        assert controller.node_clicked("a") == IDLE
        connect.assert_not_called()

    def test_round_trip_creates_one_connection(self, controller, connect):
        controller.toggle()
        assert controller.node_clicked("a") == awaiting_target("a")
        assert controller.node_clicked("b") == IDLE
        connect.assert_called_once_with("a", "b")

    def test_clicking_source_again_changes_nothing(self, controller, connect):
        controller.toggle()
        controller.node_clicked("a")
        assert controller.node_clicked("a") == awaiting_target("a")
        connect.assert_not_called()

    def test_begin_from_skips_source_pick(self, controller, connect):
        state = controller.begin_from("a")
        assert state.phase is ConnectionPhase.AWAITING_TARGET
        assert state.source_id == "a"
        controller.node_clicked("c")
        connect.assert_called_once_with("a", "c")
        assert controller.state == IDLE

    def test_returns_to_idle_when_connect_raises(self, controller, connect):
        connect.side_effect = RuntimeError("boom")
        controller.toggle()
        controller.node_clicked("a")
        with pytest.raises(RuntimeError):
            controller.node_clicked("b")
        assert controller.state == IDLE

    def test_state_change_callback(self, controller):
        seen = []
        controller.set_on_state_change(seen.append)
        controller.toggle()
        controller.node_clicked("a")
        controller.node_clicked("a")  # no transition
        controller.node_clicked("b")
        assert [s.phase for s in seen] == [
            ConnectionPhase.AWAITING_SOURCE,
            ConnectionPhase.AWAITING_TARGET,
            ConnectionPhase.IDLE,
        ]
