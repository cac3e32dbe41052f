"""Tests for the focus timer display."""

import io

import pytest
from conftest import FakeSettings
from rich.console import Console

from pomo_cli.models.focus.plan import Phase
from pomo_cli.models.focus.state import SessionStateMachine
from pomo_cli.models.focus.ui import TimerDisplay, completion_message


def render_text(machine) -> str:
    console = Console(file=io.StringIO(), width=100, record=True, color_system=None)
    console.print(TimerDisplay().render(machine))
    return console.export_text()


class TestTimerDisplay:
    def test_idle_panel(self, machine):
        text = render_text(machine)
        assert "Idle" in text
        assert "00:03" in text
        assert "'p' resume" in text

    def test_running_focus_panel(self, machine):
        machine.start()
        text = render_text(machine)

        assert "Focus" in text
        assert "PAUSED" not in text
        assert "'p' pause" in text
        assert "round 1/2" in text
        assert "0 done" in text

    def test_paused_title(self, machine, scheduler):
        machine.start()
        scheduler.fire()
        machine.pause()

        text = render_text(machine)

        assert "PAUSED - Focus" in text
        assert "00:02" in text

    def test_plan_dots_follow_position(self, machine):
        machine.skip()
        text = render_text(machine)
        assert "● ○" in text
        assert "Short Break" in text


class TestCompletionMessage:
    def test_focus_then_waiting_break(self, machine, scheduler):
        machine.start()
        scheduler.fire(3)

        message = completion_message(Phase.FOCUS, machine)

        assert message == "Focus session complete (3s). Press 'p' to start short break."

    def test_auto_started_break(self, store, scheduler):
        m = SessionStateMachine(FakeSettings(auto_start_break=True), store, scheduler)
        m.start()
        scheduler.fire(3)

        assert completion_message(Phase.FOCUS, m).endswith("Short Break started.")

    def test_last_phase(self, store, scheduler):
        m = SessionStateMachine(FakeSettings(target_rounds=1), store, scheduler)
        m.start()
        scheduler.fire(3)

        assert completion_message(Phase.FOCUS, m) == (
            "Focus session complete (3s). All rounds finished!"
        )

    @pytest.mark.parametrize("running", [False, True])
    def test_break_over(self, store, scheduler, running):
        m = SessionStateMachine(
            FakeSettings(auto_start_break=running), store, scheduler
        )
        m.start()
        scheduler.fire(3)
        m.resume()
        scheduler.fire(2)

        message = completion_message(Phase.SHORT_BREAK, m)
        assert message.startswith("Break over.")
        assert "focus" in message.lower()
