import unittest

from focus_timer import LoopScheduler, SessionActionResult, SessionConfig, SessionController


class _FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class _RecordingAudio:
    def __init__(self):
        self.cues: list[str] = []

    def play_start(self) -> None:
        self.cues.append("start")

    def play_pause(self) -> None:
        self.cues.append("pause")

    def play_complete(self) -> None:
        self.cues.append("complete")

    def play_interval_start(self) -> None:
        self.cues.append("interval_start")


class SessionControllerTests(unittest.TestCase):
    def _build(self, **config_values) -> SessionController:
        self.clock = _FakeClock()
        self.scheduler = LoopScheduler(clock=self.clock)
        self.audio = _RecordingAudio()
        return SessionController(
            config=SessionConfig(**config_values),
            audio=self.audio,
            scheduler=self.scheduler,
        )

    def _advance(self, seconds: int) -> None:
        for _ in range(seconds):
            self.clock.now += 1.0
            self.scheduler.run_due()

    def test_initial_state_is_idle_focus_with_full_duration(self) -> None:
        controller = self._build(focus_minutes=25)

        self.assertEqual("idle", controller.state)
        self.assertEqual("focus", controller.mode)
        self.assertEqual(1500, controller.remaining_seconds)
        self.assertFalse(controller.tick_armed)

    def test_toggle_from_idle_starts_and_ticks_once_per_second(self) -> None:
        controller = self._build(focus_minutes=25)

        result = controller.toggle()
        self._advance(3)

        self.assertEqual("started", result.reason)
        self.assertEqual("running", controller.state)
        self.assertEqual(1497, controller.remaining_seconds)
        self.assertTrue(controller.tick_armed)
        self.assertEqual(["start"], self.audio.cues)

    def test_pause_stops_ticking_and_resume_continues(self) -> None:
        controller = self._build(focus_minutes=25)
        controller.toggle()
        self._advance(10)

        pause_result = controller.toggle()
        self._advance(30)
        frozen = controller.remaining_seconds
        resume_result = controller.toggle()
        self._advance(5)

        self.assertEqual("paused", pause_result.reason)
        self.assertEqual(1490, frozen)
        self.assertEqual("resumed", resume_result.reason)
        self.assertEqual(1485, controller.remaining_seconds)
        self.assertEqual(["start", "pause", "start"], self.audio.cues)

    def test_no_ticks_apply_while_not_running(self) -> None:
        controller = self._build(focus_minutes=25)

        self.assertIsNone(controller.on_tick())
        self._advance(5)

        self.assertEqual(1500, controller.remaining_seconds)
        self.assertEqual(0, self.scheduler.pending_count)

    def test_repeated_toggles_never_stack_tick_callbacks(self) -> None:
        controller = self._build(focus_minutes=25)

        controller.toggle()
        controller.toggle()
        controller.toggle()
        self.assertEqual(1, self.scheduler.pending_count)

        self._advance(1)
        self.assertEqual(1499, controller.remaining_seconds)

    def test_reset_returns_to_idle_focus_from_any_state(self) -> None:
        controller = self._build(focus_minutes=1, break_minutes=5)
        controller.toggle()
        self._advance(70)
        self.assertEqual("break", controller.mode)

        result = controller.reset()

        self.assertEqual("reset", result.action)
        self.assertEqual("idle", controller.state)
        self.assertEqual("focus", controller.mode)
        self.assertEqual(60, controller.remaining_seconds)
        self.assertFalse(controller.tick_armed)
        self.assertEqual("pause", self.audio.cues[-1])

    def test_config_edit_while_running_preserves_elapsed_time(self) -> None:
        controller = self._build(focus_minutes=25)
        controller.toggle()
        self._advance(500)
        self.assertEqual(1000, controller.remaining_seconds)

        controller.update_config(SessionConfig(focus_minutes=30))

        self.assertEqual(1300, controller.remaining_seconds)
        self.assertEqual(30, controller.config.focus_minutes)

    def test_config_edit_while_idle_recomputes_without_drift(self) -> None:
        controller = self._build(focus_minutes=25)
        new_config = SessionConfig(focus_minutes=40)

        controller.update_config(new_config)
        controller.update_config(new_config)

        self.assertEqual("idle", controller.state)
        self.assertEqual(2400, controller.remaining_seconds)

    def test_config_edit_while_paused_keeps_paused_state(self) -> None:
        controller = self._build(focus_minutes=25)
        controller.toggle()
        self._advance(100)
        controller.toggle()

        controller.update_config(SessionConfig(focus_minutes=20))

        self.assertEqual("paused", controller.state)
        self.assertEqual(1100, controller.remaining_seconds)

    def test_shrinking_duration_below_elapsed_completes_on_next_tick(self) -> None:
        controller = self._build(focus_minutes=25, break_minutes=5)
        controller.toggle()
        self._advance(600)

        controller.update_config(SessionConfig(focus_minutes=5, break_minutes=5))
        self.assertEqual(-300, controller.remaining_seconds)
        self.assertEqual("focus", controller.mode)

        self._advance(1)

        self.assertEqual("break", controller.mode)
        self.assertEqual(300, controller.remaining_seconds)
        self.assertEqual("running", controller.state)

    def test_resume_after_shrink_while_paused_completes_on_next_tick(self) -> None:
        controller = self._build(
            focus_minutes=25,
            break_minutes=5,
            auto_start_break=False,
        )
        controller.toggle()
        self._advance(400)
        controller.toggle()
        controller.update_config(
            SessionConfig(focus_minutes=1, break_minutes=5, auto_start_break=False)
        )

        controller.toggle()
        self._advance(1)

        self.assertEqual("finished", controller.state)
        self.assertEqual("break", controller.mode)
        self.assertEqual(300, controller.remaining_seconds)

    def test_completion_auto_starts_break_with_deferred_interval_cue(self) -> None:
        controller = self._build(
            focus_minutes=1,
            break_minutes=5,
            auto_start_break=True,
            auto_start_focus=False,
        )
        controller.toggle()
        self._advance(60)

        self.assertEqual("break", controller.mode)
        self.assertEqual(300, controller.remaining_seconds)
        self.assertEqual("running", controller.state)
        self.assertEqual(["start", "complete"], self.audio.cues)

        self._advance(1)

        self.assertEqual(["start", "complete", "interval_start"], self.audio.cues)
        self.assertEqual(299, controller.remaining_seconds)

    def test_completion_without_auto_start_waits_for_acknowledgement(self) -> None:
        controller = self._build(
            focus_minutes=1,
            break_minutes=5,
            auto_start_break=False,
        )
        controller.toggle()
        self._advance(60)

        self.assertEqual("finished", controller.state)
        self.assertEqual("break", controller.mode)
        self.assertEqual(300, controller.remaining_seconds)
        self.assertFalse(controller.tick_armed)

        self._advance(10)
        self.assertEqual(300, controller.remaining_seconds)

        result = controller.toggle()

        self.assertEqual("acknowledged", result.reason)
        self.assertEqual("running", controller.state)
        self.assertEqual("break", controller.mode)
        self.assertEqual(300, controller.remaining_seconds)
        self.assertEqual("start", self.audio.cues[-1])

    def test_break_completion_returns_to_focus(self) -> None:
        controller = self._build(focus_minutes=1, break_minutes=1, auto_start_focus=True)
        controller.toggle()
        self._advance(120)

        self.assertEqual("focus", controller.mode)
        self.assertEqual(60, controller.remaining_seconds)
        self.assertEqual("running", controller.state)
        self.assertNotIn("interval_start", self.audio.cues[-1:])

    def test_zero_break_duration_never_enters_break(self) -> None:
        controller = self._build(focus_minutes=1, break_minutes=0, auto_start_focus=True)
        observed_modes: list[str] = []
        controller.add_listener(lambda result: observed_modes.append(result.snapshot.mode))

        controller.toggle()
        self._advance(200)

        self.assertTrue(observed_modes)
        self.assertNotIn("break", observed_modes)
        self.assertEqual("running", controller.state)
        self.assertNotIn("interval_start", self.audio.cues)

    def test_disabling_breaks_restages_focus_while_awaiting_acknowledgement(self) -> None:
        controller = self._build(focus_minutes=1, break_minutes=5, auto_start_break=False)
        controller.toggle()
        self._advance(60)
        self.assertEqual(("finished", "break"), (controller.state, controller.mode))

        controller.update_config(
            SessionConfig(focus_minutes=1, break_minutes=0, auto_start_break=False)
        )

        self.assertEqual("finished", controller.state)
        self.assertEqual("focus", controller.mode)
        self.assertEqual(60, controller.remaining_seconds)

        result = controller.toggle()
        self._advance(1)

        self.assertEqual("acknowledged", result.reason)
        self.assertEqual("focus", controller.mode)
        self.assertEqual(59, controller.remaining_seconds)

    def test_disabling_breaks_restages_focus_while_break_is_paused(self) -> None:
        controller = self._build(focus_minutes=1, break_minutes=5)
        controller.toggle()
        self._advance(160)
        controller.toggle()
        self.assertEqual(("paused", "break", 200), _state(controller))

        controller.update_config(SessionConfig(focus_minutes=1, break_minutes=0))

        self.assertEqual(("paused", "focus", 60), _state(controller))
        self.assertEqual(60, controller.display_seconds)

        controller.toggle()
        self._advance(1)
        self.assertEqual(("running", "focus", 59), _state(controller))

    def test_muting_before_deferred_interval_cue_silences_it(self) -> None:
        controller = self._build(focus_minutes=1, break_minutes=5)
        controller.toggle()
        self._advance(60)

        controller.update_config(SessionConfig(focus_minutes=1, break_minutes=5, sound_enabled=False))
        self._advance(2)

        self.assertEqual(["start", "complete"], self.audio.cues)
        self.assertEqual("break", controller.mode)

    def test_count_up_display_shows_elapsed_seconds(self) -> None:
        controller = self._build(focus_minutes=25, count_up_display=True)
        controller.toggle()
        self._advance(600)

        self.assertEqual(900, controller.remaining_seconds)
        self.assertEqual(600, controller.display_seconds)
        self.assertEqual(600, controller.snapshot().display_seconds)

    def test_next_session_preview_follows_break_skip_rule(self) -> None:
        controller = self._build(focus_minutes=25, break_minutes=5)
        self.assertEqual(("break", 300), _next(controller))

        controller.update_config(SessionConfig(focus_minutes=25, break_minutes=0))
        self.assertEqual(("focus", 1500), _next(controller))

    def test_next_session_preview_from_break_is_focus(self) -> None:
        controller = self._build(focus_minutes=1, break_minutes=5, auto_start_break=False)
        controller.toggle()
        self._advance(60)

        self.assertEqual("break", controller.mode)
        self.assertEqual(("focus", 60), _next(controller))

    def test_sound_disabled_suppresses_all_cues(self) -> None:
        controller = self._build(focus_minutes=1, break_minutes=5, sound_enabled=False)
        controller.toggle()
        self._advance(62)
        controller.toggle()
        controller.reset()

        self.assertEqual([], self.audio.cues)

    def test_pausing_right_after_auto_started_break_cancels_interval_cue(self) -> None:
        controller = self._build(focus_minutes=1, break_minutes=5)
        controller.toggle()
        self._advance(60)

        controller.toggle()
        self._advance(3)

        self.assertEqual(["start", "complete", "pause"], self.audio.cues)

    def test_reset_right_after_auto_started_break_cancels_interval_cue(self) -> None:
        controller = self._build(focus_minutes=1, break_minutes=5)
        controller.toggle()
        self._advance(60)

        controller.reset()
        self._advance(3)

        self.assertNotIn("interval_start", self.audio.cues)
        self.assertEqual(0, self.scheduler.pending_count)

    def test_listeners_receive_every_transition(self) -> None:
        controller = self._build(focus_minutes=1, break_minutes=5, auto_start_break=False)
        results: list[SessionActionResult] = []
        controller.add_listener(results.append)

        controller.toggle()
        self._advance(60)

        actions = [result.action for result in results]
        self.assertEqual("toggle", actions[0])
        self.assertEqual(59, actions.count("tick"))
        self.assertEqual("completed", actions[-1])
        self.assertEqual("awaiting_acknowledgement", results[-1].reason)
        self.assertTrue(results[-1].snapshot.awaiting_acknowledgement)


def _state(controller: SessionController) -> tuple[str, str, int]:
    return controller.state, controller.mode, controller.remaining_seconds


def _next(controller: SessionController) -> tuple[str, int]:
    upcoming = controller.next_session
    return upcoming.mode, upcoming.duration_seconds


if __name__ == "__main__":
    unittest.main()
