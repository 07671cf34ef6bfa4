from dataclasses import replace
from typing import List, Optional, Tuple

import pytest

from cablefault.controller.engine import FieldEngine
from cablefault.controller.interaction import InteractionController
from cablefault.model.errors import NoDataAvailable
from cablefault.model.results import SimulationResult
from cablefault.model.state import DEFAULT_PARAMETERS, DragState, PlotBounds, SimulationParameters

PLOT_BOUNDS = PlotBounds(0.0, 100.0, 0.0, 3.0)


class CountingEngine(FieldEngine):
    def __init__(self) -> None:
        super().__init__()
        self.calls: List[SimulationParameters] = []

    def compute(self, params: SimulationParameters) -> SimulationResult:
        self.calls.append(params)
        return super().compute(params)


class BrokenEngine(FieldEngine):
    def compute(self, params: SimulationParameters) -> SimulationResult:
        raise RuntimeError("boom")


class Recorder:
    """Collects everything the controller publishes."""

    def __init__(self) -> None:
        self.results: List[SimulationResult] = []
        self.errors: List[Tuple[str, str]] = []
        self.parameters: List[SimulationParameters] = []
        self.cleared: int = 0
        self.cursor: List[bool] = []

    def on_result(self, result: SimulationResult) -> None:
        self.results.append(result)

    def on_error(self, title: str, message: str) -> None:
        self.errors.append((title, message))

    def on_parameters_changed(self, params: SimulationParameters) -> None:
        self.parameters.append(params)

    def on_cleared(self) -> None:
        self.cleared += 1

    def on_cursor_changed(self, touch_enabled: bool) -> None:
        self.cursor.append(touch_enabled)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def engine() -> CountingEngine:
    return CountingEngine()


def make_controller(
    engine: FieldEngine,
    recorder: Recorder,
    parameters: SimulationParameters = DEFAULT_PARAMETERS,
    bounds: Optional[PlotBounds] = PLOT_BOUNDS,
    **kwargs,
) -> InteractionController:
    return InteractionController(
        engine=engine,
        parameters=parameters,
        bounds_provider=lambda: bounds,
        on_result=recorder.on_result,
        on_cleared=recorder.on_cleared,
        on_error=recorder.on_error,
        on_parameters_changed=recorder.on_parameters_changed,
        on_cursor_changed=recorder.on_cursor_changed,
        **kwargs,
    )


@pytest.fixture
def controller(engine, recorder) -> InteractionController:
    return make_controller(engine, recorder)


# --- TOUCH MODE ---

def test_initial_state(controller):
    assert controller.drag_state is DragState.IDLE
    assert controller.state.touch_mode_enabled is False
    assert controller.state.last_accepted_fault_location is None
    assert controller.has_result is False


def test_enable_touch_mode_does_not_compute(controller, engine, recorder):
    controller.enable_touch_mode()

    assert controller.state.touch_mode_enabled is True
    assert engine.calls == []
    assert recorder.cursor == [True]


def test_pointer_events_ignored_without_touch_mode(controller, engine):
    assert controller.pointer_down(52.0, 1.0) is False
    controller.pointer_up()

    assert controller.drag_state is DragState.IDLE
    assert engine.calls == []


def test_disable_touch_mode_abandons_drag(controller, engine, recorder):
    controller.enable_touch_mode()
    controller.pointer_down(52.0, 1.0)

    controller.disable_touch_mode()

    assert controller.drag_state is DragState.IDLE
    assert controller.state.touch_mode_enabled is False
    assert len(engine.calls) == 1
    assert recorder.cursor == [True, False]
    # Motion after disabling is ignored
    assert controller.pointer_motion(60.0, 1.0) is False


def test_failing_cursor_hook_is_ignored(engine, recorder):
    def broken_cursor(_):
        raise RuntimeError("no cursor support")

    controller = make_controller(engine, recorder)
    controller._on_cursor_changed = broken_cursor

    controller.enable_touch_mode()

    assert controller.state.touch_mode_enabled is True
    assert recorder.errors == []


# --- POINTER DOWN ---

def test_pointer_down_inside_plot_starts_drag(controller, engine, recorder):
    controller.enable_touch_mode()

    assert controller.pointer_down(52.0, 1.0) is True

    assert controller.drag_state is DragState.DRAGGING
    assert controller.parameters.fault_location == 52.0
    assert controller.state.last_accepted_fault_location == 52.0
    assert len(engine.calls) == 1
    assert recorder.results[-1].fault_location == 52.0
    assert recorder.parameters[-1].fault_location == 52.0


def test_pointer_down_outside_plot_is_ignored(controller, engine, recorder):
    controller.enable_touch_mode()

    assert controller.pointer_down(-5.0, 1.0) is False

    assert controller.drag_state is DragState.IDLE
    assert controller.parameters.fault_location == DEFAULT_PARAMETERS.fault_location
    assert engine.calls == []
    assert recorder.results == []


def test_pointer_down_without_known_bounds_is_ignored(engine, recorder):
    controller = make_controller(engine, recorder, bounds=None)
    controller.enable_touch_mode()

    assert controller.pointer_down(52.0, 1.0) is False
    assert engine.calls == []


def test_pointer_down_clamps_to_cable(engine, recorder):
    controller = make_controller(engine, recorder, bounds=PlotBounds(-10.0, 110.0, 0.0, 3.0))
    controller.enable_touch_mode()

    controller.pointer_down(105.0, 1.0)

    assert controller.parameters.fault_location == 100.0
    assert engine.calls[-1].fault_location == 100.0


def test_pointer_down_on_plot_edge_counts_as_inside(controller, engine):
    controller.enable_touch_mode()

    assert controller.pointer_down(100.0, 3.0) is True
    assert len(engine.calls) == 1


# --- POINTER MOTION ---

def test_motion_without_drag_is_ignored(controller, engine):
    controller.enable_touch_mode()

    assert controller.pointer_motion(60.0, 1.0) is False
    assert engine.calls == []


def test_motion_within_threshold_does_not_recompute(controller, engine):
    controller.enable_touch_mode()
    controller.pointer_down(52.0, 1.0)

    assert controller.pointer_motion(52.0005, 1.0) is False
    assert controller.pointer_motion(51.9991, 1.2) is False

    assert len(engine.calls) == 1
    assert controller.parameters.fault_location == 52.0


def test_motion_beyond_threshold_recomputes(controller, engine, recorder):
    controller.enable_touch_mode()
    controller.pointer_down(52.0, 1.0)

    assert controller.pointer_motion(53.5, 1.0) is True

    assert len(engine.calls) == 2
    assert controller.parameters.fault_location == 53.5
    assert controller.state.last_accepted_fault_location == 53.5
    assert recorder.results[-1].fault_location == 53.5


def test_threshold_is_measured_from_last_accepted_location(controller, engine):
    controller.enable_touch_mode()
    controller.pointer_down(52.0, 1.0)

    # Each step is small, the accumulated shift is not
    assert controller.pointer_motion(52.0006, 1.0) is False
    assert controller.pointer_motion(52.0012, 1.0) is True
    assert len(engine.calls) == 2


def test_motion_outside_plot_is_ignored(controller, engine):
    controller.enable_touch_mode()
    controller.pointer_down(52.0, 1.0)

    assert controller.pointer_motion(60.0, 4.0) is False
    assert controller.drag_state is DragState.DRAGGING
    assert len(engine.calls) == 1


# --- POINTER UP ---

def test_pointer_up_ends_drag_without_compute(controller, engine):
    controller.enable_touch_mode()
    controller.pointer_down(52.0, 1.0)

    controller.pointer_up(60.0, 1.0)

    assert controller.drag_state is DragState.IDLE
    assert len(engine.calls) == 1
    assert controller.pointer_motion(60.0, 1.0) is False


# --- FAILURES ---

def test_invalid_parameters_during_drag_keep_dragging(engine, recorder):
    bad = replace(DEFAULT_PARAMETERS, fault_resistance=0.0)
    controller = make_controller(engine, recorder, parameters=bad)
    controller.enable_touch_mode()

    assert controller.pointer_down(52.0, 1.0) is True
    assert controller.drag_state is DragState.DRAGGING
    assert controller.pointer_motion(55.0, 1.0) is True
    assert controller.drag_state is DragState.DRAGGING

    assert controller.result is None
    assert recorder.results == []
    assert len(recorder.errors) == 2
    assert recorder.errors[0][0] == "Invalid Parameters"


def test_unexpected_engine_failure_is_reported(recorder):
    controller = make_controller(BrokenEngine(), recorder)

    assert controller.run() is None

    assert recorder.errors == [("Error", "Error running simulation: boom")]
    assert controller.result is None


def test_failed_compute_keeps_previous_result(engine, recorder):
    controller = make_controller(engine, recorder)
    first = controller.run()

    controller.run(replace(DEFAULT_PARAMETERS, soil_resistivity=-1.0))

    assert controller.result is first
    assert recorder.errors[-1][0] == "Invalid Parameters"


def test_errors_are_logged_without_listener(engine, caplog):
    controller = InteractionController(engine=engine, parameters=replace(DEFAULT_PARAMETERS, cable_radius=0.0))

    assert controller.run() is None
    assert "Invalid Parameters" in caplog.text


# --- RUN / RESET / SAVE ---

def test_run_publishes_clamped_parameters(controller, recorder):
    result = controller.run(replace(DEFAULT_PARAMETERS, fault_location=150.0))

    assert result is controller.result
    assert result.fault_location == 100.0
    assert controller.parameters.fault_location == 100.0
    assert recorder.parameters[-1].fault_location == 100.0


def test_drag_picks_up_edited_inputs(engine, recorder):
    edited = replace(DEFAULT_PARAMETERS, applied_voltage=22000.0)
    controller = make_controller(engine, recorder, parameters_provider=lambda: edited)
    controller.enable_touch_mode()

    controller.pointer_down(52.0, 1.0)

    assert engine.calls[-1].applied_voltage == 22000.0
    assert engine.calls[-1].fault_location == 52.0


def test_reset_defaults_discards_result(controller, recorder):
    controller.run(replace(DEFAULT_PARAMETERS, cable_depth=2.0, fault_location=10.0))

    controller.reset_defaults()

    assert controller.parameters == DEFAULT_PARAMETERS
    assert controller.result is None
    assert recorder.cleared == 1
    assert recorder.parameters[-1] == DEFAULT_PARAMETERS


def test_save_without_data_reports_no_data(controller, recorder, tmp_path):
    target = tmp_path / "field.h5"

    assert controller.save_data(str(target)) is False

    assert recorder.errors == [("No Data", "No data available. Run the simulation first.")]
    assert not target.exists()
    with pytest.raises(NoDataAvailable):
        controller.require_result()


def test_save_after_run(controller, recorder, tmp_path):
    controller.run()
    target = tmp_path / "field.h5"

    assert controller.save_data(str(target)) is True
    assert target.exists()
    assert recorder.errors == []


def test_save_failure_is_reported(controller, recorder, tmp_path):
    controller.run()
    target = tmp_path / "missing_dir" / "field.h5"

    assert controller.save_data(str(target)) is False
    assert recorder.errors[-1][0] == "Save Error"
