"""
Interaction Controller
======================
Decides when, and with which parameters, the field is recomputed.

Why is this file needed?
------------------------
1. State machine: Pointer events move the controller between IDLE and
   DRAGGING. Touch mode gates whether pointer events are processed at all.
2. Debounce: While dragging, sub-millimetre pointer jitter must not trigger
   a recomputation storm.
3. Event boundary: Every failure of the engine or of the save action is
   caught here and forwarded to the error channel. The GUI event loop never
   sees an exception.

The controller has no Qt dependency. The view injects plain callables:
a bounds provider for the plot receiving pointer events, and listeners for
new results, cleared results, errors, parameter changes and cursor changes.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from cablefault import config
from cablefault.controller.engine import FieldEngine
from cablefault.model.errors import FaultFieldError, NoDataAvailable
from cablefault.model.io import IOManager
from cablefault.model.results import SimulationResult
from cablefault.model.state import (
    DEFAULT_PARAMETERS, DragState, InteractionState, PlotBounds, SimulationParameters, clamp
)

logger = logging.getLogger(__name__)

BoundsProvider = Callable[[], Optional[PlotBounds]]
ErrorListener = Callable[[str, str], None]


class InteractionController:
    def __init__(
        self,
        engine: Optional[FieldEngine] = None,
        parameters: SimulationParameters = DEFAULT_PARAMETERS,
        bounds_provider: Optional[BoundsProvider] = None,
        parameters_provider: Optional[Callable[[], SimulationParameters]] = None,
        on_result: Optional[Callable[[SimulationResult], None]] = None,
        on_cleared: Optional[Callable[[], None]] = None,
        on_error: Optional[ErrorListener] = None,
        on_parameters_changed: Optional[Callable[[SimulationParameters], None]] = None,
        on_cursor_changed: Optional[Callable[[bool], None]] = None,
        debounce_threshold: float = config.DEBOUNCE_THRESHOLD,
    ) -> None:
        self.engine = engine or FieldEngine()
        self.parameters: SimulationParameters = parameters
        self.state = InteractionState()
        self.result: Optional[SimulationResult] = None
        self.debounce_threshold = debounce_threshold

        self._bounds_provider = bounds_provider
        self._parameters_provider = parameters_provider
        self._on_result = on_result
        self._on_cleared = on_cleared
        self._on_error = on_error
        self._on_parameters_changed = on_parameters_changed
        self._on_cursor_changed = on_cursor_changed

    # --- PROPERTIES ---

    @property
    def drag_state(self) -> DragState:
        return self.state.drag_state

    @property
    def has_result(self) -> bool:
        return self.result is not None

    # --- TOUCH MODE ---

    def enable_touch_mode(self) -> None:
        """Start routing pointer events. Does not compute anything."""
        self.state.touch_mode_enabled = True
        logger.debug("Touch mode enabled.")
        self._set_cursor(True)

    def disable_touch_mode(self) -> None:
        """Stop routing pointer events and abandon any drag in progress."""
        self.state.touch_mode_enabled = False
        self.state.dragging = False
        logger.debug("Touch mode disabled.")
        self._set_cursor(False)

    # --- POINTER EVENTS ---

    def pointer_down(self, x: float, y: float) -> bool:
        """
        Press inside the plot: start dragging and move the fault there.

        Returns:
            True if a computation was triggered.
        """
        if not self.state.touch_mode_enabled:
            return False
        if not self._inside_plot(x, y):
            logger.debug(f"Pointer down outside plot at ({x:.3f}, {y:.3f}) ignored.")
            return False

        self.state.dragging = True
        logger.debug("Drag started.")
        self._accept_fault_location(x)
        return True

    def pointer_motion(self, x: float, y: float) -> bool:
        """
        Move while dragging: follow the pointer, ignoring jitter.

        Returns:
            True if a computation was triggered.
        """
        if not (self.state.touch_mode_enabled and self.state.dragging):
            return False
        if not self._inside_plot(x, y):
            return False

        candidate = clamp(x, 0.0, self.parameters.cable_length)
        last = self.state.last_accepted_fault_location
        if last is not None and abs(candidate - last) <= self.debounce_threshold:
            return False

        self._accept_fault_location(x)
        return True

    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> None:
        """Release: end the drag. No final computation is forced."""
        if not self.state.touch_mode_enabled:
            return
        if self.state.dragging:
            logger.debug("Drag finished.")
        self.state.dragging = False

    # --- ACTIONS ---

    def run(self, parameters: Optional[SimulationParameters] = None) -> Optional[SimulationResult]:
        """
        Compute with the given input snapshot (or the active parameters).

        Returns:
            The new result, or None if the computation failed.
        """
        if parameters is not None:
            self.parameters = parameters
        return self._compute()

    def reset_defaults(self) -> None:
        """Restore the canonical parameters and drop the current result."""
        self.parameters = DEFAULT_PARAMETERS
        self.state.last_accepted_fault_location = None
        self.result = None
        logger.info("Parameters reset to defaults.")
        if self._on_parameters_changed:
            self._on_parameters_changed(self.parameters)
        if self._on_cleared:
            self._on_cleared()

    def require_result(self) -> SimulationResult:
        """
        Raises:
            NoDataAvailable: Nothing has been computed yet.
        """
        if self.result is None:
            raise NoDataAvailable()
        return self.result

    def save_data(self, filepath: str) -> bool:
        """
        Persist the current result.

        Returns:
            True on success. Failures are reported through the error channel.
        """
        try:
            IOManager.save_result(self.result, filepath)
        except NoDataAvailable as e:
            self._report(e.title, str(e))
            return False
        except Exception as e:
            logger.exception(f"Saving to '{filepath}' failed.")
            self._report("Save Error", f"Could not save data:\n{e}")
            return False
        return True

    # --- INTERNALS ---

    def _inside_plot(self, x: float, y: float) -> bool:
        if self._bounds_provider is None:
            return False
        bounds = self._bounds_provider()
        return bounds is not None and bounds.contains(x, y)

    def _accept_fault_location(self, x: float) -> None:
        # Pick up edits made in the input fields since the last computation
        if self._parameters_provider is not None:
            self.parameters = self._parameters_provider()
        location = clamp(x, 0.0, self.parameters.cable_length)
        self.state.last_accepted_fault_location = location
        self.parameters = self.parameters.with_fault_location(location)
        self._compute()

    def _compute(self) -> Optional[SimulationResult]:
        """Run the engine and publish. Failures leave the drag state untouched."""
        try:
            result = self.engine.compute(self.parameters)
        except FaultFieldError as e:
            logger.warning(f"Computation rejected: {e}")
            self._report(e.title, str(e))
            return None
        except Exception as e:
            logger.exception("Unexpected error during computation.")
            self._report("Error", f"Error running simulation: {e}")
            return None

        self.result = result
        # Keep inputs in sync with the clamped fault location
        if result.parameters != self.parameters:
            self.parameters = result.parameters
        if self._on_parameters_changed:
            self._on_parameters_changed(self.parameters)
        if self._on_result:
            self._on_result(result)
        return result

    def _report(self, title: str, message: str) -> None:
        if self._on_error:
            self._on_error(title, message)
        else:
            logger.error(f"{title}: {message}")

    def _set_cursor(self, touch_enabled: bool) -> None:
        # Cosmetic only: a failing cursor hook must not break touch mode
        if self._on_cursor_changed is None:
            return
        try:
            self._on_cursor_changed(touch_enabled)
        except Exception as e:
            logger.warning(f"Could not change cursor: {e}")
