"""
Simulation State (Data Model)
=============================
This module defines the data structures the application runs on.

Why is this file needed?
------------------------
1. Parameters: The numerical inputs of one computation live in an immutable
   record instead of in widget fields, so the engine never reads the GUI.
2. Interaction: The drag state machine keeps its flags in one place that only
   the controller mutates.
3. Decoupling: Views read from these objects; the Controller writes them.

Classes:
    SimulationParameters: Immutable input set of one computation.
    InteractionState: Touch mode and drag flags.
    PlotBounds: Data-space limits of the plot that receives pointer events.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, replace, fields
from enum import Enum
import logging
from typing import Any, Dict, Optional

from cablefault.model.errors import InvalidParameters

logger = logging.getLogger(__name__)


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return min(max(value, lower), upper)


@dataclass(frozen=True)
class SimulationParameters:
    """
    Inputs of the fault field model.

    Units: lengths in m, resistance in Ohm, voltage in V, resistivity in Ohm*m.
    """
    cable_length: float = 100.0
    cable_depth: float = 1.5
    cable_radius: float = 0.025
    fault_location: float = 50.0
    fault_resistance: float = 100.0
    applied_voltage: float = 11000.0
    soil_resistivity: float = 100.0

    def validate(self) -> None:
        """
        Reject inputs the model cannot handle.

        Raises:
            InvalidParameters: If fault resistance, soil resistivity or cable
                radius is not strictly positive.
        """
        offending = [
            name for name in ("fault_resistance", "soil_resistivity", "cable_radius")
            if not getattr(self, name) > 0
        ]
        if offending:
            raise InvalidParameters(
                "Fault resistance, soil resistivity and cable radius must be positive "
                f"(invalid: {', '.join(offending)})."
            )

    @property
    def fault_current(self) -> float:
        """Fault current from Ohm's law [A]."""
        return self.applied_voltage / self.fault_resistance

    def clamped(self) -> SimulationParameters:
        """Return a copy with the fault location inside the cable."""
        location = clamp(self.fault_location, 0.0, self.cable_length)
        if location == self.fault_location:
            return self
        logger.debug(f"Fault location {self.fault_location} clamped to {location}.")
        return replace(self, fault_location=location)

    def with_fault_location(self, location: float) -> SimulationParameters:
        return replace(self, fault_location=float(location))

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SimulationParameters:
        """Build from a mapping, ignoring unknown keys (e.g. HDF5 attributes)."""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, val in data.items():
            if key not in known:
                continue
            # HDF5 and MATLAB return numpy scalars / 1x1 arrays
            if hasattr(val, 'item'):
                val = val.item()
            values[key] = float(val)
        return cls(**values)


# Canonical parameter set restored by "Reset"
DEFAULT_PARAMETERS = SimulationParameters()


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass
class InteractionState:
    """
    Pointer interaction flags.
    Touch mode is orthogonal to the drag state: it decides whether pointer
    events are processed at all.
    """
    touch_mode_enabled: bool = False
    dragging: bool = False
    last_accepted_fault_location: Optional[float] = None

    @property
    def drag_state(self) -> DragState:
        return DragState.DRAGGING if self.dragging else DragState.IDLE


@dataclass(frozen=True)
class PlotBounds:
    """Axis limits of the plot that receives pointer events (data space)."""
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max
