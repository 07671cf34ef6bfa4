"""
Field Computation Engine
========================
Computes the electric field and potential around a cable fault.

The fault is modelled as a point current source in homogeneous soil
(grounding-electrode theory):

    I = U / R_f
    E = rho * I / (2 pi r)
    V = rho * I / (2 pi) * ln(r / a)

where ``a`` is the cable radius. Distances below the cable radius are
floored to it, so the field stays finite at the fault and the potential is
referenced to zero on the cable surface.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from cablefault import config
from cablefault.model.errors import FieldComputationError
from cablefault.model.results import FieldGrid, SimulationResult
from cablefault.model.state import SimulationParameters

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def build_grid(params: SimulationParameters, n_points: int = config.GRID_POINTS) -> FieldGrid:
    """
    Sample window centred on the fault, cut at both cable ends.

    Args:
        params: Parameters with an already clamped fault location.
        n_points: Samples along each axis.
    """
    x_min = max(0.0, params.fault_location - config.WINDOW_HALF_WIDTH)
    x_max = min(params.cable_length, params.fault_location + config.WINDOW_HALF_WIDTH)
    x = np.linspace(x_min, x_max, n_points)
    y = np.linspace(0.0, config.DEPTH_EXTENT, n_points)
    return FieldGrid.from_axes(x, y)


def effective_radius(
    grid: FieldGrid,
    params: SimulationParameters,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Offsets from the fault and the guarded distance.

    Returns:
        (dx, dy, r) with r floored at the cable radius.
    """
    dx = grid.X - params.fault_location
    dy = grid.Y - params.cable_depth
    r = np.sqrt(dx**2 + dy**2)

    # Prevent r < cable_radius (cable surface is the closest approach)
    r[r < params.cable_radius] = params.cable_radius
    return dx, dy, r


class FieldEngine:
    """
    Stateless calculator. One call to compute() gives one complete result.
    """

    def __init__(self, n_points: int = config.GRID_POINTS) -> None:
        self.n_points = n_points

    def compute(self, params: SimulationParameters) -> SimulationResult:
        """
        Evaluate the fault field on a fresh grid.

        Args:
            params: Input parameters. The fault location may lie outside the
                cable; the clamped value is reported in result.parameters.

        Returns:
            The new SimulationResult.

        Raises:
            InvalidParameters: Non-positive fault resistance, soil resistivity
                or cable radius. Nothing is computed in that case.
            FieldComputationError: The field contains non-finite values.
        """
        params.validate()
        params = params.clamped()

        grid = build_grid(params, self.n_points)
        dx, dy, r = effective_radius(grid, params)

        # Fault current estimation (Ohm's law)
        i_fault = params.fault_current
        source = params.soil_resistivity * i_fault / (2.0 * np.pi)

        e_magnitude = source / r
        ex = e_magnitude * (dx / r)
        ey = e_magnitude * (dy / r)
        v_potential = source * np.log(r / params.cable_radius)

        for name, array in (("E", e_magnitude), ("Ex", ex), ("Ey", ey), ("V", v_potential)):
            if not np.all(np.isfinite(array)):
                raise FieldComputationError(f"Non-finite values in {name}; check the input parameters.")

        logger.debug(
            f"Computed field: I={i_fault:.4g} A, fault at {params.fault_location:.3f} m, "
            f"E_max={float(e_magnitude.max()):.4g} V/m"
        )

        return SimulationResult(
            grid=grid,
            Ex=ex,
            Ey=ey,
            E=e_magnitude,
            V=v_potential,
            parameters=params,
        )
