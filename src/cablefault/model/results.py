"""
Field Results
=============
Containers for the sampled grid and the computed field.

A SimulationResult is created in one piece by the engine and never modified
afterwards: all arrays are flagged read-only, a new computation produces a
new object. Views and the save action can therefore hold on to a result
without copying it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, TYPE_CHECKING

import numpy as np

from cablefault import config
from cablefault.model.state import SimulationParameters

if TYPE_CHECKING:
    import numpy.typing as npt


def _freeze(array: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class FieldGrid:
    """
    Uniform rectangular sample of the cross-section.
    Rows of X and Y index depth (y), columns index distance along the cable (x).
    """
    x: npt.NDArray[np.float64]
    y: npt.NDArray[np.float64]
    X: npt.NDArray[np.float64]
    Y: npt.NDArray[np.float64]

    @classmethod
    def from_axes(cls, x: npt.NDArray[np.float64], y: npt.NDArray[np.float64]) -> FieldGrid:
        X, Y = np.meshgrid(x, y)
        return cls(x=_freeze(x), y=_freeze(y), X=_freeze(X), Y=_freeze(Y))

    @property
    def shape(self) -> Tuple[int, int]:
        return self.X.shape

    @property
    def x_range(self) -> Tuple[float, float]:
        return float(self.x[0]), float(self.x[-1])

    @property
    def y_range(self) -> Tuple[float, float]:
        return float(self.y[0]), float(self.y[-1])


@dataclass(frozen=True)
class SimulationResult:
    """Field components, magnitude and potential sampled on a FieldGrid."""
    grid: FieldGrid
    Ex: npt.NDArray[np.float64]
    Ey: npt.NDArray[np.float64]
    E: npt.NDArray[np.float64]
    V: npt.NDArray[np.float64]
    parameters: SimulationParameters

    def __post_init__(self) -> None:
        for array in (self.Ex, self.Ey, self.E, self.V):
            if array.shape != self.grid.shape:
                raise ValueError(f"Array shape {array.shape} does not match grid {self.grid.shape}.")
            _freeze(array)

    # --- SHORTCUTS ---

    @property
    def fault_location(self) -> float:
        """Effective (clamped) fault location [m]."""
        return self.parameters.fault_location

    @property
    def cable_depth(self) -> float:
        return self.parameters.cable_depth

    @property
    def fault_current(self) -> float:
        return self.parameters.fault_current

    # --- DERIVED VIEWS ---

    def axial_profile(self) -> Tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], int]:
        """
        Field magnitude along the cable.

        Returns:
            (x, E_row, fault_col): the x axis, the magnitude on the grid row
            closest to the cable depth and the column closest to the fault.
        """
        row = int(np.argmin(np.abs(self.grid.y - self.cable_depth)))
        col = int(np.argmin(np.abs(self.grid.x - self.fault_location)))
        return self.grid.x, self.E[row, :], col

    def subsampled(
        self,
        max_columns: int = config.QUIVER_MAX_COLUMNS,
        max_rows: int = config.QUIVER_MAX_ROWS,
    ) -> Tuple[npt.NDArray[np.float64], ...]:
        """
        Thin out the grid so vector arrows are not too dense.

        Returns:
            (X, Y, Ex, Ey) taken every n-th column/row.
        """
        n_rows, n_cols = self.grid.shape
        step_x = max(1, n_cols // max_columns)
        step_y = max(1, n_rows // max_rows)
        sl = (slice(None, None, step_y), slice(None, None, step_x))
        return self.grid.X[sl], self.grid.Y[sl], self.Ex[sl], self.Ey[sl]

    def as_arrays(self) -> Dict[str, npt.NDArray[np.float64]]:
        """The six arrays under their persistence names."""
        return {
            "X": self.grid.X,
            "Y": self.grid.Y,
            "Ex": self.Ex,
            "Ey": self.Ey,
            "E_magnitude": self.E,
            "V_potential": self.V,
        }

    @classmethod
    def from_arrays(cls, arrays: Dict[str, npt.NDArray[np.float64]], parameters: SimulationParameters) -> SimulationResult:
        """Rebuild a result from persisted arrays (inverse of as_arrays)."""
        X = np.array(arrays["X"], dtype=np.float64)
        Y = np.array(arrays["Y"], dtype=np.float64)
        grid = FieldGrid(x=_freeze(X[0, :].copy()), y=_freeze(Y[:, 0].copy()), X=_freeze(X), Y=_freeze(Y))
        return cls(
            grid=grid,
            Ex=np.array(arrays["Ex"], dtype=np.float64),
            Ey=np.array(arrays["Ey"], dtype=np.float64),
            E=np.array(arrays["E_magnitude"], dtype=np.float64),
            V=np.array(arrays["V_potential"], dtype=np.float64),
            parameters=parameters,
        )
