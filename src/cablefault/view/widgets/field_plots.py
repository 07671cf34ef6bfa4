"""
2D Field Views (pyqtgraph)
==========================
Magnitude contour, vector field, axial profile and potential contour.

All views plot depth downwards (inverted y axis), like a cross-section
drawing. The magnitude view is also the surface that receives pointer
events in touch mode, see MainWindow.
"""
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QRectF
import pyqtgraph as pg

from cablefault import config
from cablefault.model.results import SimulationResult
from cablefault.model.state import PlotBounds

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

AXIS_DISTANCE = "Distance along cable (m)"
AXIS_DEPTH = "Depth (m)"


def quantize(data: npt.NDArray[np.float64], levels: int = config.CONTOUR_LEVELS) -> npt.NDArray[np.float64]:
    """Snap values to a fixed number of bands (filled-contour look)."""
    lo, hi = float(np.min(data)), float(np.max(data))
    if hi <= lo:
        return np.array(data, dtype=np.float64)
    step = (hi - lo) / levels
    bands = np.minimum(np.floor((data - lo) / step), levels - 1)
    return lo + bands * step


def arrow_segments(
    X: npt.NDArray[np.float64],
    Y: npt.NDArray[np.float64],
    U: npt.NDArray[np.float64],
    W: npt.NDArray[np.float64],
    scale: float = 2.0,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Line segments for a quiver plot, auto-scaled to the arrow spacing.

    Returns:
        (xs, ys) ready for a PlotCurveItem with connect="pairs".
    """
    spacing_x = abs(X[0, 1] - X[0, 0]) if X.shape[1] > 1 else 1.0
    spacing_y = abs(Y[1, 0] - Y[0, 0]) if Y.shape[0] > 1 else 1.0
    spacings = [s for s in (spacing_x, spacing_y) if s > 0]
    spacing = min(spacings) if spacings else 1.0

    length = np.hypot(U, W)
    max_length = float(np.max(length)) if length.size else 0.0
    factor = 0.5 * scale * spacing / max_length if max_length > 0 else 0.0

    xs = np.empty(2 * X.size)
    ys = np.empty(2 * X.size)
    xs[0::2] = X.ravel()
    ys[0::2] = Y.ravel()
    xs[1::2] = (X + factor * U).ravel()
    ys[1::2] = (Y + factor * W).ravel()
    return xs, ys


class _CrossSectionPlot(pg.PlotWidget):
    """Plot with distance/depth axes and a fault marker."""

    def __init__(self, title: str) -> None:
        super().__init__()
        self.plot_item = self.getPlotItem()
        self.plot_item.setTitle(title)
        self.plot_item.setLabel("bottom", AXIS_DISTANCE)
        self.plot_item.setLabel("left", AXIS_DEPTH)
        self.plot_item.invertY(True)
        self.plot_item.showGrid(x=True, y=True, alpha=0.3)

        self.marker = pg.ScatterPlotItem(symbol="star", size=14, brush=pg.mkBrush("r"), pen=pg.mkPen("r"))
        self.marker.setZValue(10)
        self.plot_item.addItem(self.marker)

    def set_marker(self, x: float, y: float) -> None:
        self.marker.setData([x], [y])

    def fit_to(self, result: SimulationResult) -> None:
        x0, x1 = result.grid.x_range
        y0, y1 = result.grid.y_range
        self.plot_item.setXRange(x0, x1, padding=0)
        self.plot_item.setYRange(y0, y1, padding=0)

    def bounds(self) -> PlotBounds:
        (x0, x1), (y0, y1) = self.plot_item.vb.viewRange()
        return PlotBounds(min(x0, x1), max(x0, x1), min(y0, y1), max(y0, y1))

    def clear_data(self) -> None:
        self.marker.clear()


class ContourPlot(_CrossSectionPlot):
    """Banded color map of a scalar field with a color bar."""

    def __init__(self, title: str, colormap: str = "viridis") -> None:
        super().__init__(title)
        self.image = pg.ImageItem(axisOrder="row-major")
        self.plot_item.addItem(self.image)

        self.color_bar = pg.ColorBarItem(colorMap=pg.colormap.get(colormap), interactive=False)
        self.color_bar.setImageItem(self.image, insert_in=self.plot_item)
        self.has_data: bool = False

    def show_field(self, result: SimulationResult, data: npt.NDArray[np.float64]) -> None:
        x0, x1 = result.grid.x_range
        y0, y1 = result.grid.y_range
        banded = quantize(data)
        self.image.setImage(banded, autoLevels=False)
        self.image.setRect(QRectF(x0, y0, x1 - x0, y1 - y0))

        lo, hi = float(np.min(data)), float(np.max(data))
        if hi <= lo:
            hi = lo + 1.0
        self.color_bar.setLevels((lo, hi))

        self.set_marker(result.fault_location, result.cable_depth)
        self.fit_to(result)
        self.has_data = True

    def clear_data(self) -> None:
        super().clear_data()
        self.image.clear()
        self.has_data = False


class VectorPlot(_CrossSectionPlot):
    def __init__(self) -> None:
        super().__init__("Electric Field Vectors")
        self.arrows = pg.PlotCurveItem(pen=pg.mkPen("#1f77b4", width=1), connect="pairs")
        self.tails = pg.ScatterPlotItem(size=3, brush=pg.mkBrush("#1f77b4"), pen=None)
        self.plot_item.addItem(self.arrows)
        self.plot_item.addItem(self.tails)

    def show_field(self, result: SimulationResult) -> None:
        X, Y, U, W = result.subsampled()
        xs, ys = arrow_segments(X, Y, U, W)
        self.arrows.setData(xs, ys, connect="pairs")
        self.tails.setData(X.ravel(), Y.ravel())
        self.set_marker(result.fault_location, result.cable_depth)
        self.fit_to(result)

    def clear_data(self) -> None:
        super().clear_data()
        self.arrows.clear()
        self.tails.clear()


class ProfilePlot(pg.PlotWidget):
    """Field magnitude on the grid row at cable depth."""

    def __init__(self) -> None:
        super().__init__()
        self.plot_item = self.getPlotItem()
        self.plot_item.setTitle("Field along cable depth")
        self.plot_item.setLabel("bottom", AXIS_DISTANCE)
        self.plot_item.setLabel("left", "E (V/m)")
        self.plot_item.showGrid(x=True, y=True, alpha=0.3)

        self.curve = self.plot_item.plot(pen=pg.mkPen("b", width=2))
        self.marker = pg.ScatterPlotItem(symbol="star", size=12, brush=pg.mkBrush("r"), pen=pg.mkPen("r"))
        self.plot_item.addItem(self.marker)

    def show_field(self, result: SimulationResult) -> None:
        x, e_row, col = result.axial_profile()
        self.curve.setData(x, e_row)
        self.marker.setData([x[col]], [e_row[col]])

    def clear_data(self) -> None:
        self.curve.clear()
        self.marker.clear()


class FieldPlots:
    """The four 2D views, updated and cleared together."""

    def __init__(self) -> None:
        self.magnitude = ContourPlot("Electric Field Magnitude (V/m)")
        self.vectors = VectorPlot()
        self.profile = ProfilePlot()
        self.potential = ContourPlot("Electric Potential (V)", colormap="plasma")

    @property
    def pointer_plot(self) -> ContourPlot:
        """The plot that receives pointer events in touch mode."""
        return self.magnitude

    def pointer_bounds(self) -> Optional[PlotBounds]:
        # Empty axes have no meaningful coordinates yet
        if not self.magnitude.has_data:
            return None
        return self.magnitude.bounds()

    def update(self, result: SimulationResult) -> None:
        self.magnitude.show_field(result, result.E)
        self.vectors.show_field(result)
        self.profile.show_field(result)
        self.potential.show_field(result, result.V)

    def clear(self) -> None:
        for plot in (self.magnitude, self.vectors, self.profile, self.potential):
            plot.clear_data()
