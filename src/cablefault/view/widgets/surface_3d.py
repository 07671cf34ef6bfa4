"""
3D Surface Widget (PyVista Wrapper)
"""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pyvista as pv
from PySide6.QtWidgets import QWidget, QVBoxLayout
from pyvistaqt import QtInteractor

from cablefault import config
from cablefault.model.results import SimulationResult

logger = logging.getLogger(__name__)

SCALARS_NAME = "E (V/m)"


def surface_grid(result: SimulationResult) -> pv.StructuredGrid:
    """
    Warp the grid by the field magnitude.
    The height is rescaled so the surface is as tall as the grid is wide;
    the true values stay attached as point scalars.
    """
    X, Y, E = result.grid.X, result.grid.Y, result.E
    extent = max(np.ptp(X), np.ptp(Y))
    peak = float(np.max(np.abs(E)))
    z_scale = extent / peak if peak > 0 and extent > 0 else 1.0

    grid = pv.StructuredGrid(np.asarray(X), np.asarray(Y), np.asarray(E) * z_scale)
    # StructuredGrid stores points in Fortran order
    grid.point_data[SCALARS_NAME] = np.asarray(E).ravel(order="F")
    return grid


def view_direction(azimuth: float, elevation: float) -> np.ndarray:
    """
    Unit vector from the focal point towards the camera.
    Azimuth is measured in the x-y plane from the -y axis towards +x, elevation
    from that plane towards +z (both in degrees).
    """
    az, el = np.radians(azimuth), np.radians(elevation)
    return np.array([np.sin(az) * np.cos(el), -np.cos(az) * np.cos(el), np.sin(el)])


class SurfaceView(QWidget):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        self.plotter.set_background("white")
        self._surface_actor: Optional[pv.Actor] = None
        self._camera_initialized: bool = False

    def show_field(self, result: SimulationResult) -> None:
        self.clear()
        grid = surface_grid(result)
        self._surface_actor = self.plotter.add_mesh(
            grid,
            scalars=SCALARS_NAME,
            cmap="viridis",
            show_edges=False,
            smooth_shading=True,
            scalar_bar_args={"title": SCALARS_NAME, "vertical": True, "color": "black"},
        )
        self.plotter.add_text("3D Electric Field Distribution", font_size=10, color="black")

        # Keep the user's camera while dragging
        if not self._camera_initialized:
            self.set_view_angles(grid, config.SURFACE_AZIMUTH, config.SURFACE_ELEVATION)
            self._camera_initialized = True
        self.plotter.render()

    def set_view_angles(self, grid: pv.StructuredGrid, azimuth: float, elevation: float) -> None:
        focal = np.asarray(grid.center)
        position = focal + grid.length * view_direction(azimuth, elevation)
        self.plotter.camera_position = [tuple(position), tuple(focal), (0.0, 0.0, 1.0)]
        # Fit the distance, keep the direction
        self.plotter.reset_camera()

    def clear(self) -> None:
        self.plotter.clear()
        self._surface_actor = None

    def close_plotter(self) -> None:
        self.plotter.close()
