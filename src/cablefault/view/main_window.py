"""
Main Application Window
=======================
The primary GUI container that holds the Control Panel and the Plot Tabs.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects buttons and pointer events to the InteractionController
   and feeds the controller's results back into the plots.
"""
import logging

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QSplitter, QTabWidget, QFileDialog, QMessageBox
)
from PySide6.QtCore import Qt, QEvent, QObject, QPointF

from cablefault import config
from cablefault.controller.interaction import InteractionController
from cablefault.model.errors import NoDataAvailable
from cablefault.model.io import IOManager
from cablefault.model.results import SimulationResult
from cablefault.model.state import SimulationParameters, DEFAULT_PARAMETERS
from cablefault.view.panels.parameters import ParametersPanel
from cablefault.view.pointer import POINTER_EVENTS, route_pointer_event
from cablefault.view.widgets.field_plots import FieldPlots
from cablefault.view.widgets.surface_3d import SurfaceView

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Cable Fault Electric Field Simulator"

class MainWindow(QMainWindow):
    def __init__(self, parameters: SimulationParameters = DEFAULT_PARAMETERS) -> None:
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1200, 720)

        # --- VIEWS ---
        self.panel = ParametersPanel(parameters)
        self.plots = FieldPlots()
        self.surface = SurfaceView()

        # --- CONTROLLER ---
        self.controller = InteractionController(
            parameters=parameters,
            bounds_provider=self.plots.pointer_bounds,
            parameters_provider=self.panel.read_parameters,
            on_result=self.on_result,
            on_cleared=self.on_cleared,
            on_error=self.show_error,
            on_parameters_changed=self.panel.load_parameters,
            on_cursor_changed=self.set_touch_cursor,
        )

        self._build_layout()

        # --- SIGNAL CONNECTIONS ---
        self.panel.run_requested.connect(self.on_run_clicked)
        self.panel.save_requested.connect(self.on_save_clicked)
        self.panel.reset_requested.connect(self.controller.reset_defaults)
        self.panel.touch_mode_toggled.connect(self.on_touch_mode_toggled)

        # Pointer events of the magnitude plot are routed to the controller
        self._pointer_widget = self.plots.pointer_plot.viewport()
        self._pointer_widget.installEventFilter(self)

    def _build_layout(self) -> None:
        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QHBoxLayout(main_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)

        splitter = QSplitter(Qt.Horizontal)
        main_layout.addWidget(splitter)
        splitter.addWidget(self.panel)

        self.tabs = QTabWidget()

        main_views = QWidget()
        main_row = QHBoxLayout(main_views)
        main_row.addWidget(self.plots.magnitude)
        main_row.addWidget(self.plots.vectors)
        main_row.addWidget(self.surface)
        self.tabs.addTab(main_views, "Main Views")

        analysis = QWidget()
        analysis_col = QVBoxLayout(analysis)
        analysis_col.addWidget(self.plots.profile)
        analysis_col.addWidget(self.plots.potential)
        self.tabs.addTab(analysis, "Analysis")

        splitter.addWidget(self.tabs)

        # Fixed-width sidebar : flexible plots
        splitter.setSizes([320, 880])
        splitter.setStretchFactor(1, 1)

    # --- CONTROLLER LISTENERS ---

    def on_result(self, result: SimulationResult) -> None:
        self.plots.update(result)
        self.surface.show_field(result)
        self.panel.status_message = (
            f"Fault at {result.fault_location:.3f} m, I = {result.fault_current:.4g} A"
        )

    def on_cleared(self) -> None:
        self.plots.clear()
        self.surface.clear()
        self.panel.status_message = ""

    def show_error(self, title: str, message: str) -> None:
        QMessageBox.critical(self, title, message)

    def set_touch_cursor(self, touch_enabled: bool) -> None:
        cursor = Qt.PointingHandCursor if touch_enabled else Qt.ArrowCursor
        self._pointer_widget.setCursor(cursor)

    # --- BUTTON SLOTS ---

    def on_run_clicked(self) -> None:
        self.controller.run(self.panel.read_parameters())

    def on_save_clicked(self) -> None:
        try:
            self.controller.require_result()
        except NoDataAvailable as e:
            self.show_error(e.title, str(e))
            return

        fname, selected_filter = QFileDialog.getSaveFileName(
            self, "Save field data as", config.default_save_path(), config.SAVE_FILE_FILTER
        )
        if not fname:
            # User cancelled
            return
        fname = IOManager.with_extension(fname, selected_filter)

        if self.controller.save_data(fname):
            QMessageBox.information(self, "Saved", f"Data saved to\n{fname}")

    def on_touch_mode_toggled(self, checked: bool) -> None:
        if checked:
            self.controller.enable_touch_mode()
        else:
            self.controller.disable_touch_mode()
        # Panning/zooming would move the bounds under the pointer
        self.plots.pointer_plot.plot_item.vb.setMouseEnabled(x=not checked, y=not checked)

    # --- POINTER EVENTS ---

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is not self._pointer_widget or event.type() not in POINTER_EVENTS:
            return super().eventFilter(watched, event)
        if not self.controller.state.touch_mode_enabled:
            return False

        point = self._to_data_coordinates(event.position())
        return route_pointer_event(self.controller, event.type(), event.button(), point.x(), point.y())

    def _to_data_coordinates(self, position: QPointF) -> QPointF:
        plot = self.plots.pointer_plot
        scene_pos = plot.mapToScene(position.toPoint())
        return plot.plot_item.vb.mapSceneToView(scene_pos)

    # --- WINDOW ---

    def closeEvent(self, event, /) -> None:
        self._pointer_widget.removeEventFilter(self)
        self.surface.close_plotter()
        event.accept()
