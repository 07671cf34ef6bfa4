"""
Parameters Control Panel
"""
from typing import Dict, Set, Tuple

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QPushButton, QDoubleSpinBox, QGroupBox, QFormLayout, QLabel
)
from PySide6.QtCore import Signal, Qt

from cablefault.model.state import SimulationParameters, DEFAULT_PARAMETERS

INPUT_LIMIT: float = 1e12
DISPLAY_DECIMALS: int = 8

# field name -> (label, suffix, minimum, maximum)
FIELD_SPECS: Dict[str, Tuple[str, str, float, float]] = {
    "cable_length": ("Cable length:", " m", 0.0, INPUT_LIMIT),
    "cable_depth": ("Cable depth:", " m", 0.0, INPUT_LIMIT),
    "cable_radius": ("Cable radius:", " m", 0.0, INPUT_LIMIT),
    "fault_location": ("Fault location:", " m", -INPUT_LIMIT, INPUT_LIMIT),
    "fault_resistance": ("Fault resistance:", " Ω", -INPUT_LIMIT, INPUT_LIMIT),
    "applied_voltage": ("Applied voltage:", " V", -INPUT_LIMIT, INPUT_LIMIT),
    "soil_resistivity": ("Soil resistivity:", " Ω·m", -INPUT_LIMIT, INPUT_LIMIT),
}


class ParametersPanel(QWidget):
    run_requested = Signal()
    save_requested = Signal()
    reset_requested = Signal()
    touch_mode_toggled = Signal(bool)

    def __init__(self, parameters: SimulationParameters = DEFAULT_PARAMETERS) -> None:
        super().__init__()
        self.spin_boxes: Dict[str, QDoubleSpinBox] = {}
        # Values as loaded, before the spin boxes rounded them for display
        self._loaded: Dict[str, float] = {}
        self._edited: Set[str] = set()

        layout = QVBoxLayout(self)

        # --- Inputs ---
        # Ranges admit zero and negative values, validation is the engine's job
        grp = QGroupBox("Controls")
        form = QFormLayout(grp)
        for name, (label, suffix, lo, hi) in FIELD_SPECS.items():
            spin = QDoubleSpinBox()
            spin.setDecimals(DISPLAY_DECIMALS)
            spin.setRange(lo, hi)
            spin.setStepType(QDoubleSpinBox.StepType.AdaptiveDecimalStepType)
            spin.setSuffix(suffix)
            spin.valueChanged.connect(lambda _value, field=name: self._edited.add(field))
            form.addRow(label, spin)
            self.spin_boxes[name] = spin
        layout.addWidget(grp)

        # --- Actions ---
        self.btn_touch = QPushButton("Touch Mode: OFF")
        self.btn_touch.setCheckable(True)
        self.btn_touch.toggled.connect(self.on_touch_toggled)
        layout.addWidget(self.btn_touch)

        self.btn_run = QPushButton("Run Simulation")
        self.btn_run.setMinimumHeight(40)
        self.btn_run.clicked.connect(self.run_requested)
        layout.addWidget(self.btn_run)

        self.btn_save = QPushButton("Save Data")
        self.btn_save.clicked.connect(self.save_requested)
        layout.addWidget(self.btn_save)

        self.btn_reset = QPushButton("Reset to Defaults")
        self.btn_reset.clicked.connect(self.reset_requested)
        layout.addWidget(self.btn_reset)

        # --- Status Info ---
        self.lbl_status = QLabel("")
        self.lbl_status.setAlignment(Qt.AlignCenter)
        self.lbl_status.setWordWrap(True)
        self.lbl_status.setStyleSheet("color: gray;")
        layout.addWidget(self.lbl_status)

        layout.addStretch()

        self.load_parameters(parameters)

    # --- PROPERTIES ---

    @property
    def status_message(self) -> str:
        return self.lbl_status.text()

    @status_message.setter
    def status_message(self, text: str) -> None:
        self.lbl_status.setText(text)

    # --- SLOTS ---

    def on_touch_toggled(self, checked: bool) -> None:
        self.btn_touch.setText("Touch Mode: ON" if checked else "Touch Mode: OFF")
        self.touch_mode_toggled.emit(checked)

    # --- STATE SYNC ---

    def read_parameters(self) -> SimulationParameters:
        """
        Snapshot of the current field values.
        Fields the user has not touched since the last load keep their exact value.
        """
        values = {}
        for name, spin in self.spin_boxes.items():
            if name in self._edited or name not in self._loaded:
                values[name] = float(spin.value())
            else:
                values[name] = self._loaded[name]
        return SimulationParameters(**values)

    def load_parameters(self, parameters: SimulationParameters) -> None:
        """Show the given parameters without emitting change signals."""
        for name, value in parameters.to_dict().items():
            spin = self.spin_boxes[name]
            spin.blockSignals(True)
            try:
                spin.setValue(value)
            finally:
                spin.blockSignals(False)
            self._loaded[name] = float(value)
            self._edited.discard(name)
