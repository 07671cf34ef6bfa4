from dataclasses import replace

import pytest

pytest.importorskip("PySide6.QtWidgets")

from cablefault.model.state import DEFAULT_PARAMETERS
from cablefault.view.panels.parameters import ParametersPanel

EXTREME = replace(
    DEFAULT_PARAMETERS,
    cable_length=2e5,
    cable_radius=4e-05,
    fault_location=1.5e5,
    applied_voltage=2.2e7,
)


@pytest.fixture
def panel(qapp) -> ParametersPanel:
    return ParametersPanel(EXTREME)


def test_loaded_parameters_read_back_unchanged(panel):
    assert panel.read_parameters() == EXTREME


def test_values_beyond_display_precision_survive(qapp):
    tiny = replace(DEFAULT_PARAMETERS, cable_radius=1.234567891234e-9, soil_resistivity=3e13)

    assert ParametersPanel(tiny).read_parameters() == tiny


def test_spin_boxes_hold_large_values(panel):
    assert panel.spin_boxes["cable_length"].value() == pytest.approx(2e5)
    assert panel.spin_boxes["applied_voltage"].value() == pytest.approx(2.2e7)
    assert panel.spin_boxes["cable_radius"].value() == pytest.approx(4e-05)


def test_edited_field_is_read_from_spin_box(panel):
    panel.spin_boxes["soil_resistivity"].setValue(250.0)

    params = panel.read_parameters()

    assert params.soil_resistivity == 250.0
    assert params.cable_radius == 4e-05
    assert params.applied_voltage == 2.2e7


def test_load_discards_previous_edits(panel):
    panel.spin_boxes["cable_radius"].setValue(0.5)

    panel.load_parameters(DEFAULT_PARAMETERS)

    assert panel.read_parameters() == DEFAULT_PARAMETERS


def test_touch_button_emits_state(panel):
    received = []
    panel.touch_mode_toggled.connect(received.append)

    panel.btn_touch.setChecked(True)
    panel.btn_touch.setChecked(False)

    assert received == [True, False]
    assert panel.btn_touch.text() == "Touch Mode: OFF"
