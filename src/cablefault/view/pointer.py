"""
Pointer Routing
Translates Qt mouse events on the magnitude plot into InteractionController calls.
"""
from PySide6.QtCore import Qt, QEvent

from cablefault.controller.interaction import InteractionController

POINTER_EVENTS = (QEvent.Type.MouseButtonPress, QEvent.Type.MouseMove, QEvent.Type.MouseButtonRelease)


def route_pointer_event(
    controller: InteractionController,
    event_type: QEvent.Type,
    button: Qt.MouseButton,
    x: float,
    y: float,
) -> bool:
    """
    Forward one pointer event, already mapped to data coordinates.

    Only the left button starts and ends a drag. Other buttons are left
    to the plot (context menu).

    Returns:
        True if the event was consumed.
    """
    if event_type not in POINTER_EVENTS or not controller.state.touch_mode_enabled:
        return False

    if event_type == QEvent.Type.MouseMove:
        controller.pointer_motion(x, y)
        return True

    if button != Qt.MouseButton.LeftButton:
        return False
    if event_type == QEvent.Type.MouseButtonPress:
        controller.pointer_down(x, y)
    else:
        controller.pointer_up(x, y)
    return True
