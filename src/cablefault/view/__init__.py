"""
The VIEW layer: Qt widgets, pyqtgraph plots and the PyVista surface.
Widgets never compute fields; they forward user actions to the controller.
"""
