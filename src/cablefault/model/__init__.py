"""
The MODEL layer contains pure data structures and persistence.
It has NO knowledge of the GUI (Qt) or the Visualization (pyqtgraph, PyVista).
"""
from cablefault.model.errors import FaultFieldError, InvalidParameters, NoDataAvailable, FieldComputationError
from cablefault.model.state import SimulationParameters, InteractionState, DragState, PlotBounds, DEFAULT_PARAMETERS
from cablefault.model.results import FieldGrid, SimulationResult
