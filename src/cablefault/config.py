"""
Configuration & Constants
=========================
This module serves as the central registry for global constants.

Why is this file needed?
------------------------
The grid resolution, the plotting window and the drag threshold are
referenced by the engine, the controller and the views. Keeping them here
prevents magic numbers scattered throughout the code.

Exports:
    GRID_POINTS (int): Number of samples along each grid axis.
    WINDOW_HALF_WIDTH (float): Half-width of the x window around the fault [m].
    DEPTH_EXTENT (float): Depth covered by the y axis [m].
    DEBOUNCE_THRESHOLD (float): Minimal fault shift during drag [m].
"""
import os

# --- Grid ---
GRID_POINTS: int = 160
WINDOW_HALF_WIDTH: float = 5.0  # m, either side of the fault
DEPTH_EXTENT: float = 3.0  # m, y runs from 0 (surface) down to this depth

# --- Interaction ---
DEBOUNCE_THRESHOLD: float = 1e-3  # m

# --- Plotting ---
QUIVER_MAX_COLUMNS: int = 30
QUIVER_MAX_ROWS: int = 20
CONTOUR_LEVELS: int = 30
SURFACE_AZIMUTH: float = 45.0  # deg, measured from the -y axis towards +x
SURFACE_ELEVATION: float = 30.0  # deg above the x-y plane

# --- Persistence ---
DEFAULT_SAVE_NAME: str = "fault_efield_data.h5"
HDF5_FILE_FILTER: str = "HDF5 Files (*.h5)"
MAT_FILE_FILTER: str = "MATLAB Files (*.mat)"
SAVE_FILE_FILTER: str = ";;".join((HDF5_FILE_FILTER, MAT_FILE_FILTER))


def default_save_path() -> str:
    """Initial path offered by the save dialog."""
    return os.path.join(os.getcwd(), DEFAULT_SAVE_NAME)
