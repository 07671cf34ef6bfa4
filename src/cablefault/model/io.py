"""
Input/Output Manager (HDF5, MATLAB)
Handles saving and loading a SimulationResult.

Layout (both formats):
    field_data/X, Y, Ex, Ey, E_magnitude, V_potential   -- 2D arrays
    field_data/parameters                               -- the seven inputs
"""
import logging
import os
from importlib.metadata import version, PackageNotFoundError
from typing import Optional

import h5py
import numpy as np
import scipy.io

from cablefault import config
from cablefault.model.errors import NoDataAvailable
from cablefault.model.results import SimulationResult
from cablefault.model.state import SimulationParameters

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("cablefault")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"

ARRAY_NAMES = ("X", "Y", "Ex", "Ey", "E_magnitude", "V_potential")


class IOManager:

    @staticmethod
    def save_result(result: Optional[SimulationResult], filepath: str) -> None:
        """
        Write the result and the parameters that produced it.
        The format follows the extension: '.mat' for MATLAB, anything else HDF5.

        Raises:
            NoDataAvailable: If result is None.
        """
        if result is None:
            raise NoDataAvailable()

        logger.info(f"Saving field data to: {filepath}")
        ext = os.path.splitext(filepath)[1].lower()
        try:
            if ext == ".mat":
                IOManager._save_mat(result, filepath)
            else:
                IOManager._save_h5(result, filepath)
        except Exception as e:
            logger.exception(f"Failed to save field data: {e}")
            raise

        logger.info(f"Field data saved to: {filepath}")

    @staticmethod
    def with_extension(filepath: str, selected_filter: str = "") -> str:
        """
        Append the extension of the chosen save-dialog filter when the name has none.
        Unknown or empty filters fall back to HDF5.
        """
        if os.path.splitext(filepath)[1]:
            return filepath
        ext = ".mat" if selected_filter == config.MAT_FILE_FILTER else ".h5"
        return filepath + ext

    @staticmethod
    def load_result(filepath: str) -> SimulationResult:
        """
        Read a file written by save_result.
        '.mat' is read as MATLAB, any other name must be an HDF5 file.
        """
        logger.info(f"Loading field data from: {filepath}")
        ext = os.path.splitext(filepath)[1].lower()
        if ext == ".mat":
            return IOManager._load_mat(filepath)
        if not h5py.is_hdf5(filepath):
            msg = f"File '{filepath}' is not a valid HDF5 file."
            logger.error(msg)
            raise ValueError(msg)
        return IOManager._load_h5(filepath)

    # --- HDF5 ---

    @staticmethod
    def _save_h5(result: SimulationResult, filepath: str) -> None:
        with h5py.File(filepath, "w") as f:
            f.attrs["version"] = APP_VERSION

            grp = f.create_group("field_data")
            for name, array in result.as_arrays().items():
                grp.create_dataset(name, data=array, compression="gzip")

            grp_params = grp.create_group("parameters")
            for key, val in result.parameters.to_dict().items():
                grp_params.attrs[key] = val

            logger.debug(f"Saved {len(ARRAY_NAMES)} arrays of shape {result.grid.shape}.")

    @staticmethod
    def _load_h5(filepath: str) -> SimulationResult:
        with h5py.File(filepath, "r") as f:
            if "field_data" not in f:
                raise ValueError(f"File '{filepath}' contains no field data.")
            grp = f["field_data"]
            missing = [name for name in ARRAY_NAMES if name not in grp]
            if missing:
                raise ValueError(f"File '{filepath}' is missing arrays: {', '.join(missing)}")

            arrays = {name: grp[name][:] for name in ARRAY_NAMES}
            parameters = SimulationParameters.from_dict(dict(grp["parameters"].attrs))

        return SimulationResult.from_arrays(arrays, parameters)

    # --- MATLAB ---

    @staticmethod
    def _save_mat(result: SimulationResult, filepath: str) -> None:
        field_data = {name: np.asarray(array) for name, array in result.as_arrays().items()}
        field_data["parameters"] = result.parameters.to_dict()
        scipy.io.savemat(filepath, {"field_data": field_data}, do_compression=True)

    @staticmethod
    def _load_mat(filepath: str) -> SimulationResult:
        content = scipy.io.loadmat(filepath, squeeze_me=True, struct_as_record=False)
        if "field_data" not in content:
            raise ValueError(f"File '{filepath}' contains no 'field_data' struct.")
        field_data = content["field_data"]

        arrays = {name: np.atleast_2d(getattr(field_data, name)) for name in ARRAY_NAMES}
        params_struct = field_data.parameters
        parameters = SimulationParameters.from_dict(
            {name: getattr(params_struct, name) for name in params_struct._fieldnames}
        )
        return SimulationResult.from_arrays(arrays, parameters)
