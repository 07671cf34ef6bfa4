"""
Application Initialization
==========================
This module parses the command line, sets up logging and either starts the
Qt Event Loop or runs a single headless computation.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Builds the initial SimulationParameters from the defaults and CLI overrides.
2. Instantiates the Main Window (View), which owns the Controller.
3. Keeps Qt imports out of the headless path, so batch runs need no display.
"""
import argparse
import logging
import sys
from dataclasses import fields
from typing import List, Optional

from cablefault import config
from cablefault.logging_config import setup_logging
from cablefault.model.state import SimulationParameters, DEFAULT_PARAMETERS

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cablefault",
        description="Electric field around a fault in an underground cable.",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging.")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file.")
    parser.add_argument("--headless", action="store_true", help="Compute once and save, no window.")
    parser.add_argument(
        "--output", default=config.DEFAULT_SAVE_NAME,
        help="Output file for --headless (.h5 or .mat).",
    )

    params = parser.add_argument_group("parameters")
    for f in fields(SimulationParameters):
        params.add_argument(
            f"--{f.name.replace('_', '-')}",
            dest=f.name,
            type=float,
            default=getattr(DEFAULT_PARAMETERS, f.name),
        )
    return parser


def parameters_from_args(args: argparse.Namespace) -> SimulationParameters:
    return SimulationParameters(**{f.name: getattr(args, f.name) for f in fields(SimulationParameters)})


def run_headless(parameters: SimulationParameters, output: str) -> int:
    """Compute once and save. Returns the process exit code."""
    from cablefault.controller.interaction import InteractionController

    controller = InteractionController(parameters=parameters)
    result = controller.run()
    if result is None:
        return 1
    logger.info(
        f"Fault at {result.fault_location:.3f} m, I = {result.fault_current:.4g} A, "
        f"E_max = {float(result.E.max()):.4g} V/m"
    )
    return 0 if controller.save_data(output) else 1


def run_gui(parameters: SimulationParameters) -> int:
    from PySide6.QtWidgets import QApplication
    from cablefault.view.main_window import MainWindow, VISIBLE_APP_NAME

    import pyqtgraph as pg

    app = QApplication(sys.argv)
    pg.setConfigOptions(antialias=True)
    app.setApplicationName(VISIBLE_APP_NAME)

    window = MainWindow(parameters)
    window.show()

    return app.exec()


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)
    parameters = parameters_from_args(args)

    if args.headless:
        sys.exit(run_headless(parameters, args.output))
    sys.exit(run_gui(parameters))


if __name__ == "__main__":
    main()
