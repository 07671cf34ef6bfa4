"""
Error Taxonomy
==============
Exceptions raised by the engine and the persistence layer.

The controller is the only place that catches them; it turns them into
user-facing messages so a failed computation never ends the event loop.
"""


class FaultFieldError(Exception):
    """Base class for all application errors."""

    title: str = "Error"


class InvalidParameters(FaultFieldError, ValueError):
    """Fault resistance, soil resistivity or cable radius is not positive."""

    title = "Invalid Parameters"


class NoDataAvailable(FaultFieldError, RuntimeError):
    """Saving was requested before any successful computation."""

    title = "No Data"

    def __init__(self, message: str = "No data available. Run the simulation first.") -> None:
        super().__init__(message)


class FieldComputationError(FaultFieldError, ArithmeticError):
    """The computed field contains non-finite values."""

    title = "Computation Error"
