"""
Exceptions raised by the calculation engines.

Only two failure modes exist. ``MissingRequiredData`` is raised by the
drivetrain comparison entry point alone; the per-field helpers return zero
or empty results instead. ``InvalidParameter`` is raised for numeric inputs
that are non-positive or physically implausible. Unknown enum strings never
raise, they fall back to a default and log a warning.
"""

from typing import Union


class RideCalcError(Exception):
    """Base class for calculator errors."""


class MissingRequiredData(RideCalcError):
    """A setup lacks the cassette or chainring data needed for comparison."""

    def __init__(self, setup_label: str, missing: str):
        self.setup_label = setup_label
        self.missing = missing
        super().__init__(f"{setup_label} setup is missing {missing} data")


# Name used by the drivetrain comparison API
MissingComponentData = MissingRequiredData


class InvalidParameter(RideCalcError, ValueError):
    """A numeric input is out of its physically sensible range."""

    def __init__(self, parameter: str, value: Union[int, float], reason: str):
        self.parameter = parameter
        self.value = value
        super().__init__(f"Invalid {parameter}={value}: {reason}")
