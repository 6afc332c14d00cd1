"""
Exceptions raised by the schedule engine.
"""


class PeriodicScheduleException(ValueError):
    """Raised when a periodic schedule cannot be created from its specification.

    The engine is pure, so retrying with the same input always fails the same
    way. The message names the rule that failed and the dates involved.
    """
