"""Exceptions raised by tripleclouds."""


class ConfigurationError(ValueError):
    """Raised when the solver is built with an unsupported configuration.

    Examples are a region count other than 2 or 3, or an unknown sub-grid
    optical depth distribution. These are detected when a partitioner or
    pipeline is constructed, never part-way through a flux calculation.
    """
    pass
