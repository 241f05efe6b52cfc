"""
Network Errors

Exception hierarchy shared by the linear algebra kernel, the network,
the trainer and the persistence codec.
"""


class NeuroNetError(Exception):
    """Base class for all neuronet errors."""


class ShapeError(NeuroNetError, ValueError):
    """A declared dimension is not positive, or a literal array is empty."""


class ShapeMismatchError(NeuroNetError, ValueError):
    """Operand lengths or shapes do not line up."""


class ConfigurationError(NeuroNetError, ValueError):
    """Unknown activation, malformed topology or invalid training setup."""


class FormatError(NeuroNetError, ValueError):
    """A persisted network is truncated or corrupt."""
