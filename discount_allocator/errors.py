"""Exception types raised by the allocation pipeline and its configuration layer."""


class AllocationError(Exception):
    """Base class for faults that abort a single allocation run."""
    pass


class ValidationError(AllocationError):
    """Raised when input or bounds are structurally invalid."""
    pass


class StrategyFault(AllocationError):
    """Raised when a scoring strategy fails or returns unusable scores."""
    pass


class ConfigError(Exception):
    """Raised when a config file or environment override cannot be used."""
    pass
