class RtEstimationError(Exception):
    """Base class for errors raised by rt_estimation."""


class ConfigurationError(RtEstimationError, ValueError):
    """Invalid shared configuration, raised before any region is processed."""


class InputError(RtEstimationError, ValueError):
    """Invalid case series for a single region."""
