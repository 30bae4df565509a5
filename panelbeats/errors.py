"""Exception types for the panelbeats effect core."""


class PanelbeatsError(Exception):
    """Base class for all panelbeats errors."""


class ConfigurationError(PanelbeatsError, ValueError):
    """Raised at startup when layout, palette or settings cannot drive an effect."""


class BoundsViolation(PanelbeatsError, AssertionError):
    """Raised when an internal capacity or size invariant is broken."""
