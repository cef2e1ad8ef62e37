"""
Error taxonomy for the ROU simulator.

Both errors subclass ValueError so callers that already guard numerical
entry points with ``except ValueError`` keep working.
"""


class ROUError(ValueError):
    """Base class for all simulator errors."""


class InvalidParameter(ROUError):
    """Non-positive horizon/steps/dt, non-conformant shapes, bad diffusion."""


class InvalidInput(ROUError):
    """Malformed series or arguments passed to the diagnostics."""
