"""Exception hierarchy for the NEPO interpreter."""

from __future__ import annotations


class NepoError(Exception):
    """Base class for all interpreter errors."""


class ProgramLoadError(NepoError):
    """The program markup could not be read or parsed."""


class MissingEntryPointError(NepoError):
    """The program has no ``robControls_start`` block."""


class BlockExecutionError(NepoError):
    """Structural fault raised while executing a single block."""


class HardwareError(NepoError):
    """A hardware capability was addressed incorrectly or failed."""
