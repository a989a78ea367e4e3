"""tpm command-line interface."""

from tact_pm import __version__

__all__ = ["__version__"]
