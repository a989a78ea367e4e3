"""Error taxonomy for tact-pm.

Each component raises its own error kind and wraps whatever it catches from
below with a descriptive prefix. Only the CLI catches these for reporting.
"""


class TpmError(Exception):
    """Base class for all tact-pm errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class SyncError(TpmError):
    """Alias registry fetch, parse or cache write failed."""
    pass


class FetchError(TpmError):
    """Clone, checkout, log or update check failed, or the clone is malformed."""

    def __init__(self, message: str, missing: tuple = ()):
        super().__init__(message)
        self.missing = tuple(missing)


class ManagerError(TpmError):
    """Package manager operation failed."""
    pass


class WorkspaceError(TpmError):
    """Workspace manifest, module lookup or child process failed."""

    def __init__(self, message: str, exit_code: int = None):
        super().__init__(message)
        self.exit_code = exit_code
