"""Exceptions raised by cratematch."""


class CrateMatchError(Exception):
    """Base class for cratematch errors."""


class CrateLoadError(CrateMatchError):
    """Raised by a crate store when a crate's membership cannot be loaded."""

    def __init__(self, crate_id: str, reason: str = "") -> None:
        self.crate_id = crate_id
        message = f"Failed to load crate {crate_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class LibraryFileError(CrateMatchError):
    """Raised when a library snapshot file is malformed."""
