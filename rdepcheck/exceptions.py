"""Custom exceptions for rdepcheck."""


class ValidatorError(Exception):
    """Base exception for all validator errors."""


class ManifestError(ValidatorError):
    """Raised when the manifest exists but cannot be read."""


class ManifestWriteError(ValidatorError):
    """Raised when a rewritten manifest cannot be stored."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write manifest {path}: {reason}")


class LockfileError(ValidatorError):
    """Raised by a lockfile reader when the lockfile cannot be interpreted."""
