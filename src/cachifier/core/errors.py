class CachifierError(Exception):
    """Base error for all user-facing Cachifier exceptions."""


class ConfigurationError(CachifierError):
    """Raised when configuration is invalid or incomplete."""


class InvalidArgumentError(ConfigurationError, ValueError):
    """Raised when a required argument is missing, empty or malformed."""


class SourceReadError(CachifierError):
    """Raised when a resource's source file cannot be opened or hashed."""


class FilesystemError(CachifierError):
    """Raised when creating, copying, writing or deleting output files fails."""


class PreconditionViolation(RuntimeError):
    """Raised when an internal invariant is broken, e.g. naming before hashing."""
