"""Domain-specific errors for fastbootctl."""


class FastbootError(Exception):
    """Base error for fastbootctl."""


class ArgumentError(FastbootError):
    """Raised when command-line tokens are malformed or out of range."""


class UsageError(ArgumentError):
    """Raised on an unknown command or a command missing its arguments."""


class FileLoadError(FastbootError):
    """Raised when an image or signature file cannot be read."""


class PackageError(FastbootError):
    """Raised when a flash package is unreadable or incomplete."""


class MissingEntryError(PackageError):
    """Raised when a named entry is absent from an archive."""


class DecodeError(FastbootError):
    """Raised when an archive entry fails to decompress."""


class ExecutionError(FastbootError):
    """Raised when the execution engine reports a failed queue."""


class ConfigError(FastbootError):
    """Raised when the config file cannot be read or does not validate."""


class TransportError(FastbootError):
    """Base USB transport error."""


class TransportTimeoutError(TransportError):
    """Raised when a USB transfer times out."""


class DeviceResponseError(TransportError):
    """Raised when the device answers FAIL or an unexpected reply."""
