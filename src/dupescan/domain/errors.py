class DupescanError(Exception):
    """Base exception for domain-specific errors."""


class ConfigurationError(DupescanError):
    """Bad CLI args or unusable config (e.g., root is not a directory)."""


class ProtocolError(DupescanError):
    """A frame received from a worker is truncated or malformed."""


class TransportError(DupescanError):
    """A worker channel closed early or a worker process died."""
