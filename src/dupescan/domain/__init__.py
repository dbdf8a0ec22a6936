from .errors import (
    ConfigurationError,
    DupescanError,
    ProtocolError,
    TransportError,
)
from .models import (
    DuplicateGroup,
    FileRecord,
    GlobalIndex,
    HashOutcome,
    LocalIndex,
    ScanConfig,
    ScanResult,
)

__all__ = [
    "ConfigurationError",
    "DupescanError",
    "ProtocolError",
    "TransportError",
    "DuplicateGroup",
    "FileRecord",
    "GlobalIndex",
    "HashOutcome",
    "LocalIndex",
    "ScanConfig",
    "ScanResult",
]
