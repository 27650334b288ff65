"""Runtime detection and reference assembly resolution."""
from .resolver import (
    ReferenceHandle, ReferenceResolver, ReferencesUnavailableError,
)
from .runtime import (
    FrameworkType, PlatformNotSupportedError, ReferenceResolutionError, RuntimeIdentity,
    classify_framework, detect_runtime,
)

__all__ = [
    "FrameworkType",
    "PlatformNotSupportedError",
    "ReferenceHandle",
    "ReferenceResolutionError",
    "ReferenceResolver",
    "ReferencesUnavailableError",
    "RuntimeIdentity",
    "classify_framework",
    "detect_runtime",
]
