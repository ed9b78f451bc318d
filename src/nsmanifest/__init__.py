"""
nsmanifest: namespace-driven build manifest resolution.

Resolves source units that provide and require namespaces into a single,
dependency-ordered manifest.
"""

from .config import BuilderConfig
from .core import (
    CircularDependencyError,
    DuplicateProviderError,
    InvalidRuntimeBaseError,
    InvariantViolationError,
    ManifestBuilder,
    ManifestError,
    MissingDependencyError,
    MissingEntryPointError,
    SortStrategy,
    SourceUnit,
)

__version__ = "0.1.0"

__all__ = [
    "BuilderConfig",
    "CircularDependencyError",
    "DuplicateProviderError",
    "InvalidRuntimeBaseError",
    "InvariantViolationError",
    "ManifestBuilder",
    "ManifestError",
    "MissingDependencyError",
    "MissingEntryPointError",
    "SortStrategy",
    "SourceUnit",
]
