"""Dependency resolution and manifest ordering engine."""

from .errors import (
    CircularDependencyError,
    DuplicateProviderError,
    InvalidRuntimeBaseError,
    InvariantViolationError,
    ManifestError,
    MissingDependencyError,
    MissingEntryPointError,
)
from .result import Err, Ok, Result
from .types import DEFAULT_ROOT_NAMESPACE, SortStrategy, SourceUnit
from .registry import NamespaceRegistry
from .resolver import DependencyResolver
from .graph import DependencyGraph
from .sorter import TopologicalSorter
from .builder import ManifestBuilder

__all__ = [
    "CircularDependencyError",
    "DEFAULT_ROOT_NAMESPACE",
    "DependencyGraph",
    "DependencyResolver",
    "DuplicateProviderError",
    "Err",
    "InvalidRuntimeBaseError",
    "InvariantViolationError",
    "ManifestBuilder",
    "ManifestError",
    "MissingDependencyError",
    "MissingEntryPointError",
    "NamespaceRegistry",
    "Ok",
    "Result",
    "SortStrategy",
    "SourceUnit",
    "TopologicalSorter",
]
