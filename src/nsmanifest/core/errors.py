"""
Error taxonomy for manifest resolution.

Every failure carries the structured data a caller needs to render its own
diagnostic (namespace, offending units, cycle path). The message built here
is only a convenience.

Structural errors (bad input graph):
    - DuplicateProviderError: raised at registration time.
    - InvalidRuntimeBaseError: raised when a SourceUnit is constructed, or
      when a builder is given a runtime base with a foreign root namespace.
    - MissingDependencyError, MissingEntryPointError, CircularDependencyError:
      raised by ``ManifestBuilder.to_manifest()``.

Programming errors:
    - InvariantViolationError: internal bookkeeping went wrong.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from .types import SourceUnit


class ManifestError(Exception):
    """Base class for every error raised by the resolution engine."""


class DuplicateProviderError(ManifestError):
    """
    Raised when a namespace is provided by more than one unit.

    Attributes:
        namespace: The namespace with two providers.
        units: The existing provider followed by the conflicting one.
    """

    def __init__(self, namespace: str, existing: "SourceUnit", conflicting: "SourceUnit"):
        self.namespace = namespace
        self.units: List["SourceUnit"] = [existing, conflicting]
        super().__init__(
            f"Namespace '{namespace}' is provided by multiple units: "
            f"'{existing.id}' and '{conflicting.id}'"
        )


class InvalidRuntimeBaseError(ManifestError):
    """
    Raised when a runtime-base unit is malformed.

    Either it declares explicit provides or requires, or its root namespace
    differs from the one the builder was configured with.

    Attributes:
        unit_id: Identity of the offending unit.
        provides: The provides found.
        requires: The requires found.
        expected_root: The configured root namespace, set only on a mismatch.
    """

    def __init__(
        self,
        unit_id: str,
        provides: Sequence[str],
        requires: Sequence[str],
        expected_root: Optional[str] = None,
    ):
        self.unit_id = unit_id
        self.provides = sorted(provides)
        self.requires = sorted(requires)
        self.expected_root = expected_root
        if expected_root is None:
            message = (
                f"Runtime base '{unit_id}' must not provide or require namespaces "
                f"(provides={self.provides}, requires={self.requires})"
            )
        else:
            message = (
                f"Runtime base '{unit_id}' provides {self.provides} but the "
                f"configured root namespace is '{expected_root}'"
            )
        super().__init__(message)


class MissingDependencyError(ManifestError):
    """
    Raised when a required namespace has no registered provider.

    Attributes:
        namespace: The namespace that is required but never provided.
        unit: The unit requiring it.
    """

    def __init__(self, namespace: str, unit: "SourceUnit"):
        self.namespace = namespace
        self.unit = unit
        super().__init__(
            f"Required namespace '{namespace}' is never provided. Unit: '{unit.id}'"
        )


class MissingEntryPointError(ManifestError):
    """
    Raised when a namespace entry point has no registered provider.

    Attributes:
        namespace: The requested entry point namespace.
    """

    def __init__(self, namespace: str):
        self.namespace = namespace
        super().__init__(
            f"Namespace '{namespace}' is an entry point but is never provided"
        )


class CircularDependencyError(ManifestError):
    """
    Raised when the dependency graph of the working set contains a cycle.

    Attributes:
        cycle: Namespaces along the cycle in dependency direction, with the
            first namespace repeated at the end (``["x", "y", "x"]``).
        units: The units forming the cycle, each requiring the next one.
    """

    def __init__(self, cycle: Sequence[str], units: Sequence["SourceUnit"]):
        self.cycle = list(cycle)
        self.units = list(units)
        super().__init__(f"Circular dependency: {self.path}")

    @property
    def path(self) -> str:
        """The cycle rendered as ``a -> b -> a``."""
        return " -> ".join(self.cycle)


class InvariantViolationError(ManifestError):
    """Raised when the builder's internal bookkeeping is inconsistent."""
