"""
Core type definitions for nsmanifest.

A SourceUnit is the engine's view of one input: its identity, its content and
the namespaces it declares. Units are built once by whatever scanned the input
and are only referenced (never copied) afterwards.
"""

from typing import FrozenSet, List

from pydantic import BaseModel, ConfigDict, Field

from ..config import DEFAULT_ROOT_NAMESPACE, SortStrategy
from .errors import InvalidRuntimeBaseError


class SourceUnit(BaseModel):
    """
    Immutable view of one input and its declared dependencies.

    A unit with empty ``provides`` is a "moocher". A runtime-base unit must
    not declare anything explicitly; it implicitly provides ``root_namespace``.
    """
    id: str
    content: str = ""
    provides: FrozenSet[str] = Field(default_factory=frozenset)
    requires: FrozenSet[str] = Field(default_factory=frozenset)
    is_runtime_base: bool = False
    root_namespace: str = DEFAULT_ROOT_NAMESPACE

    model_config = ConfigDict(frozen=True, extra="forbid")

    def model_post_init(self, __context) -> None:
        if not self.is_runtime_base:
            return
        if self.provides or self.requires:
            raise InvalidRuntimeBaseError(self.id, self.provides, self.requires)
        object.__setattr__(self, "provides", frozenset({self.root_namespace}))

    @property
    def is_moocher(self) -> bool:
        return not self.provides

    def sorted_provides(self) -> List[str]:
        return sorted(self.provides)

    def sorted_requires(self) -> List[str]:
        return sorted(self.requires)

    def representative_namespace(self) -> str:
        """First provided namespace in sorted order, or the id for moochers."""
        if self.provides:
            return min(self.provides)
        return self.id

    def _identity(self):
        return (
            self.id,
            self.content,
            self.provides,
            self.requires,
            self.is_runtime_base,
        )

    def __hash__(self):
        return hash(self._identity())

    def __eq__(self, other):
        if isinstance(other, SourceUnit):
            return self._identity() == other._identity()
        return False

    def __str__(self) -> str:
        return self.id
