"""Typed document-store addresses.

A path is a tuple of non-empty segments. An odd number of segments
addresses a collection, an even number addresses a single document.
Both types refuse the wrong parity on construction, so any reference
that exists is consistent with the store's addressing scheme.
"""

from __future__ import annotations

from dataclasses import dataclass


def _check_segments(segments: tuple[str, ...]) -> None:
    if not segments:
        raise ValueError("Path must have at least one segment")
    for segment in segments:
        if not isinstance(segment, str) or not segment:
            raise ValueError(f"Invalid empty path segment in {segments!r}")
        if "/" in segment:
            raise ValueError(f"Path segment must not contain '/': {segment!r}")


@dataclass(frozen=True)
class CollectionPath:
    """Address of a collection (odd segment count)."""

    segments: tuple[str, ...]

    def __post_init__(self) -> None:
        _check_segments(self.segments)
        if len(self.segments) % 2 != 1:
            raise ValueError(
                f"Collection path needs an odd segment count: {'/'.join(self.segments)}"
            )

    @classmethod
    def from_string(cls, path: str) -> CollectionPath:
        return cls(tuple(path.strip("/").split("/")))

    @property
    def id(self) -> str:
        return self.segments[-1]

    @property
    def path(self) -> str:
        return "/".join(self.segments)

    @property
    def parent(self) -> DocumentPath | None:
        """Owning document, or None for a root collection."""
        if len(self.segments) == 1:
            return None
        return DocumentPath(self.segments[:-1])

    def document(self, document_id: str) -> DocumentPath:
        return DocumentPath((*self.segments, document_id))

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class DocumentPath:
    """Address of a single document (even segment count)."""

    segments: tuple[str, ...]

    def __post_init__(self) -> None:
        _check_segments(self.segments)
        if len(self.segments) % 2 != 0:
            raise ValueError(
                f"Document path needs an even segment count: {'/'.join(self.segments)}"
            )

    @classmethod
    def from_string(cls, path: str) -> DocumentPath:
        return cls(tuple(path.strip("/").split("/")))

    @property
    def id(self) -> str:
        return self.segments[-1]

    @property
    def path(self) -> str:
        return "/".join(self.segments)

    @property
    def parent(self) -> CollectionPath:
        """Collection holding this document."""
        return CollectionPath(self.segments[:-1])

    def collection(self, collection_id: str) -> CollectionPath:
        return CollectionPath((*self.segments, collection_id))

    def __str__(self) -> str:
        return self.path


StorePath = CollectionPath | DocumentPath
