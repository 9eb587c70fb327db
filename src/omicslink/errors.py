"""Exceptions raised by OmicsLink harmonization and linkage."""

from __future__ import annotations


class HarmonizationError(ValueError):
    """Base class for identifier harmonization failures."""


class ValidationError(HarmonizationError):
    """Input tables or identifiers do not meet shape preconditions."""


class MalformedIdentifierError(ValidationError):
    """Raw barcode is too short (or not text) to derive a canonical id."""

    def __init__(self, barcode: object, prefix_length: int, position: int | None = None) -> None:
        self.barcode = barcode
        self.prefix_length = prefix_length
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(
            f"Malformed barcode{where}: {barcode!r} "
            f"(need at least {prefix_length} characters)"
        )


class EmptyIntersectionError(HarmonizationError):
    """Two tables share no canonical identifiers after normalization."""

    def __init__(self, left: str, right: str, left_count: int, right_count: int) -> None:
        self.left = left
        self.right = right
        self.left_count = left_count
        self.right_count = right_count
        super().__init__(
            f"No shared identifiers between '{left}' ({left_count} ids) "
            f"and '{right}' ({right_count} ids)"
        )
