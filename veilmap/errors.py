"""
Error types raised by the coordinate resolution engine.

All of them are ValueError subclasses so callers that only care about
"bad input" can catch the builtin. Errors are scoped to a single entity;
the dataset builder catches them per record and keeps going.
"""
from __future__ import annotations

from typing import Optional


class LocationError(ValueError):
    """Base class for every location-resolution failure."""


class InvalidAreaCode(LocationError):
    """The area-code is empty or otherwise unusable."""


class InvalidCharacter(InvalidAreaCode):
    """An area-code contains a symbol outside the base-32 alphabet."""

    def __init__(self, code: str, char: str, position: int) -> None:
        self.code = code
        self.char = char
        self.position = position
        super().__init__(f"Invalid area-code character {char!r} at position {position} in {code!r}")


class MissingLocationData(LocationError):
    """Entity has no authorized precise point and no area-code."""

    def __init__(self, entity_id: str, kind: Optional[str] = None) -> None:
        self.entity_id = entity_id
        self.kind = kind
        label = f"{kind} {entity_id}" if kind else str(entity_id)
        super().__init__(f"{label} missing location data: needs an authorized precise point or an area-code")


class InvalidCoordinate(LocationError):
    """Latitude/longitude outside the valid domain or not finite."""


class InvalidEntity(LocationError):
    """An upstream entity record could not be parsed."""
