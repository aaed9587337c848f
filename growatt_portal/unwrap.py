"""Rules for telling real portal data apart from empty responses.

The portal rarely reports errors explicitly. When a session has lapsed it
answers with ``[]``, ``{}``, ``{"obj": null}`` and similar payloads, so each
endpoint states where its data lives and the pipeline rejects empty values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import GrowattInvalidResponseError

EMPTY_RESPONSE = "empty response"
INVALID_STRUCTURE = "invalid response structure"


class UnwrapMode(Enum):
    """Where the payload of a response is found."""

    ARRAY = "array"  # top-level non-empty list
    OBJECT_FIELD = "object_field"  # value under "obj" (or deeper)
    BARE = "bare"  # the top-level value itself


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (dict, list)) and not value)


@dataclass(frozen=True)
class Unwrap:
    """An unwrap strategy passed along with each authenticated call."""

    mode: UnwrapMode
    path: tuple[str, ...] = ()

    @classmethod
    def array(cls) -> Unwrap:
        """Expect a non-empty top-level array."""
        return cls(UnwrapMode.ARRAY)

    @classmethod
    def field(cls, *path: str) -> Unwrap:
        """Expect a non-empty value under ``obj`` or a nested field of it."""
        return cls(UnwrapMode.OBJECT_FIELD, path or ("obj",))

    @classmethod
    def bare(cls) -> Unwrap:
        """Expect a non-null, non-empty top-level value."""
        return cls(UnwrapMode.BARE)

    def apply(self, payload: Any) -> Any:
        """
        Return the unwrapped value of a decoded response.

        Args:
            payload: The decoded JSON body.

        Returns:
            The part of the payload holding the endpoint's data.

        Raises:
            GrowattInvalidResponseError: If the value is missing or empty.

        """
        if self.mode is UnwrapMode.ARRAY:
            if not isinstance(payload, list) or not payload:
                raise GrowattInvalidResponseError(EMPTY_RESPONSE)
            return payload

        if self.mode is UnwrapMode.BARE:
            if payload is None or (isinstance(payload, dict) and not payload):
                raise GrowattInvalidResponseError(EMPTY_RESPONSE)
            return payload

        # A null or empty parent of a nested field counts as a missing field
        value = payload
        for key in self.path:
            if not isinstance(value, dict) or key not in value:
                raise GrowattInvalidResponseError(INVALID_STRUCTURE)
            value = value[key]
        if _is_empty(value):
            raise GrowattInvalidResponseError(EMPTY_RESPONSE)
        return value

    def describe(self) -> str:
        """Return a short label for log messages."""
        if self.mode is UnwrapMode.OBJECT_FIELD:
            return ".".join(self.path)
        return self.mode.value


ARRAY = Unwrap.array()
OBJ = Unwrap.field()
BARE = Unwrap.bare()
