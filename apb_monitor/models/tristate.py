#    Copyright 2026 Two Sigma Open Source, LLC
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.

"""Four-state sampled values.

A sampled bus signal is either a known logic value or unknown (X or Z on any
bit). The two cases are modeled as separate types so that comparisons are
total and explicit:

    Known(5) == Known(5)      -> True  (unchanged)
    UNKNOWN == UNKNOWN        -> True  (unchanged)
    Known(0) == UNKNOWN       -> False (changed)

Simulators and VCD traces present values as binary strings ("0101", "x",
"01z1"); decode_bits() and decode_bit() turn those into TriState values.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")

# Characters accepted as a resolved logic level
_RESOLVED_CHARS = frozenset("01")


@dataclass(frozen=True)
class Known(Generic[T]):
    """A fully resolved sampled value."""

    value: T

    def __str__(self) -> str:
        if isinstance(self.value, bool):
            return str(int(self.value))
        if isinstance(self.value, int):
            return f"0x{self.value:x}"
        return str(self.value)


@dataclass(frozen=True)
class Unknown:
    """A sampled value with at least one X or Z bit."""

    def __str__(self) -> str:
        return "X"


UNKNOWN = Unknown()
"""Shared Unknown instance (all Unknown instances compare equal)."""

TriState = Union[Known[T], Unknown]


def is_known(value: "TriState[T]") -> bool:
    """Return True if the value is resolved."""
    return isinstance(value, Known)


def is_true(value: "TriState[bool]") -> bool:
    """Return True only for Known(True); Unknown is never true."""
    return isinstance(value, Known) and bool(value.value)


def is_false(value: "TriState[bool]") -> bool:
    """Return True only for Known(False); Unknown is never false."""
    return isinstance(value, Known) and not value.value


def decode_bits(text: str) -> "TriState[int]":
    """Decode a binary string (MSB first) into a TriState integer.

    Any character other than 0/1 (x, z, u, w, -, ...) makes the whole value
    Unknown.

    Raises:
        ValueError: If text is empty.
    """
    text = text.strip()
    if not text:
        raise ValueError("Cannot decode an empty bit string")
    if set(text) <= _RESOLVED_CHARS:
        return Known(int(text, 2))
    return UNKNOWN


def decode_bit(text: str) -> "TriState[bool]":
    """Decode a one-bit string into a TriState boolean.

    Multi-bit strings are accepted; the value is true when it is non-zero.
    """
    decoded = decode_bits(text)
    if isinstance(decoded, Known):
        return Known(bool(decoded.value))
    return UNKNOWN
