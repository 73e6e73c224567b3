# Copyright (C) 2022 Leiden University Medical Center
# This file is part of genomecount
#
# genomecount is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# genomecount is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with genomecount.  If not, see <https://www.gnu.org/licenses/

import enum
from typing import Union


class Symbol(enum.IntEnum):
    A = 0
    C = 1
    G = 2
    T = 3


# Sequences are bytes objects holding Symbol values, not ASCII letters.
Sequence = bytes

_LETTERS = "ACGT"
_DNA_CHARACTERS = b"ACGTacgt"
_DELETE = bytes(c for c in range(256) if c not in _DNA_CHARACTERS)
_TO_SYMBOLS = bytearray(range(256))
for _symbol in Symbol:
    _TO_SYMBOLS[ord(_symbol.name)] = _symbol
    _TO_SYMBOLS[ord(_symbol.name.lower())] = _symbol
_TO_SYMBOLS = bytes(_TO_SYMBOLS)
_TO_LETTERS = bytes.maketrans(bytes(range(len(_LETTERS))), _LETTERS.encode())


def decode(dest_capacity: int, source: Union[str, bytes]) -> Sequence:
    """
    Decode at most dest_capacity characters of source into a Sequence.

    Characters other than a, c, g and t (in either case) are skipped. They
    count against dest_capacity but do not produce a symbol, so the result
    can be shorter than dest_capacity.
    """
    if dest_capacity <= 0:
        return b""
    chunk = source[:dest_capacity]
    if isinstance(chunk, str):
        # Non-ASCII characters are never DNA.
        chunk = chunk.encode("ascii", errors="ignore")
    return bytes(chunk).translate(_TO_SYMBOLS, _DELETE)


def to_string(sequence: Sequence) -> str:
    """Convert a Sequence back to its uppercase letters."""
    return sequence.translate(_TO_LETTERS).decode("ascii")
