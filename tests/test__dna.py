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

from genomecount import Symbol, decode, to_string

import pytest


@pytest.mark.parametrize(["capacity", "source", "result"], [
    (4, "ACGT", [Symbol.A, Symbol.C, Symbol.G, Symbol.T]),
    (4, "acgt", [Symbol.A, Symbol.C, Symbol.G, Symbol.T]),
    (4, b"gAtC", [Symbol.G, Symbol.A, Symbol.T, Symbol.C]),
    (5, "AC\nGT", [Symbol.A, Symbol.C, Symbol.G, Symbol.T]),
    (3, "AC\nGT", [Symbol.A, Symbol.C]),
    (10, "AC", [Symbol.A, Symbol.C]),
    (6, "NNNNNN", []),
    (0, "ACGT", []),
    (3, "AéC", [Symbol.A, Symbol.C]),
])
def test_decode(capacity, source, result):
    assert decode(capacity, source) == bytes(result)


def test_decode_never_exceeds_capacity():
    for capacity in range(10):
        assert len(decode(capacity, "GATTACA")) <= capacity


def test_to_string():
    assert to_string(decode(7, "gattaca")) == "GATTACA"


def test_to_string_empty():
    assert to_string(b"") == ""
