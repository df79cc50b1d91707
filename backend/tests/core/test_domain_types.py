"""Domain Types — verifies wire tags of the domain enums.

Tests:
    - Enum values are the exact wire tags
    - Acceptance parses from the bare vote strings only
"""

import pytest

from ledger_gateway.core.domain_types import (
    MAX_U64, Acceptance, PayloadKind, RequestKind, SerialNumber,
)


def test_enum_values_are_wire_tags():
    assert [a.value for a in Acceptance] == ["Accept", "Reject"]
    assert [k.value for k in PayloadKind] == ["Json", "JsonPatch"]
    assert [k.value for k in RequestKind] == ["Create", "State"]


def test_acceptance_parses_vote_strings():
    assert Acceptance("Accept") is Acceptance.ACCEPT
    with pytest.raises(ValueError):
        Acceptance("accept")


def test_serial_number_range():
    assert SerialNumber(0) == 0
    assert MAX_U64 == 18446744073709551615
