from __future__ import annotations

import pytest
from hypothesis import given, strategies as st

from msgpet.errors import ConfigError
from msgpet.payload import NAMED_SIZES, PAYLOAD_ALPHABET, payload_size, random_payload


def test_named_sizes() -> None:
    assert payload_size("mouse") == 8
    assert payload_size("whale") == 2048
    assert sorted(NAMED_SIZES.values()) == [2**n for n in range(3, 12)]


def test_numeric_size() -> None:
    assert payload_size("100") == 100


@pytest.mark.parametrize("value", ["0", "-5", "dragon", "", "1.5"])
def test_invalid_size(value: str) -> None:
    with pytest.raises(ConfigError):
        payload_size(value)


@given(size=st.integers(min_value=1, max_value=4096), seed=st.integers())
def test_random_payload_shape(size: int, seed: int) -> None:
    payload = random_payload(size, seed=seed)
    assert len(payload) == size
    assert set(payload.decode("ascii")) <= set(PAYLOAD_ALPHABET)
    assert payload == random_payload(size, seed=seed)
