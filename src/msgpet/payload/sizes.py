from __future__ import annotations

from random import Random

from msgpet.errors import ConfigError

NAMED_SIZES: dict[str, int] = {
    "mouse": 8,
    "chicken": 16,
    "pig": 32,
    "goat": 64,
    "zebra": 128,
    "rhino": 256,
    "hippo": 512,
    "elephant": 1024,
    "whale": 2048,
}

PAYLOAD_ALPHABET = "qwertyuiopasdfghjklzxcvbnmQWERTYUIOPASDFGHJKLZXCVBNM"


def payload_size(value: str) -> int:
    """Resolve a named size or a positive integer string to a byte count."""
    if value in NAMED_SIZES:
        return NAMED_SIZES[value]
    if value.isdigit() and int(value) > 0:
        return int(value)
    names = ", ".join(NAMED_SIZES)
    msg = f"Invalid message size {value!r}, use a positive integer or one of: {names}"
    raise ConfigError(msg)


def random_payload(size: int, seed: int | None = None) -> bytes:
    if size < 1:
        msg = f"Payload size must be positive, got {size}"
        raise ConfigError(msg)
    rng = Random(seed)
    return "".join(rng.choice(PAYLOAD_ALPHABET) for _ in range(size)).encode("ascii")
