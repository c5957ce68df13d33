from __future__ import annotations

from msgpet.payload.sizes import NAMED_SIZES, PAYLOAD_ALPHABET, payload_size, random_payload

__all__ = ["NAMED_SIZES", "PAYLOAD_ALPHABET", "payload_size", "random_payload"]
