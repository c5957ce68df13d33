from __future__ import annotations

ERROR_DELIMITER = ": "


def classify_error(description: str) -> str:
    """Bucket a transport error by the text after its last ``": "``."""
    return description.split(ERROR_DELIMITER)[-1]
