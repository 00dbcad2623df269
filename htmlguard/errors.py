from __future__ import annotations


class ContentTooLargeError(ValueError):
    """Raised when content exceeds the configured byte ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"content is {size} bytes, limit is {limit} bytes")
        self.size = size
        self.limit = limit
