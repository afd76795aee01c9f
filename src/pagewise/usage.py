"""Delivered-token accounting per operation."""

from collections import Counter

from pagewise.logging import get_logger

logger = get_logger("pagewise.usage")


class TokenUsageTracker:
    """Running totals of tokens delivered, keyed by operation name."""

    def __init__(self) -> None:
        self._usage: Counter[str] = Counter()

    def track(self, operation: str, tokens: int) -> None:
        """Add ``tokens`` to ``operation``'s total."""
        if tokens < 0:
            raise ValueError("tokens must be non-negative")
        self._usage[operation] += tokens
        logger.debug(f"Tracked {tokens} tokens for {operation}", total=self._usage[operation])

    @property
    def total(self) -> int:
        return sum(self._usage.values())

    def get(self, operation: str) -> int:
        return self._usage[operation]

    def snapshot(self) -> dict[str, int]:
        """Copy of the per-operation totals."""
        return dict(self._usage)

    def reset(self) -> None:
        self._usage.clear()
        logger.info("Token usage statistics reset")

    def __repr__(self) -> str:
        return f"<TokenUsageTracker total={self.total} operations={len(self._usage)}>"
