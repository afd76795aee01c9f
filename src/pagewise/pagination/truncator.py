"""Truncation of a single oversized text to a token target."""

import math

from pagewise.logging import get_logger
from pagewise.pagination.estimator import TokenEstimator, default_estimator

logger = get_logger("pagewise.pagination.truncator")

TRUNCATION_MARKER = "\n\n[Content truncated due to token limit]"


def truncate(
    text: str,
    target_tokens: int,
    estimator: TokenEstimator | None = None,
) -> tuple[str, int]:
    """Shrink ``text`` so its estimate fits within ``target_tokens``.

    The cut point is derived from the text's own tokens-per-character
    ratio, then the marker is appended and the result re-estimated. If the
    re-estimate still overshoots, the cut is moved left proportionally
    until it fits or only the marker is left.

    Args:
        text: Text whose estimate exceeds ``target_tokens``
        target_tokens: Token target, must be positive
        estimator: Estimator to use (defaults to the heuristic)

    Returns:
        tuple[str, int]: The returned text and the estimator's count for it
    """
    estimator = estimator or default_estimator
    tokens = estimator.estimate(text)

    if not text or target_tokens <= 0 or tokens <= target_tokens:
        return text, tokens

    ratio = tokens / len(text)
    max_chars = min(len(text), math.floor(target_tokens / ratio))

    while True:
        candidate = text[:max_chars] + TRUNCATION_MARKER
        candidate_tokens = estimator.estimate(candidate)
        if candidate_tokens <= target_tokens or max_chars == 0:
            break
        # Step left in proportion to the overshoot, at least one character
        shrunk = math.floor(max_chars * target_tokens / candidate_tokens)
        max_chars = max(0, min(max_chars - 1, shrunk))

    if candidate_tokens > target_tokens:
        logger.warning(
            "Truncation target below marker cost",
            target_tokens=target_tokens,
            tokens=candidate_tokens,
        )

    logger.debug(
        f"Truncated {len(text)} chars to {max_chars}",
        original_tokens=tokens,
        tokens=candidate_tokens,
    )
    return candidate, candidate_tokens
