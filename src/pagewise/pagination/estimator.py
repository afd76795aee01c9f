"""Conservative token estimation.

The default heuristic is not tied to any particular model tokenizer. It
takes the larger of a word-based and a character-based estimate so that
both prose and dense markup/code are over-counted rather than under-counted.
Anything with an ``estimate(text) -> int`` method can be used instead.
"""

import math
import re
from typing import Protocol, runtime_checkable

# ASCII semantics: non-ASCII letters count as symbols, which biases high.
_NON_WORD_CHARS = re.compile(r"[^\w\s]", re.ASCII)

CHARS_PER_TOKEN = 4


@runtime_checkable
class TokenEstimator(Protocol):
    """Strategy interface for counting tokens in a text blob."""

    def estimate(self, text: str) -> int:
        ...


class HeuristicTokenEstimator:
    """Default estimator: max(words * 1.3 + symbols * 0.3, chars / 4)."""

    def estimate(self, text: str) -> int:
        """Estimate the token count of ``text``.

        Args:
            text: Arbitrary text

        Returns:
            int: Estimated token count, 0 for empty text
        """
        if not text:
            return 0

        words = len(text.split())
        symbols = len(_NON_WORD_CHARS.findall(text))

        # Tenths in integer arithmetic so 10 words give exactly 13
        word_estimate = math.ceil((words * 13 + symbols * 3) / 10)
        char_estimate = math.ceil(len(text) / CHARS_PER_TOKEN)

        return max(word_estimate, char_estimate)

    def __repr__(self) -> str:
        return "HeuristicTokenEstimator()"


default_estimator = HeuristicTokenEstimator()


def estimate_tokens(text: str) -> int:
    """Estimate tokens with the default heuristic."""
    return default_estimator.estimate(text)
