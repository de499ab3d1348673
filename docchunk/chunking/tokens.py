"""Character-count token estimation with a bounded memo cache."""

import logging
import math

from docchunk.config import ChunkingConfig

logger = logging.getLogger(__name__)


def estimate_tokens(text: str | None, chars_per_token: int = 4) -> int:
    """Estimate token count for a text string.

    Uses ``ceil(len(text) / chars_per_token)``. This deliberately
    overestimates for typical English prose, so budgets computed from it
    err on the safe side.

    Args:
        text: The text to estimate tokens for.
        chars_per_token: Characters assumed per token.

    Returns:
        Estimated token count, 0 for empty or missing text.
    """
    if not text:
        return 0
    return math.ceil(len(text) / chars_per_token)


class TokenEstimator:
    """Memoizing wrapper around ``estimate_tokens``.

    The cache is keyed by exact text and is cleared wholesale when it
    reaches ``max_entries``. One estimator belongs to one pipeline run;
    it is not thread-safe.

    Args:
        chars_per_token: Characters assumed per token.
        max_entries: Cache size that triggers a full reset.
    """

    def __init__(self, chars_per_token: int = 4, max_entries: int = 10_000) -> None:
        self._chars_per_token = chars_per_token
        self._max_entries = max_entries
        self._cache: dict[str, int] = {}

    @classmethod
    def from_config(cls, config: ChunkingConfig) -> "TokenEstimator":
        return cls(
            chars_per_token=config.chars_per_token,
            max_entries=config.token_cache_size,
        )

    def estimate(self, text: str | None) -> int:
        """Return the (cached) token estimate for ``text``."""
        if not text:
            return 0
        cached = self._cache.get(text)
        if cached is not None:
            return cached

        if len(self._cache) >= self._max_entries:
            logger.debug("Token cache reached %d entries, clearing", len(self._cache))
            self._cache.clear()

        tokens = estimate_tokens(text, self._chars_per_token)
        self._cache[text] = tokens
        return tokens

    __call__ = estimate

    def clear(self) -> None:
        """Drop every cached estimate."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
