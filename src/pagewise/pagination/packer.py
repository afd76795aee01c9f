"""Sequential packing of pages into token-budgeted chunks.

The packer is an incremental state machine: sessions feed it one page at a
time with :meth:`ChunkPacker.offer` and call :meth:`ChunkPacker.flush` once
the input is exhausted. It never reorders pages and never looks ahead, so a
chunk's ``next_cursor`` always names the page that did not fit. Replaying the
input from that cursor through a fresh packer yields exactly the chunks an
uninterrupted run would have produced from there on.
"""

from typing import Iterable

from pagewise.logging import get_logger
from pagewise.pagination.estimator import TokenEstimator, default_estimator
from pagewise.pagination.models import Chunk, PageRecord, TokenBudget
from pagewise.pagination.truncator import truncate

logger = get_logger("pagewise.pagination.packer")


class ChunkPacker:
    """Pack an ordered stream of pages into chunks bounded by a token budget.

    A page that would push the pending chunk over budget closes that chunk
    first. A page that exceeds the budget on its own is truncated to
    ``budget.truncation_target`` and becomes the only page of its chunk. A
    page that exactly fills the remaining budget is kept (the check is
    strictly greater-than).

    Example:
        >>> packer = ChunkPacker(TokenBudget(max_tokens_per_chunk=100_000))
        >>> chunks = [c for page in pages if (c := packer.offer(page))]
        >>> if (last := packer.flush()) is not None:
        ...     chunks.append(last)
    """

    def __init__(
        self,
        budget: TokenBudget,
        estimator: TokenEstimator | None = None,
    ):
        """Initialize an empty packer.

        Args:
            budget: Token budget, fixed for the packer's lifetime
            estimator: Estimator used when truncating oversized pages
        """
        self.budget = budget
        self.estimator = estimator or default_estimator
        self._pages: list[PageRecord] = []
        self._tokens = 0

    @property
    def pending_pages(self) -> list[PageRecord]:
        """Pages accepted but not yet emitted."""
        return list(self._pages)

    @property
    def pending_tokens(self) -> int:
        return self._tokens

    @property
    def is_empty(self) -> bool:
        return not self._pages

    def offer(self, page: PageRecord, cursor: str | None = None) -> Chunk | None:
        """Add a page, emitting the pending chunk if the page does not fit.

        Args:
            page: Next page in input order
            cursor: Continuation cursor naming this page; defaults to its URL

        Returns:
            Chunk | None: The chunk closed by this page, if any
        """
        emitted = None
        limit = self.budget.max_tokens_per_chunk

        if self._pages and self._tokens + page.token_count > limit:
            emitted = self._emit(has_more=True, next_cursor=cursor or page.url)

        if page.token_count > limit:
            page = self._truncate(page)

        self._pages.append(page)
        self._tokens += page.token_count

        return emitted

    def flush(self) -> Chunk | None:
        """Emit whatever is pending as the final chunk.

        Returns:
            Chunk | None: Final chunk, or None if nothing is pending
        """
        if not self._pages:
            return None
        return self._emit(has_more=False, next_cursor=None)

    def pack(self, pages: Iterable[PageRecord]) -> list[Chunk]:
        """Offer every page in order and flush.

        Args:
            pages: Ordered pages

        Returns:
            list[Chunk]: All emitted chunks, in order
        """
        chunks = []
        for page in pages:
            chunk = self.offer(page)
            if chunk is not None:
                chunks.append(chunk)
        final = self.flush()
        if final is not None:
            chunks.append(final)
        return chunks

    def _truncate(self, page: PageRecord) -> PageRecord:
        target = self.budget.truncation_target
        content, tokens = truncate(page.content, target, self.estimator)
        logger.info(
            f"Page exceeds token budget, truncating: {page.url}",
            tokens=page.token_count,
            target=target,
            truncated_tokens=tokens,
        )
        return page.model_copy(
            update={"content": content, "token_count": tokens, "truncated": True}
        )

    def _emit(self, has_more: bool, next_cursor: str | None) -> Chunk:
        chunk = Chunk(
            pages=self._pages,
            total_tokens=self._tokens,
            has_more=has_more,
            next_cursor=next_cursor,
        )
        self._pages = []
        self._tokens = 0
        logger.debug(
            "Emitted chunk",
            pages=chunk.page_count,
            tokens=chunk.total_tokens,
            next_cursor=next_cursor,
        )
        return chunk

    def __repr__(self) -> str:
        return (
            f"<ChunkPacker budget={self.budget.max_tokens_per_chunk} "
            f"pending={len(self._pages)} tokens={self._tokens}>"
        )
