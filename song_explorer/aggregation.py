from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Iterable, List, Optional

from .composer import summarize
from .models import (
    Failure,
    ProviderConfig,
    ProviderError,
    ProviderOutcome,
    Skipped,
    SongMetadata,
    Success,
)
from .providers.client import ProviderClient

logger = logging.getLogger(__name__)


class AggregationEngine:
    """Queries every configured provider concurrently and waits for all of them.

    One outcome is produced per provider passed in, in the same order.
    Unconfigured providers are recorded as Skipped without a network call; a
    provider that errors, times out or answers with an unusable body becomes
    a Failure and never affects its siblings.
    """

    def __init__(
        self,
        client: Optional[ProviderClient] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.client = client or ProviderClient()
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else self.client.timeout

    async def aggregate(
        self,
        metadata: SongMetadata,
        providers: Iterable[ProviderConfig],
    ) -> List[ProviderOutcome]:
        providers = list(providers)
        outcomes: List[Optional[ProviderOutcome]] = [None] * len(providers)
        pending: List[int] = []
        tasks: List[asyncio.Future] = []
        for index, provider in enumerate(providers):
            if not provider.is_configured:
                logger.debug("Skipping unconfigured provider %s", provider.name)
                outcomes[index] = Skipped(provider.name)
                continue
            pending.append(index)

        executor = ThreadPoolExecutor(max_workers=max(len(pending), 1), thread_name_prefix="provider")
        try:
            for index in pending:
                tasks.append(asyncio.ensure_future(self._query(executor, providers[index], metadata)))
            results = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            # Hung calls keep their worker thread; callers do not wait for it.
            executor.shutdown(wait=False, cancel_futures=True)
        for index, result in zip(pending, results):
            provider = providers[index]
            if isinstance(result, BaseException):
                logger.warning("Provider %s crashed: %r", provider.name, result)
                outcomes[index] = Failure(provider.name, f"unexpected error: {result!r}")
            else:
                outcomes[index] = result

        final = [outcome for outcome in outcomes if outcome is not None]
        counts = summarize(final)
        logger.info(
            "Aggregated %d provider(s): %d succeeded, %d failed, %d skipped",
            len(final),
            counts["success"],
            counts["failure"],
            counts["skipped"],
        )
        return final

    def aggregate_sync(
        self,
        metadata: SongMetadata,
        providers: Iterable[ProviderConfig],
    ) -> List[ProviderOutcome]:
        return asyncio.run(self.aggregate(metadata, providers))

    async def _query(
        self,
        executor: Executor,
        provider: ProviderConfig,
        metadata: SongMetadata,
    ) -> ProviderOutcome:
        loop = asyncio.get_running_loop()
        call = loop.run_in_executor(executor, self.client.fetch, provider, metadata)
        try:
            text = await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except ProviderError as exc:
            logger.warning("Provider %s failed: %s", provider.name, exc)
            return Failure(provider.name, str(exc))
        except asyncio.TimeoutError:
            logger.warning("Provider %s timed out after %gs", provider.name, self.timeout_seconds)
            return Failure(provider.name, f"timed out after {self.timeout_seconds:g}s")
        logger.debug("Provider %s returned %d characters", provider.name, len(text))
        return Success(provider.name, text)
