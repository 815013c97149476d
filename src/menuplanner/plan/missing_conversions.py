"""Fire-and-forget recording of conversions missing from the conversion table."""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from tenacity import retry, stop_after_attempt, wait_exponential

from menuplanner.config import get_settings
from menuplanner.logging_config import get_logger
from menuplanner.schemas import MissingConversion

logger = get_logger(__name__)

MissingConversionSink = Callable[[list[MissingConversion]], Awaitable[Any]]


class MissingConversionReporter:
    """
    Hands missing conversions to a sink (usually the conversion table store)
    in a background task.

    Reports at most once per session: repeated builds of the same shopping
    list do not report the same gaps again until `reset()` is called.
    Failures are retried, then logged; they never reach the caller.
    """

    def __init__(
        self,
        sink: MissingConversionSink,
        max_retries: int | None = None,
        backoff_base: float = 0.5,
        backoff_max: float | None = None,
    ):
        settings = get_settings()
        self._sink = sink
        self.max_retries = max(1, max_retries or settings.missing_conversion_max_retries)
        self.backoff_base = backoff_base
        self.backoff_max = (
            backoff_max if backoff_max is not None else settings.missing_conversion_backoff_max
        )
        self._reported = False
        self._tasks: set[asyncio.Task] = set()

    @property
    def reported(self) -> bool:
        return self._reported

    def reset(self) -> None:
        """Start a new session; the next report is sent again."""
        self._reported = False

    def report(self, missing: Iterable[MissingConversion]) -> asyncio.Task | None:
        """
        Schedule recording of missing conversions without waiting for it.

        Returns the background task, or None when nothing was scheduled.
        """
        missing = list(missing)
        if not missing or self._reported:
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                f"No running event loop, {len(missing)} missing conversions not recorded"
            )
            return None

        self._reported = True
        task = loop.create_task(self._persist(missing))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for all scheduled reports to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _persist(self, missing: list[MissingConversion]) -> None:
        @retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.backoff_base, max=self.backoff_max),
            reraise=True,
        )
        async def _do_record() -> Any:
            return await self._sink(missing)

        try:
            await _do_record()
            logger.info(f"Recorded {len(missing)} missing conversions for curation")
        except Exception:
            logger.exception(f"Failed to record {len(missing)} missing conversions")
