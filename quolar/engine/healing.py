"""Auto-healing policy for failing tests.

Healing asks the test framework to propose a fix (usually a new selector)
for each failure and accepts the fix only when the framework is confident
enough. Attempts run sequentially or, when allowed, with bounded
concurrency; the accepted test names always come back in failure order.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence

import structlog

from quolar.models.domain import HealResult, TestFailure

log = structlog.get_logger(__name__)

HealFunction = Callable[[TestFailure], Awaitable[HealResult]]


class HealingPolicy:
    """Decide which failures count as healed.

    Args:
        threshold: Minimum ``HealResult.confidence`` (0-100) for a heal to
            be accepted.
    """

    def __init__(self, threshold: float) -> None:
        self.threshold = threshold

    def is_healed(self, result: HealResult) -> bool:
        """A heal counts only if it succeeded with enough confidence."""
        return result.success and result.confidence >= self.threshold

    async def heal_all(
        self,
        failures: Sequence[TestFailure],
        heal: HealFunction,
        max_concurrency: int = 1,
    ) -> list[str]:
        """Attempt to heal every failure.

        Args:
            failures: Failures in reporting order.
            heal: Coroutine function asking the framework for a fix.
            max_concurrency: Upper bound on in-flight heal calls. ``1``
                runs strictly one after another.

        Returns:
            Names of healed tests, in the order of ``failures``.

        Raises:
            Whatever ``heal`` raises. The first error aborts the remaining
            attempts.
        """
        if max_concurrency <= 1:
            results = []
            for failure in failures:
                results.append(await heal(failure))
        else:
            results = await self._heal_bounded(failures, heal, max_concurrency)

        healed = []
        for failure, result in zip(failures, results):
            if self.is_healed(result):
                healed.append(failure.test_name)
                log.info(
                    "test_healed",
                    test_name=failure.test_name,
                    new_selector=result.new_selector,
                    confidence=result.confidence,
                )
            else:
                log.info(
                    "test_not_healed",
                    test_name=failure.test_name,
                    success=result.success,
                    confidence=result.confidence,
                    threshold=self.threshold,
                )
        return healed

    @staticmethod
    async def _heal_bounded(
        failures: Sequence[TestFailure],
        heal: HealFunction,
        max_concurrency: int,
    ) -> list[HealResult]:
        semaphore = asyncio.Semaphore(max_concurrency)

        async def heal_one(failure: TestFailure) -> HealResult:
            async with semaphore:
                return await heal(failure)

        tasks = [asyncio.create_task(heal_one(failure)) for failure in failures]
        try:
            return await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
