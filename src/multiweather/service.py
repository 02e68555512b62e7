# orchestration and business rules.
# fan out one thread per provider, collect until every provider answered, one failed, or the deadline hit
# the first error wins, a deadline without errors degrades to 0.0 instead of failing

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as WaitTimeout
from typing import Iterable, List
from .client import AggregationTimeout, ProviderError
from .models import COMPLETED, TIMEOUT, Aggregation, mean
from .providers import WeatherProvider

log = logging.getLogger(__name__)


def provider_name(provider: WeatherProvider) -> str:
    return getattr(provider, "name", type(provider).__name__)


class Aggregator:
    """Averages the current temperature of a city over several providers.

    Providers are fixed at construction. Every call starts its own pool with
    one worker per provider, so calls never share state. On early return the
    pool is released without waiting: providers still in flight finish in the
    background and their results are dropped.
    """

    DEFAULT_DEADLINE = 2.0

    def __init__(
        self,
        providers: Iterable[WeatherProvider],
        deadline: float = DEFAULT_DEADLINE,
        timeout_is_error: bool = False,
    ):
        self.providers = tuple(providers)
        if not self.providers:
            # nothing to average, refuse instead of dividing by zero per request
            raise ValueError("Aggregator needs at least one provider")
        if deadline <= 0:
            raise ValueError(f"deadline must be positive (got {deadline})")
        self.deadline = deadline
        self.timeout_is_error = timeout_is_error

    def temperature(self, city: str) -> float:
        return self.aggregate(city).temp

    def aggregate(self, city: str) -> Aggregation:
        expected = len(self.providers)
        temps: List[float] = []

        pool = ThreadPoolExecutor(max_workers=expected, thread_name_prefix="provider")
        try:
            futures = {pool.submit(p.temperature, city): p for p in self.providers}
            try:
                # deadline counts from here, i.e. right after fan-out
                for fut in as_completed(futures, timeout=self.deadline):
                    exc = fut.exception()
                    if exc is not None:
                        self._fail(futures[fut], city, exc)
                    temps.append(fut.result())
            except WaitTimeout:
                pending = [provider_name(p) for f, p in futures.items() if not f.done()]
                return self._degrade(city, pending, len(temps), expected)
        finally:
            pool.shutdown(wait=False)

        return Aggregation(
            city=city, temp=mean(temps), status=COMPLETED, responded=len(temps), expected=expected
        )

    def _fail(self, provider: WeatherProvider, city: str, exc: BaseException) -> None:
        name = provider_name(provider)
        log.warning("provider %s failed for %s: %s", name, city, exc)
        if isinstance(exc, ProviderError):
            raise exc
        raise ProviderError(f"{name}: {exc}") from exc

    def _degrade(self, city: str, pending: List[str], responded: int, expected: int) -> Aggregation:
        log.warning(
            "deadline of %.2fs hit for %s, still waiting on %s",
            self.deadline, city, ", ".join(pending),
        )
        if self.timeout_is_error:
            raise AggregationTimeout(
                f"timed out after {self.deadline}s waiting for {', '.join(pending)}"
            )
        return Aggregation(city=city, temp=0.0, status=TIMEOUT, responded=responded, expected=expected)
