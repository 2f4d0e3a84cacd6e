"""Circuit breaker and retry for embedding provider calls.

Only provider clients use these. The memory stores and the vector index
never retry: a provider failure that survives the provider's own retries
reaches the caller unchanged.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from talae_memory.core.base import ServiceErrorDetails
from talae_memory.core.errors import RateLimitError, ServiceError, TimeoutError
from talae_memory.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Fails fast once a provider keeps failing.

    ``failure_threshold`` consecutive failures open the circuit. After
    ``recovery_timeout`` seconds the next call is let through as a probe
    (half-open); ``success_threshold`` successful probes close the circuit
    again, a single failed probe reopens it.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        expected_exception_types: tuple[type[Exception], ...] = (Exception,),
        success_threshold: int = 2,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            name: Circuit name used in logs and errors
            failure_threshold: Consecutive failures that open the circuit
            recovery_timeout: Seconds an open circuit waits before probing
            expected_exception_types: Exceptions that count as provider failures
            success_threshold: Successful probes needed to close the circuit
            clock: Monotonic time source
        """
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception_types = expected_exception_types
        self.success_threshold = success_threshold
        self._clock = clock

        self._state = CircuitState.CLOSED
        self.consecutive_failures = 0
        self.probe_successes = 0
        self.opened_at: float | None = None
        self.last_exception: Exception | None = None

    @property
    def state(self) -> CircuitState:
        """Current state; an open circuit past its timeout reports half-open."""
        if (
            self._state is CircuitState.OPEN
            and self.opened_at is not None
            and self._clock() - self.opened_at >= self.recovery_timeout
        ):
            self._transition(CircuitState.HALF_OPEN)
        return self._state

    @property
    def is_open(self) -> bool:
        return self.state is CircuitState.OPEN

    def _transition(self, state: CircuitState) -> None:
        previous, self._state = self._state, state
        if state is CircuitState.OPEN:
            self.opened_at = self._clock()
        if state is not CircuitState.HALF_OPEN:
            self.probe_successes = 0
        if state is CircuitState.CLOSED:
            self.consecutive_failures = 0
            self.last_exception = None

        log = logger.warning if state is CircuitState.OPEN else logger.info
        log(
            f"Circuit '{self.name}' {previous.value} -> {state.value}",
            consecutive_failures=self.consecutive_failures,
            last_exception=str(self.last_exception) if self.last_exception else None,
        )

    def _on_success(self) -> None:
        if self._state is CircuitState.HALF_OPEN:
            self.probe_successes += 1
            if self.probe_successes >= self.success_threshold:
                self._transition(CircuitState.CLOSED)
        else:
            self.consecutive_failures = 0

    def _on_failure(self, error: Exception) -> None:
        self.last_exception = error
        self.consecutive_failures += 1
        if self._state is CircuitState.HALF_OPEN or self.consecutive_failures >= self.failure_threshold:
            self._transition(CircuitState.OPEN)

    async def call_async(
        self,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Run ``func`` unless the circuit is open.

        Raises:
            ServiceError: If the circuit is open
            Whatever ``func`` raises, after counting it when it is an expected failure
        """
        if self.state is CircuitState.OPEN:
            reason = f" (last error: {self.last_exception})" if self.last_exception else ""
            raise ServiceError(
                message=f"Circuit '{self.name}' is open{reason}",
                details=ServiceErrorDetails(
                    source="circuit_breaker",
                    operation=getattr(func, "__name__", "call"),
                    service_name=self.name,
                    status_code=503,
                ),
            )

        try:
            result = await func(*args, **kwargs)
        except self.expected_exception_types as e:
            self._on_failure(e)
            raise
        self._on_success()
        return result

    def snapshot(self) -> dict[str, Any]:
        """State for diagnostics."""
        return {
            "name": self.name,
            "state": self.state.value,
            "consecutive_failures": self.consecutive_failures,
            "probe_successes": self.probe_successes,
            "opened_at": self.opened_at,
            "last_exception": repr(self.last_exception) if self.last_exception else None,
        }


class RetryWithCircuitBreaker:
    """Retries transient failures with exponential backoff through a breaker.

    Rate limits and timeouts are retried; anything else, including an open
    circuit, is raised on the first occurrence.
    """

    def __init__(
        self,
        circuit_breaker: CircuitBreaker,
        max_retries: int = 3,
        initial_delay: float = 1.0,
        backoff_factor: float = 2.0,
        max_delay: float = 60.0,
        retryable_exceptions: tuple[type[Exception], ...] = (RateLimitError, TimeoutError),
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            circuit_breaker: Breaker every attempt goes through
            max_retries: Total attempts, at least one
            initial_delay: Seconds before the second attempt
            backoff_factor: Delay multiplier per attempt
            max_delay: Upper bound on any single delay
            retryable_exceptions: Exceptions worth another attempt
            sleep: Awaitable sleep
        """
        self.circuit_breaker = circuit_breaker
        self.max_retries = max(1, max_retries)
        self.initial_delay = initial_delay
        self.backoff_factor = backoff_factor
        self.max_delay = max_delay
        self.retryable_exceptions = retryable_exceptions
        self._sleep = sleep

    def delays(self) -> list[float]:
        """Backoff schedule between attempts."""
        schedule = []
        delay = self.initial_delay
        for _ in range(self.max_retries - 1):
            schedule.append(min(delay, self.max_delay))
            delay *= self.backoff_factor
        return schedule

    async def call_async(
        self,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Call ``func`` until it succeeds, fails permanently or attempts run out.

        Raises:
            The last retryable exception once every attempt failed, or the
            first non-retryable one
        """
        for attempt, delay in enumerate(self.delays(), start=1):
            try:
                return await self.circuit_breaker.call_async(func, *args, **kwargs)
            except self.retryable_exceptions as e:
                logger.warning(
                    f"Retrying '{self.circuit_breaker.name}' in {delay:.1f}s",
                    attempt=attempt,
                    max_retries=self.max_retries,
                    error=e,
                )
                await self._sleep(delay)

        return await self.circuit_breaker.call_async(func, *args, **kwargs)
