# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# Timeout handling shared by every UI wait in the suite.
#
# Element and URL states are waited on with Playwright's own primitives
# (Locator.wait_for, ElementHandle.wait_for_element_state, Page.wait_for_url);
# `playwright_wait` turns their timeout into the suite's WaitTimeoutError and
# lets every other browser error through.
#
# `poll_until` covers the conditions Playwright has no primitive for, such as
# "a toast whose text matches X" or "this input is empty or disabled".
#
# Usage:
#   await playwright_wait(locator.wait_for(state="visible", timeout=5000),
#                         "code input visible", 5000)
#   toast = await poll_until(check_toast, timeout=10, description="toast")
#
# ================================================================================

import asyncio
import inspect
import random
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type, TypeVar, Union

from loguru import logger
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


T = TypeVar('T')

CheckResult = Tuple[bool, Any]
CheckFn = Callable[[], Union[CheckResult, Awaitable[CheckResult]]]


@dataclass
class WaitConfig:
    """
    Configuration for wait operations.

    Attributes:
        initial_interval: Initial wait interval in seconds
        multiplier: Multiplier applied to the interval after each attempt
        max_interval: Maximum interval between attempts
        timeout: Total timeout in seconds
        jitter: Add random jitter to the interval
    """
    initial_interval: float = 0.25
    multiplier: float = 1.0
    max_interval: float = 0.25
    timeout: float = 10.0
    jitter: bool = False


# Pre-configured wait strategies for common scenarios
WAIT_SCENARIOS: Dict[str, WaitConfig] = {
    "default": WaitConfig(),

    # Element state flips (radio, toggle, inline error)
    "fast": WaitConfig(
        initial_interval=0.1,
        multiplier=1.0,
        max_interval=0.1,
        timeout=3.0,
    ),

    # Form submission round-trips (toast, server-side validation)
    "form": WaitConfig(
        initial_interval=0.25,
        multiplier=1.5,
        max_interval=1.0,
        timeout=10.0,
    ),

    # Redirects after login/logout
    "navigation": WaitConfig(
        initial_interval=0.25,
        multiplier=1.5,
        max_interval=2.0,
        timeout=30.0,
    ),
}


class WaitTimeoutError(Exception):
    """Raised when a wait operation times out."""
    pass


async def playwright_wait(awaitable: Awaitable[T], description: str, timeout: int) -> T:
    """
    Await a Playwright wait, reporting its timeout as WaitTimeoutError.

    Args:
        awaitable: Pending Playwright call that accepts a timeout
        description: Human-readable condition for the error message
        timeout: The timeout passed to Playwright, in milliseconds

    Raises:
        WaitTimeoutError: Playwright gave up waiting
        playwright.async_api.Error: Any other browser failure, unchanged
    """
    try:
        return await awaitable
    except PlaywrightTimeoutError as e:
        error_msg = f"Timeout after {timeout}ms waiting for: {description}"
        logger.debug(error_msg)
        raise WaitTimeoutError(error_msg) from e


def get_wait_config(scenario: str) -> WaitConfig:
    """Return the named scenario, or the default configuration."""
    return WAIT_SCENARIOS.get(scenario, WAIT_SCENARIOS["default"])


def calculate_next_interval(current_interval: float, config: WaitConfig) -> float:
    """
    Calculate the next polling interval.

    Args:
        current_interval: Current interval in seconds
        config: Wait configuration

    Returns:
        Next interval in seconds
    """
    next_interval = min(current_interval * config.multiplier, config.max_interval)

    if config.jitter:
        # +/- 25%
        next_interval = next_interval * (0.75 + random.random() * 0.5)

    return next_interval


async def poll_until(
    check_fn: CheckFn,
    timeout: Optional[float] = None,
    description: str = "Waiting for condition",
    scenario: str = "default",
    config: Optional[WaitConfig] = None,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
) -> Any:
    """
    Poll `check_fn` until it reports success.

    The check is always evaluated at least once, even with a zero timeout.
    An exception listed in `retry_on` counts as "not yet" and is kept for the
    timeout message; any other exception propagates immediately.

    Args:
        check_fn: Sync or async function returning (success, result)
        timeout: Timeout in seconds, overriding the scenario's
        description: Human-readable description for logging
        scenario: Predefined scenario name for configuration
        config: Optional custom WaitConfig (overrides scenario)
        retry_on: Exception types treated as a failed attempt

    Returns:
        Result from check_fn when successful

    Raises:
        WaitTimeoutError: If the timeout is reached without success
    """
    config = config or get_wait_config(scenario)
    limit = config.timeout if timeout is None else timeout

    start_time = time.monotonic()
    current_interval = config.initial_interval
    attempt = 0
    last_result = None
    last_error = None

    while True:
        attempt += 1
        try:
            outcome = check_fn()
            if inspect.isawaitable(outcome):
                outcome = await outcome
            success, result = outcome
            last_result = result
            if success:
                logger.debug(
                    f"Wait satisfied after {attempt} attempt(s) "
                    f"({time.monotonic() - start_time:.2f}s): {description}"
                )
                return result
        except retry_on as e:
            last_error = f"{type(e).__name__}: {e}"
            logger.debug(f"Attempt {attempt} for '{description}' raised {last_error}")

        elapsed = time.monotonic() - start_time
        if elapsed >= limit:
            error_msg = (
                f"Timeout after {elapsed:.1f}s waiting for: {description}. "
                f"Last result: {last_result}, Last error: {last_error}"
            )
            logger.debug(error_msg)
            raise WaitTimeoutError(error_msg)

        await asyncio.sleep(min(current_interval, max(limit - elapsed, 0)))
        current_interval = calculate_next_interval(current_interval, config)


__all__ = [
    "CheckFn",
    "WaitConfig",
    "WaitTimeoutError",
    "WAIT_SCENARIOS",
    "calculate_next_interval",
    "get_wait_config",
    "playwright_wait",
    "poll_until",
]
