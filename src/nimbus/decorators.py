# Nimbus: derived metrics for a personal weather dashboard
# Copyright (C) 2025 Ruaraidh Dobson, South London Scientific

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Function decorators for cross-cutting concerns.

This module provides decorators that add retry logic and logging to the
network layer without modifying the functions' core logic.
"""

import logging
from functools import wraps
from typing import Callable, TypeVar

import requests
from tenacity import (
    after_log,
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

# Type variable for generic function signatures
F = TypeVar("F", bound=Callable)

logger = logging.getLogger(__name__)


def is_transient_error(exception: BaseException) -> bool:
    """
    True for errors worth retrying: connection errors, timeouts and HTTP 5xx.

    4xx client errors are not retried.
    """
    if isinstance(
        exception, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)
    ):
        return True
    if isinstance(exception, requests.exceptions.HTTPError):
        response = exception.response
        return response is not None and 500 <= response.status_code < 600
    return False


def with_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 10.0,
    multiplier: float = 2.0,
) -> Callable[[F], F]:
    """
    Decorator to add exponential backoff retry logic to a function.

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        min_wait: Minimum wait time between retries in seconds (default: 1.0)
        max_wait: Maximum wait time between retries in seconds (default: 10.0)
        multiplier: Multiplier for exponential backoff (default: 2.0)

    Returns:
        Callable: Decorated function with retry logic

    Example:
        >>> @with_retry(max_attempts=5, min_wait=2.0)
        ... def fetch_feed(url):
        ...     response = requests.get(url, timeout=30)
        ...     response.raise_for_status()
        ...     return response.json()
    """

    def decorator(func: F) -> F:
        @retry(
            retry=retry_if_exception(is_transient_error),
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            after=after_log(logger, logging.DEBUG),
            # Re-raise the last exception if all attempts fail
            reraise=True,
        )
        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        return wrapper

    return decorator


def with_logging(logger_name: str | None = None) -> Callable[[F], F]:
    """
    Decorator to add logging to function entry and exit.

    Calls and completions are logged at INFO. Errors are logged at ERROR
    with the traceback before being re-raised.

    Args:
        logger_name: Name of logger to use. If None, uses the module name.
    """

    def decorator(func: F) -> F:
        func_logger = logging.getLogger(logger_name or func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            func_logger.info(
                f"Calling {func.__name__}",
                extra={
                    "function": func.__name__,
                    "args_count": len(args),
                    "kwargs_keys": list(kwargs.keys()),
                },
            )

            try:
                result = func(*args, **kwargs)
                func_logger.info(
                    f"Completed {func.__name__}", extra={"function": func.__name__}
                )
                return result
            except Exception as e:
                func_logger.error(
                    f"Error in {func.__name__}: {e}",
                    extra={
                        "function": func.__name__,
                        "error_type": type(e).__name__,
                        "error_message": str(e),
                    },
                    exc_info=True,
                )
                raise

        return wrapper

    return decorator


# Standard retry for the feed and sun-times requests
retry_on_network_error = with_retry(
    max_attempts=3, min_wait=1.0, max_wait=10.0, multiplier=2.0
)
