"""Retrying HTTP plumbing shared by API clients."""
from __future__ import annotations

import os
import random
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict

import requests

from issuecopilot.logging_config import get_logger

logger = get_logger(__name__)


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header value (seconds or HTTP date) into seconds."""

    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        pass
    try:
        retry_dt = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if retry_dt is None:
        return None
    if retry_dt.tzinfo is None:
        retry_dt = retry_dt.replace(tzinfo=timezone.utc)
    return max((retry_dt - datetime.now(timezone.utc)).total_seconds(), 0.0)


class BaseAPIClient:
    """Issue HTTP requests, retrying rate limits and transient failures."""

    _MAX_ATTEMPTS = 5
    _BASE_DELAY = 1.0

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session or requests.Session()
        self._random = random.Random()
        self._retries_enabled = os.getenv("IC_DISABLE_RETRIES", "false").lower() not in {
            "1",
            "true",
            "yes",
            "on",
        }

    def _sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    @staticmethod
    def _is_retryable_status(status: int) -> bool:
        return status == 429 or 500 <= status < 600

    @staticmethod
    def _is_retryable_exception(exc: requests.RequestException) -> bool:
        return isinstance(exc, (requests.Timeout, requests.ConnectionError))

    def _compute_delay(self, attempt: int, response: requests.Response | None) -> float:
        backoff = self._BASE_DELAY * (2 ** (attempt - 1))
        delay = backoff + self._random.uniform(0, backoff)
        if response is not None:
            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            if retry_after is not None:
                delay = max(delay, retry_after)
        return delay

    def _request_with_retry(
        self,
        *,
        method: str,
        url: str,
        logger_context: Dict[str, Any],
        **kwargs: Any,
    ) -> requests.Response:
        """Send a request, retrying 429/5xx responses and connection errors.

        The final response is returned whatever its status; callers decide
        how to map failures. Exceptions from the last attempt propagate.
        """

        max_attempts = self._MAX_ATTEMPTS if self._retries_enabled else 1
        attempt = 1
        while True:
            context = dict(logger_context, method=method, url=url, attempt=attempt)
            logger.debug("HTTP request", extra=context)
            start = time.perf_counter()
            try:
                response = self.session.request(method=method, url=url, **kwargs)
            except requests.RequestException as exc:
                if attempt >= max_attempts or not self._is_retryable_exception(exc):
                    raise
                delay = self._compute_delay(attempt, None)
                context.update({"error": str(exc), "retry_in_s": round(delay, 2)})
                logger.warning("Retrying after exception", extra=context)
                self._sleep(delay)
                attempt += 1
                continue

            context.update(
                {
                    "status_code": response.status_code,
                    "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                }
            )
            logger.debug("HTTP response", extra=context)

            if self._is_retryable_status(response.status_code) and attempt < max_attempts:
                delay = self._compute_delay(attempt, response)
                context["retry_in_s"] = round(delay, 2)
                logger.warning("Retrying after status", extra=context)
                self._sleep(delay)
                attempt += 1
                continue

            return response


__all__ = ["BaseAPIClient", "parse_retry_after"]
