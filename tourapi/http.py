"""HTTP client with retry/backoff, envelope validation and request metrics."""
from __future__ import annotations

import logging
import re
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Sequence

import requests

from . import config
from .errors import (
    ApiError,
    NotFoundError,
    RequestTimeoutError,
    TransientNetworkError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_XML_REASON_RE = re.compile(r"<returnReasonCode>\s*([^<]*?)\s*</returnReasonCode>")
_XML_AUTH_MSG_RE = re.compile(r"<returnAuthMsg>\s*([^<]*?)\s*</returnAuthMsg>")
_XML_ERR_MSG_RE = re.compile(r"<errMsg>\s*([^<]*?)\s*</errMsg>")


@dataclass
class RequestMetrics:
    """Per-run request counters, passed explicitly to the clients that update them."""

    network_calls: int = 0
    retries: int = 0
    failures: int = 0
    calls_by_endpoint: Dict[str, int] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def inc_network(self, endpoint: str) -> int:
        with self._lock:
            self.network_calls += 1
            self.calls_by_endpoint[endpoint] = self.calls_by_endpoint.get(endpoint, 0) + 1
            return self.network_calls

    def inc_retry(self) -> None:
        with self._lock:
            self.retries += 1

    def inc_failure(self) -> None:
        with self._lock:
            self.failures += 1

    def as_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "network_calls": self.network_calls,
                "retries": self.retries,
                "failures": self.failures,
                "calls_by_endpoint": dict(self.calls_by_endpoint),
            }


class HttpClient:
    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_max: Optional[int] = None,
        retry_delays: Optional[Sequence[float]] = None,
        rate_limit_delays: Optional[Sequence[float]] = None,
        metrics: Optional[RequestMetrics] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.api_key = api_key
        self.base_url = (base_url or config.BASE_URL).rstrip("/")
        self.timeout = config.HTTP_TIMEOUT_SECONDS if timeout is None else timeout
        self.retry_max = config.HTTP_RETRY_MAX if retry_max is None else retry_max
        self.retry_delays = tuple(config.HTTP_RETRY_DELAYS if retry_delays is None else retry_delays)
        self.rate_limit_delays = tuple(
            config.HTTP_RATE_LIMIT_DELAYS if rate_limit_delays is None else rate_limit_delays
        )
        self.metrics = metrics
        self._sleep = sleep
        self.session = requests.Session()

    def build_params(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        merged: Dict[str, Any] = {
            "MobileOS": config.MOBILE_OS,
            "MobileApp": config.MOBILE_APP,
            "_type": config.RESPONSE_TYPE,
            "serviceKey": self.api_key,
        }
        if params:
            merged.update(params)
        return {k: str(v) for k, v in merged.items() if v is not None and v != ""}

    def execute(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """GET ``endpoint`` and return the validated response body.

        Retryable failures (transport errors, 5xx, rate limiting) are retried
        up to ``retry_max`` times; everything else raises on the first attempt.
        """
        url = f"{self.base_url}{endpoint}"
        query = self.build_params(params)
        effective_timeout = self.timeout if timeout is None else timeout

        attempt = 0
        while True:
            try:
                return self._request_once(url, endpoint, query, effective_timeout)
            except ApiError as exc:
                if not exc.retryable or attempt >= self.retry_max:
                    if self.metrics is not None:
                        self.metrics.inc_failure()
                    logger.error("%s failed after %s attempt(s): %s", endpoint, attempt + 1, exc)
                    raise
                delay = self._retry_delay(exc, attempt)
                attempt += 1
                if self.metrics is not None:
                    self.metrics.inc_retry()
                logger.warning(
                    "%s from %s (retry %s/%s in %.1fs)",
                    exc.kind, endpoint, attempt, self.retry_max, delay,
                )
                self._sleep(delay)

    def _retry_delay(self, exc: ApiError, attempt: int) -> float:
        rate_limited = isinstance(exc, UpstreamError) and exc.rate_limited
        delays = self.rate_limit_delays if rate_limited else self.retry_delays
        if not delays:
            return 0.0
        return float(delays[min(attempt, len(delays) - 1)])

    def _request_once(
        self,
        url: str,
        endpoint: str,
        query: Dict[str, str],
        timeout: float,
    ) -> Dict[str, Any]:
        if self.metrics is not None:
            call_no = self.metrics.inc_network(endpoint)
            logger.debug("GET %s (call #%s)", endpoint, call_no)
        try:
            resp = self.session.get(
                url, params=query, headers={"Accept": "application/json"}, timeout=timeout
            )
        except requests.Timeout as exc:
            raise RequestTimeoutError(
                f"Request to {endpoint} timed out after {timeout}s", endpoint=endpoint
            ) from exc
        except requests.RequestException as exc:
            raise TransientNetworkError(
                f"Network error calling {endpoint}: {exc}", endpoint=endpoint
            ) from exc

        status = resp.status_code
        if status == 429:
            raise UpstreamError(
                f"HTTP 429 from {endpoint}", endpoint=endpoint, status_code=status, rate_limited=True
            )
        if status >= 400:
            raise UpstreamError(f"HTTP {status} from {endpoint}", endpoint=endpoint, status_code=status)

        try:
            data = resp.json()
        except ValueError:
            raise parse_gateway_error(resp.text, endpoint) from None
        return validate_envelope(data, endpoint)


def parse_gateway_error(text: Optional[str], endpoint: Optional[str] = None) -> ApiError:
    """Map a non-JSON response body onto the error taxonomy.

    The provider's gateway answers credential and quota problems with an XML
    ``OpenAPI_ServiceResponse`` document even when JSON was requested.
    """
    text = text or ""
    reason = _XML_REASON_RE.search(text)
    if reason is None:
        return ValidationError(f"Non-JSON response from {endpoint}", endpoint=endpoint)
    code = reason.group(1)
    auth_msg = _XML_AUTH_MSG_RE.search(text)
    err_msg = _XML_ERR_MSG_RE.search(text)
    message = (auth_msg.group(1) if auth_msg else "") or (err_msg.group(1) if err_msg else "") or "SERVICE ERROR"
    return UpstreamError(
        f"{message} (code: {code})",
        endpoint=endpoint,
        result_code=code,
        rate_limited=code in config.RESULT_CODE_RATE_LIMITED,
    )


def validate_envelope(data: Any, endpoint: Optional[str] = None) -> Dict[str, Any]:
    """Return the ``response.body`` of an upstream envelope or raise."""
    if not isinstance(data, dict):
        raise ValidationError(f"Unexpected response type from {endpoint}", endpoint=endpoint)

    response = data.get("response")
    if not isinstance(response, dict):
        code = data.get("resultCode")
        if code is not None:
            raise _result_code_error(str(code), data.get("resultMsg"), endpoint)
        raise ValidationError(f"Missing response envelope from {endpoint}", endpoint=endpoint)

    header = response.get("header")
    code = header.get("resultCode") if isinstance(header, dict) else None
    if code is not None and str(code) not in config.RESULT_CODE_SUCCESS:
        raise _result_code_error(str(code), header.get("resultMsg"), endpoint)

    body = response.get("body")
    if not isinstance(body, dict):
        top_code = data.get("resultCode")
        if top_code is not None and str(top_code) not in config.RESULT_CODE_SUCCESS:
            raise _result_code_error(str(top_code), data.get("resultMsg"), endpoint)
        raise ValidationError(f"Missing response body from {endpoint}", endpoint=endpoint)
    return body


def _result_code_error(code: str, message: Optional[str], endpoint: Optional[str]) -> ApiError:
    text = f"{message or 'Unknown upstream error'} (code: {code})"
    if code in config.RESULT_CODE_NO_DATA:
        return NotFoundError(text, endpoint=endpoint)
    return UpstreamError(
        text,
        endpoint=endpoint,
        result_code=code,
        rate_limited=code in config.RESULT_CODE_RATE_LIMITED,
    )
