"""HTTP client for the VoteX API with bounded retry and exponential backoff."""

import logging
import time
from typing import Any, Callable, TypeVar

import requests

from config import DEFAULT_REQUEST_TIMEOUT_SECONDS, ClientSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_ATTEMPTS = 3
BASE_DELAY_SECONDS = 1.0
MAX_DELAY_SECONDS = 5.0
NON_RETRYABLE_STATUSES = frozenset({400, 401, 403})


class ApiClientError(Exception):
    def __init__(self, message: str, status: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    @property
    def retryable(self) -> bool:
        return self.status not in NON_RETRYABLE_STATUSES


def backoff_delay(attempt: int, base_delay: float = BASE_DELAY_SECONDS, max_delay: float = MAX_DELAY_SECONDS) -> float:
    return min(base_delay * (2 ** (attempt - 1)), max_delay)


def call_with_retry(
    fn: Callable[[], T],
    operation: str = "blockchain operation",
    max_attempts: int = MAX_ATTEMPTS,
    base_delay: float = BASE_DELAY_SECONDS,
    max_delay: float = MAX_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``fn`` up to ``max_attempts`` times.

    Client errors (400/401/403) are raised at once. Anything else is retried
    after ``base_delay * 2**(attempt-1)`` seconds, capped at ``max_delay``;
    the last error is raised when attempts run out.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    last_error: ApiClientError | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            result = fn()
            if attempt > 1:
                logger.info("%s succeeded on attempt %d", operation, attempt)
            return result
        except ApiClientError as exc:
            last_error = exc
            logger.warning("%s failed (attempt %d/%d): %s", operation, attempt, max_attempts, exc.message)
            if not exc.retryable:
                raise
        if attempt < max_attempts:
            delay = backoff_delay(attempt, base_delay, max_delay)
            logger.info("Retrying %s in %.1fs...", operation, delay)
            sleep(delay)
    raise last_error  # type: ignore[misc]


class VotexClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        self.base_url = (base_url or ClientSettings.from_env().api_url).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        self.sleep = sleep
        self.max_attempts = max_attempts

    def _request(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, json=body, timeout=self.timeout)
        except requests.Timeout as exc:
            raise ApiClientError(f"Request to {path} timed out") from exc
        except requests.RequestException as exc:
            raise ApiClientError(f"Network error calling {path}: {exc}") from exc

        if resp.status_code >= 400:
            message = resp.reason or f"HTTP {resp.status_code}"
            code = None
            try:
                payload = resp.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                message = payload.get("error") or message
                code = payload.get("code")
            raise ApiClientError(message, status=resp.status_code, code=code)
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiClientError(f"Invalid JSON response from {path}", status=resp.status_code) from exc

    def _call(self, operation: str, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        return call_with_retry(
            lambda: self._request(method, path, body),
            operation,
            max_attempts=self.max_attempts,
            sleep=self.sleep,
        )

    def get_candidates(self) -> list[dict[str, Any]]:
        return self._call("Fetching candidates from blockchain", "GET", "/candidates")

    def add_candidate(self, name: str) -> dict[str, Any]:
        return self._call("Adding candidate to blockchain", "POST", "/add-candidate", {"name": name})

    def authorize_voter(self, address: str) -> dict[str, Any]:
        return self._call("Authorizing voter on blockchain", "POST", "/authorize", {"address": address})

    def end_election(self) -> dict[str, Any]:
        return self._call("Ending election on blockchain", "POST", "/end")

    def restart_election(self, password: str) -> dict[str, Any]:
        return self._call("Restarting election on blockchain", "POST", "/restart", {"password": password})

    def set_restart_password(self, password: str) -> dict[str, Any]:
        return self._call(
            "Setting restart password on blockchain", "POST", "/set-restart-password", {"password": password}
        )

    def get_status(self) -> dict[str, Any]:
        return self._call("Fetching election status from blockchain", "GET", "/status")

    def get_results(self) -> dict[str, Any]:
        return self._call("Fetching election results from blockchain", "GET", "/results")

    def has_voted(self, address: str) -> dict[str, Any]:
        return self._call("Checking vote status on blockchain", "GET", f"/has-voted/{address}")

    def cast_vote(self, candidate_index: int, voter_address: str) -> dict[str, Any]:
        return self._call(
            "Casting vote on blockchain",
            "POST",
            "/vote",
            {"candidateIndex": candidate_index, "voterAddress": voter_address},
        )
