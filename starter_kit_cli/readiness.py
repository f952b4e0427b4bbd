import http.client
import logging
import time
import urllib.request
from typing import Callable, Dict, List, Optional

from .errors import ReadinessTimeout
from .schemas import ServiceEndpoint, WaitResult

log = logging.getLogger(__name__)

PollCallback = Callable[[ServiceEndpoint, int], None]


def http_ok(url: str, timeout: float = 3.0) -> bool:
    """True when the URL answers with a 2xx status."""
    try:
        with urllib.request.urlopen(url, timeout=timeout) as response:
            return 200 <= response.status < 300
    except (OSError, http.client.HTTPException, ValueError) as e:
        log.debug(f"Health check failed for {url}: {e}")
        return False


class ReadinessWaiter:
    """
    Polls service health endpoints until they answer or their budget runs out.

    Elapsed time is counted in poll intervals rather than read from a clock.
    Both the probe and the sleep are injectable.
    """

    def __init__(
        self,
        check: Callable[[str], bool] = http_ok,
        sleep: Callable[[float], None] = time.sleep,
        on_poll: Optional[PollCallback] = None,
    ):
        self._check = check
        self._sleep = sleep
        self._on_poll = on_poll

    def wait_for(self, endpoint: ServiceEndpoint, on_poll: Optional[PollCallback] = None) -> WaitResult:
        on_poll = on_poll or self._on_poll
        elapsed = 0
        while True:
            if self._check(endpoint.url):
                log.debug(f"{endpoint.name} answered after {elapsed}s")
                return WaitResult.READY
            self._sleep(endpoint.poll_interval_seconds)
            elapsed += endpoint.poll_interval_seconds
            if on_poll:
                on_poll(endpoint, elapsed)
            if elapsed >= endpoint.timeout_seconds:
                return WaitResult.TIMED_OUT

    def wait_all(self, endpoints: List[ServiceEndpoint], on_poll: Optional[PollCallback] = None) -> Dict[str, WaitResult]:
        """
        Waits for each endpoint in order.

        A required endpoint that times out raises ReadinessTimeout; an optional
        one is logged as a warning and the remaining endpoints are still polled.
        """
        results = {}
        for endpoint in endpoints:
            log.info(f"Waiting for {endpoint.name} to be ready...")
            result = self.wait_for(endpoint, on_poll)
            results[endpoint.name] = result
            if result == WaitResult.READY:
                log.info(f"{endpoint.name} is ready!")
            elif endpoint.required:
                raise ReadinessTimeout(endpoint.name, endpoint.timeout_seconds, required=True)
            else:
                log.warning(f"{endpoint.name} may not be ready yet, but continuing...")
        return results
