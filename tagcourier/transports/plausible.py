"""Plausible-compatible HTTP transport.

Events are posted as JSON to ``{api_host}/api/event``:

    {"name": "Search", "domain": "example.com", "url": "https://example.com/",
     "referrer": null, "props": {"feature": "docs", "label": "install"}}

Delivery is fire-and-forget by default: requests run on a single background
worker and failures are logged, never retried. At most ``max_pending``
deliveries are queued; events beyond that are logged and dropped.
"""

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, Optional

import httpx

from ..tracking.config import TrackingConfig
from .base import BaseTransport, register_transport

logger = logging.getLogger(__name__)


LOCALHOST_DOMAINS = {"localhost", "127.0.0.1", "0.0.0.0"}
EXPECTED_STATUS_CODES = {200, 201, 202, 204}


def is_localhost(domain: str) -> bool:
    host = domain.split(":")[0].lower()
    return host in LOCALHOST_DOMAINS or host.endswith(".localhost")


@register_transport("plausible")
class PlausibleTransport(BaseTransport):
    """Sends events to a Plausible Analytics compatible collector."""

    def __init__(self, config: TrackingConfig, client: Optional[httpx.Client] = None):
        """Initialize transport.

        Args:
            config: Tracking configuration (domain, API host, plausible settings)
            client: Optional preconfigured HTTP client
        """
        super().__init__(config)
        self.settings = config.plausible
        self.endpoint = f"{config.api_host}{self.settings.event_path}"

        self.headers = {
            "Content-Type": "application/json",
            "User-Agent": self.settings.user_agent
        }
        self.client = client or httpx.Client(
            timeout=httpx.Timeout(timeout=self.settings.timeout_seconds)
        )
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending = 0
        self._pending_lock = threading.Lock()
        if self.settings.fire_and_forget:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tag-courier")

    @property
    def should_send(self) -> bool:
        return self.settings.track_localhost or not is_localhost(self.config.site_domain)

    def track(self, event_name: str, properties: Dict[str, Any]) -> Optional[Future]:
        """Deliver an event.

        Returns:
            The pending delivery in fire-and-forget mode, otherwise None

        Raises:
            httpx.HTTPError: Inline delivery failed
        """
        if not self.should_send:
            logger.debug(f"Skipping '{event_name}' for localhost domain {self.config.site_domain}")
            return None

        payload = self.build_payload(event_name, properties)

        if self._executor is None:
            self._send(payload)
            return None

        with self._pending_lock:
            if self._pending >= self.settings.max_pending:
                logger.warning(
                    f"Dropping '{event_name}', {self._pending} deliveries already pending"
                )
                return None
            self._pending += 1

        try:
            future = self._executor.submit(self._send, payload)
        except RuntimeError:
            self._release_pending()
            raise
        future.add_done_callback(self._delivery_done)
        return future

    @property
    def pending(self) -> int:
        """Number of background deliveries queued or in flight."""
        with self._pending_lock:
            return self._pending

    def build_payload(self, event_name: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        """Build the collector payload for an event.

        ``url`` and ``referrer`` properties become top-level fields; everything
        else is sent as custom props, with structured values JSON encoded.
        """
        props = dict(properties)
        scheme = "http" if is_localhost(self.config.site_domain) else "https"
        url = props.pop("url", None) or f"{scheme}://{self.config.site_domain}/"
        referrer = props.pop("referrer", None)

        return {
            "name": event_name,
            "domain": self.config.site_domain,
            "url": str(url),
            "referrer": referrer,
            "props": {key: self._encode_prop(value) for key, value in props.items()}
        }

    def _send(self, payload: Dict[str, Any]) -> int:
        response = self.client.post(
            self.endpoint,
            content=json.dumps(payload),
            headers=self.headers
        )
        if response.status_code not in EXPECTED_STATUS_CODES:
            raise httpx.HTTPStatusError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                request=response.request,
                response=response
            )
        return response.status_code

    @staticmethod
    def _encode_prop(value: Any) -> Any:
        if value is None or isinstance(value, (str, int, float, bool)):
            return value
        return json.dumps(value, default=str)

    def _release_pending(self) -> None:
        with self._pending_lock:
            self._pending -= 1

    def _delivery_done(self, future: Future) -> None:
        self._release_pending()
        self._log_delivery_failure(future)

    def _log_delivery_failure(self, future: Future) -> None:
        error = future.exception()
        if error is None:
            return
        # DEBUG in production, as in LoggingReporter
        level = logging.DEBUG if self.config.is_production else logging.WARNING
        logger.log(level, f"Plausible event delivery failed: {error}")

    def close(self) -> None:
        """Wait for pending deliveries and close the HTTP client."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self.client.close()
