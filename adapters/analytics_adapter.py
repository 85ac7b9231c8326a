"""Analytics sink.

Events go to the GA4 Measurement Protocol when a measurement id and API
secret are configured; otherwise they are only logged. Sending is
fire-and-forget: failures are logged and never reach the caller.
"""

from typing import Any, Dict, Optional
import logging
import uuid

import httpx

from app.utils import utc_now_iso

logger = logging.getLogger("whatcanicook.analytics")


def _param_value(value: Any) -> Any:
    """Measurement Protocol params must be scalars."""
    if isinstance(value, (list, tuple, set)):
        return ",".join(str(v) for v in value)
    if isinstance(value, (str, int, float)) or value is None:
        return value
    return str(value)


class AnalyticsClient:
    def __init__(
        self,
        measurement_id: Optional[str] = None,
        api_secret: Optional[str] = None,
        endpoint: str = "https://www.google-analytics.com/mp/collect",
        http_client: Optional[httpx.Client] = None,
        client_id: Optional[str] = None,
    ):
        self.measurement_id = measurement_id
        self.api_secret = api_secret
        self.endpoint = endpoint
        self.client_id = client_id or str(uuid.uuid4())
        self._http = http_client
        if self._http is None and self.enabled:
            self._http = httpx.Client(timeout=5.0)

    @property
    def enabled(self) -> bool:
        return bool(self.measurement_id and self.api_secret)

    def close(self):
        if self._http is not None:
            self._http.close()

    def log_event(self, name: str, params: Optional[Dict[str, Any]] = None):
        """Record a named event; a ``timestamp`` param is always added."""
        try:
            event_params = {k: _param_value(v) for k, v in (params or {}).items()}
            event_params.setdefault("timestamp", utc_now_iso())
            event = {"name": name, "params": event_params}
            logger.debug("analytics_event name=%s params=%s", name, event_params)

            if not self.enabled or self._http is None:
                return

            payload: Dict[str, Any] = {"client_id": self.client_id, "events": [event]}
            user_id = event_params.get("userId")
            if user_id:
                payload["user_id"] = str(user_id)
            response = self._http.post(
                self.endpoint,
                params={"measurement_id": self.measurement_id, "api_secret": self.api_secret},
                json=payload,
            )
            response.raise_for_status()
        except Exception as exc:
            logger.error("Failed to log analytics event %s: %s", name, exc)
