"""
Transport component.

Delivers serialized telemetry payloads to the collection endpoint. Delivery
is best effort: a failure is logged and reported back as a DeliveryResult,
never raised and never retried.
"""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from telemetry_client.config import Settings, settings as default_settings
from telemetry_client.models.payload import DeliveryResult
from telemetry_client.utils.logging import get_logger, log_delivery
from telemetry_client.utils.metrics import emit_metric, timed

logger = get_logger(__name__)

CONTENT_TYPE = "application/json"


class Transport(ABC):
    """Delivers a serialized payload to a remote endpoint."""
    
    @abstractmethod
    def send(self, payload: bytes) -> DeliveryResult:
        """
        Deliver a payload.
        
        Args:
            payload: JSON-encoded payload
            
        Returns:
            DeliveryResult describing success or the failure reason
        """
        pass
    
    def close(self) -> None:
        """Release any resources held by the transport."""
        pass


class HttpTransport(Transport):
    """Posts payloads to an HTTP endpoint with httpx."""
    
    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the HTTP transport.
        
        Args:
            endpoint_url: Collection endpoint (defaults to settings)
            timeout: Request timeout in seconds, fixed for the transport's lifetime
            client: Preconfigured httpx.Client (e.g. with a mock transport)
            settings: Settings used for missing arguments
        """
        settings = settings or default_settings
        self.endpoint_url = endpoint_url or settings.endpoint_url
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self.timeout)
        
        logger.info(f"HttpTransport initialized for endpoint: {self.endpoint_url}")
    
    def send(self, payload: bytes) -> DeliveryResult:
        status_code = None
        error = None
        
        with timed() as timer:
            try:
                response = self._client.post(
                    self.endpoint_url,
                    content=payload,
                    headers={"Content-Type": CONTENT_TYPE},
                    timeout=self.timeout,
                )
                status_code = response.status_code
                if not response.is_success:
                    error = f"HTTP {status_code}"
            
            except httpx.TimeoutException as e:
                error = f"Timed out after {self.timeout}s: {e}"
            
            except httpx.HTTPError as e:
                error = f"{type(e).__name__}: {e}"
        
        log_delivery(
            logger,
            endpoint=self.endpoint_url,
            status_code=status_code,
            duration_ms=timer.duration_ms,
            error=error,
        )
        emit_metric("telemetry.delivery_ms", timer.duration_ms, success=error is None)
        
        return DeliveryResult(
            success=error is None,
            status_code=status_code,
            error=error,
            duration_ms=round(timer.duration_ms, 2),
        )
    
    def close(self) -> None:
        if self._owns_client:
            self._client.close()
