"""Shared plumbing for the HTTP services the bridge forwards to."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from bridge.telemetry import observe_upstream

from .errors import DecodeError, TransportError, UpstreamError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class Deadline:
    """Monotonic expiry shared by every stage of one request."""

    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(expires_at=time.monotonic() + seconds)

    def remaining(self) -> float:
        """Seconds left before expiry, never negative."""

        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0


class UpstreamHttpService:
    """Base class issuing one bounded POST per call against a fixed base URL."""

    service_name: ClassVar[str] = "upstream"

    def __init__(
        self,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _post(self, path: str, deadline: Deadline, **kwargs: Any) -> httpx.Response:
        """POST ``path`` within the remaining deadline and return a 2xx response."""

        remaining = deadline.remaining()
        if remaining <= 0:
            raise TransportError(
                f"{self.service_name} request not sent: request deadline exceeded"
            )

        url = f"{self._base_url}{path}"
        start_time = time.perf_counter()
        outcome = "transport_error"
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=remaining,
            ) as client:
                response = await asyncio.wait_for(client.post(url, **kwargs), timeout=remaining)
        except asyncio.TimeoutError as exc:
            raise TransportError(
                f"{self.service_name} request aborted: request deadline exceeded"
            ) from exc
        except httpx.TimeoutException as exc:
            raise TransportError(f"{self.service_name} request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"failed to send request: {exc}") from exc
        else:
            outcome = "success" if response.is_success else "status_error"
        finally:
            observe_upstream(self.service_name, outcome, time.perf_counter() - start_time)

        if not response.is_success:
            logger.warning(
                "%s responded %s for %s", self.service_name, response.status_code, url
            )
            raise UpstreamError(self.service_name, response.status_code, response.text)

        return response

    def _decode(self, response: httpx.Response, model: type[ModelT]) -> ModelT:
        """Validate a JSON body against ``model``."""

        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            raise DecodeError(f"failed to decode response: {exc}") from exc


__all__ = ["Deadline", "UpstreamHttpService"]
