"""Error taxonomy shared by the upstream HTTP clients."""

from __future__ import annotations


class ServiceCallError(RuntimeError):
    """Raised when a call to an upstream service does not yield a usable result."""


class TransportError(ServiceCallError):
    """The request never produced a response (connection failure, timeout, deadline)."""


class UpstreamError(ServiceCallError):
    """The upstream answered with a non-success HTTP status."""

    def __init__(self, service: str, status_code: int, body: str) -> None:
        self.service = service
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"{service} returned non-success status: {status_code}, body: {body}"
        )


class DecodeError(ServiceCallError):
    """The upstream answered successfully but the body did not match the expected JSON shape."""


__all__ = ["DecodeError", "ServiceCallError", "TransportError", "UpstreamError"]
