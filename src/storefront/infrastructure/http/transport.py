"""Shared httpx plumbing for the gateway clients.

Every service sits behind the same API gateway, so all clients share one
``httpx.AsyncClient``. Transport failures and unparseable bodies become
``RemoteUnavailable``; what counts as a rejection is up to each client.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from storefront.domain.exceptions import RemoteUnavailable

logger = structlog.get_logger(__name__)


class GatewayTransport:

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("gateway_unreachable", method=method, path=path, error=str(exc))
            raise RemoteUnavailable(f"{method} {path} failed: {exc}") from exc
        logger.debug("gateway_response", method=method, path=path, status=response.status_code)
        return response

    async def send_ok(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Like ``send`` but any non-2xx answer is also ``RemoteUnavailable``."""
        response = await self.send(method, path, **kwargs)
        if response.is_error:
            raise RemoteUnavailable(
                f"{method} {path} answered {response.status_code}: {error_message(response)}"
            )
        return response

    async def aclose(self) -> None:
        await self._client.aclose()


def json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise RemoteUnavailable(
            f"{response.request.method} {response.request.url.path} returned invalid JSON"
        ) from exc


def error_message(response: httpx.Response) -> str | None:
    """The ``error`` or ``message`` field of an error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("error") or body.get("message")
    return str(message) if message else None
