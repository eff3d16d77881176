"""HTTP client for the accounts/work items service."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import requests
from prometheus_client import Counter

from .config import settings
from .errors import RemoteError

logger = logging.getLogger(__name__)

# Counter of remote calls by HTTP method, resource path and outcome
REMOTE_REQUEST_COUNTER = Counter(
    "adminconsole_remote_requests_total",
    "Total requests sent to the remote service",
    ["method", "resource", "outcome"],
)


class RemoteService:
    """Thin wrapper over the REST endpoints of the remote service.

    Requests are blocking ``requests`` calls; the async methods push them to
    a worker thread so the event loop driving the console stays responsive.
    Any exception raised while sending the request or decoding the body is
    re-raised as :class:`RemoteError`.

    ``http`` may be any object exposing ``request(method, url, json=...,
    timeout=...)`` with a ``requests``-like response, which lets tests route
    calls to an in-process application.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Any = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = settings.request_timeout if timeout is None else timeout
        self._http = http if http is not None else requests.Session()

    def _send(
        self,
        method: str,
        path: str,
        operation: str,
        resource: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        kwargs: Dict[str, Any] = {"timeout": self.timeout}
        if payload is not None:
            kwargs["json"] = payload
        logger.info("request %s %s", method, url)
        try:
            response = self._http.request(method, url, **kwargs)
            response.raise_for_status()
            body = response.json() if response.content else None
        except Exception as exc:
            REMOTE_REQUEST_COUNTER.labels(
                method=method, resource=resource, outcome="failure"
            ).inc()
            raise RemoteError(operation, resource, str(exc)) from exc
        REMOTE_REQUEST_COUNTER.labels(
            method=method, resource=resource, outcome="success"
        ).inc()
        logger.info("response %s %s status %s", method, url, response.status_code)
        return body

    async def fetch_collection(self, resource: str) -> Any:
        """``GET /{resource}``; returns the decoded body as-is."""
        return await asyncio.to_thread(self._send, "GET", f"/{resource}", "list", resource)

    async def create(self, resource: str, payload: Dict[str, Any]) -> Any:
        return await asyncio.to_thread(
            self._send, "POST", f"/{resource}", "create", resource, payload
        )

    async def replace(self, resource: str, entity_id: int, payload: Dict[str, Any]) -> Any:
        return await asyncio.to_thread(
            self._send, "PUT", f"/{resource}/{entity_id}", "update", resource, payload
        )

    async def delete(self, resource: str, entity_id: int) -> Any:
        return await asyncio.to_thread(
            self._send, "DELETE", f"/{resource}/{entity_id}", "delete", resource
        )

    async def health(self) -> Dict[str, Any]:
        """Return the service status document from ``GET /health``."""
        body = await asyncio.to_thread(self._send, "GET", "/health", "health", "health")
        return body if isinstance(body, dict) else {}
