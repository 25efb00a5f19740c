from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .auth_store import SessionStore
from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import AuthenticationError, NetworkError

logger = logging.getLogger(__name__)

JsonPayload = dict[str, Any] | list[Any] | None


@dataclass
class HttpClient:
    """Single-attempt JSON client. Retries live in :class:`RetryPolicy`.

    The only state it mutates is the injected session store, which is cleared
    when the server answers 401.
    """

    config: ClientConfig
    session_store: SessionStore
    session: requests.Session | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        requires_auth: bool = True,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> JsonPayload:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        request_headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)
        if requires_auth:
            token = self.session_store.get_token()
            if not token:
                logger.warning("api_request_missing_token", extra={"path": path})
                raise AuthenticationError(
                    code="MISSING_TOKEN",
                    message="No authentication token found. Please login again.",
                )
            request_headers["Authorization"] = f"Bearer {token}"

        normalized_method = method.upper()
        url = self._build_url(path)
        started = time.monotonic()
        try:
            response = self.session.request(
                method=normalized_method,
                url=url,
                headers=request_headers,
                json=json_body,
                params=params,
                timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                verify=self.config.verify_ssl,
            )
        except requests.RequestException as exc:
            logger.warning(
                "api_request_transport_error",
                extra={"method": normalized_method, "path": path, "error_type": type(exc).__name__},
            )
            raise NetworkError(
                code="TRANSPORT_ERROR",
                message=str(exc) or "Network request failed",
                details={"type": type(exc).__name__},
            ) from exc

        duration_ms = int((time.monotonic() - started) * 1000)
        logger.debug(
            "api_request_complete",
            extra={
                "method": normalized_method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        if response.ok:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise NetworkError(
                    code="MALFORMED_RESPONSE",
                    message="Response body is not valid JSON",
                    status_code=response.status_code,
                    details={"type": type(exc).__name__},
                ) from exc

        payload: Any
        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text} if response.text else {}
        if not isinstance(payload, dict):
            payload = {}

        if response.status_code == 401:
            logger.info("api_session_invalidated", extra={"path": path})
            self.session_store.clear()
        raise map_error(response.status_code, payload)
