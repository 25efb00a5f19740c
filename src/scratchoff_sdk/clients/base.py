from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..http_client import HttpClient, JsonPayload
from ..retry import RetryPolicy


@dataclass
class BaseClient:
    http: HttpClient
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def _request(self, method: str, path: str, **kwargs: Any) -> JsonPayload:
        return self.http.request(method, path, **kwargs)

    def _get_with_retry(self, path: str, *, operation: str, **kwargs: Any) -> JsonPayload:
        return self.retry.call(lambda: self._request("GET", path, **kwargs), operation=operation)
