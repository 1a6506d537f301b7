from __future__ import annotations

from typing import Any, Dict, Optional

import requests
from django.conf import settings
from requests import RequestException

from .logger import get_logger
from .results import LookupResult

logger = get_logger(__name__).bind(component="common", layer="client")


class ServiceClient:
    """JSON-over-HTTP reader for a sibling service.

    Every GET is translated into a LookupResult: 2xx → FOUND, 404 → NOT_FOUND,
    anything else (transport error, other status, bad JSON) → ERROR.
    """

    service_name = "service"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: Optional[float] = None,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = (
            timeout
            if timeout is not None
            else getattr(settings, "COLLABORATOR_TIMEOUT", 5.0)
        )
        self.token = token if token is not None else getattr(settings, "SERVICE_API_TOKEN", "")
        self.session = session or requests.Session()
        self.logger = logger.bind(client=self.__class__.__name__, service=self.service_name)

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get_json(self, path: str) -> LookupResult[Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        self.logger.debug("Collaborator GET", url=url)
        try:
            resp = self.session.get(url, headers=self._headers(), timeout=self.timeout)
        except RequestException as exc:
            self.logger.warning("Collaborator unreachable", url=url, error=str(exc))
            return LookupResult.failed(f"{self.service_name} unreachable: {exc}")
        if resp.status_code == 404:
            self.logger.debug("Collaborator resource not found", url=url)
            return LookupResult.not_found(f"{url} returned 404")
        if not 200 <= resp.status_code < 300:
            self.logger.warning(
                "Collaborator returned error status",
                url=url,
                status=resp.status_code,
            )
            return LookupResult.failed(
                f"{self.service_name} returned HTTP {resp.status_code}"
            )
        try:
            payload = resp.json()
        except ValueError as exc:
            self.logger.warning("Collaborator returned invalid JSON", url=url, error=str(exc))
            return LookupResult.failed(f"{self.service_name} returned invalid JSON")
        return LookupResult.found(payload)
