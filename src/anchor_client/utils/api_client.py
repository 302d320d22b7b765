"""Control-plane API client for Anchor Client."""

import asyncio
import time
from typing import Any
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from anchor_client.config import Settings, get_settings
from anchor_client.utils import get_logger
from anchor_client.utils.exceptions import (
    ApiConnectionError,
    ApiResponseError,
    ApiTimeoutError,
)
from anchor_client.utils.metrics_collector import get_metrics_collector

logger = get_logger(__name__)


class ControlPlaneClient:
    """Thin client over the control-plane HTTP API.

    Every endpoint answers with an envelope ``{success, data?, error?}``.
    Methods return the unwrapped ``data`` and raise ``ApiError`` subclasses
    otherwise. Blocking HTTP calls run in a worker thread so callers can fan
    out with ``asyncio.gather``.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """
        Initialize control-plane client.

        Args:
            settings: Settings to use (defaults to the cached settings)
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.base_url
        self._session: requests.Session | None = None
        self.metrics = get_metrics_collector()

    def _get_session(self) -> requests.Session:
        """Get or create a requests session with retry configuration."""
        if self._session is None:
            session = requests.Session()
            retry = Retry(
                total=self.settings.retry_total,
                connect=self.settings.retry_total,
                read=self.settings.retry_total,
                backoff_factor=self.settings.retry_backoff_factor,
                status_forcelist=(502, 503, 504),
                allowed_methods=("GET",),
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry, pool_connections=4, pool_maxsize=16)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
            session.headers.update(
                {"Accept": "application/json", "User-Agent": "anchor-client/0.1"}
            )
            self._session = session
        return self._session

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None
            logger.debug("Control-plane session closed")

    def _url(self, *segments: str) -> str:
        return "/".join([self.base_url, *(quote(s, safe="") for s in segments)])

    def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        timeout: tuple[float, float] | None = None,
    ) -> Any:
        """Perform one request and unwrap its envelope."""
        session = self._get_session()
        started = time.monotonic()
        outcome = "error"
        try:
            response = session.request(
                method,
                url,
                params=params,
                json=json_body,
                timeout=timeout or self.settings.timeout,
            )
            data = self._handle_response(response)
            outcome = "success"
            return data
        except requests.exceptions.Timeout as e:
            logger.warning("API request timed out", extra={"method": method, "url": url})
            raise ApiTimeoutError(self.base_url, e) from e
        except requests.exceptions.ConnectionError as e:
            logger.warning(
                "API connection failed",
                extra={"method": method, "url": url, "error": str(e)},
            )
            raise ApiConnectionError(self.base_url, e) from e
        finally:
            self.metrics.record_api_request(method, outcome, time.monotonic() - started)

    @staticmethod
    def _error_message(payload: Any) -> str | None:
        """Server message of an envelope whose ``error`` is an object or a string."""
        if not isinstance(payload, dict):
            return None
        error = payload.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            return str(message) if message else None
        if isinstance(error, str) and error.strip():
            return error
        return None

    @classmethod
    def _handle_response(cls, response: requests.Response) -> Any:
        """
        Validate the HTTP status and the response envelope.

        Args:
            response: Raw HTTP response

        Returns:
            The envelope's ``data`` field

        Raises:
            ApiResponseError: On non-2xx status or ``success: false``
        """
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok:
            raise ApiResponseError(
                cls._error_message(payload) or f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                payload=payload,
            )

        if not isinstance(payload, dict):
            raise ApiResponseError(
                "Invalid response from control-plane API",
                status_code=response.status_code,
            )

        if not payload.get("success"):
            raise ApiResponseError(
                cls._error_message(payload) or "API request failed",
                status_code=response.status_code,
                payload=payload,
            )

        return payload.get("data")

    async def _call(
        self,
        method: str,
        *segments: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        long_running: bool = False,
    ) -> Any:
        timeout = self.settings.long_operation_timeout if long_running else None
        return await asyncio.to_thread(
            self._request, method, self._url(*segments), params, json_body, timeout
        )

    @staticmethod
    def _force(force: bool) -> dict[str, str] | None:
        return {"force": "true"} if force else None

    # System endpoints

    async def test_connection(self) -> Any:
        """Probe connectivity via the system info endpoint."""
        return await self._call("GET", "system", "info")

    async def get_system_info(self) -> Any:
        return await self._call("GET", "system", "info")

    async def get_system_version(self) -> Any:
        return await self._call("GET", "system", "version")

    async def get_system_events(self) -> Any:
        return await self._call("GET", "system", "events")

    async def prune_system(self) -> Any:
        return await self._call("POST", "system", "prune")

    # Container endpoints

    async def get_all_containers(self) -> Any:
        return await self._call("GET", "containers", "all")

    async def get_running_containers(self) -> Any:
        return await self._call("GET", "containers")

    async def get_container(self, container_id: str) -> Any:
        return await self._call("GET", "containers", container_id)

    async def start_container(self, container_id: str) -> Any:
        return await self._call("POST", "containers", container_id, "start")

    async def stop_container(self, container_id: str) -> Any:
        return await self._call("POST", "containers", container_id, "stop")

    async def restart_container(self, container_id: str) -> Any:
        return await self._call("POST", "containers", container_id, "restart")

    async def remove_container(self, container_id: str, force: bool = False) -> Any:
        return await self._call(
            "DELETE", "containers", container_id, params=self._force(force)
        )

    async def get_container_logs(self, container_id: str, lines: int = 100) -> Any:
        return await self._call(
            "GET", "containers", container_id, "logs", params={"lines": lines}
        )

    async def get_container_stats(self, container_id: str) -> Any:
        return await self._call("GET", "containers", container_id, "stats")

    # Image endpoints

    async def get_all_images(self) -> Any:
        return await self._call("GET", "images")

    async def get_image(self, image_id: str) -> Any:
        return await self._call("GET", "images", image_id)

    async def pull_image(self, image_name: str) -> Any:
        return await self._call(
            "POST",
            "images",
            "pull",
            json_body={"imageName": image_name},
            long_running=True,
        )

    async def remove_image(self, image_id: str, force: bool = False) -> Any:
        return await self._call("DELETE", "images", image_id, params=self._force(force))

    async def build_image(self, context: str, dockerfile: str, tag: str) -> Any:
        return await self._call(
            "POST",
            "images",
            "build",
            json_body={"context": context, "dockerfile": dockerfile, "tag": tag},
            long_running=True,
        )

    # Volume endpoints

    async def get_all_volumes(self) -> Any:
        return await self._call("GET", "volumes")

    async def create_volume(
        self, name: str, driver: str = "local", options: dict[str, Any] | None = None
    ) -> Any:
        return await self._call(
            "POST",
            "volumes",
            json_body={"name": name, "driver": driver, "options": options or {}},
        )

    async def remove_volume(self, name: str, force: bool = False) -> Any:
        return await self._call("DELETE", "volumes", name, params=self._force(force))


def create_api_client(settings: Settings | None = None) -> ControlPlaneClient:
    """
    Create a control-plane client.

    Args:
        settings: Optional settings override

    Returns:
        ControlPlaneClient instance
    """
    client = ControlPlaneClient(settings)
    logger.info("Control-plane client created", extra={"base_url": client.base_url})
    return client
