import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from harvest_mcp.config import Config
from harvest_mcp.errors import HarvestAPIError, error_for_status

logger = logging.getLogger("harvest-mcp.client")

ALLOWED_METHODS = ("GET", "POST", "PATCH", "DELETE")


def mask_sensitive_data(text: str) -> str:
    """Mask sensitive data like tokens and credentials in strings."""
    if not text:
        return text

    text = re.sub(r'(Bearer\s+)[^\s"]+', r'\1[REDACTED]', text)
    text = re.sub(r'(Authorization["\s]*:)[^,}\n]+', r'\1 [REDACTED]', text)
    text = re.sub(r'(token|TOKEN|Token)["\s]*:?["\s]*[^,}\s"]+', r'\1: [REDACTED]', text)

    return text


def build_query_string(params: Optional[Dict[str, Any]]) -> str:
    """Build a URL query string from a dictionary of parameters.

    Args:
        params: Dictionary of query parameters; None values are dropped

    Returns:
        A URL-encoded query string
    """
    if not params:
        return ""

    filtered_params = {k: v for k, v in params.items() if v is not None}

    for key, value in filtered_params.items():
        if isinstance(value, bool):
            filtered_params[key] = str(value).lower()

    if not filtered_params:
        return ""

    return urlencode(filtered_params)


class HarvestClient:
    """Authenticated async client for the Harvest v2 REST API."""

    def __init__(self, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.access_token}",
            "Harvest-Account-Id": str(self.config.account_id),
            "User-Agent": self.config.user_agent,
            "Content-Type": "application/json",
        }

    def _make_transport(self) -> httpx.AsyncBaseTransport:
        if self._transport is not None:
            return self._transport
        return httpx.AsyncHTTPTransport(retries=self.config.max_retries)

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make an authenticated request to the Harvest API.

        Args:
            endpoint: The API endpoint to call, relative to the base URL
            method: HTTP method (GET, POST, PATCH, DELETE)
            params: Optional query parameters
            data: Optional JSON body for POST and PATCH

        Returns:
            The JSON response from the API, or an empty dict for an empty body

        Raises:
            ValueError: If the method is not supported
            HarvestAPIError: If the API returns an error response or cannot be reached
        """
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = f"{self.config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        query_string = build_query_string(params)
        if query_string:
            url = f"{url}?{query_string}"

        logger.debug(f"Making {method} request to {url}")

        async with httpx.AsyncClient(
            transport=self._make_transport(),
            timeout=self.config.timeout,
        ) as client:
            try:
                if method in ("POST", "PATCH"):
                    response = await client.request(method, url, headers=self.headers, json=data)
                else:
                    response = await client.request(method, url, headers=self.headers)
            except httpx.TimeoutException as e:
                logger.error(f"Request to {url} timed out: {e}")
                raise HarvestAPIError(
                    f"Request timed out after {self.config.timeout:g} seconds",
                    code="timeout",
                    endpoint=endpoint,
                ) from e
            except httpx.RequestError as e:
                logger.error(f"Request error for {url}: {mask_sensitive_data(str(e))}")
                raise HarvestAPIError(
                    f"Network error: {e}",
                    code="network_error",
                    endpoint=endpoint,
                ) from e

        if response.status_code >= 400:
            logger.error(f"Request to {url} failed with status {response.status_code}")
            logger.error(f"Response body (sanitized): {mask_sensitive_data(response.text)}")
            raise error_for_status(
                response.status_code,
                response.text,
                endpoint,
                retry_after=response.headers.get("retry-after"),
            )

        logger.debug(f"Response {response.status_code} from {url}")

        if not response.content:
            return {}
        return response.json()

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request(endpoint, params=params)

    async def post(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request(endpoint, method="POST", data=data)

    async def patch(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request(endpoint, method="PATCH", data=data)

    async def delete(self, endpoint: str) -> Dict[str, Any]:
        return await self.request(endpoint, method="DELETE")
