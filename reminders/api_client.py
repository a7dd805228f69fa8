"""Easy!Appointments REST API client."""

import httpx

from logger import logger
from .errors import FetchError


class SchedulingApiClient:
    """Fetch appointments and customers with bearer-token auth."""

    def __init__(
        self,
        api_root: str,
        api_key: str,
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        """Initialize the client.

        Args:
            api_root: Base URL of the API, e.g. https://host/index.php/api/v1/
            api_key: Bearer token
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (tests)
        """
        self.api_root = api_root if api_root.endswith("/") else f"{api_root}/"
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    async def fetch_appointments(self) -> list[dict]:
        """GET {api_root}appointments.

        Raises:
            FetchError: On transport error, non-2xx status or a non-list body
        """
        return await self._get_list("appointments")

    async def fetch_customers(self) -> list[dict]:
        """GET {api_root}customers.

        Raises:
            FetchError: On transport error, non-2xx status or a non-list body
        """
        return await self._get_list("customers")

    async def _get_list(self, resource: str) -> list[dict]:
        url = f"{self.api_root}{resource}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(url, headers=self._headers(), timeout=self._timeout)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise FetchError(f"GET {url} returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"GET {url} failed: {e!r}") from e
        except ValueError as e:
            raise FetchError(f"GET {url} returned invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise FetchError(f"GET {url} returned {type(data).__name__}, expected a list")

        logger.debug(f"Fetched {len(data)} {resource}")
        return data
