"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

REQUEST_TIMEOUT_SECONDS = 15


class FdcClient(Protocol):
    """Interface for FoodData Central search."""

    async def search_foods(self, query: str, page_size: int = 50) -> dict[str, object]:
        """Search foods by query and return raw API data."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def search_foods(self, query: str, page_size: int = 50) -> dict[str, object]:
        """Search foods by query."""
        url = f"{self.base_url.rstrip('/')}/foods/search"
        response = await self.http_client.post(
            url,
            params={"api_key": self.api_key},
            json={"query": query, "pageSize": page_size},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
