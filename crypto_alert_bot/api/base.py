"""
Base class for asynchronous API clients.
Provides standardized request handling and error logging.
"""

import asyncio
from abc import ABC
from typing import Dict, Any, Optional
from loguru import logger

from .request_utilities import async_request, APIError, build_url_with_params


class AsyncBaseAPI(ABC):
    """
    Base class for asynchronous API clients with common functionality.

    Provides:
    - Async HTTP GET with a bounded timeout
    - Standardized error handling
    """

    def __init__(self, base_url: str, timeout: float = 10, retries: int = 1):
        """
        Initialize the async API client.

        Args:
            base_url: Base URL for API requests
            timeout: Request timeout in seconds
            retries: Attempts per request
        """
        self.base_url = base_url
        self.timeout = timeout
        self.retries = retries
        self.default_headers = {"Accept": "application/json"}

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Dict[str, Any] = None,
        headers: Dict[str, Any] = None,
    ) -> Any:
        """
        Make an asynchronous request to the API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint
            params: Query parameters
            headers: Additional headers

        Returns:
            Parsed response body

        Raises:
            APIError: On request failure
        """
        request_headers = self.default_headers.copy()
        if headers:
            request_headers.update(headers)

        url = build_url_with_params(self.base_url, endpoint, params)
        logger.debug(f"API Request: {method} {url}")

        try:
            start_time = asyncio.get_event_loop().time()
            response = await async_request(
                method=method,
                url=url,
                headers=request_headers,
                timeout=self.timeout,
                retries=self.retries
            )
            elapsed = asyncio.get_event_loop().time() - start_time
            logger.debug(f"API Response received in {elapsed:.2f}s")

            return response

        except APIError as e:
            logger.error(f"API Error: {e.message} (Status: {e.status_code})")
            raise APIError(
                message=f"Error in {method} request to {endpoint}: {e.message}",
                status_code=e.status_code,
                response=e.response
            )

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        """Make a GET request to the API"""
        return await self.request("GET", endpoint, params=params, **kwargs)
