"""
Common utilities for API request handling.
Provides the async HTTP request helper, URL building and environment lookup.
"""

import requests
import asyncio
import time
import os
from typing import Dict, Any, Optional
import urllib.parse

from loguru import logger


class APIError(Exception):
    """Exception raised for API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)


def get_env_var(key: str, default: str = "", required: bool = False) -> str:
    """
    Get environment variable with validation.

    Args:
        key: Environment variable name
        default: Default value if not set
        required: Whether the variable is required

    Returns:
        Environment variable value or default

    Raises:
        ValueError: If the variable is required but not set
    """
    value = os.getenv(key, default)
    if required and not value:
        logger.error(f"Required environment variable {key} is not set!")
        raise ValueError(f"Required environment variable {key} is not set!")
    return value


async def async_request(
    method: str,
    url: str,
    headers: Dict[str, str] = None,
    params: Dict[str, Any] = None,
    json_data: Dict[str, Any] = None,
    timeout: float = 10,
    retries: int = 1,
    backoff_factor: float = 0.5
) -> Any:
    """
    Make an asynchronous HTTP request to an API.

    The blocking request runs in the default executor so the event loop
    keeps serving commands while a quote is in flight.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: URL to request
        headers: Optional headers
        params: Optional query parameters
        json_data: Optional JSON data for POST requests
        timeout: Request timeout in seconds
        retries: Number of attempts before giving up
        backoff_factor: Backoff factor between attempts

    Returns:
        Parsed JSON response

    Raises:
        APIError: On request failure or a body that is not JSON
    """
    loop = asyncio.get_event_loop()

    def make_request():
        for attempt in range(retries):
            try:
                response = requests.request(
                    method=method,
                    url=url,
                    headers=headers,
                    params=params,
                    json=json_data,
                    timeout=timeout
                )

                response.raise_for_status()
                return response.json()

            except requests.exceptions.RequestException as e:
                logger.warning(f"Request failed (attempt {attempt+1}/{retries}): {str(e)}")

                if attempt == retries - 1:
                    error_response = None
                    status_code = None

                    if getattr(e, "response", None) is not None:
                        status_code = e.response.status_code
                        error_response = e.response.text

                    raise APIError(
                        message=f"Request failed after {retries} attempts: {str(e)}",
                        status_code=status_code,
                        response=error_response
                    )

                # Exponential backoff
                time.sleep(backoff_factor * (2 ** attempt))

            except ValueError as e:
                # Body was not valid JSON
                raise APIError(f"Invalid JSON in response from {url}: {str(e)}")

    try:
        return await loop.run_in_executor(None, make_request)
    except APIError:
        raise
    except Exception as e:
        raise APIError(f"Unexpected error during request: {str(e)}")


def build_url_with_params(base_url: str, endpoint: str, params: Dict[str, Any] = None) -> str:
    """
    Build a URL with properly encoded query parameters.

    Args:
        base_url: Base URL
        endpoint: API endpoint
        params: Query parameters

    Returns:
        Full URL with encoded parameters
    """
    # Ensure there's no double slash between base_url and endpoint
    if base_url.endswith('/') and endpoint.startswith('/'):
        endpoint = endpoint[1:]
    elif not base_url.endswith('/') and not endpoint.startswith('/'):
        endpoint = '/' + endpoint

    url = base_url + endpoint

    if params:
        # Filter out None values
        filtered_params = {k: v for k, v in params.items() if v is not None}
        if filtered_params:
            query_string = urllib.parse.urlencode(filtered_params)
            url = f"{url}?{query_string}"

    return url
