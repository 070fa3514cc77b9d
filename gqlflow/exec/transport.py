"""
JSON-over-HTTP transport.
Issues one POST per step and decodes the JSON response body.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from ..exceptions import TransportError


logger = logging.getLogger(__name__)


class HttpTransport:
    """POSTs JSON payloads with a reusable httpx client."""

    def __init__(self, timeout: Optional[float] = None, client: Optional[httpx.Client] = None):
        """
        Initialize transport.

        Args:
            timeout: Request timeout in seconds (None = httpx default)
            client: Preconfigured client, e.g. one built on httpx.MockTransport
        """
        if client is None:
            client = httpx.Client(timeout=timeout) if timeout is not None else httpx.Client()
        self.client = client

    def post(self, url: str, payload: Dict[str, Any], headers: Dict[str, str]) -> Any:
        """
        Send payload as JSON and return the decoded response body.

        The HTTP status code is not treated as failure: GraphQL servers
        commonly answer 4xx/5xx with an `errors` body, which the caller
        inspects.

        Raises:
            TransportError: On connection failure, timeout, or a non-JSON body
        """
        logger.debug(f"POST {url} (headers: {sorted(headers)})")
        try:
            response = self.client.post(url, content=json.dumps(payload), headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        if response.is_error:
            logger.warning(f"POST {url} returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Response from {url} (HTTP {response.status_code}) is not valid JSON: {e}"
            ) from e

    def close(self):
        """Close the underlying HTTP client."""
        self.client.close()
