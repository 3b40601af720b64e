"""
This module is used to interact with the Qiita API v2 for
publishing posts and retrieving them.
"""

import logging
from os import environ
from typing import Callable, Dict, Optional

import requests
from dotenv import load_dotenv

from qiitasync.interfaces.api_client import ApiClient, Response
from qiitasync.utils.error_handler import (
    AuthenticationError,
    ErrorHandler,
    handle_api_response,
)

# Load environment variables from .env file
load_dotenv()

API_HOST = "qiita.com"
API_PREFIX = "/api/v2"
DEFAULT_TIMEOUT = 30


def default_url_builder(sub_domain: Optional[str], path: str) -> str:
    """
    Build the URL of an API path.

    Args:
        sub_domain: Team ID, or None for qiita.com
        path: API path starting with "/"

    Returns:
        Absolute URL
    """
    host = f"{sub_domain}.{API_HOST}" if sub_domain else API_HOST
    return f"https://{host}{API_PREFIX}{path}"


class QiitaClient(ApiClient):
    """
    This class is used to send authenticated requests to the Qiita API v2.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        url_builder: Optional[Callable[[Optional[str], str], str]] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the client.

        Args:
            access_token: Personal access token, defaults to QIITA_ACCESS_TOKEN
            url_builder: Function mapping (sub_domain, path) to a URL
            timeout: Request timeout in seconds

        Raises:
            AuthenticationError: If no access token is available
        """
        self.logging = logging.getLogger(__name__)
        self.error_handler = ErrorHandler(self.logging)
        self.access_token = access_token or environ.get("QIITA_ACCESS_TOKEN")
        self.url_builder = url_builder or default_url_builder
        self.timeout = timeout

        if not self.access_token:
            self.error_handler.log_authentication_error(
                "QIITA_ACCESS_TOKEN environment variable is not set"
            )
            raise AuthenticationError("QIITA_ACCESS_TOKEN environment variable is required")

    def get(self, sub_domain: Optional[str], path: str) -> Response:
        return self._request("GET", sub_domain, path)

    def post(self, sub_domain: Optional[str], path: str, data: Dict) -> Response:
        return self._request("POST", sub_domain, path, data)

    def patch(self, sub_domain: Optional[str], path: str, data: Dict) -> Response:
        return self._request("PATCH", sub_domain, path, data)

    def delete(self, sub_domain: Optional[str], path: str) -> Response:
        return self._request("DELETE", sub_domain, path)

    def _request(
        self, method: str, sub_domain: Optional[str], path: str, data: Optional[Dict] = None
    ) -> Response:
        """
        Send a request and check its status.

        Raises:
            ResponseError: If the API returned a structured error
            StatusError: If the API returned any other non-2xx status
            requests.RequestException: On transport failures
        """
        url = self.url_builder(sub_domain, path)
        self.logging.debug(f"{method} {url}")

        response = requests.request(
            method,
            url,
            json=data,
            headers=self._generate_authenticated_header(),
            timeout=self.timeout,
        )
        return handle_api_response(response)

    def _generate_authenticated_header(self) -> Dict[str, str]:
        """
        Function to generate authenticated headers for the requests.
        Returns:
            dict: The authenticated header.
        """
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
