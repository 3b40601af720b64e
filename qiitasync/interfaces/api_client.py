"""
API client interface used by the post models.
"""

from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional, Tuple

Response = Tuple[str, int, Mapping[str, str]]


class ApiClient(ABC):
    """
    Abstract base class for clients of the Qiita API v2.

    ``sub_domain`` selects a team workspace; None means the personal space.
    Every method returns ``(body, status_code, headers)`` and raises
    ResponseError or StatusError for non-2xx responses.
    """

    @abstractmethod
    def get(self, sub_domain: Optional[str], path: str) -> Response:
        """
        Send a GET request.

        Args:
            sub_domain: Team ID or None
            path: API path including any query string, e.g. "/items/abc"

        Returns:
            Tuple of response body, status code and headers
        """
        pass

    @abstractmethod
    def post(self, sub_domain: Optional[str], path: str, data: Dict) -> Response:
        """
        Send a POST request with a JSON body.

        Args:
            sub_domain: Team ID or None
            path: API path
            data: Payload serialized as JSON

        Returns:
            Tuple of response body, status code and headers
        """
        pass

    @abstractmethod
    def patch(self, sub_domain: Optional[str], path: str, data: Dict) -> Response:
        """
        Send a PATCH request with a JSON body.

        Args:
            sub_domain: Team ID or None
            path: API path
            data: Payload serialized as JSON

        Returns:
            Tuple of response body, status code and headers
        """
        pass

    @abstractmethod
    def delete(self, sub_domain: Optional[str], path: str) -> Response:
        """
        Send a DELETE request.

        Args:
            sub_domain: Team ID or None
            path: API path

        Returns:
            Tuple of response body, status code and headers
        """
        pass
