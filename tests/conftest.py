"""
Pytest configuration and fixtures for qiitasync.
"""

import json
from typing import Callable, Dict, List, Optional, Tuple

import pytest
from hypothesis import settings, Verbosity

from qiitasync.interfaces.api_client import ApiClient

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.load_profile("default")


class MockApiClient(ApiClient):
    """In-memory API client recording every call."""

    def __init__(self, handler: Optional[Callable] = None):
        self.handler = handler
        self.calls: List[Tuple[str, Optional[str], str, Optional[Dict]]] = []

    def get(self, sub_domain, path):
        return self._call("GET", sub_domain, path, None)

    def post(self, sub_domain, path, data):
        return self._call("POST", sub_domain, path, data)

    def patch(self, sub_domain, path, data):
        return self._call("PATCH", sub_domain, path, data)

    def delete(self, sub_domain, path):
        return self._call("DELETE", sub_domain, path, None)

    def _call(self, method, sub_domain, path, data):
        self.calls.append((method, sub_domain, path, data))
        if self.handler is None:
            raise AssertionError(f"unexpected request: {method} {path}")
        return self.handler(method, sub_domain, path, data)


@pytest.fixture
def sample_item():
    """Item as returned by GET /items/:id."""
    return {
        "rendered_body": "<h2>Example body</h2>",
        "body": "## Example body",
        "coediting": False,
        "created_at": "2000-01-01T00:00:00+00:00",
        "id": "4bd431809afb1bb99e4f",
        "private": False,
        "tags": [{"name": "Ruby", "versions": ["0.0.1"]}],
        "title": "Example title",
        "updated_at": "2000-01-01T00:00:00+00:00",
        "url": "https://qiita.com/yaotti/items/4bd431809afb1bb99e4f",
        "user": {
            "description": "Hello, world.",
            "facebook_id": "yaotti",
            "followees_count": 100,
            "followers_count": 200,
            "github_login_name": "yaotti",
            "id": "yaotti",
            "items_count": 300,
            "linkedin_id": "yaotti",
            "location": "Tokyo, Japan",
            "name": "Hiroshige Umino",
            "organization": "Increments Inc",
            "permanent_id": 1,
            "profile_image_url": "https://si0.twimg.com/profile_images/2309761038/1ijg13pfs0dg84sk2y0h_normal.jpeg",
            "twitter_screen_name": "yaotti",
            "website_url": "http://yaotti.hatenablog.com",
        },
    }


@pytest.fixture
def sample_post_text():
    """Local post file with every metadata field set."""
    return """<!--
id: abcdefghijklmnopqrst
url: http://example.com/mypost
created_at: 2013-12-10T12:29:14+09:00
updated_at: 2015-02-25T09:26:30+09:00
private: true
coediting: false
tags:
- TypeScript
- Docker:
  - '1.9'
- Go:
  - 1.4.3
  - 1.5.3
team: null
-->

# Main title

## Sub title
Paragraph
"""


@pytest.fixture
def mock_client_factory():
    """Build a MockApiClient from a handler."""
    return MockApiClient


@pytest.fixture
def json_response():
    """Build a (body, status, headers) triple from a JSON-serializable value."""

    def build(data, status: int = 200, headers: Optional[Dict] = None):
        return json.dumps(data), status, headers or {}

    return build
