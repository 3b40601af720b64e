"""
Tests for the paginated post listing and saving a collection of posts.
"""

import json
import os
from urllib.parse import parse_qs, urlparse

import pytest

from qiitasync.models.post import Post
from qiitasync.models.posts import ITEMS_PATH, PER_PAGE, Posts, fetch_posts
from qiitasync.models.team import Team
from qiitasync.models.timestamp import Timestamp
from qiitasync.utils.error_handler import (
    InvalidTotalCountError,
    ResponseError,
    StatusError,
)


def create_item(index: int) -> dict:
    return {
        "id": f"{index:020d}",
        "url": f"https://qiita.com/yaotti/items/{index:020d}",
        "title": f"Example title {index}",
        "body": "## Example body",
        "created_at": "2015-11-28T22:02:37+09:00",
        "updated_at": "2015-11-28T22:02:37+09:00",
        "private": False,
        "coediting": False,
        "tags": [{"name": "Ruby", "versions": ["0.0.1"]}],
    }


def paginated_handler(total_count: int, header=None):
    """Serve ``total_count`` items in pages of PER_PAGE."""
    items = [create_item(i) for i in range(total_count)]

    def handler(method, sub_domain, path, data):
        query = parse_qs(urlparse(path).query)
        page = int(query["page"][0])
        per_page = int(query["per_page"][0])
        chunk = items[(page - 1) * per_page : page * per_page]
        return json.dumps(chunk), 200, {"Total-Count": str(total_count) if header is None else header}

    return handler


class TestFetchPosts:
    """Tests for fetch_posts."""

    def test_walks_every_page(self, mock_client_factory):
        """1422 posts take 15 requests with increasing page numbers."""
        client = mock_client_factory(paginated_handler(1422))

        posts = fetch_posts(client)

        assert len(posts) == 1422
        assert [call[2] for call in client.calls] == [
            f"{ITEMS_PATH}?page={page}&per_page={PER_PAGE}" for page in range(1, 16)
        ]
        assert all(call[0] == "GET" and call[1] is None for call in client.calls)
        assert posts[0].title == "Example title 0"
        assert posts[-1].title == "Example title 1421"
        assert all(post.path is None for post in posts)

    def test_single_page(self, mock_client_factory):
        """Exactly one full page takes one request."""
        client = mock_client_factory(paginated_handler(PER_PAGE))

        posts = fetch_posts(client)

        assert len(posts) == PER_PAGE
        assert len(client.calls) == 1

    def test_no_posts(self, mock_client_factory):
        """A total of zero still takes one request."""
        client = mock_client_factory(paginated_handler(0))

        assert fetch_posts(client) == []
        assert len(client.calls) == 1

    def test_team(self, mock_client_factory):
        """Team listings use the team sub-domain and carry the team."""
        team = Team(active=True, id="increments", name="Increments Inc")
        client = mock_client_factory(paginated_handler(2))

        posts = fetch_posts(client, team)

        assert client.calls[0][1] == "increments"
        assert all(post.team == team for post in posts)

    def test_missing_total_count(self, mock_client_factory):
        """A response without Total-Count is rejected."""
        client = mock_client_factory(lambda method, sub_domain, path, data: ("[]", 200, {}))

        with pytest.raises(InvalidTotalCountError):
            fetch_posts(client)

    def test_invalid_total_count(self, mock_client_factory):
        """A non-numeric Total-Count is rejected."""
        client = mock_client_factory(paginated_handler(3, header="dummy"))

        with pytest.raises(InvalidTotalCountError):
            fetch_posts(client)

    def test_negative_total_count(self, mock_client_factory):
        """A negative Total-Count is rejected."""
        client = mock_client_factory(paginated_handler(0, header="-1"))

        with pytest.raises(InvalidTotalCountError):
            fetch_posts(client)

    def test_count_mismatch(self, mock_client_factory):
        """Fewer items than announced is an error."""
        client = mock_client_factory(paginated_handler(3, header="5"))

        with pytest.raises(InvalidTotalCountError) as exc_info:
            fetch_posts(client)

        assert exc_info.value.total_count == 5

    def test_response_error(self, mock_client_factory):
        """A structured API error aborts the listing."""

        def handler(method, sub_domain, path, data):
            raise ResponseError("unauthorized", "Unauthorized", 401)

        with pytest.raises(ResponseError) as exc_info:
            fetch_posts(mock_client_factory(handler))

        assert exc_info.value.type == "unauthorized"
        assert exc_info.value.message == "Unauthorized"

    def test_status_error_on_later_page(self, mock_client_factory):
        """A failure on any page aborts the whole listing."""
        serve = paginated_handler(250)

        def handler(method, sub_domain, path, data):
            if "page=2&" in path:
                raise StatusError(500, "Internal Server Error")
            return serve(method, sub_domain, path, data)

        client = mock_client_factory(handler)

        with pytest.raises(StatusError):
            fetch_posts(client)

        assert len(client.calls) == 2

    def test_non_json_body(self, mock_client_factory):
        """A body that is not JSON fails to decode."""
        client = mock_client_factory(
            lambda method, sub_domain, path, data: ("Non JSON format", 200, {"Total-Count": "1"})
        )

        with pytest.raises(json.JSONDecodeError):
            fetch_posts(client)


class TestPostsSave:
    """Tests for Posts.save."""

    def test_save_all(self, tmp_path):
        """Every post is written under its derived path."""
        created_at = Timestamp.parse("2015-11-28T22:02:37+09:00")
        posts = Posts(
            [
                Post(title="Example Title 0", id="00000000000000000000", created_at=created_at),
                Post(title="Example Title 1", id="00000000000000000001", created_at=created_at),
            ]
        )

        paths = posts.save(str(tmp_path))

        directory = os.path.join(str(tmp_path), "mine", "2015", "11", "28")
        assert paths == [
            os.path.join(directory, "Example Title 0.md"),
            os.path.join(directory, "Example Title 1.md"),
        ]
        assert sorted(os.listdir(directory)) == ["Example Title 0.md", "Example Title 1.md"]
        assert Post.from_file(paths[1]).id == "00000000000000000001"

    def test_save_stops_at_first_error(self, tmp_path):
        """Files written before a failure are kept and later posts are skipped."""
        created_at = Timestamp.parse("2015-11-28T22:02:37+09:00")
        directory = os.path.join(str(tmp_path), "mine", "2015", "11", "28")
        # a directory where the second post's file would go
        os.makedirs(os.path.join(directory, "Second.md"))
        posts = Posts(
            [
                Post(title="First", id="00000000000000000000", created_at=created_at),
                Post(title="Second", id="00000000000000000001", created_at=created_at),
                Post(title="Third", id="00000000000000000002", created_at=created_at),
            ]
        )

        with pytest.raises(OSError):
            posts.save(str(tmp_path))

        assert os.path.isfile(os.path.join(directory, "First.md"))
        assert not os.path.exists(os.path.join(directory, "Third.md"))
        assert posts[0].path is not None
        assert posts[2].path is None

    def test_fetched_posts_are_saved_idempotently(self, tmp_path, mock_client_factory):
        """Fetching and saving twice does not duplicate files."""
        client = mock_client_factory(paginated_handler(3))

        first = fetch_posts(client).save(str(tmp_path))
        second = fetch_posts(client).save(str(tmp_path))

        assert first == second
        assert len(os.listdir(os.path.join(str(tmp_path), "mine", "2015", "11", "28"))) == 3
