"""
Collections of posts and the paginated listing of the authenticated user's items.
"""

import json
import logging
import math
from typing import List, Mapping, Optional

from qiitasync.interfaces.api_client import ApiClient
from qiitasync.models.post import Post
from qiitasync.models.team import Team
from qiitasync.utils.error_handler import InvalidTotalCountError

logger = logging.getLogger(__name__)

PER_PAGE = 100
TOTAL_COUNT_HEADER = "Total-Count"
ITEMS_PATH = "/authenticated_user/items"


class Posts(list):
    """Ordered collection of Post."""

    def save(self, root_dir: str = ".") -> List[str]:
        """
        Save every post in order, stopping at the first failure.

        Args:
            root_dir: Directory holding the "mine" and team directories

        Returns:
            Paths of the written files
        """
        return [post.save(root_dir) for post in self]


def fetch_posts(client: ApiClient, team: Optional[Team] = None) -> Posts:
    """
    Fetch every post of the authenticated user, page by page.

    The number of pages is computed from the Total-Count header. Any
    failure aborts the whole listing.

    Args:
        client: API client
        team: Team workspace, None for the personal space

    Returns:
        Posts in server order

    Raises:
        InvalidTotalCountError: If the header is missing or not a number,
            or the number of received posts does not match it
    """
    sub_domain = team.id if team else None
    posts = Posts()
    page = 1
    total_count = 0

    while True:
        body, _, headers = client.get(sub_domain, f"{ITEMS_PATH}?page={page}&per_page={PER_PAGE}")
        total_count = _total_count(headers)
        posts.extend(Post.from_dict(data, team) for data in json.loads(body))
        logger.debug(f"Fetched page {page} ({len(posts)}/{total_count} posts)")

        if page >= math.ceil(total_count / PER_PAGE):
            break
        page += 1

    if len(posts) != total_count:
        raise InvalidTotalCountError(
            f"expected {total_count} posts, got {len(posts)}", total_count
        )
    return posts


def _total_count(headers: Mapping[str, str]) -> int:
    raw = headers.get(TOTAL_COUNT_HEADER)
    if raw is None:
        raise InvalidTotalCountError(f"response has no {TOTAL_COUNT_HEADER} header")
    try:
        total_count = int(raw)
    except (TypeError, ValueError):
        raise InvalidTotalCountError(f"invalid {TOTAL_COUNT_HEADER} header: {raw!r}", raw)
    if total_count < 0:
        raise InvalidTotalCountError(f"invalid {TOTAL_COUNT_HEADER} header: {raw!r}", raw)
    return total_count
