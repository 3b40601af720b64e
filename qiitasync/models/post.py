"""
Post model: a Qiita item backed by a local markdown file.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

import yaml

from qiitasync.interfaces.api_client import ApiClient
from qiitasync.models.tag import Tags
from qiitasync.models.team import Team
from qiitasync.models.timestamp import Timestamp
from qiitasync.models.user import User
from qiitasync.processors.meta_handler import format_post, split_meta
from qiitasync.utils.error_handler import (
    EmptyIDError,
    InvalidMetaValueError,
    MissingTitleError,
    PostFormatError,
    ValidationStatus,
)
from qiitasync.utils.file import file_exists, read_file, remove_file, write_file

logger = logging.getLogger(__name__)

DIR_MINE = "mine"
FILE_EXTENSION = ".md"
UNIQUE_SUFFIX = "-"

TITLE_PATTERN = re.compile(r"^#(?!#) ?(.*?)\r?$")


@dataclass
class Post:
    """
    Data model representing a post and its local file.
    """

    title: str = ""
    body: str = ""
    id: str = ""
    url: str = ""
    created_at: Timestamp = field(default_factory=Timestamp.now)
    updated_at: Optional[Timestamp] = None
    private: bool = False
    coediting: bool = False
    tags: Tags = field(default_factory=Tags)
    team: Optional[Team] = None
    path: Optional[str] = None
    rendered_body: str = ""
    user: Optional[User] = None

    def __post_init__(self):
        if self.updated_at is None:
            self.updated_at = self.created_at
        if not isinstance(self.tags, Tags):
            self.tags = Tags(self.tags)

    @classmethod
    def new(
        cls,
        title: str,
        created_at: Optional[Timestamp] = None,
        team: Optional[Team] = None,
    ) -> "Post":
        """
        Create an unsaved post with no ID, URL, tags or body.

        Args:
            title: Title of the post
            created_at: Creation time, defaults to now
            team: Team workspace, None for the personal space

        Returns:
            Post instance
        """
        created_at = created_at or Timestamp.now()
        return cls(title=title, created_at=created_at, updated_at=created_at, team=team)

    # Local file format

    @classmethod
    def decode(cls, text: str) -> "Post":
        """
        Decode the text of a local post file.

        Args:
            text: File content starting with the metadata block

        Returns:
            Post instance without path

        Raises:
            MissingMetaBlockError: If the text does not open with the metadata block
            MissingTitleError: If no level-1 heading follows the block
            InvalidTagFormatError: If a tag entry is malformed
            InvalidMetaValueError: If a flag is not a boolean or team is not a mapping
        """
        meta, content = split_meta(text)

        lines = content.split("\n")
        index = 0
        while index < len(lines) and not lines[index].strip():
            index += 1
        if index == len(lines):
            raise MissingTitleError()
        match = TITLE_PATTERN.match(lines[index])
        if not match:
            raise MissingTitleError()

        body_lines = lines[index + 1 :]
        while body_lines and not body_lines[0].strip():
            body_lines.pop(0)
        while body_lines and not body_lines[-1].strip():
            body_lines.pop()

        created_at = meta.get("created_at")
        created_at = Timestamp.parse(created_at) if created_at else Timestamp.now()
        updated_at = meta.get("updated_at")
        updated_at = Timestamp.parse(updated_at) if updated_at else created_at

        return cls(
            title=match.group(1),
            body="\n".join(body_lines),
            id=_string(meta.get("id")),
            url=_string(meta.get("url")),
            created_at=created_at,
            updated_at=updated_at,
            private=_boolean(meta, "private"),
            coediting=_boolean(meta, "coediting"),
            tags=Tags.from_yaml(meta.get("tags")),
            team=Team.from_dict(meta.get("team")),
        )

    def encode(self) -> str:
        """
        Encode the post as the text of its local file.

        Returns:
            Metadata block, title heading and body
        """
        meta = {
            "id": self.id,
            "url": self.url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "private": self.private,
            "coediting": self.coediting,
            "tags": self.tags.to_yaml(),
            "team": self.team.to_dict() if self.team else None,
        }
        content = f"# {self.title}\n\n"
        if self.body:
            content += self.body + "\n"
        return format_post(meta, content)

    @classmethod
    def from_file(cls, path: str) -> "Post":
        """Read and decode the post stored at ``path``."""
        post = cls.decode(read_file(path))
        post.path = path
        return post

    def validate(self) -> Dict[str, ValidationStatus]:
        """
        Check the fields required for publishing.

        Returns:
            Mapping of failing field names to their status, empty when valid
        """
        errors = {}
        if not self.title:
            errors["title"] = ValidationStatus(required=True)
        if not self.body:
            errors["body"] = ValidationStatus(required=True)
        if not self.tags:
            errors["tags"] = ValidationStatus(required=True)
        return errors

    # Local persistence

    def save(self, root_dir: str = ".") -> str:
        """
        Write the post to its file, deriving a path on first save.

        Args:
            root_dir: Directory holding the "mine" and team directories

        Returns:
            Path of the written file
        """
        path = self.path or self._find_path(root_dir)
        write_file(path, self.encode())
        self.path = path
        logger.debug(f"Saved '{self.title}' to {path}")
        return path

    def _find_path(self, root_dir: str) -> str:
        space = self.team.id if self.team else DIR_MINE
        year, month, day = self.created_at.date_parts()
        directory = os.path.join(root_dir, space, year, month, day)
        stem = _file_stem(self.title)

        while True:
            path = os.path.join(directory, stem + FILE_EXTENSION)
            if not file_exists(path) or self._is_stored_at(path):
                return path
            stem += UNIQUE_SUFFIX

    def _is_stored_at(self, path: str) -> bool:
        if not self.id:
            return False
        try:
            existing = Post.from_file(path)
        except (PostFormatError, yaml.YAMLError, ValueError):
            return False
        return existing.id == self.id

    # Remote operations

    @classmethod
    def from_dict(cls, data: Dict, team: Optional[Team] = None) -> "Post":
        """
        Create a Post from an item returned by the API.

        Args:
            data: Decoded JSON item
            team: Team the item was fetched from

        Returns:
            Post instance without path
        """
        created_at = Timestamp.parse(data["created_at"])
        updated_at = data.get("updated_at")
        return cls(
            title=data.get("title") or "",
            body=data.get("body") or "",
            id=data.get("id") or "",
            url=data.get("url") or "",
            created_at=created_at,
            updated_at=Timestamp.parse(updated_at) if updated_at else created_at,
            private=bool(data.get("private", False)),
            coediting=bool(data.get("coediting", False)),
            tags=Tags.from_json(data.get("tags")),
            team=team,
            rendered_body=data.get("rendered_body") or "",
            user=User.from_dict(data.get("user")),
        )

    @classmethod
    def fetch(cls, client: ApiClient, post_id: str, team: Optional[Team] = None) -> "Post":
        """
        Fetch a single post.

        Args:
            client: API client
            post_id: ID of the post
            team: Team workspace, None for the personal space

        Returns:
            Post instance without path
        """
        if not post_id:
            raise EmptyIDError("fetch")
        body, _, _ = client.get(_sub_domain(team), f"/items/{post_id}")
        return cls.from_dict(json.loads(body), team)

    def create(self, client: ApiClient, tweet: bool = False, gist: bool = False) -> None:
        """
        Publish the post as a new item.

        ``id``, ``url`` and both timestamps are taken from the response.
        The local file is not written.

        Args:
            client: API client
            tweet: Announce the post on Twitter
            gist: Export code blocks to GitHub Gist
        """
        payload = self._payload()
        payload["tweet"] = tweet
        payload["gist"] = gist

        body, _, _ = client.post(_sub_domain(self.team), "/items", payload)
        data = json.loads(body)
        post_id = data["id"]
        url = data.get("url") or ""
        created_at = Timestamp.parse(data["created_at"])
        updated_at = Timestamp.parse(data["updated_at"])

        self.id = post_id
        self.url = url
        self.created_at = created_at
        self.updated_at = updated_at

    def update(self, client: ApiClient) -> None:
        """
        Replace the remote item with the current content.

        Raises:
            EmptyIDError: If the post has never been created
        """
        if not self.id:
            raise EmptyIDError("update")

        body, _, _ = client.patch(_sub_domain(self.team), f"/items/{self.id}", self._payload())
        data = json.loads(body)
        self.updated_at = Timestamp.parse(data["updated_at"])

    def delete(self, client: ApiClient) -> None:
        """
        Delete the remote item, then the local file if there is one.

        Raises:
            EmptyIDError: If the post has never been created
        """
        if not self.id:
            raise EmptyIDError("delete")

        client.delete(_sub_domain(self.team), f"/items/{self.id}")
        if self.path and file_exists(self.path):
            remove_file(self.path)

    def _payload(self) -> Dict:
        return {
            "title": self.title,
            "body": self.body,
            "tags": self.tags.to_json(),
            "private": self.private,
            "coediting": self.coediting,
        }


def _sub_domain(team: Optional[Team]) -> Optional[str]:
    return team.id if team else None


def _boolean(meta: Dict, key: str) -> bool:
    value = meta.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise InvalidMetaValueError(key, value, "true or false")
    return value


def _string(value) -> str:
    if value is None:
        return ""
    return str(value)


def _file_stem(title: str) -> str:
    return title.replace("/", "_").replace(os.sep, "_")
