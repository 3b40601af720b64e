"""
Frontmatter handler for the metadata block of local post files.

The block is YAML wrapped in an HTML comment so that it stays invisible
when the markdown is rendered:

    <!--
    id: ...
    -->
"""

import re
from typing import Any, Dict, Tuple

import frontmatter
import yaml
from frontmatter.default_handlers import YAMLHandler

from qiitasync.models.timestamp import Timestamp
from qiitasync.utils.error_handler import MissingMetaBlockError

META_START = "<!--"
META_END = "-->"

POST_TEMPLATE = "{start_delimiter}\n{metadata}\n{end_delimiter}\n\n{content}"


class MetaLoader(yaml.SafeLoader):
    """SafeLoader that reads YAML timestamps as Timestamp values."""


class MetaDumper(yaml.SafeDumper):
    """SafeDumper that writes Timestamp values and never emits aliases."""

    def ignore_aliases(self, data):
        return True


def _construct_timestamp(loader: yaml.Loader, node: yaml.Node) -> Timestamp:
    return Timestamp.parse(loader.construct_scalar(node))


def _represent_timestamp(dumper: yaml.Dumper, value: Timestamp) -> yaml.Node:
    return dumper.represent_scalar("tag:yaml.org,2002:timestamp", value.isoformat())


def _represent_str(dumper: yaml.Dumper, value: str) -> yaml.Node:
    if not value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style='"')
    return dumper.represent_str(value)


MetaLoader.add_constructor("tag:yaml.org,2002:timestamp", _construct_timestamp)
MetaDumper.add_representer(Timestamp, _represent_timestamp)
MetaDumper.add_representer(str, _represent_str)


class MetaCommentHandler(YAMLHandler):
    """
    YAML frontmatter delimited by ``<!--`` and ``-->`` lines.

    Keys keep their insertion order and the text after the block is
    formatted as given, without stripping.
    """

    FM_BOUNDARY = re.compile(r"^(?:<!--|-->)[ \t\r]*$", re.MULTILINE)
    START_DELIMITER = META_START
    END_DELIMITER = META_END

    def load(self, fm: str, **kwargs) -> Any:
        kwargs.setdefault("Loader", MetaLoader)
        return super().load(fm, **kwargs)

    def export(self, metadata: Dict, **kwargs) -> str:
        kwargs.setdefault("Dumper", MetaDumper)
        kwargs.setdefault("sort_keys", False)
        kwargs.setdefault("width", 4096)
        return super().export(metadata, **kwargs)

    def format(self, post: frontmatter.Post, **kwargs) -> str:
        start_delimiter = kwargs.pop("start_delimiter", self.START_DELIMITER)
        end_delimiter = kwargs.pop("end_delimiter", self.END_DELIMITER)
        metadata = self.export(post.metadata, **kwargs)
        return POST_TEMPLATE.format(
            metadata=metadata,
            content=post.content,
            start_delimiter=start_delimiter,
            end_delimiter=end_delimiter,
        )


def split_meta(text: str) -> Tuple[Dict, str]:
    """
    Split post text into its metadata mapping and the remaining content.

    Only the first comment block is metadata; anything after its closing
    line is returned untouched.

    Raises:
        MissingMetaBlockError: If the text does not open with a complete block
            or the block is not a mapping
        yaml.YAMLError: If the block is not valid YAML
    """
    handler = MetaCommentHandler()
    if not text.startswith(META_START) or not handler.detect(text):
        raise MissingMetaBlockError()

    try:
        fm, content = handler.split(text)
    except ValueError:
        raise MissingMetaBlockError("metadata block is not closed with -->")

    metadata = handler.load(fm)
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise MissingMetaBlockError("metadata block must be a YAML mapping")
    return metadata, content


def format_post(metadata: Dict, content: str) -> str:
    """Render the metadata block followed by ``content``."""
    handler = MetaCommentHandler()
    post = frontmatter.Post(content, handler=handler)
    post.metadata.update(metadata)
    return frontmatter.dumps(post, handler=handler)
