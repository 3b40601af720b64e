"""
Tags attached to a post, with the JSON shape used by the API and the
YAML shape used in local files.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Union

from qiitasync.utils.error_handler import InvalidTagFormatError


@dataclass
class Tag:
    """A tag name with an ordered list of versions."""

    name: str
    versions: List[str] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, entry: Any) -> "Tag":
        """
        Decode one element of the YAML tag sequence.

        Accepts a bare scalar (``Go``) or a single-key mapping
        (``Go: [1.4.3, 1.5.3]``).

        Raises:
            InvalidTagFormatError: For any other element
        """
        if isinstance(entry, (str, int, float)) and not isinstance(entry, bool):
            return cls(name=str(entry))
        if isinstance(entry, dict) and len(entry) == 1:
            name, versions = next(iter(entry.items()))
            return cls(name=str(name), versions=_decode_versions(name, versions))
        raise InvalidTagFormatError(entry)

    def to_yaml(self) -> Union[str, Dict[str, List[str]]]:
        if not self.versions:
            return self.name
        return {self.name: list(self.versions)}

    @classmethod
    def from_json(cls, data: Dict) -> "Tag":
        return cls(
            name=data["name"],
            versions=[str(v) for v in data.get("versions") or []],
        )

    def to_json(self) -> Dict:
        return {"name": self.name, "versions": list(self.versions)}


def _decode_versions(name, versions) -> List[str]:
    if versions is None:
        return []
    if isinstance(versions, list) and all(
        not isinstance(v, (dict, list)) and v is not None for v in versions
    ):
        return [str(v) for v in versions]
    raise InvalidTagFormatError({name: versions})


class Tags(list):
    """Ordered collection of Tag."""

    def __init__(self, tags: Iterable[Tag] = ()):
        super().__init__(tags)

    @classmethod
    def from_yaml(cls, data: Any) -> "Tags":
        """
        Decode the ``tags`` value of a metadata block.

        Besides the sequence shape, a mapping of name to versions is accepted.

        Raises:
            InvalidTagFormatError: If the value or one of its entries is malformed
        """
        if data is None:
            return cls()
        if isinstance(data, dict):
            return cls(
                Tag(name=str(name), versions=_decode_versions(name, versions))
                for name, versions in data.items()
            )
        if isinstance(data, list):
            return cls(Tag.from_yaml(entry) for entry in data)
        raise InvalidTagFormatError(data)

    def to_yaml(self) -> List:
        return [tag.to_yaml() for tag in self]

    @classmethod
    def from_json(cls, data: Any) -> "Tags":
        return cls(Tag.from_json(entry) for entry in data or [])

    def to_json(self) -> List[Dict]:
        return [tag.to_json() for tag in self]
