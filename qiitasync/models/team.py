"""
Qiita:Team workspaces.
"""

import json
from dataclasses import dataclass
from typing import Dict, List, Optional

from qiitasync.interfaces.api_client import ApiClient
from qiitasync.utils.error_handler import InvalidMetaValueError


@dataclass
class Team:
    """
    A team workspace. ``id`` is both the API sub-domain and the top-level
    local directory of the team's posts.
    """

    active: bool
    id: str
    name: str

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["Team"]:
        """
        Build a Team from a metadata block or API mapping.

        Raises:
            InvalidMetaValueError: If ``data`` is not a mapping or ``active``
                is not a boolean
        """
        if data is None:
            return None
        if not isinstance(data, dict):
            raise InvalidMetaValueError("team", data, "a mapping")
        active = data.get("active", False)
        if not isinstance(active, bool):
            raise InvalidMetaValueError("team.active", active, "true or false")
        return cls(
            active=active,
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
        )

    def to_dict(self) -> Dict:
        return {"active": self.active, "id": self.id, "name": self.name}


def fetch_teams(client: ApiClient) -> List[Team]:
    """
    List the team workspaces the authenticated user belongs to.

    Args:
        client: API client

    Returns:
        Teams in server order
    """
    body, _, _ = client.get(None, "/teams")
    return [Team.from_dict(data) for data in json.loads(body)]
