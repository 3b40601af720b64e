"""
Author profile attached to posts returned by the API.
"""

from dataclasses import dataclass, fields
from typing import Dict, Optional


@dataclass
class User:
    id: str = ""
    permanent_id: int = 0
    name: str = ""
    description: str = ""
    organization: str = ""
    location: str = ""
    profile_image_url: str = ""
    website_url: str = ""
    facebook_id: str = ""
    github_login_name: str = ""
    linkedin_id: str = ""
    twitter_screen_name: str = ""
    followees_count: int = 0
    followers_count: int = 0
    items_count: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["User"]:
        """Copy the known profile fields; nulls fall back to defaults."""
        if data is None:
            return None
        values = {}
        for f in fields(cls):
            value = data.get(f.name)
            if value is not None:
                values[f.name] = value
        return cls(**values)
