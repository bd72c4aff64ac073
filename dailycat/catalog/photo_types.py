"""Shared catalog data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PhotoCandidate:
    """Photo id plus the minimal metadata a search page returns.

    Full detail is resolved later with `get_detail`.
    """

    id: str
    alt_description: Optional[str] = None
    raw: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class SearchPage:
    results: List[PhotoCandidate] = field(default_factory=list)
    total: int = 0
    total_pages: int = 0


@dataclass(frozen=True)
class PhotoUser:
    id: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    profile_url: Optional[str] = None
    profile_image: Optional[str] = None


def _tag_titles(tags: Any) -> List[str]:
    out: List[str] = []
    for t in tags or []:
        if isinstance(t, dict):
            title = t.get("title")
        else:
            title = t
        if title and str(title).strip():
            out.append(str(title).strip())
    return out


@dataclass(frozen=True)
class PhotoDetail:
    """Full photo detail as stored on a day record."""

    id: str
    description: Optional[str] = None
    alt_description: Optional[str] = None
    width: int = 0
    height: int = 0
    color: Optional[str] = None
    likes: int = 0
    created_at: Optional[str] = None
    urls: Dict[str, str] = field(default_factory=dict)
    links: Dict[str, str] = field(default_factory=dict)
    user: PhotoUser = field(default_factory=PhotoUser)
    tags: List[str] = field(default_factory=list)
    raw: Optional[Dict[str, Any]] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "PhotoDetail":
        """Normalize an Unsplash `/photos/{id}` payload."""
        if not isinstance(payload, dict) or not payload.get("id"):
            raise ValueError("photo payload is missing an id")
        u = payload.get("user") or {}
        profile_image = (u.get("profile_image") or {}).get("medium")
        user = PhotoUser(
            id=u.get("id"),
            username=u.get("username"),
            name=u.get("name"),
            profile_url=(u.get("links") or {}).get("html"),
            profile_image=profile_image,
        )
        return cls(
            id=str(payload["id"]),
            description=payload.get("description") or None,
            alt_description=payload.get("alt_description") or None,
            width=int(payload.get("width") or 0),
            height=int(payload.get("height") or 0),
            color=payload.get("color") or None,
            likes=int(payload.get("likes") or 0),
            created_at=payload.get("created_at") or None,
            urls=dict(payload.get("urls") or {}),
            links=dict(payload.get("links") or {}),
            user=user,
            tags=_tag_titles(payload.get("tags")),
            raw=payload,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "alt_description": self.alt_description,
            "width": self.width,
            "height": self.height,
            "color": self.color,
            "likes": self.likes,
            "created_at": self.created_at,
            "urls": dict(self.urls),
            "links": dict(self.links),
            "user": {
                "id": self.user.id,
                "username": self.user.username,
                "name": self.user.name,
                "profile_url": self.user.profile_url,
                "profile_image": self.user.profile_image,
            },
            "tags": list(self.tags),
            "raw": self.raw,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhotoDetail":
        u = data.get("user") or {}
        return cls(
            id=str(data["id"]),
            description=data.get("description"),
            alt_description=data.get("alt_description"),
            width=int(data.get("width") or 0),
            height=int(data.get("height") or 0),
            color=data.get("color"),
            likes=int(data.get("likes") or 0),
            created_at=data.get("created_at"),
            urls=dict(data.get("urls") or {}),
            links=dict(data.get("links") or {}),
            user=PhotoUser(
                id=u.get("id"),
                username=u.get("username"),
                name=u.get("name"),
                profile_url=u.get("profile_url"),
                profile_image=u.get("profile_image"),
            ),
            tags=list(data.get("tags") or []),
            raw=data.get("raw"),
        )
