"""Typed views of Mattermost JSON log entries."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


def _match_key(key: str, known: Mapping[str, str]) -> Optional[str]:
    """Return the attribute a JSON key maps to, matching case-insensitively."""
    if key in known:
        return known[key]
    return known.get(key.lower())


def _as_str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer, got {type(value).__name__}")
    return value


@dataclass
class PostData:
    """Post-specific data carried by a log entry."""

    team: str = ""
    channel: str = ""
    user: str = ""
    user_id: str = ""
    message: str = ""
    create_at: int = 0

    _STRING_KEYS = {
        "team": "team",
        "channel": "channel",
        "user": "user",
        "user_id": "user_id",
        "message": "message",
    }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PostData":
        """Build from a decoded JSON object; unknown keys and nulls are ignored."""
        if not isinstance(data, Mapping):
            raise ValueError("post data must be a JSON object")
        post = cls()
        for key, value in data.items():
            if value is None:
                continue
            if key.lower() == "create_at":
                post.create_at = _as_int(key, value)
                continue
            attr = _match_key(key, cls._STRING_KEYS)
            if attr is not None:
                setattr(post, attr, _as_str(key, value))
        return post


@dataclass
class MattermostLogEntry:
    """A generic Mattermost log entry, keeping the raw JSON it came from."""

    type: str = ""
    level: str = ""
    msg: str = ""
    time: str = ""
    user: str = ""
    user_id: str = ""
    email: str = ""
    ip: str = ""
    team: str = ""
    team_id: str = ""
    channel: str = ""
    channel_id: str = ""
    post: Optional[PostData] = None
    raw: str = field(default="", repr=False)

    _STRING_KEYS = {
        name: name
        for name in (
            "type",
            "level",
            "msg",
            "time",
            "user",
            "user_id",
            "email",
            "ip",
            "team",
            "team_id",
            "channel",
            "channel_id",
        )
    }

    @classmethod
    def from_json(cls, text: str | bytes) -> "MattermostLogEntry":
        """Parse one JSON log line; raises ValueError on malformed input."""
        raw = text.decode("utf-8") if isinstance(text, bytes) else text
        data = json.loads(raw)
        entry = cls(raw=raw)
        if data is None:
            return entry
        if not isinstance(data, dict):
            raise ValueError("log entry must be a JSON object")
        for key, value in data.items():
            if value is None:
                if key.lower() == "post":
                    entry.post = None
                continue
            if key.lower() == "post":
                entry.post = PostData.from_dict(value)
                continue
            attr = _match_key(key, cls._STRING_KEYS)
            if attr is not None:
                setattr(entry, attr, _as_str(key, value))
        return entry