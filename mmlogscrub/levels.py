"""Masking rules for each scrubbing level."""

from __future__ import annotations

_UID_MASKED_LENGTH = 26
_UID_KEPT = 8


def _stars(count: int) -> str:
    return "*" * count


def _keep_last_three(value: str) -> str:
    if len(value) <= 3:
        return _stars(len(value))
    return _stars(len(value) - 3) + value[-3:]


def scrub_email(email: str, level: int) -> str:
    """Mask an e-mail address; strings without exactly one '@' are returned unchanged."""
    parts = email.split("@")
    if len(parts) != 2:
        return email
    local, domain = parts
    if level == 1:
        return _keep_last_three(local) + "@" + domain
    if level == 2:
        return _stars(len(local)) + "@" + domain
    if level == 3:
        return _stars(len(local)) + "@" + _stars(len(domain))
    return email


def scrub_username(username: str, level: int) -> str:
    """Mask a username: level 1 keeps the last three characters, 2 and 3 hide all."""
    if level == 1:
        return _keep_last_three(username)
    if level in (2, 3):
        return _stars(len(username))
    return username


def scrub_ip(ip: str, level: int) -> str:
    """Mask a dotted IPv4 address at levels 2 and 3."""
    parts = ip.split(".")
    if len(parts) != 4:
        return ip
    if level == 2:
        return "***.***.***." + parts[3]
    if level == 3:
        return "***.***.***.***"
    return ip


def scrub_uid(uid: str, level: int) -> str:
    """Mask an identifier at level 3, keeping its last eight characters."""
    if level != 3:
        return uid
    if len(uid) < _UID_KEPT:
        return _stars(len(uid))
    return _stars(_UID_MASKED_LENGTH - _UID_KEPT) + uid[-_UID_KEPT:]