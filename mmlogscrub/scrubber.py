"""Scrub identifying information from Mattermost log lines and files."""

from __future__ import annotations

import csv
import json
import re
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, TextIO, Union

from mmlogscrub.levels import scrub_ip, scrub_uid

PathLike = Union[str, Path]

_EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_IP_RE = re.compile(r"\b(?:[0-9]{1,3}\.){3}[0-9]{1,3}\b", re.ASCII)
_USERNAME_RE = re.compile(r'"(?:user|username)"\s*:\s*"([^"]+)"', re.ASCII)
_UID_RE = re.compile(r"\b[a-z0-9]{20,}\b", re.ASCII)

_KEY_VALUE_SEPARATOR = '":"'
_EMAIL_PLACEHOLDER = "[email]"
_PROGRESS_INTERVAL = 1000
_AUDIT_HEADER = ("Original Value", "New Value", "Times Replaced", "Type")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _loads(text: str) -> Any:
    """Decode strict JSON, refusing NaN and Infinity."""
    return json.loads(text, parse_constant=_reject_constant)


@dataclass
class UserMapping:
    """Links a username and/or e-mail to a numbered pseudonym."""

    username: str = ""
    email: str = ""
    mapped_id: int = 0


@dataclass
class AuditEntry:
    """Records what an original value was replaced with and how often."""

    original_value: str
    new_value: str
    times_replaced: int
    kind: str  # "email", "username", "ip" or "uid"


@dataclass(frozen=True)
class ScrubStats:
    """Line counts from processing one file."""

    total: int
    processed: int
    empty: int


@dataclass
class Scrubber:
    """Stateful scrubber that keeps pseudonyms consistent across lines."""

    level: int
    verbose: bool = False
    out: Optional[TextIO] = None
    user_mappings: Dict[str, UserMapping] = field(default_factory=dict, repr=False)
    audit_entries: Dict[str, AuditEntry] = field(default_factory=dict, repr=False)
    _email_cache: Dict[str, str] = field(default_factory=dict, repr=False)
    _user_cache: Dict[str, str] = field(default_factory=dict, repr=False)
    _ip_cache: Dict[str, str] = field(default_factory=dict, repr=False)
    _uid_cache: Dict[str, str] = field(default_factory=dict, repr=False)
    _user_counter: int = field(default=0, repr=False)

    def _write(self, text: str) -> None:
        stream = self.out if self.out is not None else sys.stdout
        stream.write(text)
        stream.flush()

    # ------------------------------------------------------------------ files

    def process_file(
        self, input_path: PathLike, output_path: Optional[PathLike], dry_run: bool
    ) -> ScrubStats:
        """Scrub every non-blank line of a file; nothing is written on a dry run."""
        total = processed = empty = 0
        show_progress = not self.verbose
        last_progress = time.monotonic()
        if show_progress:
            self._write("Processing... ")

        with open(input_path, encoding="utf-8", errors="surrogateescape", newline="\n") as src:
            dst: Optional[TextIO] = None
            if not dry_run:
                if output_path is None:
                    raise ValueError("an output path is required unless dry_run is set")
                dst = open(output_path, "w", encoding="utf-8", errors="surrogateescape", newline="")
            try:
                for raw_line in src:
                    total += 1
                    line = raw_line[:-1] if raw_line.endswith("\n") else raw_line
                    if line.endswith("\r"):
                        line = line[:-1]
                    if not line.strip():
                        empty += 1
                        continue

                    scrubbed = self.process_line(line)
                    processed += 1

                    if dst is not None:
                        dst.write(scrubbed + "\n")
                    elif self.verbose:
                        self._write(f"Line {total} would be scrubbed\n")

                    if show_progress:
                        now = time.monotonic()
                        if total % _PROGRESS_INTERVAL == 0 or now - last_progress >= 1.0:
                            self._write(f"\rProcessing... {total} lines")
                            last_progress = now
            finally:
                if dst is not None:
                    dst.close()

        if show_progress:
            self._write("\r" + " " * 50 + "\r")

        summary = f"Processed {processed} lines out of {total} total lines"
        if empty:
            summary += f" ({empty} empty lines skipped)"
        self._write(summary + "\n")
        return ScrubStats(total=total, processed=processed, empty=empty)

    # ------------------------------------------------------------------ lines

    def process_line(self, line: str) -> str:
        """Scrub one log line, learning user/email pairs from JSON objects first."""
        try:
            data = _loads(line)
        except ValueError:
            return self.scrub_text(line)
        if data is not None and not isinstance(data, dict):
            return self.scrub_text(line)

        if data:
            self._find_user_mappings(data)

        scrubbed = self.scrub_text(line)
        try:
            _loads(scrubbed)
        except ValueError:
            return line
        return scrubbed

    def scrub_text(self, text: str) -> str:
        """Apply every scrubbing pass that the level enables."""
        result = _EMAIL_RE.sub(self._replace_email, text)
        result = _USERNAME_RE.sub(self._replace_username, result)
        if self.level >= 2:
            result = _IP_RE.sub(self._replace_ip, result)
        if self.level == 3:
            result = _UID_RE.sub(self._replace_uid, result)
        return result

    def _replace_email(self, match: re.Match) -> str:
        email = match.group(0)
        key = email.lower()
        scrubbed = self._email_cache.get(key)
        if scrubbed is None:
            scrubbed = self.mapped_email(email)
            self._email_cache[key] = scrubbed
        self._track(email, scrubbed, "email")
        return scrubbed

    def _replace_username(self, match: re.Match) -> str:
        text = match.group(0)
        parts = text.split(_KEY_VALUE_SEPARATOR)
        if len(parts) != 2:
            return text
        prefix = parts[0] + _KEY_VALUE_SEPARATOR
        username = parts[1][:-1] if parts[1].endswith('"') else parts[1]
        key = username.lower()
        scrubbed = self._user_cache.get(key)
        if scrubbed is None:
            scrubbed = self.mapped_name(username)
            self._user_cache[key] = scrubbed
        self._track(username, scrubbed, "username")
        return prefix + scrubbed + '"'

    def _replace_ip(self, match: re.Match) -> str:
        ip = match.group(0)
        scrubbed = self._ip_cache.get(ip)
        if scrubbed is None:
            scrubbed = scrub_ip(ip, self.level)
            self._ip_cache[ip] = scrubbed
        self._track(ip, scrubbed, "ip")
        return scrubbed

    def _replace_uid(self, match: re.Match) -> str:
        uid = match.group(0)
        scrubbed = self._uid_cache.get(uid)
        if scrubbed is None:
            scrubbed = scrub_uid(uid, self.level)
            self._uid_cache[uid] = scrubbed
        self._track(uid, scrubbed, "uid")
        return scrubbed

    # ---------------------------------------------------------------- mapping

    def _find_user_mappings(self, data: Any) -> None:
        if isinstance(data, dict):
            username = ""
            email = ""
            if "user" in data:
                if isinstance(data["user"], str):
                    username = data["user"]
            elif isinstance(data.get("username"), str):
                username = data["username"]
            if isinstance(data.get("email"), str):
                email = data["email"]
            if username and email:
                self.create_user_mapping(username, email)
            for value in data.values():
                self._find_user_mappings(value)
        elif isinstance(data, list):
            for item in data:
                self._find_user_mappings(item)

    def _next_id(self) -> int:
        self._user_counter += 1
        return self._user_counter

    def create_user_mapping(self, username: str, email: str) -> None:
        """Register a username/email pair under one pseudonym."""
        username_key = username.lower()
        email_key = email.lower()

        existing = self.user_mappings.get(username_key)
        if existing is not None:
            if not existing.email:
                existing.email = email
                self.user_mappings[email_key] = existing
            return

        existing = self.user_mappings.get(email_key)
        if existing is not None:
            if not existing.username:
                existing.username = username
                self.user_mappings[username_key] = existing
            return

        mapping = UserMapping(username=username, email=email, mapped_id=self._next_id())
        self.user_mappings[username_key] = mapping
        self.user_mappings[email_key] = mapping
        if self.verbose:
            self._write(f"Created user mapping: {username} / {email} -> user{mapping.mapped_id}\n")

    def mapped_name(self, username: str) -> str:
        """Return the pseudonym for a username, creating one if needed."""
        key = username.lower()
        mapping = self.user_mappings.get(key)
        if mapping is None:
            mapping = UserMapping(username=username, mapped_id=self._next_id())
            self.user_mappings[key] = mapping
            if self.verbose:
                self._write(
                    f"Created standalone user mapping: {username} -> user{mapping.mapped_id}\n"
                )
        return f"user{mapping.mapped_id}"

    def mapped_email(self, email: str) -> str:
        """Return the replacement for an e-mail, registering it if needed."""
        key = email.lower()
        if key not in self.user_mappings:
            self.user_mappings[key] = UserMapping(email=email, mapped_id=self._next_id())
            if self.verbose:
                self._write(f"Created standalone email mapping: {email} -> {_EMAIL_PLACEHOLDER}\n")
        return _EMAIL_PLACEHOLDER

    # ------------------------------------------------------------------ audit

    def _track(self, original: str, new_value: str, kind: str) -> None:
        entry = self.audit_entries.get(original)
        if entry is not None:
            entry.times_replaced += 1
        else:
            self.audit_entries[original] = AuditEntry(original, new_value, 1, kind)

    def write_audit_file(self, path: PathLike) -> None:
        """Write every recorded replacement to a CSV file."""
        with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            writer = csv.writer(handle, lineterminator="\n")
            writer.writerow(_AUDIT_HEADER)
            for entry in self.audit_entries.values():
                writer.writerow(
                    (entry.original_value, entry.new_value, str(entry.times_replaced), entry.kind)
                )