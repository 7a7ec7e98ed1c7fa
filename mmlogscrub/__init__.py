"""Scrub emails, usernames, IP addresses and IDs from Mattermost log files."""

__version__ = "0.3.1"
__all__ = ["__version__"]