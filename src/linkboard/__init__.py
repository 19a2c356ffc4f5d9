"""Linkboard: anonymous link voting with CAPTCHA-backed sessions."""

__version__ = "0.1.0"
