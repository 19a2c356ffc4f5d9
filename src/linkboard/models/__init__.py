"""SQLAlchemy models for the Linkboard application."""

from .captcha_session import CaptchaSession
from .link import LINK_STATUS_APPROVED, LINK_STATUS_PENDING, Link
from .vote import LinkVote

__all__ = [
    "CaptchaSession",
    "Link", "LINK_STATUS_APPROVED", "LINK_STATUS_PENDING",
    "LinkVote",
]
