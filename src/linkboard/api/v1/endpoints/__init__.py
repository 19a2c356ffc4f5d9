"""API endpoint modules for version 1."""

from .captcha import router as captcha_router
from .links import router as links_router
from .votes import router as votes_router

__all__ = [
    "captcha_router",
    "links_router",
    "votes_router",
]
