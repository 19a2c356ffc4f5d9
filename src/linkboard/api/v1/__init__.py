"""API version 1 routers."""

from .endpoints import captcha_router, links_router, votes_router

__all__ = ["captcha_router", "links_router", "votes_router"]
