"""CAPTCHA session endpoints for the Linkboard API."""

from fastapi import APIRouter, Request, Response, status

from linkboard.api.v1.dependencies import BrokerDep, ClientIdentityDep
from linkboard.core.settings import settings
from linkboard.schemas.captcha import CaptchaSessionCreate, CaptchaSessionResponse

router = APIRouter(prefix="/captcha", tags=["captcha"])


def _cookie_secure(request: Request) -> bool:
    if settings.cookie_secure is not None:
        return settings.cookie_secure
    return request.url.scheme == "https"


@router.post(
    "/session",
    response_model=CaptchaSessionResponse,
    status_code=status.HTTP_200_OK,
)
async def create_captcha_session(
    payload: CaptchaSessionCreate,
    request: Request,
    response: Response,
    broker: BrokerDep,
    client: ClientIdentityDep,
) -> CaptchaSessionResponse:
    """Exchange a human-verification token for a session cookie.

    Args:
        payload: Body carrying the one-time verification token
        request: Incoming request, used to pick the cookie's Secure flag
        response: Outgoing response the cookie is attached to
        broker: CAPTCHA session broker
        client: IP and user-agent the session is bound to

    Returns:
        The session lifetime in seconds

    Raises:
        CaptchaError: If the token is missing, rejected, or cannot be checked
    """
    minted = await broker.mint(payload.token, client.ip, client.user_agent)
    response.set_cookie(
        key=settings.captcha_cookie_name,
        value=minted.session_id,
        max_age=minted.ttl_seconds,
        path="/",
        httponly=True,
        samesite="lax",
        secure=_cookie_secure(request),
    )
    return CaptchaSessionResponse(ttl=minted.ttl_seconds)
