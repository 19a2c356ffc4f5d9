"""CAPTCHA session Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class CaptchaSessionCreate(BaseModel):
    """Request body for minting a CAPTCHA session."""

    token: str | None = Field(
        None,
        max_length=4096,
        description="One-time human-verification token from the widget",
    )

    model_config = ConfigDict(extra="forbid")


class CaptchaSessionResponse(BaseModel):
    """Confirmation returned once the session cookie has been set."""

    ttl: int = Field(..., description="Session lifetime in seconds")
