"""Link-related Pydantic schemas."""

from datetime import datetime

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, field_validator

from linkboard.db.time import as_utc


class LinkCreate(BaseModel):
    """Schema for submitting a new link."""

    title: str = Field(..., min_length=1, max_length=300)
    url: AnyHttpUrl

    model_config = ConfigDict(extra="forbid")

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value


class LinkResponse(BaseModel):
    """Schema for link information returned by the API."""

    id: int
    title: str
    url: str
    upvotes: int
    downvotes: int
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class RankedLinkResponse(LinkResponse):
    """Link as it appears in the ranked listing."""

    score: int
    is_fresh: bool
