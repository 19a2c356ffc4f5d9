"""Model for CAPTCHA-backed voting sessions."""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from linkboard.db.session import Base


class CaptchaSession(Base):
    """Short-lived voting credential minted after a successful human check.

    Only salted hashes of the client IP and user-agent are stored; the raw
    values never reach the database.
    """

    __tablename__ = "captcha_sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    ip_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    ua_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    # Epoch seconds.
    expires_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
