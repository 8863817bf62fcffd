"""SQLAlchemy model for admin records."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from keymint.common.models import Base, TimestampMixin


class AdminModel(Base, TimestampMixin):
    """Existence of a row for a user_id is the sole admin criterion."""

    __tablename__ = "admins"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
