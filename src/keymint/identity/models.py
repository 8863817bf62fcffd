"""SQLAlchemy model for operator accounts."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from keymint.common.models import Base, TimestampMixin, generate_uuid


class OperatorModel(Base, TimestampMixin):
    __tablename__ = "operators"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
