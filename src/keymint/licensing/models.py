"""SQLAlchemy model for issued license keys."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from keymint.common.models import Base, TimestampMixin, generate_uuid
from keymint.keygen.generator import KEY_LEN


class LicenseModel(Base, TimestampMixin):
    __tablename__ = "licenses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    key: Mapped[str] = mapped_column(String(KEY_LEN), unique=True, nullable=False, index=True)
    is_used: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
