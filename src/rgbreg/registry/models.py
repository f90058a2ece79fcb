"""SQLAlchemy models for the registration table."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Registration(Base):
    """Binding of an EVM address to a Taproot address.

    The pair (eth_address, rgb_address) is unique. The constraint lives in
    the database so concurrent inserts of the same pair are rejected by the
    engine itself.
    """

    __tablename__ = "registrations"
    __table_args__ = (
        UniqueConstraint("eth_address", "rgb_address", name="uq_registrations_eth_rgb"),
        Index("idx_eth_address", "eth_address"),
        Index("idx_rgb_address", "rgb_address"),
        Index("idx_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    eth_address: Mapped[str] = mapped_column(String(42), nullable=False)
    rgb_address: Mapped[str] = mapped_column(String(255), nullable=False)
    signature: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    # No update path exists; set alongside created_at.
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
