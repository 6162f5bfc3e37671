"""
Foodbabes Backend: User SQLAlchemy Model
==========================================

What:  ORM model for the `users` table.

Table Design:
    - name: required, at most 10 characters; not unique (login picks the
      first match)
    - password: salted one-way hash produced by werkzeug; the plaintext is
      never stored
    - access_token: hex string generated once at registration, never
      rotated; UNIQUE index serves the bearer-token lookup
"""

import uuid

from sqlalchemy import CheckConstraint, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from foodbabes.database import Base

NAME_MAX_LENGTH = 10


class User(Base):
    """A registered user and their bearer credential."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False, index=True)

    password: Mapped[str] = mapped_column(String(255), nullable=False)

    access_token: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        unique=True,
        index=True,
    )

    __table_args__ = (
        CheckConstraint(
            f"length(name) >= 1 AND length(name) <= {NAME_MAX_LENGTH}",
            name="ck_users_name_length",
        ),
    )

    def __repr__(self) -> str:
        # Never include password or access_token
        return f"<User(id={self.id}, name='{self.name}')>"
