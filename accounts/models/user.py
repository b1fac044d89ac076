"""ORM model for user accounts."""

from sqlalchemy import Column, DateTime, Integer, String, func

from accounts.models.base import Base


class User(Base):
    """
    User account for registration, login and password reset.

    email is unique and compared case-sensitively. password_hash is a bcrypt
    digest; it is never returned by the API or written to logs.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="USER")
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
