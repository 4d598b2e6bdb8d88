from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from todoapp.core.database import Base


class User(Base):
    """
    Registered account.

    password_hash holds a bcrypt digest from the moment the row is created;
    the plaintext password is never assigned to any column.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Unique constraint backs the duplicate-registration check under races
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
