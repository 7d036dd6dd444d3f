import secrets

from sqlalchemy import Column, Integer, String, Boolean, DateTime

from database.config import Base


def new_identity():
    """Issue an address-like identity: 0x followed by 40 hex characters."""
    return "0x" + secrets.token_hex(20)


class Account(Base):
    """Login credentials mapped to the identity a request acts as."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(255), unique=True, index=True, nullable=False)
    identity = Column(String(128), unique=True, index=True, nullable=False, default=new_identity)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime)
