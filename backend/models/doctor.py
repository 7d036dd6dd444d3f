from sqlalchemy import Column, String, DateTime

from database.config import Base


class Doctor(Base):
    __tablename__ = "doctors"

    identity = Column(String(128), primary_key=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=False)
    specialty = Column(String(255), nullable=False)
    created_at = Column(DateTime)
