from sqlalchemy import Column, String, DateTime

from database.config import Base


class Patient(Base):
    __tablename__ = "patients"

    identity = Column(String(128), primary_key=True)
    name = Column(String(255), nullable=False)
    date_of_birth = Column(String(32), nullable=False)
    sex = Column(String(32), nullable=False)
    email = Column(String(255), nullable=False)
    created_at = Column(DateTime)
