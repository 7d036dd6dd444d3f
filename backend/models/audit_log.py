import enum

from sqlalchemy import Column, Integer, String, DateTime

from database.config import Base


class AuditAction(enum.Enum):
    PATIENT_REGISTERED = "patient_registered"
    DOCTOR_REGISTERED = "doctor_registered"
    ACCESS_GRANTED = "access_granted"
    ACCESS_REVOKED = "access_revoked"
    FILE_ADDED = "file_added"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    identity = Column(String(128), index=True, nullable=False)
    action = Column(String(100), nullable=False)
    subject = Column(String(128), index=True)  # doctor identity or file id
    timestamp = Column(DateTime)
    status = Column(String(20), default="success")
