from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint

from database.config import Base


class AccessGrant(Base):
    __tablename__ = "access_grants"
    __table_args__ = (
        UniqueConstraint("patient_identity", "doctor_identity", name="uq_access_grant_pair"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    patient_identity = Column(String(128), ForeignKey("patients.identity"), index=True, nullable=False)
    # Plain identity: the grantee does not have to be a registered doctor.
    doctor_identity = Column(String(128), index=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    granted_at = Column(DateTime)
    revoked_at = Column(DateTime)
