from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey

from database.config import Base


class MedicalFile(Base):
    """File metadata attached to a patient. Rows are never updated or deleted;
    the autoincrement id is the upload order."""
    __tablename__ = "medical_files"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    patient_identity = Column(String(128), ForeignKey("patients.identity"), index=True, nullable=False)
    file_name = Column(String(255), nullable=False)
    file_type = Column(String(100), nullable=False)
    content_address = Column(Text, nullable=False)  # opaque, e.g. an IPFS CID
    created_at = Column(DateTime)
