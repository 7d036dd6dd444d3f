"""Patient/doctor registry with patient-controlled read access.

Every caller-relative operation takes the caller identity as its first
argument. The registry trusts that value; proving it is the job of whoever
calls in (the Flask app takes it from the JWT).

Each operation runs in its own transaction while holding the instance lock,
so operations are serialised and a failed call leaves nothing behind.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import List, NamedTuple, Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError

from access_control.authorization import check_patient_access, has_active_grant
from database.config import session_scope
from errors import AccessDenied, AlreadyRegistered, NotFound
from models.access_grant import AccessGrant
from models.audit_log import AuditAction, AuditLog
from models.doctor import Doctor
from models.medical_file import MedicalFile
from models.patient import Patient

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_LOG_LIMIT = 50
GRANT_ACTIONS = (AuditAction.ACCESS_GRANTED.value, AuditAction.ACCESS_REVOKED.value)


class PatientInfo(NamedTuple):
    name: str
    date_of_birth: str
    sex: str
    email: str


class DoctorInfo(NamedTuple):
    name: str
    phone: str
    specialty: str


class MedicalFileInfo(NamedTuple):
    file_name: str
    file_type: str
    content_address: str


class AuditEntry(NamedTuple):
    id: int
    identity: str
    action: str
    subject: Optional[str]
    timestamp: Optional[str]
    status: str


class Registry:
    def __init__(self, session_factory, audit_log_limit=DEFAULT_AUDIT_LOG_LIMIT):
        self._session_factory = session_factory
        self._lock = threading.RLock()
        self.audit_log_limit = audit_log_limit

    @contextmanager
    def transaction(self):
        """Hold the registry lock and one session for the whole block."""
        with self._lock:
            with session_scope(self._session_factory) as db:
                yield db

    @staticmethod
    def _audit(db, identity, action, subject=None):
        db.add(AuditLog(
            identity=identity,
            action=action.value,
            subject=subject,
            timestamp=datetime.now(),
            status="success",
        ))

    @staticmethod
    def _require_patient(db, identity):
        patient = db.get(Patient, identity)
        if patient is None:
            raise NotFound(f"No patient registered for {identity}")
        return patient

    # ==================== REGISTRATION ====================

    def register_patient(self, caller, name, date_of_birth, sex, email):
        try:
            with self.transaction() as db:
                if db.get(Patient, caller) is not None:
                    raise AlreadyRegistered(f"{caller} is already registered as a patient")
                db.add(Patient(
                    identity=caller,
                    name=name,
                    date_of_birth=date_of_birth,
                    sex=sex,
                    email=email,
                    created_at=datetime.now(),
                ))
                self._audit(db, caller, AuditAction.PATIENT_REGISTERED)
        except IntegrityError:
            # Another process inserted the same identity between check and commit
            raise AlreadyRegistered(f"{caller} is already registered as a patient")
        logger.info("[REGISTRY] Patient registered: %s", caller)

    def register_doctor(self, caller, name, phone, specialty):
        try:
            with self.transaction() as db:
                if db.get(Doctor, caller) is not None:
                    raise AlreadyRegistered(f"{caller} is already registered as a doctor")
                db.add(Doctor(
                    identity=caller,
                    name=name,
                    phone=phone,
                    specialty=specialty,
                    created_at=datetime.now(),
                ))
                self._audit(db, caller, AuditAction.DOCTOR_REGISTERED)
        except IntegrityError:
            raise AlreadyRegistered(f"{caller} is already registered as a doctor")
        logger.info("[REGISTRY] Doctor registered: %s", caller)

    # ==================== PROFILE READS ====================

    def get_patient_info(self, caller, identity) -> PatientInfo:
        with self.transaction() as db:
            patient = self._require_patient(db, identity)
            allowed, reason = check_patient_access(db, identity, caller)
            if not allowed:
                raise AccessDenied(f"{caller} may not read patient {identity}: {reason}")
            return PatientInfo(patient.name, patient.date_of_birth, patient.sex, patient.email)

    def get_doctor_info(self, identity) -> DoctorInfo:
        with self.transaction() as db:
            doctor = db.get(Doctor, identity)
            if doctor is None:
                raise NotFound(f"No doctor registered for {identity}")
            return DoctorInfo(doctor.name, doctor.phone, doctor.specialty)

    # ==================== ACCESS MANAGEMENT ====================

    def grant_access(self, caller, doctor_identity):
        """Add `doctor_identity` to the caller's grant set. Granting twice is a no-op."""
        with self.transaction() as db:
            self._require_patient(db, caller)
            grant = db.query(AccessGrant).filter(
                AccessGrant.patient_identity == caller,
                AccessGrant.doctor_identity == doctor_identity,
            ).first()
            if grant is not None and grant.is_active:
                return
            if grant is None:
                grant = AccessGrant(patient_identity=caller, doctor_identity=doctor_identity)
                db.add(grant)
            grant.is_active = True
            grant.granted_at = datetime.now()
            grant.revoked_at = None
            self._audit(db, caller, AuditAction.ACCESS_GRANTED, subject=doctor_identity)
        logger.info("[ACCESS] %s granted access to %s", caller, doctor_identity)

    def revoke_access(self, caller, doctor_identity):
        """Remove `doctor_identity` from the caller's grant set if present."""
        with self.transaction() as db:
            self._require_patient(db, caller)
            grant = db.query(AccessGrant).filter(
                AccessGrant.patient_identity == caller,
                AccessGrant.doctor_identity == doctor_identity,
                AccessGrant.is_active == True
            ).first()
            if grant is None:
                return
            # Soft delete; re-granting reuses the row
            grant.is_active = False
            grant.revoked_at = datetime.now()
            self._audit(db, caller, AuditAction.ACCESS_REVOKED, subject=doctor_identity)
        logger.info("[ACCESS] %s revoked access from %s", caller, doctor_identity)

    def has_access(self, patient_identity, doctor_identity) -> bool:
        with self.transaction() as db:
            return has_active_grant(db, patient_identity, doctor_identity)

    def list_grants(self, caller) -> List[str]:
        """Doctor identities the caller currently grants, oldest grant first."""
        with self.transaction() as db:
            self._require_patient(db, caller)
            grants = db.query(AccessGrant.doctor_identity).filter(
                AccessGrant.patient_identity == caller,
                AccessGrant.is_active == True
            ).order_by(AccessGrant.id).all()
            return [row.doctor_identity for row in grants]

    def list_accessible_patients(self, caller) -> List[str]:
        with self.transaction() as db:
            grants = db.query(AccessGrant.patient_identity).filter(
                AccessGrant.doctor_identity == caller,
                AccessGrant.is_active == True
            ).order_by(AccessGrant.id).all()
            return [row.patient_identity for row in grants]

    # ==================== FILES ====================

    def add_file(self, caller, file_name, file_type, content_address) -> MedicalFileInfo:
        with self.transaction() as db:
            # Validate registration before touching the file list
            self._require_patient(db, caller)
            medical_file = MedicalFile(
                patient_identity=caller,
                file_name=file_name,
                file_type=file_type,
                content_address=content_address,
                created_at=datetime.now(),
            )
            db.add(medical_file)
            db.flush()  # get ID
            self._audit(db, caller, AuditAction.FILE_ADDED, subject=str(medical_file.id))
        logger.info("[REGISTRY] File %s added for %s", medical_file.id, caller)
        return MedicalFileInfo(file_name, file_type, content_address)

    def get_patient_files(self, caller, identity) -> List[MedicalFileInfo]:
        with self.transaction() as db:
            self._require_patient(db, identity)
            allowed, reason = check_patient_access(db, identity, caller)
            if not allowed:
                raise AccessDenied(f"{caller} may not read files of {identity}: {reason}")
            files = db.query(MedicalFile).filter(
                MedicalFile.patient_identity == identity
            ).order_by(MedicalFile.id).all()
            return [MedicalFileInfo(f.file_name, f.file_type, f.content_address) for f in files]

    # ==================== AUDIT ====================

    def get_audit_logs(self, caller, limit=None) -> List[AuditEntry]:
        """Entries where the caller acted or was acted upon, newest first."""
        if limit is None:
            limit = self.audit_log_limit
        limit = max(1, min(limit, self.audit_log_limit))
        with self.transaction() as db:
            logs = db.query(AuditLog).filter(
                or_(
                    AuditLog.identity == caller,
                    # subject holds a file id for uploads, so only grant rows match on it
                    and_(AuditLog.subject == caller, AuditLog.action.in_(GRANT_ACTIONS)),
                )
            ).order_by(AuditLog.id.desc()).limit(limit).all()
            return [
                AuditEntry(
                    id=log.id,
                    identity=log.identity,
                    action=log.action,
                    subject=log.subject,
                    timestamp=log.timestamp.isoformat() if log.timestamp else None,
                    status=log.status,
                )
                for log in logs
            ]
