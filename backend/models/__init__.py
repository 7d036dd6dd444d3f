# models/__init__.py
# Import Base from database config (shared instance)
from database.config import Base

# Import all models here to register them with Base
from .account import Account
from .patient import Patient
from .doctor import Doctor
from .medical_file import MedicalFile
from .access_grant import AccessGrant
from .audit_log import AuditLog, AuditAction

__all__ = ['Base', 'Account', 'Patient', 'Doctor', 'MedicalFile', 'AccessGrant', 'AuditLog', 'AuditAction']
