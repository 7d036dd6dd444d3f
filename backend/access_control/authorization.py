from models.access_grant import AccessGrant


def has_active_grant(db, patient_identity, doctor_identity):
    """Membership test on the patient's grant set."""
    grant = db.query(AccessGrant.id).filter(
        AccessGrant.patient_identity == patient_identity,
        AccessGrant.doctor_identity == doctor_identity,
        AccessGrant.is_active == True
    ).first()
    return grant is not None


def check_patient_access(db, patient_identity, caller):
    """Check if `caller` may read the patient's profile and files.

    Returns (allowed, reason). The patient record is assumed to exist.
    """
    # Patients can always read their own data
    if caller == patient_identity:
        return True, "Owner access"

    # Anyone else needs an active grant from the patient, checked now
    if has_active_grant(db, patient_identity, caller):
        return True, "Grant-based access"

    return False, "No active grant found"
