from access_control.authorization import check_patient_access, has_active_grant
from sample_identities import DOCTOR, PATIENT, STRANGER


def test_owner_access(session_factory):
    db = session_factory()
    try:
        assert check_patient_access(db, PATIENT, PATIENT) == (True, "Owner access")
    finally:
        db.close()


def test_grant_based_access(registry, session_factory, john):
    registry.grant_access(john, DOCTOR)
    db = session_factory()
    try:
        assert has_active_grant(db, john, DOCTOR)
        assert check_patient_access(db, john, DOCTOR) == (True, "Grant-based access")
        assert check_patient_access(db, john, STRANGER) == (False, "No active grant found")
    finally:
        db.close()


def test_revoked_grant_is_inactive(registry, session_factory, john):
    registry.grant_access(john, DOCTOR)
    registry.revoke_access(john, DOCTOR)
    db = session_factory()
    try:
        assert not has_active_grant(db, john, DOCTOR)
    finally:
        db.close()
