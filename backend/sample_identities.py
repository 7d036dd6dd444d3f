"""Fixed address-like identities shared by the test modules."""

PATIENT = "0x" + "a1" * 20
DOCTOR = "0x" + "b2" * 20
STRANGER = "0x" + "c3" * 20
OTHER_PATIENT = "0x" + "d4" * 20
