from database.config import make_engine
from init_db import create_tables


def test_create_tables():
    engine = make_engine("sqlite://")
    try:
        tables = create_tables(bind=engine)
    finally:
        engine.dispose()
    assert set(tables) == {
        "accounts", "patients", "doctors", "medical_files", "access_grants", "audit_logs",
    }
