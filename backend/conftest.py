import pytest
from flask_jwt_extended import create_access_token

import models  # noqa: F401
from app import create_app
from database.config import Base, make_engine, make_session_factory
from registry import Registry
from sample_identities import DOCTOR, PATIENT


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def registry(session_factory):
    return Registry(session_factory)


@pytest.fixture
def app():
    return create_app({
        "TESTING": True,
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
    })


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def auth_headers(app):
    """Build bearer headers for an arbitrary identity."""
    def _headers(identity):
        with app.app_context():
            token = create_access_token(identity=identity)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def john(registry):
    registry.register_patient(PATIENT, "John Doe", "1990-01-01", "Male", "john@example.com")
    return PATIENT


@pytest.fixture
def dr_smith(registry):
    registry.register_doctor(DOCTOR, "Dr. Smith", "123-456-7890", "Cardiology")
    return DOCTOR
