import logging
from datetime import datetime

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager, create_access_token
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

import config
from access_control.decorators import handle_registry_errors, require_json_fields, with_caller
from database.config import Base, make_engine, make_session_factory
from models.account import Account, new_identity
from models.doctor import Doctor
from models.patient import Patient
from registry import Registry

logger = logging.getLogger(__name__)

# Password hashing
def get_password_hash(password):
    return generate_password_hash(password)

def verify_password(plain_password, hashed_password):
    return check_password_hash(hashed_password, plain_password)

def get_registry():
    return current_app.extensions["registry"]


def create_app(test_config=None):
    app = Flask(__name__)

    # Configuration
    app.config.update(config.flask_settings())
    if test_config:
        app.config.update(test_config)

    CORS(app, origins=app.config["CORS_ORIGINS"])
    JWTManager(app)

    # Create all tables if they don't exist
    engine = make_engine(app.config["DATABASE_URL"])
    Base.metadata.create_all(bind=engine)
    session_factory = make_session_factory(engine)

    app.extensions["registry"] = Registry(
        session_factory, audit_log_limit=app.config["AUDIT_LOG_LIMIT"]
    )

    register_routes(app)
    logger.info("[APP] Registry ready on %s", engine.url.render_as_string(hide_password=True))
    return app

def register_routes(app):

    @app.route("/health", methods=["GET"])
    def health():
        """Health check endpoint"""
        return jsonify({"status": "ok", "message": "Registry is running"}), 200

    # ==================== AUTH ROUTES ====================

    @app.route("/auth/register", methods=["POST"])
    @require_json_fields("username", "password")
    def register(data):
        username = data["username"].strip()

        try:
            with get_registry().transaction() as db:
                if db.query(Account).filter(Account.username == username).first():
                    logger.info("[AUTH] Username already taken: %s", username)
                    return jsonify({"msg": "User already exists"}), 409

                account = Account(
                    username=username,
                    identity=new_identity(),
                    hashed_password=get_password_hash(data["password"]),
                    is_active=True,
                    created_at=datetime.now(),
                )
                db.add(account)
                db.flush()
                identity = account.identity
        except IntegrityError:
            return jsonify({"msg": "User already exists"}), 409

        logger.info("[AUTH] Account created: %s -> %s", username, identity)
        return jsonify({"msg": "User created successfully", "identity": identity}), 201

    @app.route("/auth/login", methods=["POST"])
    @require_json_fields("username", "password")
    def login(data):
        username = data["username"].strip()

        with get_registry().transaction() as db:
            account = db.query(Account).filter(Account.username == username).first()
            if not account or not account.is_active or not verify_password(data["password"], account.hashed_password):
                logger.warning("[AUTH] Invalid credentials for %s", username)
                return jsonify({"msg": "Invalid credentials"}), 401
            identity = account.identity

        token = create_access_token(identity=identity)
        logger.info("[AUTH] Login successful: %s", username)
        return jsonify({"access_token": token, "identity": identity}), 200

    @app.route("/auth/me", methods=["GET"])
    @with_caller
    def auth_me(caller):
        """Get current identity and what it is registered as"""
        with get_registry().transaction() as db:
            is_patient = db.get(Patient, caller) is not None
            is_doctor = db.get(Doctor, caller) is not None
        return jsonify({
            "identity": caller,
            "is_patient": is_patient,
            "is_doctor": is_doctor,
        }), 200

    # ==================== PATIENT ROUTES ====================

    @app.route("/patients", methods=["POST"])
    @with_caller
    @handle_registry_errors
    @require_json_fields("name", "date_of_birth", "sex", "email")
    def register_patient(caller, data):
        get_registry().register_patient(
            caller, data["name"], data["date_of_birth"], data["sex"], data["email"]
        )
        return jsonify({"msg": "Patient registered", "identity": caller}), 201

    @app.route("/patients/<identity>", methods=["GET"])
    @with_caller
    @handle_registry_errors
    def get_patient_info(caller, identity):
        info = get_registry().get_patient_info(caller, identity)
        return jsonify({"identity": identity, **info._asdict()}), 200

    @app.route("/patients/<identity>/files", methods=["GET"])
    @with_caller
    @handle_registry_errors
    def get_patient_files(caller, identity):
        files = get_registry().get_patient_files(caller, identity)
        return jsonify({
            "identity": identity,
            "files": [f._asdict() for f in files],
        }), 200

    @app.route("/files", methods=["POST"])
    @with_caller
    @handle_registry_errors
    @require_json_fields("file_name", "file_type", "content_address")
    def add_file(caller, data):
        medical_file = get_registry().add_file(
            caller, data["file_name"], data["file_type"], data["content_address"]
        )
        return jsonify({"msg": "File added", **medical_file._asdict()}), 201

    # ==================== DOCTOR ROUTES ====================

    @app.route("/doctors", methods=["POST"])
    @with_caller
    @handle_registry_errors
    @require_json_fields("name", "phone", "specialty")
    def register_doctor(caller, data):
        get_registry().register_doctor(caller, data["name"], data["phone"], data["specialty"])
        return jsonify({"msg": "Doctor registered", "identity": caller}), 201

    @app.route("/doctors/<identity>", methods=["GET"])
    @handle_registry_errors
    def get_doctor_info(identity):
        info = get_registry().get_doctor_info(identity)
        return jsonify({"identity": identity, **info._asdict()}), 200

    # ==================== ACCESS ROUTES ====================

    @app.route("/access", methods=["POST"])
    @with_caller
    @handle_registry_errors
    @require_json_fields("doctor_identity")
    def grant_access(caller, data):
        doctor_identity = data["doctor_identity"].strip()
        get_registry().grant_access(caller, doctor_identity)
        return jsonify({"msg": "Access granted", "doctor_identity": doctor_identity}), 200

    @app.route("/access/<doctor_identity>", methods=["DELETE"])
    @with_caller
    @handle_registry_errors
    def revoke_access(caller, doctor_identity):
        get_registry().revoke_access(caller, doctor_identity)
        return jsonify({"msg": "Access revoked", "doctor_identity": doctor_identity}), 200

    @app.route("/access", methods=["GET"])
    @with_caller
    @handle_registry_errors
    def list_grants(caller):
        return jsonify({"doctors": get_registry().list_grants(caller)}), 200

    @app.route("/access/granted-to-me", methods=["GET"])
    @with_caller
    @handle_registry_errors
    def list_accessible_patients(caller):
        return jsonify({"patients": get_registry().list_accessible_patients(caller)}), 200

    @app.route("/access/<patient_identity>/<doctor_identity>", methods=["GET"])
    @handle_registry_errors
    def has_access(patient_identity, doctor_identity):
        return jsonify({
            "patient_identity": patient_identity,
            "doctor_identity": doctor_identity,
            "has_access": get_registry().has_access(patient_identity, doctor_identity),
        }), 200

    # ==================== AUDIT LOGS ROUTES ====================

    @app.route("/audit-logs", methods=["GET"])
    @with_caller
    @handle_registry_errors
    def get_audit_logs(caller):
        """Get audit logs for current identity"""
        limit = request.args.get("limit", type=int)
        logs = get_registry().get_audit_logs(caller, limit=limit)
        return jsonify([log._asdict() for log in logs]), 200

if __name__ == "__main__":
    config.configure_logging()
    create_app().run(host=config.HOST, port=config.PORT, debug=False, use_reloader=False)
