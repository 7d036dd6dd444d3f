#!/usr/bin/env python
"""
End-to-end smoke check against a running registry server.

    python smoke_check.py [BASE_URL]

Registers a patient account and a doctor account, walks the registration,
grant, upload and revoke flow, and exits non-zero if any step misbehaves.
"""

import sys
from uuid import uuid4

import requests

BASE_URL = "http://localhost:5000"

PASSED = 0
FAILED = 0


def log_test(name, passed, details=""):
    global PASSED, FAILED
    status = "[PASS]" if passed else "[FAIL]"
    print(f"{status} {name}")
    if details:
        print(f"     {details}")
    if passed:
        PASSED += 1
    else:
        FAILED += 1


def login_new_account(base_url, prefix):
    username = f"{prefix}_{uuid4().hex[:8]}"
    password = "SmokeCheck123!"
    requests.post(f"{base_url}/auth/register", json={"username": username, "password": password}, timeout=5)
    r = requests.post(f"{base_url}/auth/login", json={"username": username, "password": password}, timeout=5)
    r.raise_for_status()
    body = r.json()
    return body["identity"], {"Authorization": f"Bearer {body['access_token']}"}


def run(base_url):
    r = requests.get(f"{base_url}/health", timeout=5)
    log_test("Health endpoint", r.status_code == 200, f"Status: {r.status_code}")

    patient, patient_headers = login_new_account(base_url, "patient")
    doctor, doctor_headers = login_new_account(base_url, "doctor")

    r = requests.post(f"{base_url}/patients", headers=patient_headers, timeout=5, json={
        "name": "John Doe", "date_of_birth": "1990-01-01", "sex": "Male", "email": "john@example.com",
    })
    log_test("Register patient", r.status_code == 201, f"Status: {r.status_code}")

    r = requests.get(f"{base_url}/patients/{patient}", headers=patient_headers, timeout=5)
    log_test("Patient reads own info", r.ok and r.json().get("name") == "John Doe", f"Status: {r.status_code}")

    r = requests.post(f"{base_url}/doctors", headers=doctor_headers, timeout=5, json={
        "name": "Dr. Smith", "phone": "123-456-7890", "specialty": "Cardiology",
    })
    log_test("Register doctor", r.status_code == 201, f"Status: {r.status_code}")

    r = requests.get(f"{base_url}/doctors/{doctor}", timeout=5)
    log_test("Doctor info is public", r.ok and r.json().get("name") == "Dr. Smith", f"Status: {r.status_code}")

    r = requests.get(f"{base_url}/patients/{patient}", headers=doctor_headers, timeout=5)
    log_test("Doctor denied before grant", r.status_code == 403, f"Status: {r.status_code}")

    r = requests.post(f"{base_url}/access", headers=patient_headers, json={"doctor_identity": doctor}, timeout=5)
    log_test("Grant access", r.status_code == 200, f"Status: {r.status_code}")

    r = requests.get(f"{base_url}/access/{patient}/{doctor}", timeout=5)
    log_test("hasAccess is true", r.ok and r.json().get("has_access") is True, f"Status: {r.status_code}")

    r = requests.post(f"{base_url}/files", headers=patient_headers, timeout=5, json={
        "file_name": "X-ray Report", "file_type": "PDF", "content_address": "Qm123456...",
    })
    log_test("Add file", r.status_code == 201, f"Status: {r.status_code}")

    r = requests.get(f"{base_url}/patients/{patient}/files", headers=doctor_headers, timeout=5)
    files = r.json().get("files", []) if r.ok else []
    log_test("Doctor reads files", len(files) == 1 and files[0]["file_name"] == "X-ray Report",
             f"Status: {r.status_code}")

    r = requests.delete(f"{base_url}/access/{doctor}", headers=patient_headers, timeout=5)
    log_test("Revoke access", r.status_code == 200, f"Status: {r.status_code}")

    r = requests.get(f"{base_url}/patients/{patient}/files", headers=doctor_headers, timeout=5)
    log_test("Doctor denied after revoke", r.status_code == 403, f"Status: {r.status_code}")


if __name__ == "__main__":
    base_url = sys.argv[1] if len(sys.argv) > 1 else BASE_URL
    try:
        run(base_url.rstrip("/"))
    except requests.exceptions.ConnectionError as e:
        log_test("Server reachable", False, str(e))

    print("\n" + "=" * 60)
    print(f"RESULTS: {PASSED} Passed, {FAILED} Failed")
    print("=" * 60 + "\n")
    sys.exit(0 if FAILED == 0 else 1)
