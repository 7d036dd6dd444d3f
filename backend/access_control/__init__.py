# This file makes the access_control directory a Python package
from .authorization import has_active_grant, check_patient_access
from .decorators import with_caller, handle_registry_errors, require_json_fields
