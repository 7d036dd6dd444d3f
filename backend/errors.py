class RegistryError(Exception):
    """Base class for every failure a registry operation reports.

    `status_code` is the HTTP status the API answers with and `code` is the
    machine-readable name sent back in the JSON body.
    """
    status_code = 400
    code = "registry_error"
    default_msg = "Registry operation failed"

    def __init__(self, msg=None):
        self.msg = msg or self.default_msg
        super().__init__(self.msg)


class AlreadyRegistered(RegistryError):
    status_code = 409
    code = "already_registered"
    default_msg = "Identity is already registered"


class NotFound(RegistryError):
    status_code = 404
    code = "not_found"
    default_msg = "Record not found"


class AccessDenied(RegistryError):
    status_code = 403
    code = "access_denied"
    default_msg = "Access denied"
