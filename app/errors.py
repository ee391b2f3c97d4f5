from app.utils.auth import Identity


class EmailAlreadyExists(Exception):
    """Raised by the user store when the email is taken."""


class Unauthenticated(Exception):
    """No usable token on the request.

    ``status_code`` is 401 when no token was presented at all and 403 when one
    was presented but failed verification. ``message`` is the only detail
    that reaches the client.
    """

    def __init__(self, status_code: int, message: str, token_presented: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.token_presented = token_presented


class Forbidden(Exception):
    """Authenticated, but the role does not match the route."""

    def __init__(self, identity: Identity, required_role):
        super().__init__(f"role {identity.role.value} may not access {required_role.value} routes")
        self.identity = identity
        self.required_role = required_role
