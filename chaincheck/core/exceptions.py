# core/exceptions.py
"""
Registry error taxonomy
Every failure is synchronous and raised before any state is written
"""


class ChainCheckError(Exception):
    """Base class for registry failures"""
    status_code = 400
    error = 'Request failed'

    def __init__(self, message: str = None):
        super().__init__(message or self.error)
        self.message = message or self.error


class Unauthorized(ChainCheckError):
    """Caller lacks the required privilege"""
    status_code = 403
    error = 'Unauthorized'


class InvalidInput(ChainCheckError):
    """Malformed or out-of-range argument"""
    status_code = 400
    error = 'Invalid input'


class Conflict(ChainCheckError):
    """Duplicate batch id"""
    status_code = 409
    error = 'Conflict'


class NotFound(ChainCheckError):
    """Referenced batch does not exist"""
    status_code = 404
    error = 'Not found'


class RegistryPaused(ChainCheckError):
    """Registration and verification are suspended by the owner"""
    status_code = 503
    error = 'Registry paused'


class AuthError(Exception):
    """Missing, malformed or expired credentials"""
    pass
