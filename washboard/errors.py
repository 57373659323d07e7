"""Typed failures raised by the session and score ledger.

Each error carries a stable ``code`` and the HTTP ``status`` the boundary
layer should answer with. Validation and protocol errors are expected
outcomes; ``StorageUnavailable`` is a fault and never exposes internals.
"""


class LedgerError(Exception):
    code = 'LedgerError'
    status = 400
    default_message = 'Request failed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'ok': False, 'error': self.message, 'code': self.code}


class InvalidArgument(LedgerError):
    code = 'InvalidArgument'
    status = 400
    default_message = 'Invalid argument'


class InvalidScore(LedgerError):
    code = 'InvalidScore'
    status = 400
    default_message = 'score must be a number'


class InvalidToken(LedgerError):
    code = 'InvalidToken'
    status = 403
    default_message = 'Invalid session token'


class AlreadyUsed(LedgerError):
    code = 'AlreadyUsed'
    status = 409
    default_message = 'Session already used'


class Expired(LedgerError):
    code = 'Expired'
    status = 410
    default_message = 'Session expired'


class StorageUnavailable(LedgerError):
    code = 'StorageUnavailable'
    status = 500
    default_message = 'Server error'

    def to_dict(self):
        # Opaque on the wire; details stay in the logs
        return {'ok': False, 'error': self.default_message, 'code': self.code}
