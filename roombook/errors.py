"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; routes translate them with ``e.status_code``.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        payload = {'message': self.message}
        if self.details:
            payload['errors'] = self.details
        return payload


class ValidationError(ServiceError):
    """Malformed payload or time string."""
    status_code = 400


class InvalidRange(ServiceError):
    """End time is not after start time."""
    status_code = 400


class Conflict(ServiceError):
    """Overlaps an existing confirmed booking."""
    status_code = 409


class NotFound(ServiceError):
    status_code = 404


class AccessDenied(ServiceError):
    status_code = 403


class DependencyFailure(ServiceError):
    """Kitchen order creation or notification failed after the booking was committed."""
    status_code = 500
