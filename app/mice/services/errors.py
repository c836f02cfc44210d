# --- Service layer exception classes ---

class ServiceError(Exception):
    """General exception class for the service layer."""
    pass

class InvalidPayload(ServiceError):
    """A scanned code could not be parsed or carries no student id."""
    pass

class NotFound(ServiceError):
    """A student, event or attendance record does not exist."""
    pass

class StoreUnavailable(ServiceError):
    """A call to the backing store failed."""
    pass

class ScanConflict(ServiceError):
    """The attendance row changed between the conditional write and the re-read."""
    pass

class NotificationFailed(ServiceError):
    """The email service did not accept a confirmation."""
    pass
