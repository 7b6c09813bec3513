"""Exception types raised by the dashboard and mapped to responses in app.py."""


class InvalidFileFormat(ValueError):
    """The uploaded workbook cannot be turned into Name/CPF records."""


class GatewayError(RuntimeError):
    """The webhook service answered with a non-success status."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ResourceBusy(RuntimeError):
    """Another request already holds the same resource."""

    def __init__(self, key, resource=None):
        super().__init__(f"Another request for {resource or key} is already in progress")
        self.key = key
