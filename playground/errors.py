class ConfigurationError(RuntimeError):
    """Settings do not allow requests to be sent anywhere."""


class TransportError(RuntimeError):
    """No HTTP response was received."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"request to {url} failed: {cause}")
        self.url = url
        self.cause = cause
