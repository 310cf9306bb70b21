"""Custom exception hierarchy for fleet discovery."""


class DiscoveryError(Exception):
    """Base exception for all fleet discovery errors."""


class ConfigError(DiscoveryError):
    """Invalid or missing configuration."""


class CredentialsError(DiscoveryError):
    """The shared credentials file cannot be located or read. Fatal for the whole run."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ProviderError(DiscoveryError):
    """A call to the cloud provider failed (regions or instances listing)."""

    def __init__(self, message: str, operation: str | None = None, region: str | None = None):
        super().__init__(message)
        self.operation = operation
        self.region = region
