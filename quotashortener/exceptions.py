class QuotaShortenerError(Exception):
    """Base exception for all application-specific errors."""


class ValidationError(QuotaShortenerError):
    """Raised when a short URL is requested with missing or invalid parameters.

    The message is the client-facing reason, e.g. 'Invalid max_age parameter'.
    """


class ConfigurationError(QuotaShortenerError):
    """Base exception for all configuration errors."""


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""
