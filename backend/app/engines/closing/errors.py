class ClosingPolicyError(Exception):
    """Base class for closing-policy failures."""


class ValidationError(ClosingPolicyError, ValueError):
    """Raised when proposed settings are malformed or out of range."""


class StorePlatformError(ClosingPolicyError, RuntimeError):
    """Raised when the settings store cannot be read or written."""


class TriggerPlatformError(ClosingPolicyError, RuntimeError):
    """Raised when the trigger platform rejects a list/create/delete call."""


class TriggerCreationError(TriggerPlatformError):
    """Raised when a trigger cannot be created from the requested settings."""


class FormPlatformError(ClosingPolicyError, RuntimeError):
    """Raised when the form data store is unavailable or the form is missing."""
