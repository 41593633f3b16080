"""Core application components."""

from core.logger import setup_logger, get_logger
from core.constants import (
    TelegramLimits,
    SubmissionDefaults,
    DispatchDefaults,
)
from core.exceptions import (
    ApplicationError,
    ConfigurationError,
    ServiceError,
    DispatchError,
)

# ApplicationInitializer lives in core.app_initializer; it imports config,
# which itself depends on this package, so it is not re-exported here.

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    # Constants
    'TelegramLimits',
    'SubmissionDefaults',
    'DispatchDefaults',
    # Exceptions
    'ApplicationError',
    'ConfigurationError',
    'ServiceError',
    'DispatchError',
]
