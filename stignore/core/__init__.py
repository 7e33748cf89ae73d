"""stignore Core - Shared constants and validators.

Import specific names from submodules:
    from stignore.core.constants import ErrorCode, Limits
    from stignore.core.validators import ValidationError, validate_config
"""

from stignore.core import constants, validators

__all__ = [
    "constants",
    "validators",
]
