"""Security event logging.

Authentication failures and denied admin attempts go to the ``security`` logger
so they can be routed separately from application logs.
"""
import logging
from typing import Optional

logger = logging.getLogger("security")


def log_auth_failure(user_id: Optional[str], reason: str):
    """Record a failed identity resolution (bad token, unknown dev user, ...)."""
    logger.warning(f"Authentication failure: user={user_id or 'anonymous'} reason={reason}")


def log_unauthorized_access(user_id: Optional[str], required_role: str, detail: str):
    """Record an authenticated caller attempting an action above their role."""
    logger.warning(
        f"Unauthorized access: user={user_id or 'anonymous'} required={required_role} detail={detail}"
    )


def log_configuration_error(detail: str):
    logger.error(f"Security configuration error: {detail}")
