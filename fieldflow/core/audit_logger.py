import structlog
from fastapi import Request

logger = structlog.get_logger("fieldflow.audit")


def log_action(
    request: Request,
    action: str,
    username: str,
    user_id: int | None = None,
    resource_type: str | None = None,
    resource_id: int | str | None = None,
    details: dict | None = None,
) -> None:
    """Log an action to the audit trail.

    Args:
        request: FastAPI request object (for IP address)
        action: Action name (e.g., "LOGIN", "USER_CREATE")
        username: Username of actor
        user_id: User ID of actor
        resource_type: Type of resource affected
        resource_id: ID of resource affected
        details: Additional details (never credentials)
    """
    ip_address = request.client.host if request.client else None

    logger.info(
        "audit",
        action=action,
        username=username,
        user_id=user_id,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        details=details or {},
        ip_address=ip_address,
    )
