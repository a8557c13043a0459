"""Mapping from response status code to log severity."""

from request_logger.infrastructure.constants import StatusRanges


def level_for_status(status_code: int) -> str:
    """Choose the log method name for a response status code.

    Args:
        status_code: Final HTTP status code of the response

    Returns:
        ``"warning"`` for client errors, ``"error"`` for server errors,
        ``"info"`` for everything else

    Example:
        >>> level_for_status(404)
        'warning'
        >>> level_for_status(399)
        'info'
    """
    if StatusRanges.CLIENT_ERROR_MIN <= status_code < StatusRanges.SERVER_ERROR_MIN:
        return "warning"
    if status_code >= StatusRanges.SERVER_ERROR_MIN:
        return "error"
    return "info"
