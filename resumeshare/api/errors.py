from typing import Any

from fastapi import HTTPException


def api_error(status_code: int, message: str, error: Exception | None = None) -> HTTPException:
    """Build an HTTPException carrying the JSON error envelope."""
    detail: dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        detail["error"] = str(error)
    return HTTPException(status_code=status_code, detail=detail)
