from typing import Optional

from fastapi.responses import JSONResponse

def failure_response(
    status_code: int,
    message: str,
    error: Optional[str] = None,
    exc: Optional[Exception] = None,
    expose_details: bool = False,
    **extra,
) -> JSONResponse:
    """The {success: false, ...} envelope shared by every endpoint"""
    content = {"success": False, "message": message}
    if error:
        content["error"] = error
    content.update(extra)
    if exc is not None and expose_details:
        content["details"] = str(exc)
    return JSONResponse(status_code=status_code, content=content)
