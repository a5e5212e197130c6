# squad/responses.py

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    success: bool,
    data: Any = None,
    error: Optional[str] = None,
    status_code: int = 200,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Wrap an outcome into the fixed `{success, data?, error?}` envelope.

    `data` and `error` are left out of the body when not given.
    """
    body = {"success": success}
    if data is not None:
        body["data"] = jsonable_encoder(data, by_alias=True)
    if error is not None:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=body, headers=headers)
