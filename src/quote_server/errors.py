"""Exception handlers installed on the app, so routes only code the happy path.

    ConfigurationError → 400, with the list of problems in the body
    ValueError         → 404 or 400, picked from the message
    KeyError           → 404 (unknown template id)
    anything else      → 500

Only ``ConfigurationError`` details reach the client: they describe the
caller's own form or guide.  Every other message stays in the server log.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from quote_rulesets.validation import ConfigurationError

logger = logging.getLogger(__name__)

# First matching substring of a lower-cased ValueError message wins.
_STATUS_BY_KEYWORD: list[tuple[str, int]] = [
    ("not found", 404),
    ("unknown template", 404),
]

_PUBLIC_DETAIL: dict[int, str] = {
    400: "Invalid request",
    404: "Resource not found",
    500: "Internal server error",
}


def _error(status: int, **extra) -> JSONResponse:
    body = {"detail": _PUBLIC_DETAIL.get(status, "Invalid request"), **extra}
    return JSONResponse(status_code=status, content=body)


async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    logger.info("Rejected configuration at %s: %s", request.url, exc)
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "errors": exc.errors},
    )


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    msg = str(exc)
    lowered = msg.lower()
    status = next(
        (code for keyword, code in _STATUS_BY_KEYWORD if keyword in lowered), 400
    )
    logger.warning("ValueError (%d) at %s: %s", status, request.url, msg)
    return _error(status)


async def key_error_handler(request: Request, exc: KeyError) -> JSONResponse:
    logger.warning("Unknown key at %s: %s", request.url, exc)
    return _error(404)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled %s at %s", type(exc).__name__, request.url)
    return _error(500)
