"""
ERROR HANDLING SECURITY
=======================
Return generic error messages when a credential cannot be disclosed.
"""

# FLOW:
# - Register handlers that mask cipher failures in responses.
# WHY:
# - Tag mismatches and key problems must not leak into API bodies.
# HOW:
# - Logs the real error; reads get "Unable to retrieve this credential",
#   writes get "Unable to store this credential".

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from Security.encryption_errors import ConfigurationError, IntegrityError, InvalidInputError


CREDENTIAL_UNAVAILABLE = "Unable to retrieve this credential"
CREDENTIAL_NOT_STORED = "Unable to store this credential"

READ_METHODS = {"GET", "HEAD"}

logger = logging.getLogger("security.encryption")


def _generic_detail(request: Request) -> str:
    if request.method in READ_METHODS:
        return CREDENTIAL_UNAVAILABLE
    return CREDENTIAL_NOT_STORED


def register_error_handlers(app):
    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.error("Credential integrity check failed path=%s", request.url.path)
        return JSONResponse({"detail": CREDENTIAL_UNAVAILABLE}, status_code=500)

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        logger.error("Malformed encrypted field path=%s: %s", request.url.path, exc)
        return JSONResponse({"detail": _generic_detail(request)}, status_code=500)

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logger.error("Encryption misconfigured path=%s: %s", request.url.path, exc)
        return JSONResponse({"detail": _generic_detail(request)}, status_code=503)
