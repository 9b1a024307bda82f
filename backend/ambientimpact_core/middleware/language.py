"""
Language middleware
Sets the current language for the request from ?language= or Accept-Language.
"""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ambientimpact_core.core.language import (
    parse_accept_language,
    reset_current_language,
    set_current_language,
)


class LanguageMiddleware(BaseHTTPMiddleware):
    """Resolve the request language before any component output is built."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        language = parse_accept_language(request.query_params.get("language")) or parse_accept_language(
            request.headers.get("accept-language")
        )

        token = set_current_language(language)
        try:
            response = await call_next(request)
        finally:
            reset_current_language(token)

        if language:
            response.headers["Content-Language"] = language
        return response
