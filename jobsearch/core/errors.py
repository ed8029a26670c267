"""
Error model.

Every failure in the request pipeline is reported as an AppError: a message
(or list of messages, for validation) plus an HTTP status chosen by the
caller. error_response() is the single place a failure becomes a response.
"""

from typing import List, Optional, Union

from fastapi.responses import JSONResponse

Message = Union[str, List[str]]

# Non-standard status used for invalid or expired credentials.
INVALID_TOKEN = 498


class AppError(Exception):
    """Failure value carried through the pipeline to the boundary formatter."""

    def __init__(self, message: Message, status_code: Optional[int] = 500):
        super().__init__(message if isinstance(message, str) else "; ".join(message))
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"AppError(status_code={self.status_code!r}, message={self.message!r})"


def error_response(err: AppError) -> JSONResponse:
    """Render an AppError as {"message": ...}; a missing status means 500."""
    return JSONResponse(status_code=err.status_code or 500, content={"message": err.message})
