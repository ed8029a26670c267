"""
Stage results for the application submission.

Each stage returns `Ok(value)` or `Err(code, message, details)` instead of
raising, so the route can tell which step failed. Codes in use:

    DECODE_FAILED   skills text is not a JSON array of strings
    NOT_FOUND       the job does not exist
    UPLOAD_FAILED   the asset store refused the resume
    PERSIST_FAILED  the application record could not be written
    CLEANUP_FAILED  the record exists but the buffered file is still on disk

`application_service.STAGE_ERRORS` maps each code to an HTTP status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Err:
    """A failed stage. `message` goes to the client; `details` only to the log."""

    code: str
    message: str
    details: Optional[dict] = None


Result = Union[Ok[T], Err]
