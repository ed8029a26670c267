"""
Validation gate.

validate(Schema, target) builds a dependency that checks one request section
(body, query or params, or several merged, path params last) against a
pydantic schema and reports every violation at once:

    data: SignUpBody = Depends(validate(SignUpBody))
    data: JobFilter = Depends(validate(JobFilter, "query"))
    data: UpdateJob = Depends(validate(UpdateJob, ["params", "body"]))
    data: ApplyJob = Depends(validate(ApplyJob, skip=["userResume"]))

Schemas declare their own wording per field and per pydantic error type in a
`messages` class attribute; anything not listed gets a default message.
"""

import json
from typing import Any, Callable, Dict, List, Sequence, Type, TypeVar, Union

from fastapi import Request
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile

from jobsearch.core.errors import AppError

SchemaT = TypeVar("SchemaT", bound=BaseModel)
Target = Union[str, Sequence[str]]

SECTIONS = ("body", "query", "params")
FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _field_name(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) if loc else "value"


def _default_message(error: dict) -> str:
    field = _field_name(error["loc"])
    if error["type"] == "missing":
        return f'"{field}" is required'
    if error["type"] == "extra_forbidden":
        return f'"{field}" is not allowed'
    if error["type"] == "null_forbidden":
        return f'"{field}" must not be null'
    msg = error["msg"]
    return f'"{field}" {msg[:1].lower()}{msg[1:]}'


def violation_messages(schema: Type[BaseModel], exc: ValidationError) -> List[str]:
    """Translate pydantic errors into the schema's human-readable messages, in order."""
    custom: Dict[str, Dict[str, str]] = getattr(schema, "messages", {}) or {}
    messages = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else ""
        text = custom.get(field, {}).get(error["type"])
        messages.append(text or _default_message(error))
    return messages


async def read_body(request: Request) -> Dict[str, Any]:
    """Request body as a mapping. Empty body is {}; uploaded files are left out."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_TYPES):
        form = await request.form()
        return {key: value for key, value in form.multi_items() if not isinstance(value, UploadFile)}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise AppError("Request body is not valid JSON", 400)


async def read_section(request: Request, section: str) -> Any:
    if section == "body":
        return await read_body(request)
    if section == "query":
        return dict(request.query_params)
    if section == "params":
        return dict(request.path_params)
    raise ValueError(f"Unknown request section: {section}")


def validate(schema: Type[SchemaT], target: Target = "body", skip: Sequence[str] = ()) -> Callable:
    """
    Dependency factory - 400 with the full list of violations, else the parsed schema.

    Merged sections are applied in the order given, except that path params
    are applied last: a body can never retarget the resource named in the URL.
    Fields in `skip` (file parts) are removed before validation.
    """
    sections = [target] if isinstance(target, str) else list(target)
    for section in sections:
        if section not in SECTIONS:
            raise ValueError(f"Unknown request section: {section}")
    sections.sort(key=lambda section: section == "params")

    async def validation_gate(request: Request) -> SchemaT:
        if len(sections) == 1:
            payload = await read_section(request, sections[0])
        else:
            payload = {}
            for section in sections:
                data = await read_section(request, section)
                if isinstance(data, dict):
                    payload.update(data)

        if isinstance(payload, dict):
            for name in skip:
                payload.pop(name, None)

        try:
            return schema.model_validate(payload)
        except ValidationError as exc:
            raise AppError(violation_messages(schema, exc), 400)

    return validation_gate
