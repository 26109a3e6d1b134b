"""Request body parsing for content pages.

The admin forms post multipart data using a bracket convention::

    sectionsCount=2
    sections[0][title]=...
    sections[0][imageUrl]=<url to keep>
    sections[0][imageFile]=<new file>
    videoSection[videoUrl]=...
    bannerImageFile=<new file>

Each level is turned into a dict the request schemas accept, with new files
collected under ``uploads`` keyed by media slot. JSON bodies pass through
unchanged; they cannot carry files.
"""

import json
import logging
import re
from typing import Any, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel, to_snake
from starlette.datastructures import FormData, UploadFile

from clinic_cms.domain.entities import ContentKind, PendingUpload
from clinic_cms.domain.exceptions import ContentValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_KEY_PART = re.compile(r"[^\[\]]+")


async def read_content_payload(
    request: Request, kind: ContentKind, *, max_upload_bytes: int
) -> dict[str, Any]:
    """Read a JSON or form body into the nested dict shape of the request schemas."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except json.JSONDecodeError as e:
            raise ContentValidationError(f"Invalid JSON body: {e}") from e
        if not isinstance(body, dict):
            raise ContentValidationError("Request body must be a JSON object")
        return body

    form = await request.form()
    return await parse_content_form(form, kind, max_upload_bytes=max_upload_bytes)


async def parse_content_form(
    form: FormData, kind: ContentKind, *, max_upload_bytes: int
) -> dict[str, Any]:
    top: dict[str, Any] = {}
    indexed: dict[str, dict[int, dict[str, Any]]] = {}
    single: dict[str, dict[str, Any]] = {}

    for key, value in form.multi_items():
        parts = _KEY_PART.findall(key)
        if len(parts) == 1:
            top[parts[0]] = value
        elif len(parts) == 2:
            single.setdefault(parts[0], {})[parts[1]] = value
        elif len(parts) == 3 and parts[1].isdigit():
            indexed.setdefault(parts[0], {}).setdefault(int(parts[1]), {})[parts[2]] = value
        else:
            logger.debug("Ignoring form field %s", key)

    payload = await _split_uploads(top, max_upload_bytes, kind.media_slots)
    for spec in kind.collections:
        name = to_camel(spec.name)
        payload.pop(f"{name}Count", None)
        if spec.single:
            values = await _split_uploads(single.get(name, {}), max_upload_bytes, spec.media_slots)
            if any(v for k, v in values.items() if k != "id"):
                payload[name] = values
            continue

        items = indexed.get(name, {})
        count = _item_count(top.get(f"{name}Count"), items)
        payload[name] = [
            await _split_uploads(items.get(i, {}), max_upload_bytes, spec.media_slots)
            for i in range(count)
        ]
    return payload


def _item_count(raw: Any, items: dict[int, dict[str, Any]]) -> int:
    """``<collection>Count`` when sent, otherwise one past the highest index posted.

    The count only trims: it never reaches past the highest index posted.
    """
    extent = max(items) + 1 if items else 0
    if isinstance(raw, str) and raw.strip():
        try:
            return min(max(int(raw), 0), extent)
        except ValueError:
            raise ContentValidationError(f"Invalid item count '{raw}'") from None
    return extent


async def _split_uploads(
    values: dict[str, Any], max_upload_bytes: int, slots: tuple[str, ...] = ()
) -> dict[str, Any]:
    """Move file parts into ``uploads[<slot>]``; empty file inputs are dropped."""
    fields: dict[str, Any] = {}
    uploads: dict[str, PendingUpload] = {}
    for key, value in values.items():
        if not isinstance(value, UploadFile):
            fields[key] = value
            continue
        content = await value.read()
        if not content:
            continue
        if len(content) > max_upload_bytes:
            limit_mb = max_upload_bytes // (1024 * 1024)
            raise ContentValidationError(f"File size must be less than {limit_mb}MB", key)
        uploads[_slot_for(key, slots)] = PendingUpload(
            content=content,
            filename=value.filename or "",
            content_type=value.content_type or "",
        )
    if uploads:
        fields["uploads"] = uploads
    return fields


def _slot_for(key: str, slots: tuple[str, ...]) -> str:
    """``imageFile`` → ``image``, ``section1ImageFile`` → ``section1_image``."""
    name = key[: -len("File")] if key.endswith("File") and len(key) > len("File") else key
    by_field = {to_camel(slot): slot for slot in slots}
    return by_field.get(name) or to_snake(name)


def validate_content(model: type[ModelT], payload: dict[str, Any]) -> ModelT:
    """Validate ``payload`` against ``model``, reporting the first problem found."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        error = e.errors()[0]
        message = error["msg"].removeprefix("Value error, ")
        location = ".".join(str(part) for part in error["loc"])
        if location:
            raise ContentValidationError(f"{location}: {message}", location) from e
        raise ContentValidationError(message) from e
