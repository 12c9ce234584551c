"""
Upload relay router.

Endpoints:
  POST /api/send   — validate a multipart upload and email it as an attachment

Form fields:
  file   (required) — .ppt, .pptx or .pdf, at most Settings.max_file_bytes
  note   (optional) — free text included in the email body

Responses are plain text:
  200 OK | 400 Missing file | 403 Forbidden origin | 413 File too large
  415 Unsupported file type | 502 Email send failed: <provider text>
  500 Server error
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from starlette.datastructures import FormData

from upload_relay.config import DEFAULT_MAX_FILE_BYTES, Settings, get_settings
from upload_relay.cors import request_allowed_origin, with_cors
from upload_relay.errors import (
    OriginDenied,
    ProviderSendError,
    UnreadableForm,
    UploadRejected,
)
from upload_relay.services.email_sender import build_email, send_email
from upload_relay.services.upload_validator import validate_upload

logger = logging.getLogger(__name__)

router = APIRouter()

FORM_MEDIA_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _reply(message: str, status_code: int, allowed_origin: str) -> PlainTextResponse:
    return with_cors(PlainTextResponse(message, status_code=status_code), allowed_origin)


async def _read_form(request: Request, settings: Settings) -> FormData:
    """
    Parse the request body as a form.

    Text parts such as ``note`` may be as large as the file limit (and never
    smaller than the default limit).

    Raises:
        UnreadableForm: the body is not declared as a form submission.
    """
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type not in FORM_MEDIA_TYPES:
        raise UnreadableForm(f"Unsupported request body type {media_type!r}")

    return await request.form(
        max_part_size=max(settings.max_file_bytes, DEFAULT_MAX_FILE_BYTES),
    )


@router.post("/send")
async def send_upload(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> PlainTextResponse:
    """
    Relay one uploaded file to the configured inbox.

    No outbound call is made unless the origin, presence, size and type
    checks all pass.
    """
    allowed_origin = ""
    try:
        allowed_origin = request_allowed_origin(request, settings)
        if not allowed_origin:
            raise OriginDenied()

        form = await _read_form(request, settings)
        try:
            upload, note = await validate_upload(form, settings.max_file_bytes)
        finally:
            await form.close()

        message = build_email(upload, note, settings)
        await send_email(message, settings)

        return _reply("OK", 200, allowed_origin)

    except ProviderSendError as e:
        return _reply(e.message, e.status_code, allowed_origin)
    except UploadRejected as e:
        logger.info(
            f"Rejected upload ({e.error_code}) from origin "
            f"{request.headers.get('origin', '')!r}"
        )
        return _reply(e.message, e.status_code, allowed_origin)
    except Exception:
        logger.exception("Unexpected error while relaying upload")
        return _reply("Server error", 500, allowed_origin)
