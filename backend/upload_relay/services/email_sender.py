"""
Outbound email through the Resend send-email API.

Builds the message for a validated upload and POSTs it as JSON:

  {from, to, subject, text, attachments: [{filename, content}]}

``content`` is the file encoded as standard base64. One POST per upload,
no retries: a non-2xx answer or a transport failure raises
ProviderSendError, which the router turns into a 502.
"""

import base64
import logging
from typing import Optional

import httpx

from upload_relay.config import Settings
from upload_relay.errors import ProviderSendError
from upload_relay.models.upload import EmailAttachment, OutboundEmail, UploadedFile

logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "Website upload: "
_SUBJECT_FALLBACK_NAME = "file"
_ATTACHMENT_FALLBACK_NAME = "upload"


def encode_attachment(content: bytes) -> str:
    """Base64-encode file bytes for embedding in the JSON payload."""
    return base64.b64encode(content).decode("ascii")


def build_email_text(note: str, size: int) -> str:
    return (
        "A file was uploaded from the personal site.\n\n"
        f"Note: {note}\n"
        f"Size: {size} bytes"
    )


def build_email(upload: UploadedFile, note: str, settings: Settings) -> OutboundEmail:
    """Construct the outbound message for a validated upload."""
    return OutboundEmail(
        from_email=settings.from_email,
        to_email=settings.to_email,
        subject=SUBJECT_PREFIX + (upload.filename or _SUBJECT_FALLBACK_NAME),
        text=build_email_text(note or "", upload.size),
        attachments=[
            EmailAttachment(
                filename=upload.filename or _ATTACHMENT_FALLBACK_NAME,
                content=encode_attachment(upload.content),
            )
        ],
    )


def _read_error_text(response: httpx.Response) -> str:
    """Best-effort provider error body; "" if it cannot be decoded."""
    try:
        return response.text
    except Exception:
        return ""


async def _post_email(client: httpx.AsyncClient, message: OutboundEmail, settings: Settings) -> None:
    try:
        response = await client.post(
            settings.resend_api_url,
            json=message.to_payload(),
            headers={
                "Authorization": f"Bearer {settings.resend_api_key}",
                "Content-Type": "application/json",
            },
        )
    except httpx.HTTPError as exc:
        logger.error(f"Email provider request failed: {type(exc).__name__}")
        raise ProviderSendError()

    if not response.is_success:
        provider_message = _read_error_text(response)
        logger.error(
            f"Email provider rejected message (HTTP {response.status_code}) "
            f"for attachment {message.attachments[0].filename!r}"
        )
        raise ProviderSendError(provider_message, response.status_code)

    logger.info(
        f"Forwarded {message.attachments[0].filename!r} to email provider "
        f"(HTTP {response.status_code})"
    )


async def send_email(
    message: OutboundEmail,
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> None:
    """
    Send one message through the provider.

    A client may be passed in (tests use one backed by httpx.MockTransport);
    otherwise a client is opened for this call and closed afterwards.

    Raises:
        ProviderSendError: on a non-2xx response or a transport error.
    """
    if client is not None:
        await _post_email(client, message, settings)
        return

    async with httpx.AsyncClient(timeout=settings.send_timeout_seconds) as owned_client:
        await _post_email(owned_client, message, settings)
