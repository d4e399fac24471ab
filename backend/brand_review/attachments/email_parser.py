import base64
import logging
from dataclasses import dataclass, field
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ExtractedImage:
    filename: str
    mime_type: str
    data: bytes
    inline: bool = False

    @property
    def size(self) -> int:
        return len(self.data)

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "filename": self.filename,
            "mimeType": self.mime_type,
            "base64": base64.b64encode(self.data).decode("ascii"),
            "size": self.size,
        }
        if self.inline:
            out["inline"] = True
        return out


@dataclass
class ParsedEmail:
    subject: Optional[str] = None
    sender: Optional[str] = None
    date: Optional[str] = None
    images: List[ExtractedImage] = field(default_factory=list)


def _header(message: EmailMessage, name: str) -> Optional[str]:
    value = message.get(name)
    return str(value) if value is not None else None


def _date(message: EmailMessage) -> Optional[str]:
    value = message.get("date")
    if value is None:
        return None
    parsed = getattr(value, "datetime", None)
    return parsed.isoformat() if parsed is not None else str(value)


def _is_inline(part: EmailMessage) -> bool:
    return bool(part.get("Content-ID")) and part.get_content_disposition() != "attachment"


def parse_email(raw: bytes) -> ParsedEmail:
    """
    Pull the image parts out of an RFC 822 message.

    Regular image attachments come first, then inline (Content-ID) images
    that are not already present under the same filename and size.
    """
    message = BytesParser(policy=policy.default).parsebytes(raw)
    parsed = ParsedEmail(
        subject=_header(message, "subject"),
        sender=_header(message, "from"),
        date=_date(message),
    )

    image_parts = [
        part for part in message.walk()
        if not part.is_multipart() and part.get_content_maintype() == "image"
    ]

    for part in image_parts:
        if _is_inline(part):
            continue
        parsed.images.append(
            ExtractedImage(
                filename=part.get_filename() or f"attachment_{len(parsed.images) + 1}",
                mime_type=part.get_content_type(),
                data=part.get_payload(decode=True) or b"",
            )
        )
        logger.info("[Email] Found attachment: %s", parsed.images[-1].filename)

    for part in image_parts:
        if not _is_inline(part):
            continue
        data = part.get_payload(decode=True) or b""
        filename = part.get_filename()
        already_added = any(
            img.filename == filename and img.size == len(data) for img in parsed.images
        )
        if already_added:
            continue
        parsed.images.append(
            ExtractedImage(
                filename=filename or f"inline_{len(parsed.images) + 1}",
                mime_type=part.get_content_type(),
                data=data,
                inline=True,
            )
        )
        logger.info("[Email] Found inline image: %s", parsed.images[-1].filename)

    logger.info("[Email] Extracted %d image(s) from email", len(parsed.images))
    return parsed
