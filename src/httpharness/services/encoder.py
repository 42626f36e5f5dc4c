"""Form body encoders: application/x-www-form-urlencoded and multipart/form-data."""

import logging
import uuid
from typing import Mapping, Optional, Sequence
from urllib.parse import quote

from httpharness.errors import UrlEncodingError

logger = logging.getLogger("httpharness.encoder")

FieldMap = Mapping[str, Optional[Sequence[str]]]

# Path-safe characters minus the ones that delimit form pairs ('&', '=')
# and '+', which form decoders read as a space.
FORM_SAFE_CHARS = "!$'()*,/:@"

CRLF = "\r\n"


def generate_boundary() -> str:
    """Return a fresh random multipart boundary token."""
    return "----" + str(uuid.uuid4()).upper()


def percent_encode(text: str) -> str:
    """Percent-encode text as UTF-8, leaving path-safe characters alone.

    Raises:
        UrlEncodingError: If text has no UTF-8 representation
    """
    try:
        return quote(text, safe=FORM_SAFE_CHARS, encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise UrlEncodingError(f"Cannot percent-encode {text!r}: {e.reason}") from e


def url_encode(fields: FieldMap) -> str:
    """Encode fields as an application/x-www-form-urlencoded body.

    Each value becomes ``name=value``. A field whose values are None becomes
    the bare name. A field with an empty value list contributes nothing.

    Raises:
        UrlEncodingError: If a name or value cannot be encoded
    """
    parts = []
    for name, values in fields.items():
        encoded_name = percent_encode(name)
        if values is None:
            parts.append(encoded_name)
            continue
        for value in values:
            parts.append(f"{encoded_name}={percent_encode(value)}")
    body = "&".join(parts)
    logger.debug(f"URL-encoded {len(fields)} fields into {len(parts)} pairs")
    return body


def multipart_encode(fields: FieldMap, boundary: str) -> str:
    """Encode fields as a multipart/form-data body framed by boundary.

    Every value becomes one text/plain part. Fields whose values are None
    or empty produce no parts. An empty field map gives just the closing
    delimiter ``--<boundary>--``.
    """
    delimiter = "--" + boundary
    body = [delimiter]
    part_count = 0
    for name, values in fields.items():
        if not values:
            continue
        for value in values:
            body.append(CRLF + f'Content-Disposition: form-data; name="{name}"' + CRLF)
            body.append("Content-Type: text/plain" + CRLF + CRLF)
            body.append(value + CRLF)
            body.append(delimiter)
            part_count += 1
    body.append("--")
    logger.debug(f"Multipart-encoded {part_count} parts")
    return "".join(body)


def multipart_content_type(boundary: str) -> str:
    return f"multipart/form-data; boundary={boundary}"
