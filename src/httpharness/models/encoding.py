"""Form encoding enums."""

from enum import Enum


class FormEncodingType(str, Enum):
    """Body encodings available for POST requests.

    URL_ENCODED → application/x-www-form-urlencoded
    MULTIPART   → multipart/form-data; boundary=<boundary>
    """

    URL_ENCODED = "urlencoded"
    MULTIPART = "multipart"
