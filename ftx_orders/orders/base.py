"""Request contract shared by every order descriptor, plus the field serialization rules."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Dict, Optional
from urllib.parse import quote

from .common import to_camel, to_timestamp
from .models import ResponseKind, decode_response

GET = "GET"
POST = "POST"
DELETE = "DELETE"

# Field inclusion rules, stored in dataclass field metadata under RULE_KEY.
RULE_KEY = "serialize"
REQUIRED = "required"
NULLABLE = "nullable"
OPTIONAL = "optional"
PATH_PARAM = "path_param"
TIMESTAMP = "timestamp"


def required(**kwargs: Any) -> Any:
    """Always sent; ``None`` is a contract violation."""
    return field(metadata={RULE_KEY: REQUIRED}, **kwargs)


def nullable(**kwargs: Any) -> Any:
    """Always sent, as JSON null when absent."""
    return field(metadata={RULE_KEY: NULLABLE}, **kwargs)


def optional(**kwargs: Any) -> Any:
    """Omitted from the body when ``None``."""
    kwargs.setdefault("default", None)
    return field(metadata={RULE_KEY: OPTIONAL}, **kwargs)


def path_param(**kwargs: Any) -> Any:
    """Only used to render the URL path; never serialized."""
    return field(metadata={RULE_KEY: PATH_PARAM}, **kwargs)


def timestamp(**kwargs: Any) -> Any:
    """Optional datetime sent as integer Unix seconds."""
    kwargs.setdefault("default", None)
    return field(metadata={RULE_KEY: TIMESTAMP}, **kwargs)


def encode_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return to_timestamp(value)
    return value


# sub-delims plus ":" and "@" are legal inside a path segment (RFC 3986).
_SEGMENT_SAFE = "!$&'()*+,;=:@"


def _path_segment(value: Any) -> str:
    if isinstance(value, int):
        return str(int(value))
    return quote(str(value), safe=_SEGMENT_SAFE)


class Request:
    """Base for the order descriptors.

    Subclasses are frozen dataclasses that declare the fixed contract of one
    REST operation as class attributes. ``PATH`` may contain ``{field}``
    placeholders naming ``path_param`` fields.
    """

    METHOD: ClassVar[str]
    PATH: ClassVar[str]
    AUTH: ClassVar[bool] = True
    OPTIMIZED_ACCESS_SUPPORTED: ClassVar[bool] = False
    RESPONSE: ClassVar[ResponseKind]

    @classmethod
    def method(cls) -> str:
        return cls.METHOD

    @classmethod
    def requires_auth(cls) -> bool:
        return cls.AUTH

    @classmethod
    def response_type(cls) -> ResponseKind:
        return cls.RESPONSE

    @classmethod
    def supports_optimized_access(cls) -> bool:
        return cls.OPTIMIZED_ACCESS_SUPPORTED

    def path(self) -> str:
        params = {
            f.name: _path_segment(getattr(self, f.name))
            for f in fields(self)
            if f.metadata.get(RULE_KEY) == PATH_PARAM
        }
        return self.PATH.format(**params)

    def to_body(self) -> Dict[str, Any]:
        """Wire body with lowerCamelCase keys, honouring each field's inclusion rule."""
        body: Dict[str, Any] = {}
        for f in fields(self):
            rule = f.metadata.get(RULE_KEY, REQUIRED)
            if rule == PATH_PARAM:
                continue
            value = getattr(self, f.name)
            if value is None:
                if rule == REQUIRED:
                    raise ValueError(f"{type(self).__name__}.{f.name} is required.")
                if rule != NULLABLE:
                    continue
            body[to_camel(f.name)] = encode_value(value)
        return body

    def decode(self, payload: Any) -> Any:
        return decode_response(self.RESPONSE, payload)


@dataclass
class OrderResult:
    request: Request
    response: Any
    raw_response: Any
    is_success: bool
    error_message: Optional[str] = None
