"""Body template shape detection and template value walking.

Windows and MPNS templates may be XML or JSON; the other platforms only use
JSON. For XML bodies every expression found in an attribute or leaf element
is located in the raw body so the service can substitute it in place.
"""
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional
from xml.etree import ElementTree as ET
from xml.sax.saxutils import escape

from .errors import (
    MalformedPayloadError,
    UnsupportedExpressionError,
    FAILED_TO_DESERIALIZE_BODY_TEMPLATE,
    UNSUPPORTED_EXPRESSION,
)
from .expressions import ExpressionEvaluator

MPNS_NAMESPACE = "WPNotification"
MPNS_NOTIFICATION_ELEMENT = "Notification"

_ATTRIBUTE_ENTITIES = {'"': "&quot;"}


class WindowsTemplateBodyType(Enum):
    TOAST = "toast"
    TILE = "tile"
    BADGE = "badge"
    RAW = "raw"


class MpnsTemplateBodyType(Enum):
    TOAST = "toast"
    TILE = "tile"
    RAW = "raw"


@dataclass(frozen=True)
class TemplateExpression:
    """An expression located in a raw XML body template.

    Attributes:
        start: Offset of the escaped expression in the body
        length: Length of the escaped expression
        expression: The unescaped expression text
    """

    start: int
    length: int
    expression: str


def is_xml_payload(body: Optional[str]) -> bool:
    return (body or "").strip().startswith("<")


def is_json_object_payload(body: Optional[str]) -> bool:
    payload = (body or "").strip()
    return payload.startswith("{") and payload.endswith("}")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _namespace(tag: str) -> str:
    return tag[1:].split("}", 1)[0] if tag.startswith("{") else ""


def parse_xml(body: str, error: MalformedPayloadError) -> ET.Element:
    """Parse an XML body, raising ``error`` if it is not well-formed."""
    try:
        return ET.fromstring(body)
    except ET.ParseError as err:
        raise error from err


def detect_windows_template_type(
    body: str, error: MalformedPayloadError
) -> WindowsTemplateBodyType:
    """Detect the WNS notification type from the root element name.

    Args:
        body: XML body template
        error: Error raised when the body is not a recognised WNS payload

    Returns:
        The WindowsTemplateBodyType named by the root element
    """
    root = parse_xml(body, error)
    try:
        return WindowsTemplateBodyType(_local_name(root.tag).lower())
    except ValueError:
        raise error from None


def detect_mpns_template_type(
    body: str, error: MalformedPayloadError
) -> MpnsTemplateBodyType:
    """Detect the MPNS notification type from ``<wp:Notification>``'s first child."""
    root = parse_xml(body, error)
    if (_namespace(root.tag).lower() != MPNS_NAMESPACE.lower()
            or _local_name(root.tag).lower() != MPNS_NOTIFICATION_ELEMENT.lower()):
        raise error

    children = list(root)
    if not children:
        raise error
    try:
        return MpnsTemplateBodyType(_local_name(children[0].tag).lower())
    except ValueError:
        raise error from None


def validate_xml_template(body: str, error: MalformedPayloadError) -> List[TemplateExpression]:
    """Validate every attribute and leaf value of an XML body template.

    Expressions are located in the raw body by their escaped form. Repeated
    occurrences of the same expression are found at successive offsets.

    Args:
        body: XML body template
        error: Error raised when the body is not well-formed

    Returns:
        The located expressions in document order

    Raises:
        UnsupportedExpressionError: If a value is a malformed expression or
            its escaped form cannot be found in the body
    """
    root = parse_xml(body, error)
    lowered_body = body.lower()
    last_offsets: Dict[str, int] = {}
    found: List[TemplateExpression] = []

    def locate(expression: str, escaped: str) -> None:
        key = expression.lower()
        start = lowered_body.find(escaped.lower(), last_offsets.get(key, -1) + 1)
        if start == -1:
            raise UnsupportedExpressionError(
                UNSUPPORTED_EXPRESSION,
                f"Unsupported expression: {expression}",
                {"expression": expression},
            )
        found.append(TemplateExpression(start, len(escaped), expression))
        last_offsets[key] = start

    for element in root.iter():
        for value in element.attrib.values():
            if not ExpressionEvaluator.validate(value).is_literal:
                locate(value, escape(value, _ATTRIBUTE_ENTITIES))

        text = element.text or ""
        if len(element) == 0 and text:
            if not ExpressionEvaluator.validate(text).is_literal:
                locate(text, escape(text))

    return found


def _json_values(node: Any) -> Iterator[str]:
    """Yield the values a JSON body exposes for expression checks.

    Object keys that are not XML names travel as attribute values in the
    service's JSON-to-XML mapping, so they are checked as well.
    """
    if isinstance(node, dict):
        for key, value in node.items():
            if not _is_xml_name(key):
                yield key
            yield from _json_values(value)
    elif isinstance(node, list):
        for item in node:
            yield from _json_values(item)
    elif isinstance(node, str):
        if node:
            yield node


def _is_xml_name(name: str) -> bool:
    if not name or not (name[0].isalpha() or name[0] == "_"):
        return False
    return all(ch.isalnum() or ch in "._-" for ch in name)


def validate_json_template(body: str) -> None:
    """Validate every string value of a JSON body template.

    Raises:
        MalformedPayloadError: If the body is not valid JSON
        UnsupportedExpressionError: If a value is a malformed expression
    """
    try:
        document = json.loads(body)
    except (TypeError, ValueError) as err:
        raise MalformedPayloadError(
            FAILED_TO_DESERIALIZE_BODY_TEMPLATE,
            "Failed to deserialize the body template as JSON",
            {"detail": str(err)},
        ) from err

    for value in _json_values(document):
        ExpressionEvaluator.validate(value)
