"""Atom XML wire format for registration descriptions.

Registrations travel inside an Atom entry::

    <entry xmlns="http://www.w3.org/2005/Atom">
      <content type="application/xml">
        <WindowsRegistrationDescription xmlns="...servicebus/connect">
          <Tags>sports,news</Tags>
          <ChannelUri>https://...</ChannelUri>
        </WindowsRegistrationDescription>
      </content>
    </entry>
"""
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional
from xml.etree import ElementTree as ET

from .errors import MalformedPayloadError, FAILED_TO_DESERIALIZE_BODY_TEMPLATE
from .headers import ApnsHeaderCollection, HeaderCollection, MpnsHeaderCollection, WnsHeaderCollection
from .registrations import REGISTRATION_TYPES, RegistrationDescription

ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"
SERVICE_BUS_NAMESPACE = "http://schemas.microsoft.com/netservices/2010/10/servicebus/connect"
XML_SCHEMA_INSTANCE_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"

_REGISTRATION_CLASSES: Dict[str, type] = {cls.element_name: cls for cls in REGISTRATION_TYPES}

_HEADER_CLASSES: Dict[str, type] = {
    "wns_headers": WnsHeaderCollection,
    "mpns_headers": MpnsHeaderCollection,
    "apns_headers": ApnsHeaderCollection,
}

_FRACTION_PATTERN = re.compile(r'\.(\d{6})\d+')


def _sb(name: str) -> str:
    return f"{{{SERVICE_BUS_NAMESPACE}}}{name}"


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_datetime(value: str) -> datetime:
    """Parse the service's ISO 8601 timestamps (up to 7 fractional digits)."""
    text = _FRACTION_PATTERN.sub(r'.\1', value.strip())
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _append_text(parent: ET.Element, name: str, value) -> None:
    if value is None:
        return
    child = ET.SubElement(parent, name)
    child.text = str(value)


def _append_headers(parent: ET.Element, name: str, headers: HeaderCollection) -> None:
    collection = ET.SubElement(parent, name)
    for key, value in headers.items():
        item = ET.SubElement(collection, headers.item_name)
        _append_text(item, "Header", key)
        _append_text(item, "Value", value)


def registration_to_element(registration: RegistrationDescription) -> ET.Element:
    """Build the service bus element for a registration, without the Atom wrapper."""
    element = ET.Element(registration.element_name, {
        "xmlns": SERVICE_BUS_NAMESPACE,
        "xmlns:i": XML_SCHEMA_INSTANCE_NAMESPACE,
    })

    _append_text(element, "ETag", registration.etag)
    if registration.expiration_time is not None:
        _append_text(element, "ExpirationTime", _format_datetime(registration.expiration_time))
    _append_text(element, "RegistrationId", registration.registration_id)
    _append_text(element, "Tags", registration.tags_string)
    _append_text(element, "PushVariables", registration.property_bag_string)

    for name, attribute in registration.wire_fields:
        value = getattr(registration, attribute, None)
        if isinstance(value, HeaderCollection):
            _append_headers(element, name, value)
        else:
            _append_text(element, name, value)
    return element


def serialize_registration(registration: RegistrationDescription) -> str:
    """Serialize a registration to an Atom entry document.

    Call ``registration.serialize()`` to validate first.
    """
    entry = ET.Element("entry", {"xmlns": ATOM_NAMESPACE})
    content = ET.SubElement(entry, "content", {"type": "application/xml"})
    content.append(registration_to_element(registration))
    return '<?xml version="1.0" encoding="utf-8"?>' + ET.tostring(entry, encoding="unicode")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    child = element.find(_sb(name))
    if child is None:
        return None
    return child.text or ""


def _read_headers(element: ET.Element, name: str, collection_class: type) -> Optional[HeaderCollection]:
    container = element.find(_sb(name))
    if container is None:
        return None
    headers = collection_class()
    for item in container:
        headers.add(_child_text(item, "Header") or "", _child_text(item, "Value") or "")
    return headers


def element_to_registration(element: ET.Element) -> RegistrationDescription:
    """Build a registration from its service bus element.

    Raises:
        MalformedPayloadError: If the element is not a known registration type
    """
    name = _local_name(element.tag)
    cls = _REGISTRATION_CLASSES.get(name)
    if cls is None:
        raise MalformedPayloadError(
            FAILED_TO_DESERIALIZE_BODY_TEMPLATE,
            f"Unknown registration type: {name}",
            {"element": name},
        )

    registration = cls.__new__(cls)
    RegistrationDescription.__init__(registration)
    registration.etag = _child_text(element, "ETag")
    registration.registration_id = _child_text(element, "RegistrationId")
    expiration = _child_text(element, "ExpirationTime")
    if expiration:
        registration.expiration_time = parse_datetime(expiration)
    registration.tags_string = _child_text(element, "Tags")
    registration.property_bag_string = _child_text(element, "PushVariables")

    for wire_name, attribute in cls.wire_fields:
        if attribute in _HEADER_CLASSES:
            setattr(registration, attribute,
                    _read_headers(element, wire_name, _HEADER_CLASSES[attribute]))
            continue
        value = _child_text(element, wire_name)
        if attribute == "message_type" and value is not None:
            value = int(value)
        setattr(registration, attribute, value)
    return registration


def _find_registration_element(root: ET.Element) -> ET.Element:
    if _local_name(root.tag) in _REGISTRATION_CLASSES:
        return root
    content = root.find(f"{{{ATOM_NAMESPACE}}}content")
    if content is None or len(content) == 0:
        raise MalformedPayloadError(
            FAILED_TO_DESERIALIZE_BODY_TEMPLATE, "The entry has no registration content")
    return content[0]


def _parse(text: str) -> ET.Element:
    try:
        return ET.fromstring(text)
    except ET.ParseError as err:
        raise MalformedPayloadError(
            FAILED_TO_DESERIALIZE_BODY_TEMPLATE,
            "The registration document is not well-formed XML",
            {"detail": str(err)},
        ) from err


def deserialize_registration(text: str) -> RegistrationDescription:
    """Parse an Atom entry (or bare description element) into a registration."""
    return element_to_registration(_find_registration_element(_parse(text)))


def deserialize_registrations(text: str) -> List[RegistrationDescription]:
    """Parse an Atom feed of registrations."""
    root = _parse(text)
    if _local_name(root.tag) != "feed":
        return [element_to_registration(_find_registration_element(root))]
    return [
        element_to_registration(_find_registration_element(entry))
        for entry in root.findall(f"{{{ATOM_NAMESPACE}}}entry")
    ]
