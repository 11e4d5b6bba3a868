"""Entity encoding and decoding for XML and JSON bodies.

Entities are dataclasses. Each field is written under its own name unless it
was declared with :func:`api_field` and a ``name`` override. ``None`` fields are
left out of the document in both formats.

XML documents carry an ``encoding="utf-8"`` declaration, a root element named
after the class (``__xml_root__`` overrides it) and no namespace declarations.
A list field becomes a wrapper element holding one element per item.
"""

from __future__ import annotations

import base64
import json
import sys
import types
import xml.etree.ElementTree as ET
from collections.abc import Mapping, Sequence
from dataclasses import MISSING, field, fields, is_dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import lru_cache
from typing import Any, Union, get_args, get_origin, get_type_hints

from ..config import ContentType
from .errors import SerializationError

API_FIELD_KEY = "restify.api"

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, Sequence)


def api_field(
    *,
    name: str | None = None,
    default: Any = MISSING,
    default_factory: Any = MISSING,
) -> Any:
    """Dataclass field whose wire name differs from the attribute name."""

    return field(
        default=default,
        default_factory=default_factory,
        metadata={API_FIELD_KEY: {"name": name}},
    )


def wire_name(item: Any) -> str:
    options = item.metadata.get(API_FIELD_KEY) or {}
    return options.get("name") or item.name


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Strip one ``Optional``/``X | None`` layer from a type hint."""

    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(args) == 1:
            return args[0], True
    return tp, False


@lru_cache(maxsize=None)
def resolve_type_hints(cls: type) -> dict[str, Any]:
    """Field type hints of a dataclass.

    Hints naming something outside the module namespace (a class declared
    inside a function, say) stay as their annotation string; the remaining
    fields still resolve.
    """

    try:
        return get_type_hints(cls)
    except NameError:
        if not is_dataclass(cls):
            raise
    module = sys.modules.get(cls.__module__)
    namespace = dict(vars(module)) if module is not None else {}
    hints: dict[str, Any] = {}
    for item in fields(cls):
        hint = item.type
        if isinstance(hint, str):
            try:
                hint = eval(hint, namespace)
            except NameError:
                pass
        hints[item.name] = hint
    return hints


def xml_root_name(cls: type) -> str:
    return getattr(cls, "__xml_root__", None) or cls.__name__


def _is_instance(value: object) -> bool:
    return is_dataclass(value) and not isinstance(value, type)


# -- encoding ---------------------------------------------------------------


def to_primitive(value: Any) -> Any:
    """Convert an entity into JSON-compatible builtins."""

    if isinstance(value, Enum):
        return to_primitive(value.value)
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if _is_instance(value):
        out: dict[str, Any] = {}
        for item in fields(value):
            attr = getattr(value, item.name)
            if attr is None:
                continue
            out[wire_name(item)] = to_primitive(attr)
        return out
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, Mapping):
        return {str(key): to_primitive(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_primitive(item) for item in value]
    raise SerializationError(f"cannot serialize value of type {type(value).__name__}")


def _scalar_text(value: Any) -> str:
    if isinstance(value, Enum):
        return _scalar_text(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    primitive = to_primitive(value)
    return primitive if isinstance(primitive, str) else str(primitive)


def _build_element(tag: str, value: Any) -> ET.Element:
    element = ET.Element(tag)
    if _is_instance(value):
        for item in fields(value):
            attr = getattr(value, item.name)
            if attr is None:
                continue
            element.append(_build_element(wire_name(item), attr))
    elif isinstance(value, Mapping):
        for key, item in value.items():
            if item is None:
                continue
            element.append(_build_element(str(key), item))
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            item_tag = xml_root_name(type(item)) if _is_instance(item) else "item"
            element.append(_build_element(item_tag, item))
    else:
        element.text = _scalar_text(value)
    return element


def encode_json(entity: Any) -> bytes:
    return json.dumps(to_primitive(entity), ensure_ascii=False).encode("utf-8")


def encode_xml(entity: Any) -> bytes:
    if not _is_instance(entity):
        raise SerializationError(
            f"XML body requires a dataclass instance, got {type(entity).__name__}"
        )
    root = _build_element(xml_root_name(type(entity)), entity)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def encode_entity(entity: Any, content_type: ContentType) -> bytes:
    if isinstance(entity, (bytes, bytearray)):
        return bytes(entity)
    if isinstance(entity, str):
        return entity.encode("utf-8")
    if content_type is ContentType.JSON:
        return encode_json(entity)
    return encode_xml(entity)


# -- decoding ---------------------------------------------------------------


def _coerce_scalar(value: Any, tp: Any) -> Any:
    if not isinstance(tp, type):
        return value
    try:
        if tp is bool:
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in ("true", "1"):
                return True
            if text in ("false", "0"):
                return False
            raise ValueError(f"not a boolean: {value!r}")
        if issubclass(tp, Enum):
            return _coerce_enum(value, tp)
        if tp is int:
            return int(value)
        if tp is float:
            return float(value)
        if tp is Decimal:
            return Decimal(str(value))
        if tp is datetime:
            return value if isinstance(value, datetime) else _parse_datetime(str(value))
        if tp is date:
            if isinstance(value, date):
                return value
            text = str(value)
            return _parse_datetime(text).date() if "T" in text else date.fromisoformat(text)
        if tp is time:
            return value if isinstance(value, time) else time.fromisoformat(str(value))
        if tp is timedelta:
            return value if isinstance(value, timedelta) else timedelta(seconds=float(value))
        if tp is str:
            return value if isinstance(value, str) else str(value)
        if tp is bytes:
            return base64.b64decode(value)
    except (ValueError, TypeError, InvalidOperation) as exc:
        raise SerializationError(f"cannot convert {value!r} to {tp.__name__}") from exc
    return value


def _coerce_enum(value: Any, tp: type[Enum]) -> Enum:
    if isinstance(value, tp):
        return value
    try:
        return tp(value)
    except ValueError:
        if not isinstance(value, str):
            raise
    if value in tp.__members__:
        return tp[value]
    return tp(int(value))


def _parse_datetime(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _sequence_item_type(tp: Any) -> Any:
    args = get_args(tp)
    return args[0] if args else Any


def _finish_sequence(tp: Any, items: list[Any]) -> Any:
    origin = get_origin(tp) or tp
    if origin is tuple:
        return tuple(items)
    if origin in (set, frozenset):
        return origin(items)
    return items


def _dataclass_kwargs(cls: type, lookup: Any) -> dict[str, Any]:
    hints = resolve_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for item in fields(cls):
        if not item.init:
            continue
        found, raw = lookup(item)
        if found:
            kwargs[item.name] = raw(hints.get(item.name, Any))
        elif item.default is MISSING and item.default_factory is MISSING:
            kwargs[item.name] = None
    return kwargs


def from_primitive(value: Any, tp: Any) -> Any:
    """Build a value of type ``tp`` from decoded JSON builtins."""

    if tp is Any or tp is object or tp is None or isinstance(tp, str):
        return value
    tp, _ = unwrap_optional(tp)
    if value is None:
        return None
    origin = get_origin(tp)
    if origin in _SEQUENCE_ORIGINS or tp in _SEQUENCE_ORIGINS:
        if not isinstance(value, list):
            value = [value]
        item_type = _sequence_item_type(tp)
        return _finish_sequence(tp, [from_primitive(item, item_type) for item in value])
    if origin is dict or origin is Mapping or tp is dict:
        args = get_args(tp)
        value_type = args[1] if len(args) == 2 else Any
        if not isinstance(value, Mapping):
            raise SerializationError(f"expected an object for {tp}")
        return {key: from_primitive(item, value_type) for key, item in value.items()}
    if isinstance(tp, type) and is_dataclass(tp):
        if not isinstance(value, Mapping):
            raise SerializationError(f"expected an object for {tp.__name__}")

        def lookup(item: Any) -> tuple[bool, Any]:
            for key in (wire_name(item), item.name):
                if key in value:
                    return True, lambda hint, key=key: from_primitive(value[key], hint)
            return False, None

        return tp(**_dataclass_kwargs(tp, lookup))
    return _coerce_scalar(value, tp)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def element_to_primitive(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        return element.text
    out: dict[str, Any] = {}
    for child in children:
        key = _local_name(child.tag)
        value = element_to_primitive(child)
        if key in out:
            existing = out[key]
            if not isinstance(existing, list):
                out[key] = [existing]
            out[key].append(value)
        else:
            out[key] = value
    return out


def from_element(element: ET.Element, tp: Any) -> Any:
    """Build a value of type ``tp`` from a parsed XML element."""

    if tp is Any or tp is object or tp is None or isinstance(tp, str):
        return element_to_primitive(element)
    tp, _ = unwrap_optional(tp)
    origin = get_origin(tp)
    if origin in _SEQUENCE_ORIGINS or tp in _SEQUENCE_ORIGINS:
        item_type = _sequence_item_type(tp)
        children = list(element)
        if isinstance(item_type, type) and is_dataclass(item_type):
            expected = xml_root_name(item_type)
            matching = [child for child in children if _local_name(child.tag) == expected]
            if matching:
                children = matching
        return _finish_sequence(tp, [from_element(child, item_type) for child in children])
    if origin is dict or origin is Mapping or tp is dict:
        args = get_args(tp)
        value_type = args[1] if len(args) == 2 else Any
        out: dict[str, Any] = {}
        for child in element:
            out[_local_name(child.tag)] = from_element(child, value_type)
        return out
    if isinstance(tp, type) and is_dataclass(tp):
        by_name: dict[str, ET.Element] = {}
        for child in element:
            by_name.setdefault(_local_name(child.tag), child)

        def lookup(item: Any) -> tuple[bool, Any]:
            for key in (wire_name(item), item.name):
                if key in by_name:
                    return True, lambda hint, key=key: from_element(by_name[key], hint)
                if key in element.attrib:
                    return True, lambda hint, key=key: _coerce_scalar(element.attrib[key], unwrap_optional(hint)[0])
            return False, None

        return tp(**_dataclass_kwargs(tp, lookup))
    text = element.text or ""
    if tp is str:
        return text
    if text.strip() == "":
        return None
    return _coerce_scalar(text.strip(), tp)


def decode_body(content: bytes, content_type: ContentType, tp: Any) -> Any:
    """Decode a response body; an empty body decodes to ``None``."""

    if not content or not content.strip():
        return None
    if content_type is ContentType.JSON:
        try:
            payload = json.loads(content)
        except ValueError as exc:
            raise SerializationError("response body is not valid JSON") from exc
        return from_primitive(payload, tp)
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise SerializationError("response body is not valid XML") from exc
    return from_element(root, tp)


__all__ = [
    "API_FIELD_KEY",
    "api_field",
    "wire_name",
    "unwrap_optional",
    "resolve_type_hints",
    "xml_root_name",
    "to_primitive",
    "encode_json",
    "encode_xml",
    "encode_entity",
    "from_primitive",
    "from_element",
    "element_to_primitive",
    "decode_body",
]
