"""
Parsing and rendering of the XML configuration documents.

Only what the configuration manager needs is interpreted here: the root
element name, the `version` attribute and, for Logger.xml, the log path and
tag levels. Everything else in Server.xml is kept as an opaque tree.
"""

from __future__ import annotations

import copy
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..errors import DocumentParseError
from ..models import LoggerDocument, LoggerTag
from .version_registry import DocumentKind, parse_version


SERVER_ID_ELEMENT = "ID"


def parse_xml_root(path: Union[str, Path], root_name: str) -> ET.Element:
    try:
        tree = ET.parse(str(path))
    except FileNotFoundError:
        raise DocumentParseError(
            f"Could not find configuration file: {path}",
            details={"path": str(path)},
        ) from None
    except (ET.ParseError, OSError) as exc:
        raise DocumentParseError(
            f"Could not parse configuration file: {path} ({exc})",
            details={"path": str(path)},
        ) from exc

    root = tree.getroot()
    if root.tag != root_name:
        raise DocumentParseError(
            f"Unexpected root element <{root.tag}> in {path}, expected <{root_name}>",
            details={"path": str(path), "root": root.tag},
        )
    return root


class ServerDocument:
    """In-memory Server.xml tree plus the resolved server id."""

    def __init__(self, root: ET.Element, source: Optional[Path] = None) -> None:
        self.root = root
        self.source = source
        self.server_id: Optional[str] = None

    @property
    def version_text(self) -> Optional[str]:
        return self.root.get("version")

    @property
    def version(self) -> int:
        return parse_version(self.version_text)

    def to_xml(self) -> ET.Element:
        """Detached copy of the tree with the server id as an <ID> child."""
        root = copy.deepcopy(self.root)
        if self.server_id is not None:
            id_element = root.find(SERVER_ID_ELEMENT)
            if id_element is None:
                id_element = ET.Element(SERVER_ID_ELEMENT)
                root.insert(0, id_element)
            id_element.text = self.server_id
        return root

    def to_json(self) -> Dict[str, Any]:
        payload = element_to_json(self.root)
        if not isinstance(payload, dict):
            payload = {"value": payload} if payload else {}
        if self.server_id is not None:
            payload["id"] = self.server_id
        return payload


def parse_server_document(path: Union[str, Path]) -> ServerDocument:
    root = parse_xml_root(path, DocumentKind.SERVER.value)
    return ServerDocument(root, source=Path(path))


def parse_logger_document(path: Union[str, Path]) -> LoggerDocument:
    root = parse_xml_root(path, DocumentKind.LOGGER.value)
    log_path = root.findtext("Path")
    if log_path is not None:
        log_path = log_path.strip() or None
    tags = [
        LoggerTag(name=(tag.get("name") or "").strip(), level=(tag.get("level") or "").strip())
        for tag in root.findall("Tag")
    ]
    return LoggerDocument(version=root.get("version"), log_path=log_path, tags=tags)


def _json_key(name: str) -> str:
    if not name:
        return name
    if name.isupper():
        return name.lower()
    return name[0].lower() + name[1:]


def element_to_json(element: ET.Element) -> Any:
    """
    Convert an element to plain JSON data.

    Leaf elements become their text; attributes and children become keys
    (lower camel case); repeated children become lists.
    """
    children = [child for child in element if isinstance(child.tag, str)]
    text = (element.text or "").strip()
    if not children and not element.attrib:
        return text

    result: Dict[str, Any] = {}
    for key, value in element.attrib.items():
        result[_json_key(key)] = value
    for child in children:
        key = _json_key(child.tag)
        value = element_to_json(child)
        if key not in result:
            result[key] = value
        elif isinstance(result[key], list):
            result[key].append(value)
        else:
            result[key] = [result[key], value]
    if text and not children:
        result["value"] = text
    return result


def render_xml(element: ET.Element) -> str:
    element = copy.deepcopy(element)
    ET.indent(element, space="\t")
    return ET.tostring(element, encoding="unicode")
