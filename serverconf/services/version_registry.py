"""
Supported schema versions of the configuration documents.

Each document kind maps to the ordered tuple of versions the server can load.
Ranges are extended by appending a version here together with the migration
notes describing what changed at that boundary.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple, Union

from ..config import config
from ..errors import MissingVersionError, UnknownDocumentError, UnsupportedVersionError


class DocumentKind(str, Enum):
    SERVER = "Server"
    LOGGER = "Logger"


SUPPORTED_VERSIONS: Dict[DocumentKind, Tuple[int, ...]] = {
    DocumentKind.SERVER: (8, 9),
    DocumentKind.LOGGER: (2,),
}

# Keyed by the version the notes upgrade *from*; a document at version v gets
# every block whose threshold is >= v.
MIGRATION_NOTES: Dict[DocumentKind, Dict[int, Tuple[str, ...]]] = {
    DocumentKind.SERVER: {
        7: (
            "Major Changes (v7 -> v8):",
            " - Added <Server>.<Bind>.<Managers>.<API> for setting API binding port",
            " - Added <Server>.<API> for setting API server",
            " - Added <Server>.<VirtualHosts>.<VirtualHost>.<Applications>.<Application>.<OutputProfiles>",
            " - Changed <Server>.<VirtualHosts>.<VirtualHost>.<Domain> to <Host>",
            " - Changed <CrossDomain> to <CrossDomains>",
            " - Deleted <Server>.<VirtualHosts>.<VirtualHost>.<Applications>.<Application>.<Streams>",
            " - Deleted <Server>.<VirtualHosts>.<VirtualHost>.<Applications>.<Application>.<Encodes>",
        ),
        8: (
            "Major Changes (v8 -> v9):",
            " - Added <Server>.<Bind>.<Managers>.<API>.<Storage> to store configs created using API",
        ),
    },
    DocumentKind.LOGGER: {},
}


def resolve_document_kind(name: Union[str, DocumentKind]) -> DocumentKind:
    if isinstance(name, DocumentKind):
        return name
    try:
        return DocumentKind(name)
    except ValueError:
        raise UnknownDocumentError(document=str(name)) from None


def supported_versions(kind: DocumentKind) -> Tuple[int, ...]:
    return SUPPORTED_VERSIONS[kind]


def latest_version(kind: DocumentKind) -> int:
    return max(SUPPORTED_VERSIONS[kind])


def migration_notes_since(kind: DocumentKind, version: int) -> List[str]:
    """Note blocks for every threshold >= version, ascending."""
    notes = MIGRATION_NOTES.get(kind, {})
    return ["\n".join(notes[threshold]) for threshold in sorted(notes) if threshold >= version]


def parse_version(raw: object) -> int:
    """Version attribute text to int; missing or non-numeric yields 0."""
    if raw is None:
        return 0
    try:
        return int(str(raw).strip())
    except ValueError:
        return 0


def check_valid_version(name: Union[str, DocumentKind], version: int) -> None:
    kind = resolve_document_kind(name)
    examples_dir = config.SYSTEM.CONF_EXAMPLES_DIR

    if version == 0:
        raise MissingVersionError(document=kind.value, examples_dir=examples_dir)

    if version in supported_versions(kind):
        return

    latest = latest_version(kind)
    notes = migration_notes_since(kind, version)
    state = "outdated" if version < latest else "not supported"
    lines = [
        f"The version of {kind.value}.xml is {state} "
        f"(Your XML version: {version}, Latest version: {latest}).",
        f"If you have upgraded, see {examples_dir}/{kind.value}.xml",
    ]
    lines.extend(notes)
    raise UnsupportedVersionError(
        document=kind.value,
        version=version,
        latest_version=latest,
        migration_notes=notes,
        message="\n".join(lines),
    )
