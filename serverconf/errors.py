from __future__ import annotations

from typing import Any, Dict, List, Optional


class ConfigError(Exception):
    """Fatal configuration error; aborts the load, reload or persist in progress."""

    code = "CONFIG_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details: Dict[str, Any] = details or {}

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"ok": False, "error": {"code": self.code, "message": self.message}}
        if self.details:
            payload["error"]["details"] = self.details
        return payload


class LegacyConfigError(ConfigError):
    code = "LEGACY_CONFIG_FOUND"

    def __init__(self, *, file_name: str) -> None:
        super().__init__(
            f"Legacy config file found. Please migrate '{file_name}' manually or delete it and run again.",
            details={"file_name": file_name},
        )
        self.file_name = file_name


class DocumentParseError(ConfigError):
    code = "DOCUMENT_PARSE_FAILED"


class UnknownDocumentError(ConfigError):
    code = "UNKNOWN_DOCUMENT"

    def __init__(self, *, document: str) -> None:
        super().__init__(
            f"Cannot find configuration document named {document} ({document}.xml)",
            details={"document": document},
        )
        self.document = document


class MissingVersionError(ConfigError):
    code = "VERSION_NOT_FOUND"

    def __init__(self, *, document: str, examples_dir: str) -> None:
        super().__init__(
            "Could not obtain version in your XML. "
            f"If you have upgraded, see {examples_dir}/{document}.xml",
            details={"document": document},
        )
        self.document = document


class UnsupportedVersionError(ConfigError):
    code = "VERSION_NOT_SUPPORTED"

    def __init__(
        self,
        *,
        document: str,
        version: int,
        latest_version: int,
        migration_notes: List[str],
        message: str,
    ) -> None:
        super().__init__(
            message,
            details={
                "document": document,
                "version": version,
                "latest_version": latest_version,
            },
        )
        self.document = document
        self.version = version
        self.latest_version = latest_version
        self.migration_notes = migration_notes
