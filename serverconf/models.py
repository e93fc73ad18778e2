"""
Data Models for serverconf.

Pydantic models for the parsed Logger document and for the admin API
responses. The Server document stays an XML tree (see
`serverconf.services.documents`) because its schema is owned by the server
items, not by this package.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class LoggerTag(BaseModel):
    """One <Tag name=".." level=".."/> entry of Logger.xml."""
    name: str = ""
    level: str = ""


class LoggerDocument(BaseModel):
    """Parsed Logger.xml."""
    version: Optional[str] = None   # Raw version attribute text
    log_path: Optional[str] = None  # <Path>, None when absent
    tags: List[LoggerTag] = Field(default_factory=list)


class ConfigReloadResponse(BaseModel):
    ok: bool = True
    config_path: str
    server_id: str


class ConfigPersistResponse(BaseModel):
    ok: bool = True
    path: str


class ServerIdResponse(BaseModel):
    server_id: str
