"""
Generates audit tables and change-capturing triggers for a MySQL database.
"""

from .config import AuditConfig
from .errors import (
    CatalogQueryError,
    CdcAuditError,
    ConfigurationError,
    FilesystemError,
    MalformedTriggerBody,
    UnsupportedColumnKind,
)
from .generator import generate, render_artifact, run
from .schema import ExistingTrigger, SourceColumn, SourceTable

__all__ = (
    "AuditConfig",
    "CatalogQueryError",
    "CdcAuditError",
    "ConfigurationError",
    "ExistingTrigger",
    "FilesystemError",
    "MalformedTriggerBody",
    "SourceColumn",
    "SourceTable",
    "UnsupportedColumnKind",
    "generate",
    "render_artifact",
    "run",
)
