class CdcAuditError(Exception):
    """Base class for errors that abort a generation run."""


class FilesystemError(CdcAuditError):
    """The output directory or an artifact file could not be managed."""


class CatalogQueryError(CdcAuditError):
    """Reading table or trigger metadata from the server failed."""


class UnsupportedColumnKind(CdcAuditError):
    """Column metadata is missing a name or a type."""


class MalformedTriggerBody(CdcAuditError):
    """
    An existing trigger's action statement is not wrapped in BEGIN ... END.

    Never raised out of the merger: the trigger is still dropped, its custom
    action is just not carried over.
    """


class ConfigurationError(CdcAuditError):
    """The options would name audit tables exactly like their source tables."""
