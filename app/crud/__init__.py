# Import individual CRUD modules so they can be accessed via the package
from . import crud_booking # noqa
from . import crud_audit_log # noqa
from . import crud_settings # noqa
from . import crud_fleet # noqa
from .crud_bay import crud_bay # Make the bay CRUD instance directly available on crud package

__all__ = [
    "crud_booking",
    "crud_audit_log",
    "crud_settings",
    "crud_fleet",
    "crud_bay",
]
