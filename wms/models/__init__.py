"""
Models package.

Importing the modules registers every table on Base.metadata, which both
Alembic and the dev-only create_all at startup rely on.
"""

from __future__ import annotations

# imported for the side effect of registering tables
from wms.models import organization  # noqa: F401
from wms.models import inventory  # noqa: F401
from wms.models import charge  # noqa: F401
