"""
SalesRoles Core Metadata
------------------------
Project identity shared by the backend root endpoint and the console footer.
"""

from core.config import BACKEND_VERSION

__project__ = "SalesRoles"
__version__ = BACKEND_VERSION

CORE_METADATA = {
    "project": __project__,
    "version": __version__,
    "description": (
        "Sales team role and incentive management console: roles, products, "
        "role-product assignments and combined commission/bonus analysis."
    ),
}

def get_metadata() -> dict:
    """Return current system metadata as a dict."""
    return CORE_METADATA
