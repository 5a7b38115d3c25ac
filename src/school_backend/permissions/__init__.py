"""
Role based permission system: catalog, resolver, principal and entity handlers.
"""

from .catalog import RoleName
from .principal import Principal
from .resolver import resolve_permissions, resolve_effective_permissions
