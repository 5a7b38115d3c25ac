from typing import Optional, Dict, List, Set
from pydantic import BaseModel, ConfigDict, model_validator, Field, PrivateAttr
from school_backend.api.exceptions import NotFoundException
from school_backend.permissions.catalog import RoleName, parse_role


class Principal(BaseModel):
    """Authenticated caller with its resolved permission names"""

    is_admin: bool = False
    user_id: Optional[str] = None
    role: Optional[str] = None

    permissions: Set[str] = Field(default_factory=set)

    # Cache for permission checks (using private attribute)
    _permission_cache: Dict[str, bool] = PrivateAttr(default_factory=dict)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @model_validator(mode='after')
    def set_is_admin_from_role(self):
        """Automatically set admin flag based on role"""
        if parse_role(self.role) == RoleName.admin:
            self.is_admin = True
        return self

    def get_user_id_or_throw(self) -> str:
        """Get user ID or raise exception"""
        if self.user_id is None:
            raise NotFoundException("User ID not found")
        return self.user_id

    def permitted(self, permission: str | List[str]) -> bool:
        """
        Capability check used everywhere a role used to be compared.

        Args:
            permission: A permission name (e.g. "read_classes") or a list of
                names of which any one suffices

        Returns:
            True if permission is granted, False otherwise
        """

        # Admin bypasses all checks
        if self.is_admin:
            return True

        if isinstance(permission, list):
            return any(self.permitted(p) for p in permission)

        if permission in self._permission_cache:
            return self._permission_cache[permission]

        result = permission in self.permissions
        self._permission_cache[permission] = result

        return result
