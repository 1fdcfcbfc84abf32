"""
Core dependencies for route protection and church access checks.

The caller's access to a church is resolved once per request and cached on
request.state; routes receive it as a ChurchAccess and never re-query
ownership or membership themselves.
"""

from dataclasses import dataclass, field
from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from churchecker.config.roles_config import ROLE_ADMIN, capabilities_for
from churchecker.core.db_utils import first_row
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.auth.service import AuthService
from supabase import Client
from typing import Any, Dict, FrozenSet, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for church access (keyed by church_id)."""
    if not hasattr(request.state, "church_access"):
        request.state.church_access = {}
    return request.state.church_access


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the current user from the JWT token"""
    return auth_service.get_current_user(token)


def is_church_admin(owner_id: Optional[str], membership_role: Optional[str], user_id: str) -> bool:
    """Owner of the church, or holder of an admin membership"""
    return owner_id == user_id or membership_role == ROLE_ADMIN


@dataclass(frozen=True)
class ChurchAccess:
    church: Dict[str, Any]
    user_id: str
    role: Optional[str] = None  # membership role; None when the caller has no membership row
    user: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def church_id(self) -> str:
        return self.church["id"]

    @property
    def is_owner(self) -> bool:
        return self.church.get("owner_id") == self.user_id

    @property
    def is_admin(self) -> bool:
        return is_church_admin(self.church.get("owner_id"), self.role, self.user_id)

    @property
    def is_member(self) -> bool:
        return self.is_owner or self.role is not None

    @property
    def effective_role(self) -> Optional[str]:
        if self.is_admin:
            return ROLE_ADMIN
        return self.role

    @property
    def capabilities(self) -> FrozenSet[str]:
        return capabilities_for(self.effective_role)

    def can(self, capability: str) -> bool:
        return capability in self.capabilities


def resolve_church_access(
    church_id: str,
    user_data: dict,
    supabase: Client,
    cache: Optional[Dict[str, Any]] = None
) -> ChurchAccess:
    """Load the church and the caller's membership once. Missing church is 404."""
    if cache is not None and church_id in cache:
        return cache[church_id]
    try:
        church = first_row(
            supabase.table("churches")
            .select("*")
            .eq("id", church_id)
            .limit(1)
            .execute()
        )
        membership = None
        if church:
            membership = first_row(
                supabase.table("church_members")
                .select("role")
                .eq("church_id", church_id)
                .eq("user_id", user_data["id"])
                .limit(1)
                .execute()
            )
    except Exception as e:
        logger.error(f"Error resolving access to church {church_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load church"
        )
    if not church:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Church not found"
        )
    access = ChurchAccess(
        church=church,
        user_id=user_data["id"],
        role=membership["role"] if membership else None,
        user=user_data,
    )
    if cache is not None:
        cache[church_id] = access
    return access


def get_church_access(
    church_id: str,
    request: Request,
    user_data: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase)
) -> ChurchAccess:
    return resolve_church_access(church_id, user_data, supabase, _get_request_cache(request))


def require_church_member(access: ChurchAccess = Depends(get_church_access)) -> ChurchAccess:
    """Dependency: caller owns the church or has any membership in it"""
    if not access.is_member:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must be a member of this church"
        )
    return access


def require_church_admin(access: ChurchAccess = Depends(require_church_member)) -> ChurchAccess:
    """Dependency: caller owns the church or is an admin member"""
    if not access.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must be a church owner or admin to perform this action"
        )
    return access


def require_church_capability(capability: str):
    """Factory function to create a capability check dependency"""
    def check_capability(access: ChurchAccess = Depends(require_church_member)) -> ChurchAccess:
        if not access.can(capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {capability}"
            )
        return access
    return check_capability
