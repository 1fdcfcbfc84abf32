"""
Church Roles Configuration
Defines which capabilities each church membership role grants.
Used by the route dependencies in core/dependencies.py. Reading church data
only requires membership; capabilities gate every write.
"""

from typing import Dict, FrozenSet, Optional

ROLE_ADMIN = "admin"
ROLE_TEACHER = "teacher"
ROLE_MEMBER = "member"

MEMBERSHIP_ROLES = (ROLE_ADMIN, ROLE_TEACHER, ROLE_MEMBER)

# Display labels stored on comments (author_role_label)
ROLE_LABELS = {
    ROLE_ADMIN: "관리자",
    ROLE_TEACHER: "교사",
    ROLE_MEMBER: "멤버",
}

CAPABILITIES = {
    "church:manage": "Update or delete the church",
    "members:manage": "Change member roles and remove members",
    "invites:manage": "Create, list and revoke invite links",
    "people:write": "Register, edit and delete students and teachers",
    "attendance:check": "Check people in and cancel check-ins",
    "announcements:write": "Create, edit and delete announcements",
    "announcements:comment": "Comment on announcements",
    "prayers:write": "Create prayer requests and comments",
    "ledger:write": "Record offerings and expenses",
    "events:write": "Manage calendar events",
    "schedules:write": "Manage service-duty schedules",
}

ROLE_CAPABILITIES: Dict[str, FrozenSet[str]] = {
    ROLE_ADMIN: frozenset(CAPABILITIES),
    ROLE_TEACHER: frozenset({
        "people:write",
        "attendance:check",
        "announcements:comment",
        "prayers:write",
    }),
    ROLE_MEMBER: frozenset({
        "announcements:comment",
        "prayers:write",
    }),
}


def capabilities_for(role: Optional[str]) -> FrozenSet[str]:
    """Capabilities granted by a membership role (empty for non-members or unknown roles)"""
    if role is None:
        return frozenset()
    return ROLE_CAPABILITIES.get(role, frozenset())


def role_label(role: Optional[str]) -> str:
    return ROLE_LABELS.get(role or ROLE_MEMBER, ROLE_LABELS[ROLE_MEMBER])
