# Authorization Gate
"""Decide whether a caller may enrich a group's verse."""

import logging
from uuid import UUID

from fellowship_api.errors import AuthorizationError, ForbiddenError
from fellowship_api.services.membership_service import MembershipService

logger = logging.getLogger("fellowship.services.authorization")


class AuthorizationGate:
    """
    Group members and admins of the group's organization are allowed.

    A failing membership/admin lookup is fatal (AuthorizationError) and is
    never read as "not authorized".
    """

    def __init__(self, membership: MembershipService):
        self.membership = membership

    async def authorize(self, caller_id: UUID, group_id: UUID) -> bool:
        """
        Check access and raise when it is denied.

        Returns:
            True when the caller is allowed

        Raises:
            ForbiddenError: Caller is neither member nor admin
            AuthorizationError: A lookup failed
        """
        try:
            is_member = await self.membership.is_group_member(group_id, caller_id)
            is_admin = await self.membership.is_org_admin_for_group(group_id, caller_id)
        except Exception as e:
            logger.error(f"Access check failed for user {caller_id} on group {group_id}: {e}")
            raise AuthorizationError("Unable to verify group access", detail=str(e)) from e

        if not (is_member or is_admin):
            logger.warning(f"User {caller_id} denied access to group {group_id}")
            raise ForbiddenError("Forbidden: not a group member or admin")
        return True
