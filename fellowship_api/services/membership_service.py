# Membership Service
"""
Wrappers around the fellowship database's access-control SQL functions.

The functions live in the main application's schema:
    - fn_is_group_member(p_group_id, p_user_id) -> boolean
    - fn_group_org(p_group_id) -> uuid
    - fn_is_org_admin(p_org_id, p_user_id) -> boolean

Errors are not caught here; the authorization gate decides how to treat them.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import text

from fellowship_api.database.session import DatabaseService


class MembershipService:
    def __init__(self, database: DatabaseService):
        self.database = database

    async def is_group_member(self, group_id: UUID, user_id: UUID) -> bool:
        async with self.database.get_session() as session:
            result = await session.execute(
                text("SELECT fn_is_group_member(:p_group_id, :p_user_id)"),
                {"p_group_id": group_id, "p_user_id": user_id},
            )
            return bool(result.scalar())

    async def group_org(self, group_id: UUID) -> Optional[UUID]:
        async with self.database.get_session() as session:
            result = await session.execute(
                text("SELECT fn_group_org(:p_group_id)"),
                {"p_group_id": group_id},
            )
            return result.scalar()

    async def is_org_admin_for_group(self, group_id: UUID, user_id: UUID) -> bool:
        """True when ``user_id`` administers the organization owning the group."""
        org_id = await self.group_org(group_id)
        if org_id is None:
            return False
        async with self.database.get_session() as session:
            result = await session.execute(
                text("SELECT fn_is_org_admin(:p_org_id, :p_user_id)"),
                {"p_org_id": org_id, "p_user_id": user_id},
            )
            return bool(result.scalar())
