"""Admin record lookup and out-of-band grant/revoke."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from keymint.admin.models import AdminModel


class AdminService:
    """Reads and maintains the admins table."""

    async def find_admin(
        self, session: AsyncSession, user_id: str
    ) -> AdminModel | None:
        result = await session.execute(
            select(AdminModel).where(AdminModel.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_admins(self, session: AsyncSession) -> list[AdminModel]:
        result = await session.execute(select(AdminModel).order_by(AdminModel.created_at))
        return list(result.scalars().all())

    async def grant(self, session: AsyncSession, user_id: str) -> AdminModel:
        """Create the admin record for user_id. Idempotent."""
        existing = await self.find_admin(session, user_id)
        if existing is not None:
            return existing
        admin = AdminModel(user_id=user_id)
        session.add(admin)
        await session.flush()
        return admin

    async def revoke(self, session: AsyncSession, user_id: str) -> bool:
        admin = await self.find_admin(session, user_id)
        if admin is None:
            return False
        await session.delete(admin)
        await session.flush()
        return True
