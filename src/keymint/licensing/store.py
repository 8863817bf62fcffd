"""License store — batch insert and read access to the licenses table."""

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from keymint.common.exceptions import StoreUnavailableError, UniquenessViolationError
from keymint.licensing.models import LicenseModel


class LicenseStore:
    """Persistence operations for license records."""

    async def insert_batch(
        self, session: AsyncSession, rows: list[dict]
    ) -> list[LicenseModel]:
        """Insert all rows in the caller's transaction and return them as committed.

        Raises UniquenessViolationError if any key already exists (or repeats
        within the batch), StoreUnavailableError on any other database failure.
        The caller's transaction must be rolled back on either.
        """
        licenses = [
            LicenseModel(key=row["key"], is_used=row.get("is_used", False))
            for row in rows
        ]
        session.add_all(licenses)
        try:
            await session.flush()
        except IntegrityError as exc:
            raise UniquenessViolationError() from exc
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Batch insert failed: {exc.__class__.__name__}") from exc
        return licenses

    async def get_by_key(
        self, session: AsyncSession, key: str
    ) -> LicenseModel | None:
        result = await session.execute(
            select(LicenseModel).where(LicenseModel.key == key)
        )
        return result.scalar_one_or_none()

    async def count_licenses(
        self, session: AsyncSession, is_used: bool | None = None
    ) -> int:
        query = select(func.count()).select_from(LicenseModel)
        if is_used is not None:
            query = query.where(LicenseModel.is_used == is_used)
        result = await session.execute(query)
        return result.scalar_one()

    async def list_licenses(
        self,
        session: AsyncSession,
        is_used: bool | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[LicenseModel], int]:
        """List licenses newest first. Returns (items, total_count)."""
        query = select(LicenseModel)
        if is_used is not None:
            query = query.where(LicenseModel.is_used == is_used)
        total = await self.count_licenses(session, is_used=is_used)
        result = await session.execute(
            query.order_by(LicenseModel.created_at.desc(), LicenseModel.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total
