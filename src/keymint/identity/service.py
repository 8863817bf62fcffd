"""Operator account service."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from keymint.common.exceptions import InvalidCredentialsError, OperatorExistsError
from keymint.identity.models import OperatorModel
from keymint.identity.passwords import hash_password, verify_password


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class OperatorService:
    """Operator registration and password authentication."""

    async def create_operator(
        self, session: AsyncSession, email: str, password: str
    ) -> OperatorModel:
        email = _normalize_email(email)
        if await self.get_by_email(session, email) is not None:
            raise OperatorExistsError(f"Operator '{email}' already exists")
        operator = OperatorModel(email=email, password_hash=hash_password(password))
        session.add(operator)
        await session.flush()
        return operator

    async def get_by_email(
        self, session: AsyncSession, email: str
    ) -> OperatorModel | None:
        result = await session.execute(
            select(OperatorModel).where(OperatorModel.email == _normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def authenticate(
        self, session: AsyncSession, email: str, password: str
    ) -> OperatorModel:
        """Return the operator for valid credentials, else raise InvalidCredentialsError."""
        operator = await self.get_by_email(session, email)
        if operator is None or not verify_password(password, operator.password_hash):
            raise InvalidCredentialsError()
        return operator
