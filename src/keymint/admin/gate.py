"""
Admin authorization gate.

A principal is authorized iff an admin record exists for its user_id. Anything
that prevents confirming that (missing principal, absent record, failing
lookup) is a denial, and every denial instructs the caller to end the session.
"""

from dataclasses import dataclass

from keymint.admin.service import AdminService
from keymint.common.database import DatabaseManager
from keymint.common.logging import get_logger
from keymint.identity.session import Principal

logger = get_logger("admin.gate")


@dataclass(frozen=True)
class Authorized:
    principal: Principal

    allowed = True


@dataclass(frozen=True)
class Denied:
    code: str
    message: str = "Access denied. You are not an administrator."
    principal: Principal | None = None
    terminate_session: bool = True

    allowed = False


Verdict = Authorized | Denied


class AdminGate:
    """Checks the admins table on every call; verdicts are never cached."""

    def __init__(self, db: DatabaseManager, admins: AdminService | None = None):
        self.db = db
        self.admins = admins or AdminService()

    async def authorize(self, principal: Principal | None) -> Verdict:
        if principal is None or not principal.user_id:
            return Denied(code="NO_PRINCIPAL", message="No authenticated principal")

        try:
            async with self.db.get_session() as session:
                record = await self.admins.find_admin(session, principal.user_id)
        except Exception:
            logger.exception(
                "Admin lookup failed for %s", principal.user_id,
                extra={"user_id": principal.user_id},
            )
            return Denied(
                code="LOOKUP_FAILED",
                message="Could not confirm administrator access",
                principal=principal,
            )

        if record is None:
            logger.warning(
                "Admin access denied for %s", principal.user_id,
                extra={"user_id": principal.user_id, "code": "NOT_ADMIN"},
            )
            return Denied(code="NOT_ADMIN", principal=principal)

        return Authorized(principal)
