"""
Identity provider contract and the bundled in-process implementation.

The admin core only relies on the ``IdentityProvider`` protocol:
current session lookup, sign-out, and a session-change subscription.
"""

from typing import Awaitable, Callable, Protocol

from keymint.common.database import DatabaseManager
from keymint.common.logging import get_logger
from keymint.identity.service import OperatorService
from keymint.identity.session import Principal, Session, create_session_token

logger = get_logger("identity")

SessionCallback = Callable[[Session | None], Awaitable[None]]
Unsubscribe = Callable[[], None]


class IdentityProvider(Protocol):
    async def get_current_session(self) -> Session | None: ...

    async def sign_out(self) -> None: ...

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe: ...


class LocalIdentityProvider:
    """Email/password identity provider backed by the operators table.

    Holds one current session for the process (the CLI operator) and notifies
    subscribers each time it changes, including on sign-out.
    """

    def __init__(self, db: DatabaseManager, operators: OperatorService | None = None):
        self.db = db
        self.operators = operators or OperatorService()
        self._session: Session | None = None
        self._subscribers: list[SessionCallback] = []

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        """Authenticate and make the result the current session.

        Raises InvalidCredentialsError on a bad email/password pair.
        """
        async with self.db.get_session() as db_session:
            operator = await self.operators.authenticate(db_session, email, password)
            principal = Principal(user_id=operator.id, email=operator.email)
        session = Session(principal=principal, access_token=create_session_token(principal))
        logger.info("Operator signed in: %s", principal.user_id)
        await self._set_session(session)
        return session

    async def get_current_session(self) -> Session | None:
        return self._session

    async def sign_out(self) -> None:
        if self._session is not None:
            logger.info("Operator signed out: %s", self._session.principal.user_id)
        await self._set_session(None)

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def _set_session(self, session: Session | None) -> None:
        self._session = session
        for callback in list(self._subscribers):
            # A callback may have replaced the session; the newer delivery already went out.
            if self._session is not session:
                break
            await callback(session)
