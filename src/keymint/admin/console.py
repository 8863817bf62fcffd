"""
Admin console — composes the identity provider, AdminGate and LicenseIssuer.

The console owns the one "current principal" value. Every session change
delivered by the identity provider produces a fresh immutable ConsoleState;
a change of user_id re-runs the gate, and issuance is only allowed while the
state holds an Authorized verdict for the current principal.
"""

from dataclasses import dataclass

from keymint.admin.gate import AdminGate, Authorized, Denied, Verdict
from keymint.common.logging import get_logger
from keymint.identity.provider import IdentityProvider, Unsubscribe
from keymint.identity.session import Principal, Session
from keymint.licensing.issuer import IssueResult, LicenseIssuer

logger = get_logger("admin.console")


@dataclass(frozen=True)
class ConsoleState:
    principal: Principal | None = None
    verdict: Verdict | None = None

    @property
    def is_admin(self) -> bool:
        return (
            isinstance(self.verdict, Authorized)
            and self.principal is not None
            and self.verdict.principal.user_id == self.principal.user_id
        )


class AdminConsole:
    def __init__(
        self,
        provider: IdentityProvider,
        gate: AdminGate,
        issuer: LicenseIssuer,
    ):
        self.provider = provider
        self.gate = gate
        self.issuer = issuer
        self.state = ConsoleState()
        self.last_denial: Denied | None = None
        self._unsubscribe: Unsubscribe | None = None

    async def start(self) -> ConsoleState:
        """Subscribe to session changes and evaluate the current session."""
        if self._unsubscribe is None:
            self._unsubscribe = self.provider.on_session_change(self.handle_session_change)
        await self.handle_session_change(await self.provider.get_current_session())
        return self.state

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def handle_session_change(self, session: Session | None) -> None:
        if session is None:
            self.state = ConsoleState()
            return

        principal = session.principal
        current = self.state.principal
        if current is not None and current.user_id == principal.user_id:
            return

        # Drop any verdict held for the previous principal before awaiting.
        self.state = ConsoleState(principal=principal)
        verdict = await self.gate.authorize(principal)

        if self.state.principal is None or self.state.principal.user_id != principal.user_id:
            # Superseded by a later session change while the gate was running.
            return

        if isinstance(verdict, Denied):
            self.last_denial = verdict
            self.state = ConsoleState(verdict=verdict)
            if verdict.terminate_session:
                logger.info("Signing out non-admin principal %s", principal.user_id)
                await self.provider.sign_out()
            return

        self.last_denial = None
        self.state = ConsoleState(principal=principal, verdict=verdict)

    async def issue(self, count: int) -> IssueResult:
        """Issue a batch, provided the current principal is an authorized admin."""
        if not self.state.is_admin:
            return IssueResult(False, "ACCESS_DENIED", "Administrator access required")
        return await self.issuer.issue(count)
