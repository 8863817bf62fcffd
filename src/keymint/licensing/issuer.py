"""
Batch license issuance.

One call generates ``count`` fresh keys and commits them in a single
transaction. The licenses table's unique constraint is the only guard against
collisions, including between concurrent batches: any collision rolls the
whole batch back. Failures are returned as results, never raised, and are
never retried here.
"""

from dataclasses import dataclass, field
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from keymint.common.config import KeymintSettings
from keymint.common.database import DatabaseManager
from keymint.common.exceptions import (
    InvalidBatchSizeError,
    KeymintError,
    StoreUnavailableError,
)
from keymint.common.logging import get_logger
from keymint.keygen.generator import generate_key
from keymint.licensing.store import LicenseStore

logger = get_logger("licensing.issuer")

RETRYABLE_CODES = frozenset({"STORE_UNAVAILABLE", "UNIQUENESS_VIOLATION"})


@dataclass
class IssueResult:
    """Outcome of an issue() call."""

    success: bool
    code: str = ""
    message: str = ""
    keys: list[str] = field(default_factory=list)

    @property
    def retryable(self) -> bool:
        return self.code in RETRYABLE_CODES

    @classmethod
    def committed(cls, keys: list[str]) -> "IssueResult":
        return cls(True, "COMMITTED", f"Issued {len(keys)} license keys", keys)

    @classmethod
    def failed(cls, error: KeymintError) -> "IssueResult":
        return cls(False, error.code, error.message)


class LicenseIssuer:
    """Generates and registers batches of license keys."""

    def __init__(
        self,
        settings: KeymintSettings,
        db: DatabaseManager,
        store: LicenseStore | None = None,
        key_factory: Callable[[], str] = generate_key,
    ):
        self.settings = settings
        self.db = db
        self.store = store or LicenseStore()
        self.key_factory = key_factory

    def check_count(self, count) -> None:
        """Raise InvalidBatchSizeError unless 1 <= count <= max_batch_size."""
        limit = self.settings.max_batch_size
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidBatchSizeError(f"Count must be an integer, got {type(count).__name__}")
        if count < 1 or count > limit:
            raise InvalidBatchSizeError(f"Count must be between 1 and {limit}, got {count}")

    async def issue(self, count: int) -> IssueResult:
        try:
            self.check_count(count)
        except InvalidBatchSizeError as exc:
            return IssueResult.failed(exc)

        rows = [{"key": self.key_factory(), "is_used": False} for _ in range(count)]

        try:
            async with self.db.get_session() as session:
                committed = await self.store.insert_batch(session, rows)
                keys = [lic.key for lic in committed]
        except KeymintError as exc:
            logger.warning(
                "Batch of %d rejected by store: %s", count, exc.code,
                extra={"count": count, "code": exc.code},
            )
            return IssueResult.failed(exc)
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Batch of %d failed to commit: %s", count, exc, extra={"count": count})
            return IssueResult.failed(StoreUnavailableError())
        except Exception:
            logger.exception("Batch of %d failed", count, extra={"count": count})
            return IssueResult.failed(StoreUnavailableError())

        logger.info("Committed batch of %d license keys", len(keys), extra={"count": len(keys)})
        return IssueResult.committed(keys)
