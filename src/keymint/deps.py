"""Dependency injection singletons for Keymint."""

from keymint.admin.gate import AdminGate
from keymint.admin.service import AdminService
from keymint.common.config import get_settings
from keymint.common.database import DatabaseManager
from keymint.identity.service import OperatorService
from keymint.licensing.issuer import LicenseIssuer
from keymint.licensing.store import LicenseStore

_db: DatabaseManager | None = None
_operators: OperatorService | None = None
_admins: AdminService | None = None
_gate: AdminGate | None = None
_store: LicenseStore | None = None
_issuer: LicenseIssuer | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_operator_service() -> OperatorService:
    global _operators
    if _operators is None:
        _operators = OperatorService()
    return _operators


def get_admin_service() -> AdminService:
    global _admins
    if _admins is None:
        _admins = AdminService()
    return _admins


def get_admin_gate() -> AdminGate:
    global _gate
    if _gate is None:
        _gate = AdminGate(get_db(), get_admin_service())
    return _gate


def get_license_store() -> LicenseStore:
    global _store
    if _store is None:
        _store = LicenseStore()
    return _store


def get_license_issuer() -> LicenseIssuer:
    global _issuer
    if _issuer is None:
        _issuer = LicenseIssuer(get_settings(), get_db(), store=get_license_store())
    return _issuer


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _operators, _admins, _gate, _store, _issuer
    _db = None
    _operators = None
    _admins = None
    _gate = None
    _store = None
    _issuer = None
