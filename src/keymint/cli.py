"""Typer CLI for Keymint."""

import asyncio

import typer
from rich.console import Console

app = typer.Typer(name="keymint", help="Keymint: license key batch issuer")
console = Console()


async def _open_db():
    from keymint.deps import get_db

    db = get_db()
    await db.init()
    await db.create_all()
    return db


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(8080, help="Bind port"),
):
    """Start the Keymint API server."""
    import uvicorn
    from keymint.app import create_app

    console.print(f"[bold green]Starting Keymint on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


@app.command("init-db")
def init_db():
    """Create all tables in the configured database."""

    async def _run():
        db = await _open_db()
        await db.close()

    asyncio.run(_run())
    console.print("[bold green]Database ready[/bold green]")


@app.command()
def generate(
    count: int = typer.Option(1, min=1, help="Number of keys to print"),
):
    """Generate license keys (offline, not registered in the store)."""
    from keymint.keygen.generator import generate_keys

    for key in generate_keys(count):
        console.print(f"[bold]{key}[/bold]")


@app.command()
def validate(
    key: str = typer.Argument(..., help="License key to validate"),
):
    """Validate a license key's format offline."""
    from keymint.keygen.validator import normalize_key, validate_format

    result = validate_format(normalize_key(key))
    if result.valid:
        console.print(f"[bold green]VALID[/bold green] — {result.message}")
    else:
        console.print(f"[bold red]{result.code}[/bold red] — {result.message}")
        raise typer.Exit(1)


@app.command("create-operator")
def create_operator(
    email: str = typer.Argument(..., help="Operator email"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    """Register an operator account."""
    from keymint.common.exceptions import OperatorExistsError
    from keymint.deps import get_operator_service

    async def _run():
        db = await _open_db()
        try:
            async with db.get_session() as session:
                operator = await get_operator_service().create_operator(session, email, password)
                return operator.id
        finally:
            await db.close()

    try:
        operator_id = asyncio.run(_run())
    except OperatorExistsError as e:
        console.print(f"[bold red]Error:[/bold red] {e.message}")
        raise typer.Exit(1)
    console.print(f"[bold green]Created operator[/bold green] {email} ({operator_id})")


def _set_admin(email: str, grant: bool) -> bool:
    from keymint.common.exceptions import OperatorNotFoundError
    from keymint.deps import get_admin_service, get_operator_service

    async def _run():
        db = await _open_db()
        try:
            async with db.get_session() as session:
                operator = await get_operator_service().get_by_email(session, email)
                if operator is None:
                    raise OperatorNotFoundError(f"No operator with email '{email}'")
                admins = get_admin_service()
                if grant:
                    await admins.grant(session, operator.id)
                    return True
                return await admins.revoke(session, operator.id)
        finally:
            await db.close()

    try:
        return asyncio.run(_run())
    except OperatorNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e.message}")
        raise typer.Exit(1)


@app.command("grant-admin")
def grant_admin(email: str = typer.Argument(..., help="Operator email")):
    """Give an operator administrator access."""
    _set_admin(email, grant=True)
    console.print(f"[bold green]{email} is now an administrator[/bold green]")


@app.command("revoke-admin")
def revoke_admin(email: str = typer.Argument(..., help="Operator email")):
    """Remove an operator's administrator access."""
    if _set_admin(email, grant=False):
        console.print(f"[bold green]Revoked administrator access for {email}[/bold green]")
    else:
        console.print(f"[yellow]{email} was not an administrator[/yellow]")


@app.command()
def issue(
    email: str = typer.Option(..., help="Operator email"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    count: int = typer.Option(10, help="Number of keys to issue (1-100)"),
):
    """Sign in as an administrator and issue a batch of license keys."""
    from keymint.admin.console import AdminConsole
    from keymint.common.config import get_settings
    from keymint.common.exceptions import InvalidCredentialsError
    from keymint.common.logging import setup_logging
    from keymint.deps import get_admin_gate, get_license_issuer
    from keymint.identity.provider import LocalIdentityProvider

    setup_logging(get_settings().log_level)

    async def _run():
        db = await _open_db()
        provider = LocalIdentityProvider(db)
        admin_console = AdminConsole(provider, get_admin_gate(), get_license_issuer())
        try:
            await admin_console.start()
            await provider.sign_in_with_password(email, password)
            if admin_console.last_denial is not None:
                return None, admin_console.last_denial
            return await admin_console.issue(count), None
        finally:
            admin_console.close()
            await db.close()

    try:
        result, denial = asyncio.run(_run())
    except InvalidCredentialsError as e:
        console.print(f"[bold red]Error:[/bold red] {e.message}")
        raise typer.Exit(1)

    if denial is not None:
        console.print(f"[bold red]ACCESS DENIED[/bold red] — {denial.message}")
        raise typer.Exit(1)
    if not result.success:
        hint = " — try again" if result.retryable else ""
        console.print(f"[bold red]{result.code}[/bold red] — {result.message}{hint}")
        raise typer.Exit(1)

    for key in result.keys:
        console.print(key)
    console.print(f"[bold green]{result.message}[/bold green]")


@app.command()
def health(
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Check Keymint server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] — v{data['version']}")
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
