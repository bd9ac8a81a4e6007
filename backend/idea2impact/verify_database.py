"""Print how many registrations are stored and show the most recent ones."""

from typing import Optional

import typer

from idea2impact.core.config import settings
from idea2impact.core.errors import PersistenceError
from idea2impact.services.registration_store import RegistrationStore

RULE = "=" * 80

REPORT_FIELDS = (
    ("Email", "email"),
    ("Phone", "phone"),
    ("College", "college"),
    ("Year", "year"),
    ("Department", "department"),
    ("Team Size", "teamSize"),
    ("Registered", "createdAt"),
    ("Database ID", "id"),
)

app = typer.Typer(help="Registration database report")


def _print_registration(index: int, registration) -> None:
    data = registration.to_dict()
    typer.echo(f"\n{index}. {data['name']}")
    for label, key in REPORT_FIELDS:
        typer.echo(f"   {label}: {data[key]}")


@app.command()
def verify(
    database_url: Optional[str] = typer.Option(
        None, "--database-url", help="Defaults to DATABASE_URL"
    ),
    limit: int = typer.Option(5, min=1, help="How many recent registrations to show"),
) -> None:
    """Connect, report totals and the newest registrations, then disconnect."""
    store = RegistrationStore.from_url(database_url or settings.DATABASE_URL)
    typer.echo("🔍 Connecting to database...")

    try:
        store.ping()
        typer.echo("✅ Connected!\n")

        total = store.count()
        typer.echo(f"📊 Total Registrations: {total}\n")

        if total:
            typer.echo("📋 Recent Registrations:")
            typer.echo(RULE)
            for index, registration in enumerate(store.list_recent(limit), start=1):
                _print_registration(index, registration)
            typer.echo("\n" + RULE)
        else:
            typer.echo("ℹ️  No registrations found in database yet.")
    except PersistenceError as exc:
        typer.echo(f"❌ Database error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        store.dispose()

    typer.echo("\n✅ Database connection closed.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
