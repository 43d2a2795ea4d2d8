"""CLI tools for collections administration."""

import json
import logging
from datetime import datetime
from pathlib import Path
from uuid import UUID

import click
from sqlalchemy.exc import IntegrityError

from debtdesk.core.config import settings
from debtdesk.db.session import SessionLocal
from debtdesk.services import (
    account_import_service,
    contact_import_service,
    org_service,
    portfolio_service,
)
from debtdesk.services.column_mapper import MappingError, parse_csv_content
from debtdesk.services.import_service import ImportResult, ImportValidationError, PortfolioNotFoundError
from debtdesk.services.import_transformers import format_minor_units


def _load_mapping(path: str) -> dict[str, str]:
    mapping = json.loads(Path(path).read_text())
    if not isinstance(mapping, dict):
        raise click.BadParameter("Mapping file must contain a JSON object", param_hint="--mapping")
    return mapping


def _echo_result(result: ImportResult) -> None:
    click.echo(f"✓ {result.message}")
    click.echo(f"  Batch: {result.batch_id}")
    for warning in result.warnings:
        click.echo(f"  ! {warning}")
    for error in result.errors:
        click.echo(f"  ✗ {error}")
    if result.fanout_failures:
        click.echo(f"  {len(result.fanout_failures)} child record(s) failed; see the batch for details")


@click.group()
def cli():
    """DebtDesk CLI tools."""
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(asctime)s [%(levelname)s] %(message)s")


@cli.command()
@click.option("--name", required=True, help="Organization name")
@click.option("--slug", required=True, help="URL-friendly slug (lowercase, no spaces)")
def create_org(name: str, slug: str):
    """
    Create an organization (tenant).

    Example:
        python -m debtdesk.cli create-org --name "Acme Recovery" --slug "acme"
    """
    slug = slug.lower().strip()
    if not slug.replace("-", "").replace("_", "").isalnum():
        click.echo("❌ Slug must be alphanumeric (with optional hyphens/underscores)")
        return

    db = SessionLocal()
    try:
        if org_service.get_org_by_slug(db, slug):
            click.echo(f"❌ Organization with slug '{slug}' already exists")
            return
        org = org_service.create_org(db, name=name, slug=slug)
        click.echo(f"✓ Created organization: {name}")
        click.echo(f"  ID: {org.id}")
        click.echo(f"  Slug: {slug}")
    except IntegrityError as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
@click.option("--org-id", required=True, type=click.UUID, help="Organization ID")
@click.option("--name", required=True, help="Client (creditor) name")
@click.option("--contact-name", default=None)
@click.option("--email", default=None)
@click.option("--phone", default=None)
def create_client(org_id: UUID, name: str, contact_name: str | None, email: str | None, phone: str | None):
    """Create a client (the creditor that places portfolios)."""
    db = SessionLocal()
    try:
        if not org_service.get_org_by_id(db, org_id):
            click.echo("❌ Organization not found")
            return
        client = org_service.create_client(
            db, org_id, name=name, contact_name=contact_name, email=email, phone=phone
        )
        click.echo(f"✓ Created client: {name}")
        click.echo(f"  ID: {client.id}")
    finally:
        db.close()


@cli.command()
@click.option("--org-id", required=True, type=click.UUID, help="Organization ID")
@click.option("--name", required=True, help="Portfolio name")
@click.option("--client-id", type=click.UUID, default=None)
@click.option("--creditor-name", default=None)
@click.option("--debt-type", default=None)
@click.option("--purchase-date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--purchase-price", type=int, default=0, help="Purchase price in cents")
def create_portfolio(
    org_id: UUID,
    name: str,
    client_id: UUID | None,
    creditor_name: str | None,
    debt_type: str | None,
    purchase_date: datetime | None,
    purchase_price: int,
):
    """Create an empty portfolio to import accounts into."""
    db = SessionLocal()
    try:
        if not org_service.get_org_by_id(db, org_id):
            click.echo("❌ Organization not found")
            return
        if client_id and not org_service.get_client(db, org_id, client_id):
            click.echo("❌ Client not found")
            return
        portfolio = portfolio_service.create_portfolio(
            db,
            org_id,
            name=name,
            client_id=client_id,
            creditor_name=creditor_name,
            debt_type=debt_type,
            purchase_date=purchase_date.date() if purchase_date else None,
            purchase_price=purchase_price,
        )
        click.echo(f"✓ Created portfolio: {name}")
        click.echo(f"  ID: {portfolio.id}")
    finally:
        db.close()


@cli.command()
@click.option("--org-id", required=True, type=click.UUID)
@click.option("--portfolio-id", required=True, type=click.UUID)
@click.option("--client-id", required=True, type=click.UUID)
@click.option("--file", "csv_path", required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--mapping", "mapping_path", required=True, type=click.Path(exists=True, dir_okay=False), help="JSON object of column -> field")
@click.option("--file-number-start", type=int, default=None)
def import_accounts(
    org_id: UUID,
    portfolio_id: UUID,
    client_id: UUID,
    csv_path: str,
    mapping_path: str,
    file_number_start: int | None,
):
    """
    Import accounts from a CSV file.

    Example:
        python -m debtdesk.cli import-accounts --org-id ... --portfolio-id ... \\
            --client-id ... --file accounts.csv --mapping mapping.json
    """
    _, records = parse_csv_content(Path(csv_path).read_bytes())
    mappings = _load_mapping(mapping_path)

    db = SessionLocal()
    try:
        result = account_import_service.import_accounts(
            db,
            org_id,
            portfolio_id=portfolio_id,
            client_id=client_id,
            records=records,
            mappings=mappings,
            file_number_start=file_number_start,
            file_name=Path(csv_path).name,
        )
        _echo_result(result)
    except (MappingError, ImportValidationError, PortfolioNotFoundError) as e:
        click.echo(f"❌ {e}")
        raise SystemExit(1)
    finally:
        db.close()


@cli.command()
@click.option("--org-id", required=True, type=click.UUID)
@click.option("--portfolio-id", required=True, type=click.UUID)
@click.option("--file", "csv_path", required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--mapping", "mapping_path", required=True, type=click.Path(exists=True, dir_okay=False))
def import_contacts(org_id: UUID, portfolio_id: UUID, csv_path: str, mapping_path: str):
    """Add phones/emails from a CSV file to existing accounts."""
    _, records = parse_csv_content(Path(csv_path).read_bytes())
    mappings = _load_mapping(mapping_path)

    db = SessionLocal()
    try:
        result = contact_import_service.import_contacts(
            db,
            org_id,
            portfolio_id=portfolio_id,
            records=records,
            mappings=mappings,
            file_name=Path(csv_path).name,
        )
        _echo_result(result)
    except (MappingError, ImportValidationError, PortfolioNotFoundError) as e:
        click.echo(f"❌ {e}")
        raise SystemExit(1)
    finally:
        db.close()


@cli.command()
@click.option("--org-id", required=True, type=click.UUID)
@click.option("--portfolio-id", required=True, type=click.UUID)
def recompute_portfolio(org_id: UUID, portfolio_id: UUID):
    """Recompute a portfolio's account count and face value from its accounts."""
    db = SessionLocal()
    try:
        portfolio = portfolio_service.get_portfolio(db, org_id, portfolio_id)
        if not portfolio:
            click.echo("❌ Portfolio not found")
            return
        portfolio = portfolio_service.recompute_totals(db, portfolio)
        click.echo(
            f"✓ {portfolio.name}: {portfolio.total_accounts} accounts, "
            f"face value {format_minor_units(portfolio.total_face_value)}"
        )
    finally:
        db.close()


if __name__ == "__main__":
    cli()
