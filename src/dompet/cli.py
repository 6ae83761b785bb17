"""Flask CLI commands for Dompet."""

from __future__ import annotations

import click
from flask import current_app


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("dompet-seed")
    def dompet_seed() -> None:
        """Seed demo wallets, categories and transactions."""

        # Import here to avoid circular imports at module import time
        from .extensions import session_scope
        from .services.seed import run_demo_seed

        with session_scope() as session:
            summary = run_demo_seed(session, currency=current_app.config["DOMPET_CONFIG"].DEFAULT_CURRENCY)

        if summary.skipped:
            click.echo("Wallets already exist; demo seed skipped.")
        click.echo(
            f"Wallets: {summary.wallets}, categories: {summary.categories}, "
            f"transactions: {summary.transactions}"
        )

    @app.cli.command("dompet-balances")
    @click.option("--wallet-id", type=int, default=None, help="Only show this wallet.")
    def dompet_balances(wallet_id: int | None) -> None:
        """Print the current balance of every wallet."""

        from .extensions import session_scope
        from .services.balances import wallet_balances

        with session_scope() as session:
            rows = wallet_balances(session, wallet_id=wallet_id)

        if not rows:
            click.echo("No wallets found.")
            return
        for row in rows:
            click.echo(f"{row.wallet_id:>4}  {row.wallet_name:<24} {row.currency} {row.balance:>15,}")
