"""Sites command implementation.

Lists the registry together with what a run would derive for each site.
"""

import json
import os
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from wpfleet.cli.types import OutputFormat, get_config
from wpfleet.core.errors import IdentityResolutionError, RegistryError
from wpfleet.core.registry import SiteRegistry
from wpfleet.identity.resolver import IdentityResolver
from wpfleet.models.site import SiteEntry
from wpfleet.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="List registered sites.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def list_sites(
    ctx: typer.Context,
    registry_path: Annotated[
        Path | None,
        typer.Option(
            "--registry",
            "-r",
            help="Registry file to read (default: configured registry).",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show registered sites with their domain, home and account.

    The account column shows which account a run would use, or why the
    site would be skipped.
    """
    config = get_config(ctx)
    registry = SiteRegistry(registry_path or config.effective_registry_path)

    try:
        entries = registry.load()
    except RegistryError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not entries:
        print_info(f"No sites in registry {registry.path}.")
        return

    resolver = IdentityResolver(
        segment_index=config.identity_segment_index,
        credential_constant=config.credential_constant,
    )
    rows = [_describe(entry, resolver) for entry in entries]

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps({"registry": str(registry.path), "sites": rows}))
        return

    table = Table(
        title=f"Registered Sites ({escape(str(registry.path))})",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", style="site.path", no_wrap=True)
    table.add_column("Domain")
    table.add_column("Home", style="muted")
    table.add_column("Account")

    for row in rows:
        if row["account"] is not None:
            account = f"[site.identity]{escape(row['account'])}[/] [muted]({row['source']})[/]"
        else:
            account = f"[warning]{escape(row['problem'])}[/]"
        table.add_row(escape(row["path"]), escape(row["domain"]), escape(row["home"]), account)

    console.print(table)
    console.print(f"[dim]{len(rows)} site(s)[/dim]")


def _describe(entry: SiteEntry, resolver: IdentityResolver) -> dict[str, str | None]:
    """Derive the display fields for one registry entry."""
    row: dict[str, str | None] = {
        "path": entry.path,
        "domain": entry.effective_domain,
        "home": entry.home_dir,
        "account": None,
        "source": None,
        "problem": None,
    }
    if not os.path.isdir(entry.path):
        row["problem"] = "directory does not exist"
        return row
    try:
        identity = resolver.resolve(entry)
    except IdentityResolutionError as e:
        row["problem"] = f"unresolved: {e.reason}"
        return row
    row["account"] = identity.name
    row["source"] = identity.source.value
    return row
