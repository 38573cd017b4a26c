"""
relfetch — CLI entrypoint.

Usage:
    relfetch                     # latest stable release into ~/.local/bin
    relfetch --pre               # newest release, pre-releases included
    relfetch --version v0.1.0    # pin a tag
    relfetch --system            # install into /usr/local/bin via sudo
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from relfetch.core.observability.logging_config import resolve_level, setup_logging

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def _check_version(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    """Reject an empty tag, or a flag swallowed as the tag (``--version --pre``)."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise click.BadParameter("a release tag is required.", ctx=ctx, param=param)
    if value.startswith("-"):
        raise click.BadParameter(
            f"expected a release tag, got option {value!r}.", ctx=ctx, param=param,
        )
    return value


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("--system", "system_install", is_flag=True,
              help="Install to the system directory (/usr/local/bin, requires sudo).")
@click.option("--pre", "include_prerelease", is_flag=True,
              help="Include pre-releases when picking the newest release.")
@click.option("--version", "explicit_version", metavar="TAG", default=None,
              callback=_check_version, help="Install this release tag instead of the newest.")
@click.option("--dry-run", is_flag=True, help="Resolve target, tag and URL, then stop.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to a settings YAML (default: $RELFETCH_CONFIG or ~/.config/relfetch/config.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    system_install: bool,
    include_prerelease: bool,
    explicit_version: str | None,
    dry_run: bool,
    as_json: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Install the pre-built release binary for this machine.

    By default installs the latest stable release to ~/.local/bin
    (no sudo required).
    """
    from relfetch.adapters.net.http import open_url
    from relfetch.core.config.loader import load_settings
    from relfetch.core.errors import InstallerError
    from relfetch.core.models.install import HostEnvironment, InstallConfig
    from relfetch.core.use_cases.install import run_install

    ctx.ensure_object(dict)

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(
            debug=debug,
            verbose=verbose,
            quiet=quiet,
            env_level=os.environ.get("RELFETCH_LOG_LEVEL"),
        ),
        log_file=os.environ.get("RELFETCH_LOG_FILE"),
        log_file_level=os.environ.get("RELFETCH_LOG_FILE_LEVEL"),
    )

    def progress(msg: str) -> None:
        if not (as_json or quiet):
            click.echo(msg)

    try:
        settings = load_settings(Path(config_path) if config_path else None)
        destination = (
            settings.system_install_dir() if system_install else settings.user_install_dir()
        )
        config = InstallConfig(
            destination_directory=destination,
            elevation_required=system_install,
            explicit_version=explicit_version,
            include_prerelease=include_prerelease,
        )
        host = ctx.obj.get("host") or HostEnvironment.detect()

        result = run_install(
            config,
            settings,
            host,
            client=ctx.obj.get("client"),
            fs=ctx.obj.get("fs"),
            opener=ctx.obj.get("opener") or open_url,
            progress=progress,
            dry_run=dry_run,
        )
    except InstallerError as e:
        _report_error(e, as_json)
        sys.exit(e.exit_code)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if dry_run:
        click.secho(f"📋 {result.binary} {result.tag} for {result.target.target_triple}",
                    fg="cyan", bold=True)
        click.echo(f"   URL:         {result.url}")
        click.echo(f"   Destination: {result.destination}")
        click.echo("   (dry run — nothing installed)")
        return

    click.secho(
        f"✅ Successfully installed {result.binary} {result.tag} to {result.installed_path}",
        fg="green",
    )

    if result.path_advisory:
        click.echo()
        click.secho(result.path_advisory, fg="yellow")


def _report_error(error, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(error.to_dict(), indent=2))
        return
    click.secho(f"❌ {error.message}", fg="red", err=True)
    if error.hint:
        click.echo(f"   {error.hint}", err=True)


if __name__ == "__main__":
    cli(prog_name="relfetch")
