"""
rezdox — CLI entrypoint.

Usage:
    python -m rezdox.main --help
    python -m rezdox.main doxygen doc -f python/mypkg -d docs
    python -m rezdox.main config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from rezdox import __version__
from rezdox.core.observability.logging_config import setup_from_environ


@click.group()
@click.version_option(version=__version__, prog_name="rezdox")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to rezdox.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """rezdox — build and install Doxygen docs for rez packages."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_from_environ(debug=debug, verbose=verbose, quiet=quiet)


@cli.command("doxygen")
@click.argument("label", required=False)
@click.option("--file", "-f", "files", multiple=True, help="Doxygen input file or directory.")
@click.option("--destination", "-d", default=None, help="Relative directory to build and install into.")
@click.option("--doxyfile", default=None, help="Doxyfile template (default: rez's own).")
@click.option("--doxydir", default=None, help="Directory doxygen generates into (default: html).")
@click.option("--force", is_flag=True, help="Install even outside a central install.")
@click.option("--doxypy", is_flag=True, help="Filter Python sources through doxypy.")
@click.option("--central", is_flag=True, help="Treat this build as a central install.")
@click.option(
    "--descriptor",
    type=click.Choice(["query-tool", "yaml"]),
    default=None,
    help="How to read package.yaml.",
)
@click.option("--plan", "plan_only", is_flag=True, help="Register targets and show them; run nothing.")
@click.option("--dry-run", is_flag=True, help="Validate every step but don't execute.")
@click.option("--mock", is_flag=True, help="Pretend every step succeeds; read package.yaml directly.")
@click.option("--install", is_flag=True, help="Run the install pass after building.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def doxygen(
    ctx: click.Context,
    label: str | None,
    files: tuple[str, ...],
    destination: str | None,
    doxyfile: str | None,
    doxydir: str | None,
    force: bool,
    doxypy: bool,
    central: bool,
    descriptor: str | None,
    plan_only: bool,
    dry_run: bool,
    mock: bool,
    install: bool,
    as_json: bool,
) -> None:
    """Generate Doxygen docs for the package being built.

    Arguments left out fall back to the doxygen block of rezdox.yml.

    Examples:

        rezdox doxygen doc -f python/mypkg -d docs

        rezdox doxygen doc -f python -d docs --doxypy --force --install

        rezdox doxygen --plan
    """
    from rezdox.core.models.doxygen import DoxygenRequest
    from rezdox.core.models.environment import BuildEnvironment
    from rezdox.core.use_cases.build_docs import build_docs

    given: dict = {
        "label": label,
        "files": list(files),
        "destination": destination,
        "doxyfile": doxyfile,
        "doxydir": doxydir,
        "descriptor": descriptor,
    }
    # Flags only count when set, so they never clear a config value.
    if force:
        given["force"] = True
    if doxypy:
        given["doxypy"] = True
    request = DoxygenRequest(**{k: v for k, v in given.items() if v not in (None, [])})

    env = BuildEnvironment.from_environ()
    if central:
        env = env.model_copy(update={"central": True})

    result = build_docs(
        request,
        config_path=ctx.obj.get("config_path"),
        env=env,
        plan_only=plan_only,
        dry_run=dry_run,
        mock_mode=mock,
        install=install,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    registered = result.registered
    assert registered is not None
    quiet = ctx.obj.get("quiet", False)

    mode_label = "[plan] " if plan_only else "[dry-run] " if dry_run else "[mock] " if mock else ""
    if not quiet:
        meta = registered.metadata
        click.secho(f"\n📚 {mode_label}{registered.label} — {meta.name} {meta.version}", fg="cyan", bold=True)
        if meta.description:
            click.echo(f"   {meta.brief}")
        click.echo(f"   Doxyfile: {registered.doxyfile}")
        click.echo(f"   Output:   {registered.output_dir / registered.doxydir}")
        if registered.install:
            click.echo(f"   Install:  {registered.install_dir}")
        else:
            click.secho("   Install:  skipped (not a central install)", fg="yellow")
        click.echo()

    if plan_only:
        assert result.graph is not None
        for name, target in result.graph.targets.items():
            all_label = " [ALL]" if target.all else ""
            click.echo(f"   • {name}{all_label}")
            for dep in target.depends:
                click.echo(f"       ← {dep}")
        if ctx.obj.get("verbose"):
            click.echo()
            for line in registered.overrides.lines():
                click.echo(f"     │ {line}")
        click.echo()
        return

    for report in (result.build_report, result.install_report):
        if report is None:
            continue
        for owner, receipts in report.target_receipts.items():
            for receipt in receipts:
                timing = f" ({receipt.duration_ms}ms)" if receipt.duration_ms else ""
                if receipt.ok:
                    click.secho(f"   ✓ {receipt.action_id}", fg="green", nl=False)
                    click.echo(timing)
                elif receipt.failed:
                    click.secho(f"   ✗ {receipt.action_id}", fg="red", nl=False)
                    click.echo(timing)
                    if receipt.error:
                        for line in receipt.error.split("\n")[:5]:
                            click.echo(f"     │ {line}")
                else:
                    click.secho(f"   ⊘ {receipt.action_id} ", fg="yellow", nl=False)
                    click.echo(f"({receipt.output})")

    click.echo()
    if not result.ok:
        click.secho("   Result: failed", fg="red", bold=True)
        click.echo()
        sys.exit(1)

    click.secho("   Result: ok", fg="green", bold=True)
    click.echo()


@cli.group()
def config() -> None:
    """rezdox.yml configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate rezdox.yml configuration."""
    from rezdox.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.request is not None
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Label: {result.request.label}")
        click.echo(f"   Files: {len(result.request.files)}")
        click.echo(f"   Destination: {result.request.destination}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


@cli.command("help-entry")
@click.argument("destination")
@click.option("--doxydir", default=None, help="Directory doxygen generates into (default: html).")
def help_entry_cmd(destination: str, doxydir: str | None) -> None:
    """Print the package.yaml help line for installed docs."""
    from rezdox.core.services.install_doxygen import help_entry

    click.echo(f"help: {help_entry(destination, doxydir)}")


if __name__ == "__main__":
    cli()
