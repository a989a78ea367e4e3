"""Tact Package Manager CLI."""

import asyncio
import sys
from pathlib import Path
from typing import Awaitable, List, Optional, TypeVar

import typer
from rich.console import Console

from tact_pm.cli import __version__
from tact_pm.cli.utils.context import CLIContext
from tact_pm.cli.utils.output import OutputFormatter
from tact_pm.core.config import Settings, get_settings
from tact_pm.core.exceptions import TpmError
from tact_pm.core.models import UpdateStatus
from tact_pm.infrastructure.logging import bind_context, setup_logging

T = TypeVar("T")

app = typer.Typer(
    name="tpm",
    help="Tact Package Manager - install Tact modules from aliased git repositories",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    pretty_exceptions_enable=False,
    no_args_is_help=True,
)

console = Console()

# Global options that consume the following argument
VALUE_OPTIONS = {"--output", "-o", "--project", "-p"}


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        console.print(f"tpm v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
    output_format: str = typer.Option(
        "table",
        "--output",
        "-o",
        help="Output format: table, json, yaml",
    ),
    project: Optional[Path] = typer.Option(
        None,
        "--project",
        "-p",
        help="Project directory (defaults to the current directory)",
    ),
):
    """
    Tact Package Manager

    Installs Tact modules into tact_modules/ and wires them into the
    project's npm workspaces.
    """
    # Tests inject a prepared context through obj
    if ctx.obj is not None:
        return

    settings = Settings(project_root=project) if project else get_settings()
    setup_logging("DEBUG" if debug else settings.log_level, settings.log_format)
    bind_context(project=str(settings.project_root))

    ctx.obj = CLIContext(
        debug=debug,
        settings=settings,
        formatter=OutputFormatter(output_format),
        console=console,
    )


def _run(cli_ctx: CLIContext, operation: Awaitable[T]) -> T:
    """Drive one async operation, reporting any tact-pm error with exit code 1."""
    try:
        return asyncio.run(operation)
    except TpmError as e:
        cli_ctx.formatter.print_error(e.message)
        raise typer.Exit(1)


@app.command("install")
def install_command(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Package alias"),
    commit: Optional[str] = typer.Option(None, "--commit", help="Specific commit hash to install"),
):
    """
    Install a package and add it to the workspace.

    Example:
        tpm install jetton
        tpm install jetton --commit 1a2b3c4
    """
    cli_ctx: CLIContext = ctx.obj

    async def install():
        record = await cli_ctx.package_manager.install(alias, commit=commit)
        workspace = cli_ctx.workspace_manager
        await workspace.initialize()
        await workspace.add_module(alias)
        return record

    record = _run(cli_ctx, install())
    cli_ctx.formatter.print_success(f"Successfully installed {alias} at commit {record.commit_hash}")


@app.command("update")
def update_command(
    ctx: typer.Context,
    alias: Optional[str] = typer.Argument(None, help="Package alias (all packages when omitted)"),
):
    """
    Update all packages or a specific package.
    """
    cli_ctx: CLIContext = ctx.obj
    results = _run(cli_ctx, cli_ctx.package_manager.update(alias))

    if not results:
        cli_ctx.formatter.print_info("No packages installed")

    for result in results:
        if result.status == UpdateStatus.UPDATED:
            cli_ctx.formatter.print_success(f"Updated {result.alias} to latest version")
        elif result.status == UpdateStatus.UP_TO_DATE:
            cli_ctx.formatter.print_info(f"{result.alias} is already up to date")
        else:
            cli_ctx.formatter.print_warning(f"Package {result.alias} not found in state")


@app.command("remove")
def remove_command(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Package alias"),
):
    """
    Remove a package and drop it from the workspace.
    """
    cli_ctx: CLIContext = ctx.obj

    async def remove():
        await cli_ctx.package_manager.remove(alias)
        workspace = cli_ctx.workspace_manager
        await workspace.initialize()
        await workspace.remove_module(alias)

    _run(cli_ctx, remove())
    cli_ctx.formatter.print_success(f"Successfully removed {alias}")


@app.command("sync")
def sync_command(ctx: typer.Context):
    """
    Refresh the local alias cache from the registry.
    """
    cli_ctx: CLIContext = ctx.obj
    aliases = _run(cli_ctx, cli_ctx.package_manager.sync_aliases())
    cli_ctx.formatter.print_success(f"Synchronized {len(aliases)} aliases")


@app.command("deps")
def deps_command(ctx: typer.Context):
    """
    Install dependencies of the project and every installed module.
    """
    cli_ctx: CLIContext = ctx.obj

    async def deps():
        workspace = cli_ctx.workspace_manager
        await workspace.initialize()
        await workspace.install_dependencies()

    _run(cli_ctx, deps())
    cli_ctx.formatter.print_success("Dependencies installed")


@app.command("run")
def run_command(
    ctx: typer.Context,
    module: str = typer.Argument(..., help="Installed module name"),
    script: str = typer.Argument(..., help="Script from the module's package.json"),
):
    """
    Run a script of an installed module.

    Example:
        tpm run jetton build
        tpm jetton build
    """
    cli_ctx: CLIContext = ctx.obj
    workspace = cli_ctx.workspace_manager

    scripts = _run(cli_ctx, workspace.module_scripts(module))
    if script not in scripts:
        cli_ctx.formatter.print_error(f"Script '{script}' not found in module {module}")
        if scripts:
            cli_ctx.formatter.print_info(f"Available scripts: {', '.join(sorted(scripts))}")
        raise typer.Exit(1)

    _run(cli_ctx, workspace.run_module_script(module, script))


@app.command("list")
def list_command(ctx: typer.Context):
    """
    List installed packages.
    """
    cli_ctx: CLIContext = ctx.obj
    installed = _run(cli_ctx, cli_ctx.package_manager.list_installed())

    items = [
        {"alias": alias, **record.model_dump(mode="json", by_alias=True)}
        for alias, record in installed
    ]
    cli_ctx.formatter.print_list(
        items,
        columns=["alias", "commitHash", "installedAt", "url"],
        title="Installed packages",
    )


COMMAND_NAMES = {
    command.name or command.callback.__name__ for command in app.registered_commands
}


def expand_shorthand(args: List[str]) -> List[str]:
    """Rewrite ``tpm <module> <script>`` into ``tpm run <module> <script>``."""
    index = 0
    while index < len(args) and args[index].startswith("-"):
        index += 2 if args[index] in VALUE_OPTIONS else 1

    rest = args[index:]
    if (
        len(rest) == 2
        and rest[0] not in COMMAND_NAMES
        and not any(arg.startswith("-") for arg in rest)
    ):
        return args[:index] + ["run"] + rest
    return args


def cli(argv: Optional[List[str]] = None) -> None:
    """Console script entry point."""
    args = list(sys.argv[1:] if argv is None else argv)
    app(args=expand_shorthand(args), prog_name="tpm")


if __name__ == "__main__":
    cli()
