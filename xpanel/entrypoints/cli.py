"""xpanel CLI entrypoint.

Command dispatcher for the panel process. Every invocation performs exactly
one operating mode:

    xpanel                  run the panel (same as `xpanel run`)
    xpanel run              run the panel under the lifecycle supervisor
    xpanel v2-ui [-db P]    import inbounds from v2-ui, then exit
    xpanel setting [...]    change persisted settings, then exit
    xpanel -v               print the version and exit
"""

from __future__ import annotations

import functools
import logging
import sys
from pathlib import Path

import click

from xpanel.adapters.factory import PanelFactory
from xpanel.adapters.legacy.v2ui import DEFAULT_V2UI_DB_PATH
from xpanel.core.errors import XPanelCliError
from xpanel.domain.entities import OperatingMode, SupervisorExit
from xpanel.domain.exceptions import XPanelDomainError
from xpanel.version import __version__

logger = logging.getLogger(__name__)


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    click's own exceptions (including ctx.exit) pass through untouched.
    Domain errors become XPanelCliError with their hint; anything else is
    reported as an unexpected error of the named command.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (click.ClickException, click.exceptions.Exit, click.Abort):
                raise
            except XPanelDomainError as e:
                raise XPanelCliError(e.message, hint=e.hint) from e
            except Exception as e:
                logger.debug("Unexpected error in %s", command_name, exc_info=True)
                raise XPanelCliError(f"Unexpected error in {command_name}: {e}") from e

        return wrapper

    return decorator


class PanelCommandGroup(click.Group):
    """Command group with the panel's dispatch rules.

    Commands are listed in registration order, and an unknown command
    prints the usage of every command instead of a one-line error. Both
    happen before any command or group callback runs.
    """

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        cmd_name = args[0]
        if (
            self.get_command(ctx, cmd_name) is None
            and not ctx.resilient_parsing
            and not cmd_name.startswith("-")
        ):
            self._print_all_usage(ctx)
            ctx.exit(2)
        return super().resolve_command(ctx, args)

    def _print_all_usage(self, ctx: click.Context) -> None:
        names = self.list_commands(ctx)
        click.echo(f"expected {' or '.join(repr(n) for n in names)} subcommands")
        for name in names:
            command = self.get_command(ctx, name)
            click.echo()
            click.echo(command.get_help(click.Context(command, info_name=name, parent=ctx)))


def _get_factory(ctx: click.Context) -> PanelFactory:
    return ctx.obj["factory"]


def _enter_mode(ctx: click.Context, mode: OperatingMode) -> None:
    """Record the operating mode of this invocation. A process runs exactly one."""
    current = ctx.obj.get("mode")
    if current is not None and current is not mode:
        raise RuntimeError(f"operating mode already selected: {current.value}")
    ctx.obj["mode"] = mode
    logger.debug("Operating mode: %s", mode.value)


@click.group(cls=PanelCommandGroup, invoke_without_command=True)
@click.version_option(__version__, "-v", "--version", message="%(version)s")
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress progress output.",
)
@click.pass_context
def cli(ctx: click.Context, quiet: bool) -> None:
    """x-ui web panel.

    Without a command, runs the panel (same as 'run').
    """
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj.setdefault("factory", PanelFactory())

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


def _run_supervised(factory: PanelFactory, store) -> SupervisorExit:
    """Run the supervisor with OS signals wired in until it returns."""
    from xpanel.core.supervisor import ServiceSupervisor, SupervisorControl

    events = factory.create_event_queue()
    supervisor = ServiceSupervisor(factory.create_service_factory(store), events)
    with factory.create_signal_adapter(SupervisorControl(events)):
        return supervisor.run()


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Run the web panel.

    SIGHUP restarts the panel with the current settings; SIGTERM or SIGINT
    stops it and exits.
    """
    from xpanel.core.logging_setup import configure_logging
    from xpanel.domain.config import PANEL_NAME
    from xpanel.domain.exceptions import StoreInitError, UnknownLogLevelError

    _enter_mode(ctx, OperatingMode.RUN_SERVICE)
    factory = _get_factory(ctx)
    config = factory.create_config()

    try:
        configure_logging(config.effective_log_level, config.log_file)
    except UnknownLogLevelError as e:
        configure_logging("error")
        logger.critical("%s", e.message)
        ctx.exit(1)
    except OSError as e:
        configure_logging("error")
        logger.critical("open log file %s failed: %s", config.log_file, e)
        ctx.exit(1)

    logger.info("%s %s", PANEL_NAME, __version__)

    try:
        store = factory.create_store_initializer().init_store(config.db_path)
    except StoreInitError as e:
        logger.critical("%s", e.message)
        ctx.exit(1)

    try:
        outcome = _run_supervised(factory, store)
    finally:
        store.close()

    if outcome is not SupervisorExit.TERMINATED:
        ctx.exit(1)


@cli.command(name="v2-ui")
@click.option(
    "-db",
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_V2UI_DB_PATH,
    show_default=True,
    help="Set v2-ui db file path.",
)
@click.pass_context
@handle_cli_errors("v2-ui")
def v2ui(ctx: click.Context, db_path: Path) -> None:
    """Migrate inbounds from v2-ui."""
    from xpanel.core.migration import MigrateRequest
    from xpanel.core.progress import progress_context

    _enter_mode(ctx, OperatingMode.MIGRATE)
    factory = _get_factory(ctx)
    config = factory.create_config()
    usecase = factory.create_migrate_usecase()

    with progress_context(quiet_mode=ctx.obj.get("quiet", False)) as progress:
        response = usecase.execute(
            MigrateRequest(db_path=config.db_path, legacy_path=db_path),
            progress=progress,
        )

    if not response.success:
        raise XPanelCliError(f"migrate from v2-ui failed: {response.error}")
    click.echo(f"migrate v2-ui inbounds success: {response.imported}")


@cli.command()
@click.option("-reset", "--reset", "reset", is_flag=True, help="Reset all settings.")
@click.option(
    "-port",
    "--port",
    "port",
    type=int,
    default=0,
    show_default=True,
    help="Set panel port (0 leaves it unchanged).",
)
@click.option("-username", "--username", "username", default="", help="Set login username.")
@click.option("-password", "--password", "password", default="", help="Set login password.")
@click.pass_context
@handle_cli_errors("setting")
def setting(
    ctx: click.Context, reset: bool, port: int, username: str, password: str
) -> None:
    """Change panel settings without starting the panel."""
    from xpanel.core.settings import SettingsRequest

    _enter_mode(ctx, OperatingMode.CONFIGURE_SETTINGS)
    factory = _get_factory(ctx)
    config = factory.create_config()

    response = factory.create_settings_usecase().execute(
        SettingsRequest(
            db_path=config.db_path,
            reset=reset,
            port=port,
            username=username,
            password=password,
        )
    )

    if response.init_error is not None:
        raise XPanelCliError(response.init_error, hint=response.init_hint)

    for result in response.results:
        click.echo(result.message, err=not result.success)

    if not response.success:
        ctx.exit(1)


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
