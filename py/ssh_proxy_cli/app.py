"""Typer CLI entrypoint for proxied SSH sessions.

Exit codes:
  0   - success
  1   - unknown identity or other configuration error
  2   - SSH key not found
  N   - the ssh exit code (single command, interactive) or the failing
        command's exit code (command file with --stop-on-error)
  130 - interrupted by the operator
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import structlog
import typer
from typer import Option

from ssh_proxy_cli.core.exceptions import ConfigurationError, PromptAborted, SSHProxyError
from ssh_proxy_cli.core.session import async_run_session
from ssh_proxy_cli.core.settings import load_settings
from ssh_proxy_cli.models import ConnectOptions
from ssh_proxy_cli.utils import QuestionaryPrompter, configure_logging

logger = structlog.get_logger(__name__)

EXIT_INTERRUPTED = 130

_EPILOG = """\
Examples:

  ssh-proxy --user alice --proxy proxy1.example.com --remote remote2.example.com

  ssh-proxy --proxy-user bob --remote-user alice --proxy proxy1.example.com
  --remote remote2.example.com --remote-cmd "uptime"

  ssh-proxy --proxy-user bob --remote-user alice --proxy proxy1.example.com
  --remote remote2.example.com --cmd-file /tmp/commands.txt --stop-on-error
"""

app = typer.Typer(
    add_completion=False,
    help="SSH to a remote host through a proxy using SSH keys, with an audit log.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def run_connect(options: ConnectOptions) -> int:
    """Resolve settings, run the session and map failures to exit codes."""
    configure_logging(options.verbose)
    try:
        settings = load_settings(options.config)
        return asyncio.run(async_run_session(options, settings, QuestionaryPrompter()))
    except PromptAborted:
        typer.secho("Aborted.", fg=typer.colors.RED, err=True)
        return PromptAborted.exit_code
    except ConfigurationError as exc:
        logger.error("configuration-error", kind=type(exc).__name__, error=str(exc))
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        return exc.exit_code
    except SSHProxyError as exc:
        logger.error("execution-error", kind=type(exc).__name__, error=str(exc))
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        return exc.exit_code
    except KeyboardInterrupt:
        logger.warning("interrupted")
        return EXIT_INTERRUPTED


@app.command(epilog=_EPILOG)
def connect(
    user: Annotated[
        str | None, Option("--user", help="SSH username for both proxy and remote", show_default=False)
    ] = None,
    proxy_user: Annotated[
        str | None, Option("--proxy-user", help="SSH username for the proxy only", show_default=False)
    ] = None,
    remote_user: Annotated[
        str | None, Option("--remote-user", help="SSH username for the remote only", show_default=False)
    ] = None,
    proxy: Annotated[str | None, Option("--proxy", help="Proxy host", show_default=False)] = None,
    remote: Annotated[str | None, Option("--remote", help="Remote host", show_default=False)] = None,
    remote_cmd: Annotated[
        str | None, Option("--remote-cmd", help="Run a single command on the remote host", show_default=False)
    ] = None,
    cmd_file: Annotated[
        Path | None,
        Option("--cmd-file", help="Run commands from a file on the remote host", show_default=False),
    ] = None,
    stop_on_error: Annotated[
        bool, Option("--stop-on-error", help="Stop executing commands from file on first failure")
    ] = False,
    debug: Annotated[bool, Option("-d", "--debug", help="Print audit events to stdout")] = False,
    identity_file: Annotated[
        Path | None, Option("--identity-file", "-i", help="SSH private key", show_default=False)
    ] = None,
    config: Annotated[Path | None, Option("--config", "-c", help="Settings file", show_default=False)] = None,
    verbose: Annotated[bool, Option("--verbose", "-v", help="Enable verbose logging")] = False,
) -> None:
    options = ConnectOptions(
        user=user,
        proxy_user=proxy_user,
        remote_user=remote_user,
        proxy=proxy,
        remote=remote,
        remote_cmd=remote_cmd,
        cmd_file=cmd_file,
        stop_on_error=stop_on_error,
        debug=debug,
        identity_file=identity_file,
        config=config,
        verbose=verbose,
    )
    raise typer.Exit(code=run_connect(options))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
