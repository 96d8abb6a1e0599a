"""Command line interface for denv.

USAGE:
    denv [-f FILE]... [-fo FILE]... [-i] exec -- COMMAND [ARGS...]
    denv [-f FILE]... [-fo FILE]... [-i] get KEY
    denv [-f FILE]... [-fo FILE]... [-i] keys [-o text|json]
    denv [-f FILE]... [-fo FILE]... [-i] list [-o text|json]

Files are applied in command-line order, later files overriding earlier ones
and all of them overriding the inherited environment. Without any -f/-fo
flag, ./.env is used when it exists.

EXIT STATUS:
    0   success
    1   bad arguments, unreadable env file, unknown key, command not started,
        command killed by a signal
    130 interrupted by Ctrl-C before a command was started
    N   exit status of the command run by `exec`
"""

import argparse
import sys
from typing import Callable, Dict, List, NoReturn, Optional

from denv import __version__
from denv.config import EnvLoader, EnvSource, Settings
from denv.exceptions import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_OK, ArgumentError, DenvError
from denv.logger import Logger, create_logger
from denv.output import OutputFormat, lookup, render_keys, render_list
from denv.runner import CommandRunner


class DenvArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ArgumentError instead of exiting with 2."""

    def error(self, message: str) -> NoReturn:
        raise ArgumentError(message, details={"usage": self.format_usage().strip()})


def build_parser() -> DenvArgumentParser:
    parser = DenvArgumentParser(
        prog="denv",
        description="Manage environment variables from .env files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  Run a command with .env and local overrides:
    %(prog)s -f .env -fo .env.local exec -- python manage.py runserver

  Only the variables from the file, nothing inherited:
    %(prog)s -i -f prod.env list -o json

  Read one value:
    %(prog)s -f prod.env get DATABASE_URL

ENVIRONMENT:
  DENV_LOG_LEVEL, DENV_LOG_FORMAT, DENV_LOG_FILE   diagnostics on stderr
  DENV_DEFAULT_FILE                                default env file (.env)
  DENV_DISCOVERY                                   always | unless-isolated
        """,
    )

    parser.add_argument(
        "--file", "-f",
        dest="sources",
        action="append",
        type=EnvSource.required,
        metavar="PATH",
        help="path to .env file (repeatable)",
    )
    parser.add_argument(
        "--file-optional", "-fo",
        dest="sources",
        action="append",
        type=EnvSource.optional_file,
        metavar="PATH",
        help="path to .env file (optional, ignored if missing; repeatable)",
    )
    parser.add_argument(
        "--isolate", "-i",
        action="store_true",
        help="ignore system environment variables (load only from .env files)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Command", required=False)

    exec_parser = subparsers.add_parser(
        "exec",
        help="Execute a command with the loaded environment variables",
        description="Everything after -- is passed to the command unchanged",
    )
    exec_parser.add_argument("argv", nargs=argparse.REMAINDER, metavar="COMMAND")

    get_parser = subparsers.add_parser(
        "get",
        help="Get the value of a specific environment variable",
    )
    get_parser.add_argument("key", nargs="?", metavar="KEY")

    for name, help_text in (
        ("keys", "List all available environment variable keys"),
        ("list", "List all environment variables in KEY=VALUE format"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--output", "-o",
            choices=[f.value for f in OutputFormat],
            default=OutputFormat.TEXT.value,
            help="output format. Default: %(default)s",
        )

    return parser


def _emit(text: str) -> None:
    if text:
        print(text, file=sys.stdout, flush=True)


def cmd_exec(args: argparse.Namespace, loader: EnvLoader, logger: Logger) -> int:
    argv: List[str] = list(args.argv)
    if argv and argv[0] == "--":
        argv = argv[1:]
    if not argv:
        raise ArgumentError("no command specified", code="NO_COMMAND")

    env = loader.load()
    return CommandRunner(logger=logger).run(env, argv)


def cmd_get(args: argparse.Namespace, loader: EnvLoader, logger: Logger) -> int:
    if not args.key:
        raise ArgumentError("key argument is required", code="KEY_REQUIRED")

    env = loader.load()
    print(lookup(env, args.key), file=sys.stdout, flush=True)
    return EXIT_OK


def cmd_keys(args: argparse.Namespace, loader: EnvLoader, logger: Logger) -> int:
    _emit(render_keys(loader.load(), args.output))
    return EXIT_OK


def cmd_list(args: argparse.Namespace, loader: EnvLoader, logger: Logger) -> int:
    _emit(render_list(loader.load(), args.output))
    return EXIT_OK


COMMANDS: Dict[str, Callable[[argparse.Namespace, EnvLoader, Logger], int]] = {
    "exec": cmd_exec,
    "get": cmd_get,
    "keys": cmd_keys,
    "list": cmd_list,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    logger: Optional[Logger] = None
    try:
        args = parser.parse_args(argv)

        if not args.command:
            parser.print_help(sys.stderr)
            return EXIT_FAILURE

        settings = Settings.from_env()
        logger = create_logger(
            level=settings.log.level_number,
            log_file=str(settings.log.log_file) if settings.log.log_file else None,
            json_format=settings.log.json_format,
        )

        loader = EnvLoader(
            args.sources or [],
            isolate=args.isolate,
            default_env_file=settings.resolver.default_env_file,
            discovery=settings.resolver.discovery,
            logger=logger,
        )
        return COMMANDS[args.command](args, loader, logger)

    except DenvError as e:
        if logger is not None:
            logger.debug("Command failed", code=e.code, exit_code=e.exit_code)
        print(f"Error: {e.message}", file=sys.stderr)
        return e.exit_code

    except KeyboardInterrupt:
        # Ctrl-C before the child started, or with no child at all
        print("Error: interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
