"""Command line tool: create, build and run projects."""

from __future__ import annotations

import argparse
import ipaddress
import logging
import os
import re
import sys
from pathlib import Path
from typing import Callable, Sequence

from landkit import examples
from landkit.common import init_logging, print_version, short_version

log = logging.getLogger(__name__)

PROG = "land-cli"
EXAMPLES_ENV = "LAND_EXAMPLES_DIR"
DEFAULT_LISTEN = "127.0.0.1:9830"

_NAME_RE = re.compile(r"[a-zA-Z0-9-]+")
_PORT_RE = re.compile(r"[0-9]{1,5}")
_GREEN = "\x1b[32m"
_RED = "\x1b[31m"
_RESET = "\x1b[0m"


class CommandError(Exception):
    """Raised when a command cannot complete."""


def validate_name(name: str) -> str:
    """Return ``name`` if it is a valid project name, else raise ValueError."""
    if not _NAME_RE.fullmatch(name):
        raise ValueError('Project name only support alphabet, number and "-"')
    first = name[0]
    if not (first.isascii() and first.isalpha()):
        raise ValueError("Project name must start with alphabet")
    return name


def validate_address(listen: str) -> str:
    """Return ``listen`` if it is an ``ip:port`` socket address, else raise ValueError."""
    host, sep, port = listen.rpartition(":")
    try:
        if not sep or not _PORT_RE.fullmatch(port) or int(port) > 65535:
            raise ValueError
        if host.startswith("[") and host.endswith("]"):
            ipaddress.IPv6Address(host[1:-1])
        else:
            ipaddress.IPv4Address(host)
    except ValueError:
        raise ValueError("invalid listen address") from None
    return listen


def _arg_type(validator: Callable[[str], str]) -> Callable[[str], str]:
    def check(value: str) -> str:
        try:
            return validator(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from None

    return check


def _say(color: str, text: str) -> None:
    print(f"{color}{text}{_RESET}")


def _ask(prompt: str) -> str:
    return input(prompt)


def _project_name(name: str | None) -> str:
    if name is not None:
        return name
    while True:
        try:
            answer = _ask("Enter a name for your project: ")
        except (EOFError, KeyboardInterrupt):
            raise CommandError(
                'Project name only support alphabet, number and "-", '
                "and start with alphabet"
            ) from None
        try:
            return validate_name(answer)
        except ValueError as exc:
            _say(_RED, str(exc))


def _template(name: str | None) -> examples.Item:
    templates = examples.defaults()
    if name is not None:
        found = next((tpl for tpl in templates if tpl.link == name), None)
        if found is None:
            raise CommandError("Template not found")
        return found
    print("Pick a template to start your project:")
    for number, tpl in enumerate(templates, start=1):
        print(f"  {number}) {tpl}")
    while True:
        try:
            answer = _ask("> ").strip()
        except (EOFError, KeyboardInterrupt):
            raise CommandError("Template not found") from None
        if answer.isdigit() and 1 <= int(answer) <= len(templates):
            return templates[int(answer) - 1]


def _desc(desc: str | None) -> str:
    if desc is not None:
        return desc
    try:
        return _ask("Enter a description for your project (Optional): ")
    except (EOFError, KeyboardInterrupt):
        raise CommandError("Project description is invalid") from None


def _run_new(args: argparse.Namespace) -> None:
    log.debug("Create new project: %s", args)
    project_name = _project_name(args.name)
    tpl = _template(args.template)
    desc = _desc(args.desc)
    log.debug("Project name: %s, template: %s, desc: %s", project_name, tpl, desc)

    _say(_GREEN, f"Create project '{project_name}'")
    target = Path(project_name)
    if not target.exists():
        target.mkdir()

    _say(_GREEN, f"Extracting template '{tpl.title}' to '{project_name}'")
    tpl.extract(args.assets, project_name, desc)
    _say(_GREEN, f"Project '{project_name}' created successfully")


def _run_build(args: argparse.Namespace) -> None:
    log.debug("Build command: js_engine=%s", args.js_engine)


def _run_up(args: argparse.Namespace) -> None:
    log.debug(
        "Up command: address=%s, build=%s, js_engine=%s",
        args.listen,
        args.build,
        args.js_engine,
    )


def _build_parser() -> argparse.ArgumentParser:
    output = argparse.ArgumentParser(add_help=False)
    group = output.add_mutually_exclusive_group()
    group.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
        help="Generate verbose output",
    )
    group.add_argument(
        "-q", "--quiet", action="store_true", default=argparse.SUPPRESS,
        help="Do not print progress messages.",
    )

    parser = argparse.ArgumentParser(
        prog=PROG, description=f"{PROG} {short_version()}", parents=[output]
    )
    parser.add_argument(
        "-V", "--version", action="store_true", help="Print version info and exit."
    )
    commands = parser.add_subparsers(dest="cmd")

    new = commands.add_parser("new", parents=[output], help="Create a new project")
    new.set_defaults(run=_run_new)
    new.add_argument(
        "name", nargs="?", type=_arg_type(validate_name),
        help="The name of the new project",
    )
    new.add_argument(
        "-t", "--template", help="The template from which to create the new project"
    )
    new.add_argument("-d", "--desc", help="The description of the new project")
    new.add_argument(
        "--assets",
        default=os.environ.get(EXAMPLES_ENV, "examples"),
        help="Directory holding the project templates",
    )

    build = commands.add_parser("build", parents=[output], help="Build the project")
    build.set_defaults(run=_run_build)
    build.add_argument("-j", "--js-engine", dest="js_engine")

    up = commands.add_parser("up", parents=[output], help="Run the project")
    up.set_defaults(run=_run_up)
    up.add_argument(
        "--listen", type=_arg_type(validate_address), default=DEFAULT_LISTEN
    )
    up.add_argument("--build", action="store_true")
    up.add_argument("-j", "--js-engine", dest="js_engine")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line tool and return its exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    verbose = getattr(args, "verbose", False)
    if args.version:
        print_version(PROG, verbose)
        return 0

    init_logging(verbose)

    if args.cmd is None:
        parser.print_help()
        return 2
    try:
        args.run(args)
    except (CommandError, OSError, ValueError) as err:
        _say(_RED, f"Something wrong:\n  {err}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())