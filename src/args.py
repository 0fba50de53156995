"""Argument parsing functionality for brewprov."""

import argparse
import sys
from typing import List, Optional


def _add_package(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("PACKAGE",
                        help="Formula or cask name, or a formula URL",
                        type=str)


def _add_install_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-o", "--install-option",
                        dest="INSTALL_OPTIONS",
                        help="Extra flag passed verbatim to brew (repeatable, e.g. -o=--HEAD); "
                             "flags after a bare -- are passed through as well",
                        action="append",
                        default=[],
                        type=str)


def _add_version(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--version",
                        dest="VERSION",
                        help="Explicit version, installed as <name>@<version>",
                        action="store",
                        type=str)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="brewprov",
        description="brewprov - Homebrew package provider (formulae and casks)",
        add_help=True,
    )
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML config file",
                        action="store",
                        type=str)
    parser.add_argument("--brew-path",
                        dest="BREW_PATH",
                        help="Path to the brew executable",
                        action="store",
                        type=str)

    sub = parser.add_subparsers(dest="action")

    sub.add_parser("list", help="List installed packages")

    for name, help_text in (
        ("query", "Show the installed record for a package"),
        ("latest", "Show the latest available version of a package"),
        ("installed", "Report whether brew considers a package installed"),
        ("uninstall", "Uninstall a package"),
    ):
        _add_package(sub.add_parser(name, help=help_text))

    sp_install = sub.add_parser("install", help="Install a package")
    _add_package(sp_install)
    _add_version(sp_install)
    _add_install_options(sp_install)

    sp_update = sub.add_parser("update", help="Upgrade a package, installing it if absent")
    _add_package(sp_update)
    _add_version(sp_update)
    _add_install_options(sp_update)

    sp_ensure = sub.add_parser("ensure", help="Reconcile a package to a desired state")
    _add_package(sp_ensure)
    sp_ensure.add_argument("-e", "--ensure",
                           dest="ENSURE",
                           help="present, absent, latest, or an explicit version",
                           action="store",
                           type=str,
                           default="present")
    _add_install_options(sp_ensure)
    sp_ensure.add_argument("--dry-run",
                           dest="DRY_RUN",
                           help="Print the planned action without executing it",
                           action="store_true")

    # Everything after the first bare "--" is handed to brew untouched.
    argv = list(sys.argv[1:] if argv is None else argv)
    passthrough: List[str] = []
    if "--" in argv:
        idx = argv.index("--")
        argv, passthrough = argv[:idx], argv[idx + 1:]

    ns = parser.parse_args(argv)
    if passthrough:
        if not hasattr(ns, "INSTALL_OPTIONS"):
            parser.error("install options after '--' are only accepted by install, update and ensure")
        ns.INSTALL_OPTIONS = list(ns.INSTALL_OPTIONS) + passthrough
    return ns
