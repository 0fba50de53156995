"""brewprov: manage Homebrew formulae and casks from a configuration agent.

Raises:
    SystemExit: with one of the ExitCodes values.
"""

import json
import logging
import sys
from typing import Any, Callable, Dict, List, Optional

from args import parse_args
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes, _load_yaml_config, apply_config
from provider.errors import BrewOwnershipError, ChecksumMismatchError, ProviderError
from provider.homebrew import HomebrewProvider
from provider.models import Ensure, ResourceSpec
from provider.runner import BrewRunner
from provider.state import reconcile

logger = logging.getLogger(__name__)


def _emit(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2) + "\n")


def _build_spec(args, default_ensure: Any = Ensure.PRESENT) -> ResourceSpec:
    ensure = getattr(args, "ENSURE", None) or getattr(args, "VERSION", None) or default_ensure
    return ResourceSpec(
        name=args.PACKAGE,
        ensure=ensure,
        install_options=list(getattr(args, "INSTALL_OPTIONS", None) or []),
    )


def cmd_list(args, runner: BrewRunner) -> int:
    records = HomebrewProvider.package_list(runner)
    _emit([r.to_dict() for r in records])
    return ExitCodes.SUCCESS.value


def cmd_query(args, runner: BrewRunner) -> int:
    record = HomebrewProvider(_build_spec(args), runner).query()
    _emit(record.to_dict() if record else None)
    return ExitCodes.SUCCESS.value


def cmd_latest(args, runner: BrewRunner) -> int:
    provider = HomebrewProvider(_build_spec(args), runner)
    _emit({"name": provider.resource_name, "latest": provider.latest()})
    return ExitCodes.SUCCESS.value


def cmd_installed(args, runner: BrewRunner) -> int:
    provider = HomebrewProvider(_build_spec(args), runner)
    _emit({"name": provider.install_name, "installed": provider.installed()})
    return ExitCodes.SUCCESS.value


def cmd_install(args, runner: BrewRunner) -> int:
    provider = HomebrewProvider(_build_spec(args), runner)
    provider.install()
    logger.info("Installed %s", provider.install_name)
    return ExitCodes.SUCCESS.value


def cmd_uninstall(args, runner: BrewRunner) -> int:
    provider = HomebrewProvider(_build_spec(args), runner)
    provider.uninstall()
    logger.info("Uninstalled %s", provider.resource_name)
    return ExitCodes.SUCCESS.value


def cmd_update(args, runner: BrewRunner) -> int:
    provider = HomebrewProvider(_build_spec(args, default_ensure=Ensure.LATEST), runner)
    provider.update()
    logger.info("Updated %s", provider.install_name)
    return ExitCodes.SUCCESS.value


def cmd_ensure(args, runner: BrewRunner) -> int:
    provider = HomebrewProvider(_build_spec(args), runner)
    result = reconcile(provider, dry_run=bool(getattr(args, "DRY_RUN", False)))
    _emit({
        "name": result.name,
        "before": result.before.value,
        "action": result.action,
        "ensure": result.after_ensure,
    })
    return ExitCodes.SUCCESS.value


COMMANDS: Dict[str, Callable[[Any, BrewRunner], int]] = {
    "list": cmd_list,
    "query": cmd_query,
    "latest": cmd_latest,
    "installed": cmd_installed,
    "install": cmd_install,
    "uninstall": cmd_uninstall,
    "update": cmd_update,
    "ensure": cmd_ensure,
}


def _setup(args) -> None:
    configure_logging(getattr(args, "LOG_LEVEL", None))
    if getattr(args, "LOG_FILE", None):
        add_file_handler(args.LOG_FILE)
    apply_config(_load_yaml_config(getattr(args, "CONFIG", None)))
    if getattr(args, "BREW_PATH", None):
        Constants.BREW_PATH = args.BREW_PATH


def dispatch(args, runner: Optional[BrewRunner] = None) -> int:
    """Run the selected action and map provider errors onto exit codes."""
    handler = COMMANDS.get(getattr(args, "action", None) or "")
    if handler is None:
        sys.stderr.write("Error: No action provided. Try 'brewprov --help'.\n")
        return ExitCodes.USAGE_ERROR.value

    runner = runner or BrewRunner(Constants.BREW_PATH)
    if not HomebrewProvider.suitable(runner):
        logger.error(
            "Homebrew provider is not suitable here (platform %s, brew at %s)",
            sys.platform,
            runner.brew_path,
        )
        return ExitCodes.UNSUITABLE.value

    if is_debug_enabled(logger):
        logger.debug(
            "Dispatching action",
            extra=extra_context(event="function_entry", component="cli", action=args.action),
        )
    try:
        return handler(args, runner)
    except BrewOwnershipError as exc:
        logger.error("%s", exc)
        return ExitCodes.PERMISSION_ERROR.value
    except ChecksumMismatchError as exc:
        logger.error("%s", exc)
        return ExitCodes.CHECKSUM_MISMATCH.value
    except ProviderError as exc:
        logger.error("%s", exc)
        return ExitCodes.PROVIDER_ERROR.value
    except ValueError as exc:
        logger.error("Invalid resource: %s", exc)
        return ExitCodes.USAGE_ERROR.value


def main(argv: Optional[List[str]] = None) -> None:
    """Main function of the program."""
    args = parse_args(argv)
    _setup(args)
    sys.exit(dispatch(args))


if __name__ == "__main__":
    main()
