import logging
import sys
from typing import List, Optional

from elementscope.core.command_registry import (
    COMMAND_HELP_TEXTS,
    CommandRegistry,
    register_all_commands,
)
from elementscope.core.managers.config_manager import config_manager
from elementscope.core.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)


def print_help() -> None:
    print("Usage: elementscope <command> [options]\n")
    for name in sorted(COMMAND_HELP_TEXTS):
        print(COMMAND_HELP_TEXTS[name])
        print()


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for the elementscope command line."""
    configure_logger(config_manager.get_nested("debug.level", "INFO"))
    register_all_commands()

    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0] in ("help", "-h", "--help"):
        print_help()
        return 0

    command, command_args = args[0], args[1:]
    handler = CommandRegistry.get(command)
    if handler is None:
        print(f"❌ Unknown command '{command}'. Type 'elementscope help' for commands.")
        return 1

    try:
        return handler(command_args)
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        logger.error("Command '%s' failed: %s", command, e, exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
