# src/elementscope/core/command_registry.py
import importlib
import logging
import pkgutil
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

HANDLERS_PACKAGE = "elementscope.core.handlers"

# The central registries, populated dynamically.
CommandRegistry: Dict[str, Callable[[List[str]], int]] = {}
COMMAND_HELP_TEXTS: Dict[str, str] = {}


def register_command(name: str, handler: Callable[[List[str]], int]) -> None:
    """Adds a command and its handler function to the registry."""
    CommandRegistry[name] = handler
    logger.debug("Registered command '%s'", name)


def register_all_commands() -> None:
    """
    Imports every '*_handler' module of the handlers package and registers
    its 'handle_<name>' functions and '<name>_help_text' strings.
    """
    if CommandRegistry:
        return

    handlers_pkg = importlib.import_module(HANDLERS_PACKAGE)
    for _, module_name, _ in pkgutil.iter_modules(handlers_pkg.__path__):
        if not module_name.endswith("_handler"):
            continue
        try:
            module = importlib.import_module(f"{HANDLERS_PACKAGE}.{module_name}")
        except Exception as e:
            logger.error("Failed to load handler module %s: %s", module_name, e, exc_info=True)
            continue

        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if attr_name.startswith("handle_") and callable(attr):
                register_command(attr_name[len("handle_"):], attr)
            elif attr_name.endswith("_help_text") and isinstance(attr, str):
                COMMAND_HELP_TEXTS[attr_name[:-len("_help_text")]] = attr

    logger.debug("Successfully registered %d handlers.", len(CommandRegistry))
