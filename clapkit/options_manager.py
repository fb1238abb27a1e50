# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Manages runtime options across named namespaces.

The `OptionsManager` provides a small interface for retrieving, setting and toggling
options stored in `argparse.Namespace` objects. Each namespace is keyed by name
(e.g. "editor", "cli_args") so several sources of configuration can live side by side.

The line editor keeps its `insert_mode` flag in the "editor" namespace, which lets a
host application share or observe editor state without reaching into the editor.

Typical Usage:
    options = OptionsManager()
    options.set("insert_mode", True, namespace_name="editor")
    options.toggle("insert_mode", namespace_name="editor")
"""

from argparse import Namespace
from collections import defaultdict
from typing import Any

from clapkit.logger import logger


class OptionsManager:
    """
    Manages option state across multiple argparse namespaces.

    Allows dynamic retrieval, setting, toggling and introspection of options.
    """

    def __init__(self, namespaces: list[tuple[str, Namespace]] | None = None) -> None:
        self.options: defaultdict = defaultdict(Namespace)
        if namespaces:
            for namespace_name, namespace in namespaces:
                self.from_namespace(namespace, namespace_name)

    def from_namespace(
        self, namespace: Namespace, namespace_name: str = "cli_args"
    ) -> None:
        self.options[namespace_name] = namespace

    def get(
        self, option_name: str, default: Any = None, namespace_name: str = "cli_args"
    ) -> Any:
        """Get the value of an option."""
        return getattr(self.options[namespace_name], option_name, default)

    def set(self, option_name: str, value: Any, namespace_name: str = "cli_args") -> None:
        """Set the value of an option."""
        setattr(self.options[namespace_name], option_name, value)

    def has_option(self, option_name: str, namespace_name: str = "cli_args") -> bool:
        """Check if an option exists in the namespace."""
        return hasattr(self.options[namespace_name], option_name)

    def toggle(self, option_name: str, namespace_name: str = "cli_args") -> None:
        """Toggle a boolean option."""
        current = self.get(option_name, namespace_name=namespace_name)
        if not isinstance(current, bool):
            raise TypeError(
                f"Cannot toggle non-boolean option: '{option_name}' in '{namespace_name}'"
            )
        self.set(option_name, not current, namespace_name=namespace_name)
        logger.debug(
            "Toggled '%s' in '%s' to %s", option_name, namespace_name, not current
        )

