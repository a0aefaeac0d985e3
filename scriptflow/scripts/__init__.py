# scriptflow/scripts/__init__.py
"""
Wrapper scripts package.
Discovers every ``ff_*`` module and gives the flow runner and the server one place to find them.
"""

import importlib
import pkgutil
from typing import Dict, Optional

from scriptflow.command_runner.base_script import BaseScript


class ScriptManager:
    """
    Manages discovery of the wrapper scripts.

    Every module of this package exposing ``get_script()`` is registered
    under the script's ``name``.
    """

    def __init__(self):
        self.scripts: Dict[str, BaseScript] = {}
        self._discover_scripts()

    def _discover_scripts(self) -> None:
        """
        Automatically discover and register all wrapper scripts.
        """
        package = importlib.import_module(__name__)

        for _, name, is_pkg in pkgutil.iter_modules(package.__path__):
            if is_pkg or not name.startswith("ff_"):
                continue
            module = importlib.import_module(f".{name}", __name__)
            if hasattr(module, "get_script"):
                script = module.get_script()
                self.scripts[script.name] = script

    def get_script(self, name: str) -> Optional[BaseScript]:
        """
        Get a wrapper script by name.

        Args:
            name: Script name, e.g. ``ff_scale``

        Returns:
            Optional script instance, None if not found
        """
        return self.scripts.get(name)

    def module_name(self, name: str) -> Optional[str]:
        """Importable module running the script with ``python -m``."""
        script = self.scripts.get(name)
        if script is None:
            return None
        return type(script).__module__

    def list_scripts(self) -> Dict[str, str]:
        """
        List all available wrapper scripts.

        Returns:
            Dict mapping script names to their summaries
        """
        return {name: script.summary for name, script in sorted(self.scripts.items())}


_SCRIPT_MANAGER: Optional[ScriptManager] = None


def get_script_manager() -> ScriptManager:
    """Create the script manager on first use.

    Discovery is deferred so that ``python -m scriptflow.scripts.ff_x`` does not
    import its own module twice.
    """
    global _SCRIPT_MANAGER
    if _SCRIPT_MANAGER is None:
        _SCRIPT_MANAGER = ScriptManager()
    return _SCRIPT_MANAGER
