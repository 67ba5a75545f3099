"""Installable plugins."""

from crabgen.plugins.auth import AuthPlugin
from crabgen.plugins.base import InstallConfig, Plugin, PluginPlan
from crabgen.scaffolder.errors import UnsupportedOption

PLUGINS: dict[str, type[Plugin]] = {
    AuthPlugin.name: AuthPlugin,
}


def get_plugin(name: str) -> Plugin:
    """Return a fresh instance of the plugin called *name*.

    Raises:
        UnsupportedOption: If no such plugin exists.
    """
    key = name.strip().lower()
    if key not in PLUGINS:
        available = ", ".join(sorted(PLUGINS))
        raise UnsupportedOption(f"Unknown plugin {name!r} (available: {available})")
    return PLUGINS[key]()


__all__ = ["AuthPlugin", "InstallConfig", "PLUGINS", "Plugin", "PluginPlan", "get_plugin"]
