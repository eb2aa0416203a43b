"""
Environment facts providers.

The aggregator asks a provider for the host's environment facts each time it
builds a payload, so the inventory reflects the state at flush time.
"""

import platform
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from telemetry_client.config import Settings, settings as default_settings
from telemetry_client.models.environment import ComponentInfo, EnvironmentFacts


class EnvironmentProvider(ABC):
    """Supplies facts about the host installation."""
    
    @abstractmethod
    def get_facts(self) -> EnvironmentFacts:
        """Return the current environment facts."""
        pass


class StaticEnvironmentProvider(EnvironmentProvider):
    """
    Provider built from settings plus a host-maintained component inventory.
    
    The host registers its installed plugins and themes; activation state can
    change between flushes.
    """
    
    def __init__(
        self,
        settings: Optional[Settings] = None,
        plugins: Optional[Iterable[ComponentInfo]] = None,
        themes: Optional[Iterable[ComponentInfo]] = None,
        runtime_version: Optional[str] = None,
    ):
        self.settings = settings or default_settings
        self.runtime_version = runtime_version or platform.python_version()
        self._plugins: List[ComponentInfo] = list(plugins or [])
        self._themes: List[ComponentInfo] = list(themes or [])
    
    def register_plugin(self, plugin: ComponentInfo) -> None:
        """Add or replace (by slug) an installed plugin."""
        self._plugins = [p for p in self._plugins if p.slug != plugin.slug] + [plugin]
    
    def register_theme(self, theme: ComponentInfo) -> None:
        """Add or replace (by slug) an installed theme."""
        self._themes = [t for t in self._themes if t.slug != theme.slug] + [theme]
    
    def get_facts(self) -> EnvironmentFacts:
        return EnvironmentFacts(
            site_url=self.settings.site_url,
            platform_version=self.settings.platform_version,
            runtime_version=self.runtime_version,
            is_multisite=self.settings.is_multisite,
            locale=self.settings.locale,
            plugins=list(self._plugins),
            themes=list(self._themes),
        )
