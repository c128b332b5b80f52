"""
Plugin Registry - Builds block plugins and dispatches blocks to them

The host's block-execution pipeline hands a block, the conversation context
and the conversation id to the registry, which runs the named plugin and
returns its reply envelope.
"""

import os
import logging
from typing import Dict, Any, List, Optional

from .conversation import ConversationService, InMemoryConversationService
from .plugins.base_plugin import BaseBlockPlugin, text_envelope
from .plugins.calendly_plugin import CalendlyAvailabilityBlock
from .config import (
    CALENDLY_EVENT_TYPES_URL,
    CALENDLY_AVAILABILITY_URL,
    DEFAULT_TIMEOUT,
    PLUGIN_FAILURE_TEXT,
)

logger = logging.getLogger(__name__)


class PluginRegistry:
    """
    Manages plugin registration and block dispatch.

    The registry:
    1. Builds the plugins enabled in the environment
    2. Looks plugins up by the name blocks reference them with
    3. Runs a block and guarantees a text envelope comes back
    """

    def __init__(self, conversations: Optional[ConversationService] = None):
        """
        Initialize the registry with configured plugins.

        Args:
            conversations: Conversation store shared with plugins
        """
        self.conversations = conversations or InMemoryConversationService()
        self.plugins: Dict[str, BaseBlockPlugin] = {}
        self._initialize_plugins()

    def register(self, plugin: BaseBlockPlugin) -> None:
        """Add a plugin, replacing any plugin with the same name."""
        self.plugins[plugin.name] = plugin
        logger.info(f"✓ {plugin.name} registered")

    def _initialize_plugins(self):
        """
        Initialize plugins based on environment configuration.

        Plugins are only registered if:
        1. PLUGIN_<NAME>_ENABLED is true
        2. Required configuration is present (e.g., API token)
        """
        calendly_enabled = os.getenv('PLUGIN_CALENDLY_ENABLED', 'false').lower() == 'true'
        calendly_token = os.getenv('CALENDLY_API_TOKEN', '')

        if calendly_enabled and calendly_token:
            try:
                self.register(CalendlyAvailabilityBlock(
                    api_token=calendly_token,
                    event_types_url=os.getenv('CALENDLY_EVENT_TYPES_URL', CALENDLY_EVENT_TYPES_URL),
                    availability_url=os.getenv('CALENDLY_AVAILABILITY_URL', CALENDLY_AVAILABILITY_URL),
                    user_uri=os.getenv('CALENDLY_USER_URI') or None,
                    timeout=float(os.getenv('CALENDLY_TIMEOUT', str(DEFAULT_TIMEOUT))),
                    conversation_service=self.conversations,
                    enabled=True
                ))
            except Exception as e:
                logger.error(f"Failed to initialize Calendly plugin: {e}")
        elif calendly_enabled:
            logger.warning("Calendly plugin enabled but CALENDLY_API_TOKEN not configured")
        else:
            logger.debug("Calendly plugin disabled in configuration")

        logger.info(f"Plugin registry initialized with {len(self.plugins)} active plugins")

    def get_plugin(self, name: str) -> BaseBlockPlugin:
        """
        Look up a plugin by name.

        Raises:
            KeyError: If no plugin with that name is registered
        """
        try:
            return self.plugins[name]
        except KeyError:
            raise KeyError(f"Unknown plugin: {name}") from None

    def get_active_plugins(self) -> List[str]:
        """Names of the plugins that are currently available."""
        return [name for name, plugin in self.plugins.items() if plugin.is_available()]

    async def run_block(
        self,
        plugin_name: str,
        block: Dict[str, Any],
        context: Dict[str, Any],
        conversation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Run a block through the plugin it names.

        Args:
            plugin_name: Registered plugin name
            block: Block definition
            context: Conversation context
            conversation_id: Conversation identifier

        Returns:
            The plugin's reply envelope, or an apology envelope if it failed

        Raises:
            KeyError: If the plugin is not registered
        """
        plugin = self.get_plugin(plugin_name)

        try:
            logger.info(f"Running block {(block or {}).get('name', '?')} with {plugin_name}")
            return await plugin.process(block, context, conversation_id)
        except Exception as e:
            logger.error(f"Error running {plugin_name} plugin: {e}", exc_info=True)
            return text_envelope(PLUGIN_FAILURE_TEXT.format(plugin=plugin_name))

    async def health_check_all(self) -> Dict[str, bool]:
        """
        Check health of all registered plugins.

        Returns:
            Dictionary mapping plugin names to health status
        """
        health_status = {}

        for name, plugin in self.plugins.items():
            try:
                health_status[name] = await plugin.health_check()
            except Exception as e:
                logger.error(f"Health check failed for {name}: {e}")
                health_status[name] = False

        return health_status

    def get_plugin_info(self) -> List[Dict[str, Any]]:
        """Information about all registered plugins."""
        return [
            {
                'name': name,
                'template': plugin.template,
                'description': plugin.get_plugin_description(),
                'enabled': plugin.enabled,
                'available': plugin.is_available(),
            }
            for name, plugin in self.plugins.items()
        ]


# Global registry instance
_registry_instance = None


def get_plugin_registry() -> PluginRegistry:
    """
    Get the global plugin registry instance (singleton pattern).

    Returns:
        PluginRegistry instance
    """
    global _registry_instance

    if _registry_instance is None:
        _registry_instance = PluginRegistry()

    return _registry_instance


def reset_plugin_registry():
    """
    Reset the global plugin registry (useful for testing or config reload).
    """
    global _registry_instance
    _registry_instance = None
    logger.info("Plugin registry reset")
