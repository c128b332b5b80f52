"""
blockchat

Chatbot block plugins and the thin host that runs them.

Main exports:
- BaseBlockPlugin: Interface every block plugin implements
- CalendlyAvailabilityBlock: Lists available dates of a Calendly event type
- PluginRegistry: Builds plugins from configuration and runs blocks
- InMemoryConversationService: Conversation store used by the host
"""

from .plugins import BaseBlockPlugin, CalendlyAvailabilityBlock
from .plugin_registry import PluginRegistry, get_plugin_registry
from .conversation import ConversationService, InMemoryConversationService

__version__ = "0.1.0"

__all__ = [
    'BaseBlockPlugin',
    'CalendlyAvailabilityBlock',
    'PluginRegistry',
    'get_plugin_registry',
    'ConversationService',
    'InMemoryConversationService',
]
