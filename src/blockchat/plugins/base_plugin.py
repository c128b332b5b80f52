"""
Base Plugin - Abstract base class for all block plugins

A block plugin is invoked by the chatbot's block-execution pipeline when a
conversation reaches a block that names it. It receives the block, the
conversation context and the conversation id, and returns a reply envelope.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional
import logging

logger = logging.getLogger(__name__)

TEXT_FORMAT = "text"


def text_envelope(text: str) -> Dict[str, Any]:
    """Build a text-format reply envelope."""
    return {
        'format': TEXT_FORMAT,
        'message': {'text': text}
    }


class BaseBlockPlugin(ABC):
    """
    Abstract base class for all block plugins.

    Each plugin should:
    1. Declare a unique name and a template describing it
    2. Implement process() returning a reply envelope
    3. Never raise past process(); failures end in a text reply
    """

    template: Dict[str, Any] = {'name': 'Block Plugin'}

    def __init__(self, name: str, enabled: bool = True, **config):
        """
        Initialize the plugin with configuration.

        Args:
            name: Plugin identifier used by blocks to reference it
            enabled: Whether this plugin is enabled
            **config: Plugin-specific configuration parameters
        """
        self.name = name
        self.enabled = enabled
        self.config = config

    def get_arguments(self, block: Dict[str, Any]) -> Dict[str, Any]:
        """
        Return the plugin arguments carried by a block.

        Args:
            block: Block definition from the host

        Returns:
            The block's message.args, or an empty dict if it has none
        """
        message = (block or {}).get('message') or {}
        args = message.get('args') if isinstance(message, dict) else None
        if not isinstance(args, dict):
            logger.debug(f"Block {(block or {}).get('name', '?')} has no arguments")
            return {}
        return args

    @abstractmethod
    async def process(
        self,
        block: Dict[str, Any],
        context: Dict[str, Any],
        conversation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Run the plugin for a block.

        Args:
            block: Block definition (carries plugin arguments)
            context: Conversation-scoped variables resolved by the host
            conversation_id: Identifies the conversation for persistence

        Returns:
            Reply envelope: {'format': 'text', 'message': {'text': str}}
        """
        pass

    def is_available(self) -> bool:
        """
        Check if the plugin is enabled and properly configured.

        Returns:
            True if the plugin can be used
        """
        if not self.enabled:
            logger.debug(f"{self.name} plugin is disabled")
            return False

        for key in self.get_required_config():
            if key not in self.config or not self.config[key]:
                logger.warning(f"{self.name} plugin missing required config: {key}")
                return False

        return True

    def get_required_config(self) -> List[str]:
        """
        Return list of required configuration keys.

        Override this in subclasses to specify required config.
        """
        return []

    def get_plugin_description(self) -> str:
        """Human-readable description of what this plugin does."""
        return f"{self.template.get('name', self.name)}"

    async def health_check(self) -> bool:
        """
        Perform a health check on the plugin's external service.

        Returns:
            True if the service is healthy and reachable
        """
        return self.is_available()
