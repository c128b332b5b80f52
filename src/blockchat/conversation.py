"""
Conversation Service - Host-owned conversation persistence

Defines the interface plugins use to write into a conversation's persisted
context, plus an in-memory implementation used by the bundled host.
"""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class ConversationService(ABC):
    """
    Abstract base class for conversation stores.

    Updates are expressed as dotted key paths, e.g.
    {'context.vars.typeuri': 'https://...'}.
    """

    @abstractmethod
    async def update_one(self, conversation_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply dotted-path updates to a conversation.

        Args:
            conversation_id: Conversation to update (created if missing)
            updates: Mapping of dotted key path to value

        Returns:
            The updated conversation document
        """
        pass

    @abstractmethod
    async def get(self, conversation_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a conversation document, or None if it does not exist."""
        pass


def set_path(document: Dict[str, Any], path: str, value: Any) -> None:
    """Set a dotted key path inside a nested dict, creating levels as needed."""
    keys = path.split('.')
    if not all(keys):
        raise ValueError(f"Invalid key path: {path!r}")

    node = document
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[keys[-1]] = value


class InMemoryConversationService(ConversationService):
    """Keeps conversation documents in a process-local dict."""

    def __init__(self):
        self._conversations: Dict[str, Dict[str, Any]] = {}

    async def update_one(self, conversation_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        if not conversation_id:
            raise ValueError("conversation_id is required")

        document = self._conversations.setdefault(
            conversation_id,
            {'id': conversation_id, 'context': {'vars': {}}}
        )
        for path, value in updates.items():
            set_path(document, path, value)

        logger.debug(f"Conversation {conversation_id} updated: {list(updates)}")
        return copy.deepcopy(document)

    async def get(self, conversation_id: str) -> Optional[Dict[str, Any]]:
        document = self._conversations.get(conversation_id)
        return copy.deepcopy(document) if document is not None else None
