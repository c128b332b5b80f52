"""
Calendly Plugin - Event type availability lookup

This block plugin resolves a Calendly event type by name and replies with
the dates that have free slots inside a time window.
"""

from typing import Dict, Any, List, Optional
from datetime import datetime, timezone
import logging
import re

import httpx

from .base_plugin import BaseBlockPlugin, text_envelope
from ..conversation import ConversationService
from ..config import (
    CALENDLY_EVENT_TYPES_URL,
    CALENDLY_AVAILABILITY_URL,
    DEFAULT_TIMEOUT,
    EVENT_TYPE_URI_SLOT,
    MISSING_INPUT_TEXT,
    EVENT_NOT_FOUND_TEXT,
    AVAILABLE_TIMES_HEADER,
    NO_AVAILABILITY_TEXT,
)

logger = logging.getLogger(__name__)

REQUIRED_INPUTS = ('event_name', 'user_uri', 'start_time', 'end_time')

# Seconds fraction of any length; normalised to microseconds before parsing
_FRACTION = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def slot_date(start_time: str) -> str:
    """
    Reduce an ISO-8601 timestamp to its UTC calendar date.

    A trailing 'Z' is accepted, naive timestamps are taken as UTC and
    fractional seconds of any precision are cut or padded to microseconds.

    Raises:
        ValueError: If the timestamp cannot be parsed
    """
    text = start_time.strip()
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'
    text = _FRACTION.sub(lambda m: f"{m.group(1)}.{(m.group(2) + '000000')[:6]}", text)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).date().isoformat()


class CalendlyAvailabilityBlock(BaseBlockPlugin):
    """
    Block plugin that lists available dates for a Calendly event type.

    Inputs are read from the conversation context vars first, then from the
    block arguments, then from plugin configuration:
    - event_name: display name of the event type (exact, case-sensitive)
    - user_uri: Calendly user resource URI owning the event type
    - start_time / end_time: ISO-8601 bounds of the availability window
    """

    template = {'name': 'Calendly Plugin'}

    def __init__(
        self,
        api_token: str = None,
        event_types_url: str = CALENDLY_EVENT_TYPES_URL,
        availability_url: str = CALENDLY_AVAILABILITY_URL,
        user_uri: str = None,
        timeout: float = DEFAULT_TIMEOUT,
        conversation_service: Optional[ConversationService] = None,
        enabled: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the Calendly plugin.

        Args:
            api_token: Calendly personal access token
            event_types_url: Endpoint listing a user's event types
            availability_url: Endpoint listing available times of an event type
            user_uri: Default user URI when the block and context supply none
            timeout: Request timeout in seconds
            conversation_service: Store receiving the resolved event type URI
            enabled: Whether this plugin is enabled
            transport: Optional httpx transport (used to stub the provider)
        """
        super().__init__(
            'calendly-plugin',
            enabled=enabled,
            api_token=api_token,
            user_uri=user_uri,
            timeout=timeout
        )
        self.api_token = api_token
        self.event_types_url = event_types_url.rstrip('/')
        self.availability_url = availability_url.rstrip('/')
        self.user_uri = user_uri
        self.timeout = timeout
        self.conversation_service = conversation_service
        self._transport = transport

    def get_required_config(self) -> List[str]:
        """Required configuration keys for the Calendly plugin."""
        return ['api_token']

    def get_plugin_description(self) -> str:
        return "Calendly plugin - lists available dates of a Calendly event type"

    def _headers(self) -> Dict[str, str]:
        return {'Authorization': f"Bearer {self.api_token}"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _get_collection(self, url: str, params: Dict[str, str], what: str) -> Optional[List[Any]]:
        """
        GET a Calendly listing and return its 'collection'.

        Returns:
            The collection list, or None if the request or body was bad
        """
        try:
            logger.info(f"Calling Calendly API for {what}: {url}")
            async with self._client() as client:
                response = await client.get(url, params=params, headers=self._headers())
                response.raise_for_status()
                data = response.json()

        except httpx.TimeoutException:
            logger.error(f"Calendly API timeout after {self.timeout}s fetching {what}")
            return None
        except httpx.HTTPStatusError as e:
            logger.error(f"Calendly API returned {e.response.status_code} fetching {what}")
            return None
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch {what} from Calendly: {e}")
            return None
        except ValueError as e:
            logger.error(f"Calendly API returned invalid JSON for {what}: {e}")
            return None

        collection = data.get('collection') if isinstance(data, dict) else None
        if not isinstance(collection, list):
            logger.error(f"Calendly API response for {what} has no collection")
            return None
        return collection

    async def resolve_event_uri(self, event_name: str, user_uri: str) -> Optional[str]:
        """
        Find the URI of the event type called event_name.

        Args:
            event_name: Event type display name (exact, case-sensitive match)
            user_uri: Calendly user resource URI

        Returns:
            URI of the first matching event type, or None
        """
        collection = await self._get_collection(
            self.event_types_url,
            {'user': user_uri},
            'event types'
        )
        if collection is None:
            return None

        for item in collection:
            if isinstance(item, dict) and item.get('name') == event_name:
                return item.get('uri')

        logger.info(f"No event type named '{event_name}' among {len(collection)} for {user_uri}")
        return None

    async def fetch_available_dates(self, event_uri: str, start_time: str, end_time: str) -> List[str]:
        """
        Fetch the dates with available slots for an event type.

        Args:
            event_uri: Event type URI from resolve_event_uri()
            start_time: ISO-8601 window start
            end_time: ISO-8601 window end (exclusive)

        Returns:
            Sorted list of unique UTC dates (YYYY-MM-DD); empty on failure
        """
        collection = await self._get_collection(
            self.availability_url,
            {'start_time': start_time, 'end_time': end_time, 'event_type': event_uri},
            'available times'
        )
        if collection is None:
            return []

        dates = set()
        for slot in collection:
            start = slot.get('start_time') if isinstance(slot, dict) else None
            if not isinstance(start, str):
                logger.warning(f"Skipping slot without start_time: {slot}")
                continue
            try:
                dates.add(slot_date(start))
            except ValueError:
                logger.warning(f"Skipping slot with unparseable start_time: {start}")

        return sorted(dates)

    def _resolve_inputs(self, block: Dict[str, Any], context: Dict[str, Any]) -> Dict[str, str]:
        """Pick each input from context vars, block args or plugin config."""
        context_vars = (context or {}).get('vars') or {}
        args = self.get_arguments(block)
        defaults = {'user_uri': self.user_uri}

        inputs = {}
        for key in REQUIRED_INPUTS:
            value = None
            for source in (context_vars, args, defaults):
                candidate = source.get(key)
                if candidate is not None and str(candidate).strip():
                    value = candidate if isinstance(candidate, str) else str(candidate)
                    break
            inputs[key] = value
        return inputs

    async def _persist_event_uri(self, conversation_id: Optional[str], uri: Optional[str]) -> None:
        if self.conversation_service is None or not conversation_id:
            return
        try:
            await self.conversation_service.update_one(conversation_id, {EVENT_TYPE_URI_SLOT: uri})
        except Exception as e:
            logger.error(
                f"Failed to persist event type URI for conversation {conversation_id}: {e}",
                exc_info=True
            )

    async def process(
        self,
        block: Dict[str, Any],
        context: Dict[str, Any],
        conversation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        inputs = self._resolve_inputs(block, context)
        missing = [key for key, value in inputs.items() if not value]
        if missing:
            logger.info(f"Calendly block missing inputs: {missing}")
            return text_envelope(MISSING_INPUT_TEXT)

        event_name = inputs['event_name']
        user_uri = inputs['user_uri']

        uri = await self.resolve_event_uri(event_name, user_uri)
        await self._persist_event_uri(conversation_id, uri)

        if not uri:
            return text_envelope(EVENT_NOT_FOUND_TEXT.format(event_name=event_name, user=user_uri))

        dates = await self.fetch_available_dates(uri, inputs['start_time'], inputs['end_time'])

        if dates:
            header = AVAILABLE_TIMES_HEADER.format(event_name=event_name)
            return text_envelope("\n".join([header] + dates))

        return text_envelope(NO_AVAILABILITY_TEXT.format(event_name=event_name))

    async def health_check(self) -> bool:
        """
        Check that the Calendly API accepts the configured token.

        Returns:
            True if GET /users/me succeeds
        """
        if not self.is_available():
            return False

        endpoint = f"{self.event_types_url.rsplit('/', 1)[0]}/users/me"
        try:
            async with self._client() as client:
                response = await client.get(endpoint, headers=self._headers())
                response.raise_for_status()
            logger.info("Calendly API health check passed")
            return True

        except httpx.HTTPError as e:
            logger.warning(f"Calendly API health check failed: {e}")
            return False
