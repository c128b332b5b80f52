"""
Configuration module for blockchat.
Centralizes default values and configuration constants.
"""

# Calendly API endpoints
CALENDLY_API_BASE = "https://api.calendly.com"
CALENDLY_EVENT_TYPES_URL = f"{CALENDLY_API_BASE}/event_types"
CALENDLY_AVAILABILITY_URL = f"{CALENDLY_API_BASE}/event_type_available_times"

# Request timeout for provider calls (seconds)
DEFAULT_TIMEOUT = 10

# Conversation context slot that receives the resolved event type URI
EVENT_TYPE_URI_SLOT = "context.vars.typeuri"

# Reply texts
MISSING_INPUT_TEXT = "Event name, user, start time, and end time are required."
EVENT_NOT_FOUND_TEXT = 'Event "{event_name}" not found for user "{user}".'
AVAILABLE_TIMES_HEADER = 'Available times for event "{event_name}":'
NO_AVAILABILITY_TEXT = 'No available times found for event "{event_name}" within the given time range.'
PLUGIN_FAILURE_TEXT = 'Sorry, something went wrong while running "{plugin}".'

# Flask dev server defaults
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5030
