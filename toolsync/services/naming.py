"""
Tool Name Normalization
Converts Composio tool identifiers into readable, comparable and
ElevenLabs-safe names.

Examples:
    CALENDLY_CANCEL_EVENT -> "Cancel event"      (to_readable)
    "Cancel event"        -> "cancel event"      (to_canonical)
    "Cancel event"        -> "Cancel_event"      (to_platform_safe_name)
"""

import re

MAX_PLATFORM_NAME_LENGTH = 64

_TOOLKIT_PREFIX = re.compile(r"^[A-Z]+_")
_ENTRY_PREFIX = re.compile(r"^[A-Z]+[\s_]+")
_SEPARATORS = re.compile(r"[_\-\s]+")
_WHITESPACE = re.compile(r"\s+")
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")
_ONE_OFF = re.compile(r"\bOne Off\b", re.IGNORECASE)

# Action verbs are always capitalized
_VERBS = {
    "CANCEL": "Cancel",
    "CREATE": "Create",
    "GET": "Get",
    "LIST": "List",
    "ADD": "Add",
    "UPDATE": "Update",
    "DELETE": "Delete",
    "SEARCH": "Search",
}

# Fixed casing regardless of position
_FIXED_CASE = {
    "EVENTS": "events",
    "INVITEES": "invitees",
    "UID": "uid",
    "CURRENT": "Current",
    "INVITEE": "Invitee",
    "TYPE": "Type",
    "NO": "No",
    "SHOW": "Show",
    "ONE": "One",
    "OFF": "Off",
}

# Lowercased unless they open the phrase
_MID_PHRASE_LOWER = {"EVENT": "event", "USER": "user"}

# Acronyms keep the vendor's spelling
_KEEP_AS_WRITTEN = {"ID", "IDS", "CRM"}


def _readable_word(word: str, index: int) -> str:
    upper_word = word.upper()

    if upper_word in _VERBS:
        return _VERBS[upper_word]
    if upper_word in _MID_PHRASE_LOWER and index > 0:
        return _MID_PHRASE_LOWER[upper_word]
    if upper_word in _FIXED_CASE:
        return _FIXED_CASE[upper_word]
    if upper_word in _KEEP_AS_WRITTEN:
        return word

    return word[:1].upper() + word[1:].lower()


def to_readable(vendor_name: str) -> str:
    """
    Convert a Composio SCREAMING_SNAKE_CASE tool name to a readable phrase

    Names without an underscore are returned unchanged.
    """
    if "_" not in vendor_name:
        return vendor_name

    without_prefix = _TOOLKIT_PREFIX.sub("", vendor_name, count=1)
    words = [
        _readable_word(word, index)
        for index, word in enumerate(without_prefix.split("_"))
    ]
    return _ONE_OFF.sub("One-Off", " ".join(words))


def to_canonical(name: str) -> str:
    """Comparison-only folding: lowercase, separators collapsed to one space"""
    return _SEPARATORS.sub(" ", name.lower()).strip()


def to_platform_safe_name(name: str) -> str:
    """Identifier accepted by ElevenLabs: [A-Za-z0-9_-], at most 64 chars"""
    underscored = _WHITESPACE.sub("_", name)
    return _UNSAFE_CHARS.sub("", underscored)[:MAX_PLATFORM_NAME_LENGTH]


def strip_prefix(name: str) -> str:
    """Drop a leading ALLCAPS token such as "CALENDLY_" or "HUBSPOT "."""
    return _ENTRY_PREFIX.sub("", name, count=1)


def display_name(vendor_name: str) -> str:
    """Readable name shown for a vendor tool"""
    return to_readable(vendor_name)


def registered_name(vendor_name: str) -> str:
    """Name a vendor tool is registered under on the platform"""
    return to_platform_safe_name(display_name(vendor_name))


# Integration type -> Composio toolkit slug
TOOLKITS = {
    "calendly": "CALENDLY",
    "cal": "CAL",
    "hubspot": "HUBSPOT",
    "pipedrive": "PIPEDRIVE",
    "salesforce": "SALESFORCE",
}


def resolve_toolkit(integration_type: str) -> str:
    """Composio toolkit for an integration type, uppercased type when unmapped"""
    return TOOLKITS.get(integration_type.lower(), integration_type.upper())
