"""
Tool Whitelist
Decides which Composio tools are exposed to a tenant's voice agent.

Vendor tool names are inconsistently cased and prefixed across connectors,
so matching runs in tiers and stops at the first hit:

1. exact      - canonical raw name equals a canonical allow-list entry
                (entries are also compiled with their toolkit prefix)
2. readable   - canonical readable name equals an entry, as written or with
                the entry's own prefix token stripped
3. heuristics - narrow, named aliases for known vendor naming drift

Integration types without an allow-list are unrestricted.
"""

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from toolsync.core.logging import get_logger
from toolsync.services.naming import (
    resolve_toolkit,
    strip_prefix,
    to_canonical,
    to_readable,
)

logger = get_logger(__name__)


# One entry per permitted action; casing and spacing variants are folded
# when the table is compiled.
ALLOWED_TOOLS: Dict[str, List[str]] = {
    "hubspot": [
        "Create contact",
        "Create ticket",
        "Create tickets",
        "Get contact IDs",
        "Get ticket",
        "Get tickets",
        "List contacts",
        "Merge contacts",
        "Partially update CRM object by ID",
        "Read a page of objects by type",
        "Read contact",
        "Read contacts",
        "Read crm object by id",
        "Search contacts by criteria",
        "Update contact",
        "Update ticket",
        "Update tickets",
    ],
    "salesforce": [
        "Add contact to campaign",
        "Add lead to campaign",
        "Complete task",
        "Create account",
        "Create campaign",
        "Create contact",
        "Create lead",
        "Create note",
        "Create opportunity",
        "Create task",
        "Delete account",
        "Delete contact",
        "Delete lead",
        "Get account",
        "Get contact",
        "Get lead",
        "Get opportunity",
        "Get user info",
        "List accounts",
        "List contacts",
        "List leads",
        "List opportunities",
        "List pricebook entries",
        "List pricebooks",
        "Retrieve lead by id",
        "Retrieve opportunities data",
        "Retrieve specific contact by id",
        "Search accounts",
        "Search campaigns",
        "Search contacts",
        "Search leads",
        "Search notes",
        "Search opportunities",
        "Search tasks",
        "Update account",
        "Update contact",
        "Update lead",
        "Update opportunity",
    ],
    "pipedrive": [
        "Add a call log",
        "Add a deal",
        "Add a lead",
        "Add an activity",
        "Add a note",
        "Add a person",
        "Add a product",
        "Add a task",
        "Find users by name",
        "Get all call logs assigned to a particular user",
        "Get all leads",
        "Get all persons",
        "Get all products",
        "Get all tasks",
        "Get details of a call log",
        "Get one lead",
        "Search leads",
        "Search persons",
        "Search products",
        "Update a deal",
        "Update a person",
    ],
    "cal": [
        "Cancel booking via uid",
        "Check calendar availability",
        "Confirm booking by uid",
        "Create phone call event",
        "Decline booking with reason",
        "Delete event type by id",
        "Delete selected slot",
        "Fetch all bookings",
        "Get available slots info",
        "Post a new booking request",
        "Reschedule booking by uid",
        "Retrieve calendar list",
    ],
    "calendly": [
        # Identity and scoping
        "Get user",
        "Get current user",
        # Meeting types the agent can book
        "List user event types",
        "List event types",
        "Create one-off event type",
        "List event type hosts",
        "Get event type hosts",
        # Availability
        "List user availability schedules",
        "List availability schedules",
        "Get user availability schedule",
        "List user busy times",
        "List busy times",
        # Booking links
        "Create single use scheduling link",
        "Create scheduling link",
        # Booked events
        "List events",
        "Get events",
        "Fetch events",
        "Get event",
        "Cancel event",
        "List event invitees",
        # Optional extras
        "List webhook subscriptions",
        "Get webhook subscriptions",
        "List routing forms",
        "Get routing forms",
    ],
}


@dataclass(frozen=True)
class AllowList:
    """Canonicalized allow-list for one integration type"""
    entries: Tuple[str, ...]
    exact: FrozenSet[str]
    unprefixed: FrozenSet[str]

    @classmethod
    def compile(cls, integration_type: str, entries: Iterable[str]) -> "AllowList":
        toolkit = to_canonical(resolve_toolkit(integration_type))
        canonical = tuple(dict.fromkeys(to_canonical(entry) for entry in entries))
        exact = set(canonical)
        exact.update(f"{toolkit} {entry}" for entry in canonical)
        unprefixed = {to_canonical(strip_prefix(entry)) for entry in entries}
        return cls(entries=canonical, exact=frozenset(exact), unprefixed=frozenset(unprefixed))

    def find_containing(self, phrase: str) -> Optional[str]:
        """First entry whose canonical form contains phrase"""
        for entry in self.entries:
            if phrase in entry:
                return entry
        return None


ALLOW_LISTS: Dict[str, AllowList] = {
    integration_type: AllowList.compile(integration_type, entries)
    for integration_type, entries in ALLOWED_TOOLS.items()
}


def matches_current_user_alias(readable: str, allow_list: AllowList) -> bool:
    """Get current user is accepted wherever Get user is allowed"""
    if "get" not in readable or "current user" not in readable:
        return False
    return allow_list.find_containing("get user") is not None


def matches_event_invitee_alias(readable: str, allow_list: AllowList) -> bool:
    """Get event invitee is accepted wherever List event invitees is allowed"""
    if not all(word in readable for word in ("get", "event", "invitee")):
        return False
    return allow_list.find_containing("list event invitees") is not None


LIST_EVENTS_VERBS = ("list", "get", "fetch")
LIST_EVENTS_NOUNS = ("event", "events", "scheduled")
LIST_EVENTS_BLOCKLIST = (
    "event_type",
    "event_invitee",
    "cancel",
    "create",
    "delete",
    "update",
    "current_user",
    "group",
    "organization",
    "invitee_no_show",
    "webhook",
    "share",
    "scheduling_link",
)


def looks_like_list_events(raw_name: str, allow_list: AllowList) -> bool:
    """
    Accept vendor variants of "List events" (e.g. LIST_SCHEDULED_EVENTS)

    Only applies when "List events" is allowed. The candidate needs a listing
    verb and an event noun, and none of the blocklisted fragments.
    """
    if allow_list.find_containing("list events") is None:
        return False

    snake = "_".join(to_canonical(raw_name).split())
    if not any(verb in snake for verb in LIST_EVENTS_VERBS):
        return False
    if not any(noun in snake for noun in LIST_EVENTS_NOUNS):
        return False
    return not any(blocked in snake for blocked in LIST_EVENTS_BLOCKLIST)


HEURISTICS: Tuple[Tuple[str, Callable[[str, str, AllowList], bool]], ...] = (
    ("current_user_alias", lambda raw, readable, allowed: matches_current_user_alias(readable, allowed)),
    ("event_invitee_alias", lambda raw, readable, allowed: matches_event_invitee_alias(readable, allowed)),
    ("list_events", lambda raw, readable, allowed: looks_like_list_events(raw, allowed)),
)


def has_allow_list(integration_type: str) -> bool:
    """Whether tools of this integration type are filtered at all"""
    return integration_type.lower() in ALLOW_LISTS


def match_tool(raw_name: str, integration_type: str) -> Optional[str]:
    """
    Name of the tier that admits a tool, or None when it is rejected

    Returns "unrestricted" for integration types without an allow-list.
    """
    allow_list = ALLOW_LISTS.get(integration_type.lower())
    if allow_list is None:
        return "unrestricted"

    if to_canonical(raw_name) in allow_list.exact:
        return "exact"

    readable = to_canonical(to_readable(raw_name))
    if readable in allow_list.exact or readable in allow_list.unprefixed:
        return "readable"

    for tier, predicate in HEURISTICS:
        if predicate(raw_name, readable, allow_list):
            return tier

    return None


def is_allowed(raw_name: str, integration_type: str) -> bool:
    """Whether a Composio tool may be registered for this integration type"""
    tier = match_tool(raw_name, integration_type)

    if tier:
        logger.debug(f"Allowed {raw_name} for {integration_type} ({tier} match)")
    else:
        logger.debug(f"Rejected {raw_name} for {integration_type}")

    return tier is not None
