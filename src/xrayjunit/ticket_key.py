"""Best-effort Xray ticket key resolution for JUnit test cases.

Every test case in the report carries a ``test_key`` property so Xray can link
the result to a test issue. The key is looked up in the scripts of the
originating request, then in the request name, and defaults to ``UNKNOWN``.
"""

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .scripts import get_event_exec_lines
from .tree import find_item_by_id, get_field, get_members

if TYPE_CHECKING:
    from .models import Execution

logger = logging.getLogger(__name__)

UNKNOWN_TEST_KEY = "UNKNOWN"
VENDOR_KEYWORD = "Xray"

PREREQUEST_SCRIPT = "prerequestScript"
ASSERTIONS = "assertions"
TEST_SCRIPT = "testScript"

TICKET_PATTERN = re.compile(r"([A-Z]+-\d+)")
VENDOR_TICKET_PATTERN = re.compile(VENDOR_KEYWORD + r"[\"'\s,:-]*([A-Z]+-\d+)")

SCOPE_BLOCK = "block"
SCOPE_SCRIPT = "script"


@dataclass(frozen=True)
class TicketMatcher:
    """One step of the lookup cascade.

    Attributes:
        scope: ``block`` searches inside the ``pm.test`` block named after the
            test case; ``script`` searches the whole script.
        pattern: Regex whose first group is the ticket key.
        anchor: Keyword the pattern is anchored to, if any.
    """

    scope: str
    pattern: re.Pattern[str]
    anchor: str | None = None

    def match(self, text: str) -> str | None:
        found = self.pattern.search(text)
        return found.group(1) if found else None


TICKET_MATCHERS: tuple[TicketMatcher, ...] = (
    TicketMatcher(SCOPE_BLOCK, VENDOR_TICKET_PATTERN, VENDOR_KEYWORD),
    TicketMatcher(SCOPE_BLOCK, TICKET_PATTERN),
    TicketMatcher(SCOPE_SCRIPT, VENDOR_TICKET_PATTERN, VENDOR_KEYWORD),
    TicketMatcher(SCOPE_SCRIPT, TICKET_PATTERN),
)


def block_pattern_for(testcase_name: str) -> re.Pattern[str]:
    """Build the regex for the body of ``pm.test("<testcase_name>", ...)``.

    The body runs up to the first ``});`` after the callback opens, which is
    not always the closing call of the block.
    """
    return re.compile(
        r"pm\.test\([\"']"
        + re.escape(testcase_name)
        + r"[\"']\s*,\s*(?:function\s*\([^)]*\)|\([^)]*\)\s*=>)\s*\{([\s\S]*?)\}\);"
    )


def _candidate_events(node: Any, execution: "Execution") -> list[Any]:
    events = get_field(node, "event")
    if isinstance(events, (list, tuple)) and events:
        return list(events)

    events = get_members(get_field(node, "events"))
    if events:
        return events

    snapshot = get_field(execution, "item")
    events = get_field(snapshot, "event") or get_field(snapshot, "events")
    return get_members(events)


def _match_script(script: str, testcase_name: str, kind: str) -> str | None:
    block = None
    if kind == ASSERTIONS and testcase_name:
        found = block_pattern_for(testcase_name).search(script)
        if found and found.group(1):
            block = found.group(1)

    for matcher in TICKET_MATCHERS:
        if matcher.scope == SCOPE_BLOCK:
            if block is None:
                continue
            key = matcher.match(block)
        else:
            key = matcher.match(script)
        if key:
            return key
    return None


def _key_from_scripts(
    execution: "Execution", collection: Any, testcase_name: str, kind: str
) -> str | None:
    item_id = get_field(get_field(execution, "item"), "id")
    node = find_item_by_id(collection, item_id) or {}

    for event in _candidate_events(node, execution):
        listen = get_field(event, "listen")
        if kind == ASSERTIONS and listen and listen != "test":
            continue

        lines = get_event_exec_lines(event)
        if not lines:
            continue

        key = _match_script("\n".join(lines), testcase_name, kind)
        if key:
            return key
    return None


def resolve_test_key(
    execution: "Execution", collection: Any, testcase_name: str, kind: str
) -> str:
    """Resolve the ticket key for one test case.

    Args:
        execution: Execution the test case belongs to.
        collection: Collection tree the execution's item came from.
        testcase_name: Assertion text, or the fixed name of a script test case.
        kind: One of ``prerequestScript``, ``assertions``, ``testScript``.

    Returns:
        A ticket key such as ``PROJ-42``; never empty.
    """
    key = None
    try:
        key = _key_from_scripts(execution, collection, testcase_name, kind)
    except Exception:
        logger.debug("Script lookup for test key of %r failed", testcase_name, exc_info=True)

    if not key:
        name = get_field(get_field(execution, "item"), "name", "")
        found = TICKET_PATTERN.search(name) if isinstance(name, str) else None
        key = found.group(1) if found else None

    if not key:
        key = UNKNOWN_TEST_KEY
    return key
