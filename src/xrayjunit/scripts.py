"""Script source extraction from collection events.

Events reach the reporter in several shapes: exported JSON where ``exec`` is a
list of lines, hand-written collections where it is a single string, and SDK
objects that only expose their source through a serializer. The shape is
resolved once here into a :data:`ScriptSource`.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .tree import get_field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InlineScript:
    """Script body stored as one string."""

    text: str

    def lines(self) -> list[str]:
        return [self.text]


@dataclass(frozen=True)
class LineScript:
    """Script body stored as a sequence of lines."""

    source: tuple[str, ...]

    def lines(self) -> list[str]:
        return list(self.source)


@dataclass(frozen=True)
class SerializedScript:
    """Script whose body is only reachable through ``to_json()``."""

    serialize: Callable[[], Any]

    def lines(self) -> list[str]:
        try:
            data = self.serialize()
        except Exception:
            logger.debug("Script serializer failed; treating script as empty", exc_info=True)
            return []
        source = _classify_exec(get_field(data, "exec"))
        # A serializer that returns another serializable object is not followed.
        if source is None or isinstance(source, SerializedScript):
            return []
        return source.lines()


ScriptSource = InlineScript | LineScript | SerializedScript


def _classify_exec(exec_value: Any) -> InlineScript | LineScript | None:
    if isinstance(exec_value, str):
        return InlineScript(exec_value)
    if isinstance(exec_value, (list, tuple)):
        return LineScript(tuple(str(line) for line in exec_value))
    return None


def classify_script(event: Any) -> ScriptSource | None:
    """Resolve the script attached to ``event`` into a known representation.

    Returns:
        The script representation, or None when the event carries no script.
    """
    script = get_field(event, "script")
    if not script:
        return None

    source = _classify_exec(get_field(script, "exec"))
    if source is not None and source.lines():
        return source

    for method_name in ("to_json", "toJSON"):
        method = getattr(script, method_name, None)
        if callable(method):
            return SerializedScript(method)

    # A plain string or list standing in for the whole script object.
    return _classify_exec(script) if isinstance(script, (str, list, tuple)) else source


def get_event_exec_lines(event: Any) -> list[str]:
    """Return the script lines of an event, or an empty list."""
    source = classify_script(event)
    if source is None:
        return []
    return source.lines()
