"""Data model for Newman run summaries and Postman collections.

The dataclasses mirror the JSON written by Newman's ``json`` reporter. Each
``from_dict`` accepts plain lists as well as ``{"members": [...]}`` containers,
since both appear depending on whether the summary was produced from SDK
objects or from exported JSON.
"""

from dataclasses import dataclass, field
from typing import Any

from .tree import find_item_by_id, get_field, get_members


@dataclass
class KeyValue:
    """A global or environment variable."""

    key: str
    value: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KeyValue":
        return cls(key=str(data.get("key", "")), value=data.get("value"))


@dataclass
class Script:
    """Script source attached to an event."""

    exec: list[str] | str | None = None
    type: str = "text/javascript"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str | list[str]) -> "Script":
        if isinstance(data, (str, list)):
            return cls(exec=data)
        return cls(exec=data.get("exec"), type=data.get("type", "text/javascript"))

    def to_json(self) -> dict[str, Any]:
        return {"type": self.type, "exec": self.exec}


@dataclass
class Event:
    """A lifecycle event (``prerequest`` or ``test``) with its script."""

    listen: str | None = None
    script: Script | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Event":
        script = data.get("script")
        return cls(
            listen=data.get("listen"),
            script=Script.from_dict(script) if script is not None else None,
        )


def _parse_events(data: dict[str, Any]) -> list[Event]:
    raw = data.get("event")
    if not raw:
        raw = get_members(data.get("events"))
    return [Event.from_dict(ev) for ev in raw or [] if isinstance(ev, dict)]


@dataclass(eq=False)
class Item:
    """A single request definition."""

    id: str | None = None
    name: str | None = None
    events: list[Event] = field(default_factory=list)
    parent: "ItemGroup | None" = field(default=None, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any], parent: "ItemGroup | None" = None) -> "Item":
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            events=_parse_events(data),
            parent=parent,
        )


@dataclass(eq=False)
class ItemGroup:
    """A folder of items and nested folders."""

    id: str | None = None
    name: str | None = None
    events: list[Event] = field(default_factory=list)
    items: list["Item | ItemGroup"] = field(default_factory=list)
    parent: "ItemGroup | None" = field(default=None, repr=False)

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], parent: "ItemGroup | None" = None
    ) -> "ItemGroup":
        group = cls(
            id=data.get("id"),
            name=data.get("name"),
            events=_parse_events(data),
            parent=parent,
        )
        group.items = _parse_children(data, group)
        return group


def _parse_children(data: dict[str, Any], parent: ItemGroup) -> list[Item | ItemGroup]:
    raw = data.get("item")
    if not raw:
        raw = get_members(data.get("items"))

    children: list[Item | ItemGroup] = []
    for child in raw or []:
        if not isinstance(child, dict):
            continue
        # Folders carry an item list; requests do not.
        if "item" in child or "items" in child:
            children.append(ItemGroup.from_dict(child, parent))
        else:
            children.append(Item.from_dict(child, parent))
    return children


@dataclass(eq=False)
class Collection(ItemGroup):
    """Root of the test-definition tree."""

    @classmethod
    def from_dict(cls, data: dict[str, Any], parent: ItemGroup | None = None) -> "Collection":
        info = data.get("info") or {}
        collection = cls(
            id=data.get("id") or info.get("_postman_id") or info.get("id"),
            name=data.get("name") or info.get("name"),
            events=_parse_events(data),
        )
        collection.items = _parse_children(data, collection)
        return collection


@dataclass
class Cursor:
    """Position of an execution within the run."""

    iteration: int = 0
    length: int = 0
    position: int = 0
    cycles: int = 1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Cursor":
        return cls(
            iteration=int(data.get("iteration") or 0),
            length=int(data.get("length") or 0),
            position=int(data.get("position") or 0),
            cycles=int(data.get("cycles") or 1),
        )


def _format_frame(frame: Any) -> str:
    if not isinstance(frame, dict):
        return str(frame)
    function = frame.get("functionName") or "<anonymous>"
    location = ":".join(
        str(frame[key]) for key in ("fileName", "lineNumber", "columnNumber") if key in frame
    )
    return f"at {function} ({location})" if location else f"at {function}"


@dataclass
class ErrorInfo:
    """Error raised by an assertion or a script."""

    name: str | None = None
    message: str | None = None
    stack: str | None = None
    stacktrace: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ErrorInfo":
        stacktrace = data.get("stacktrace")
        if isinstance(stacktrace, list):
            stacktrace = "\n".join(_format_frame(frame) for frame in stacktrace)
        return cls(
            name=data.get("name"),
            message=data.get("message"),
            stack=data.get("stack"),
            stacktrace=stacktrace,
        )


def _parse_error(data: dict[str, Any]) -> ErrorInfo | None:
    error = data.get("error")
    return ErrorInfo.from_dict(error) if isinstance(error, dict) else None


@dataclass
class AssertionResult:
    """Outcome of one ``pm.test`` assertion."""

    assertion: str = ""
    error: ErrorInfo | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AssertionResult":
        return cls(assertion=str(data.get("assertion", "")), error=_parse_error(data))


@dataclass
class ScriptResult:
    """Outcome of a pre-request or test script run."""

    error: ErrorInfo | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScriptResult":
        return cls(error=_parse_error(data))


@dataclass
class RequestUrl:
    """The parts of the request URL used for the suite hostname."""

    protocol: str | None = None
    host: list[str] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str | None) -> "RequestUrl":
        if not isinstance(data, dict):
            return cls()
        host = data.get("host")
        if isinstance(host, str):
            host = host.split(".")
        return cls(protocol=data.get("protocol"), host=host)


@dataclass
class Execution:
    """One run of a single item within one iteration."""

    cursor: Cursor
    item: Item
    url: RequestUrl = field(default_factory=RequestUrl)
    response_time: float | None = None
    assertions: list[AssertionResult] | None = None
    prerequest_script: list[ScriptResult] = field(default_factory=list)
    test_script: list[ScriptResult] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Execution":
        item_data = data.get("item") or {}
        request = data.get("request") or item_data.get("request") or {}
        response = data.get("response") or {}
        assertions = data.get("assertions")
        return cls(
            cursor=Cursor.from_dict(data.get("cursor") or {}),
            item=Item.from_dict(item_data),
            url=RequestUrl.from_dict(request.get("url") if isinstance(request, dict) else None),
            response_time=response.get("responseTime"),
            assertions=(
                [AssertionResult.from_dict(a) for a in assertions]
                if isinstance(assertions, list)
                else None
            ),
            prerequest_script=[
                ScriptResult.from_dict(r) for r in data.get("prerequestScript") or []
            ],
            test_script=[ScriptResult.from_dict(r) for r in data.get("testScript") or []],
        )


def _parse_values(scope: dict[str, Any] | None) -> list[KeyValue]:
    values = get_members(get_field(scope, "values"))
    return [KeyValue.from_dict(v) for v in values if isinstance(v, dict)]


@dataclass
class RunSummary:
    """Everything a completed Newman run hands to its reporters."""

    collection: Collection
    executions: list[Execution] = field(default_factory=list)
    globals: list[KeyValue] = field(default_factory=list)
    environment: list[KeyValue] = field(default_factory=list)
    total_tests: int | None = None

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], collection: Collection | None = None
    ) -> "RunSummary":
        """Build a summary from Newman JSON reporter output.

        Args:
            data: Parsed summary JSON.
            collection: Collection to use instead of ``data["collection"]``.

        Returns:
            RunSummary whose execution items are linked into the collection tree.
        """
        if collection is None:
            collection = Collection.from_dict(data.get("collection") or {})

        run = data.get("run") or {}
        executions = [Execution.from_dict(e) for e in run.get("executions") or []]
        for execution in executions:
            origin = find_item_by_id(collection, execution.item.id)
            if origin is not None:
                execution.item.parent = origin.parent

        total = ((run.get("stats") or {}).get("tests") or {}).get("total")
        return cls(
            collection=collection,
            executions=executions,
            globals=_parse_values(data.get("globals")),
            environment=_parse_values(data.get("environment")),
            total_tests=total,
        )
