"""Opaque, resumable pagination cursors for page-number based listings.

Grafana listings take a page number and page size but report neither a
total count nor a "has more" flag. A cursor is a stack of frames, one per
nesting level, each recording the resource type being listed, the parent
resource it is listed under, and the next page to fetch. Serialized as
compact JSON; callers treat the string as opaque and an empty string as
"start from the first page" on input or "no more pages" on output.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

FIRST_PAGE = 1

KEY_STATES = "states"
KEY_CURRENT_STATE = "current_state"
KEY_TOKEN = "token"
KEY_RESOURCE_TYPE_ID = "resource_type_id"
KEY_RESOURCE_ID = "resource_id"


class CursorDecodeError(ValueError):
    """Raised when a serialized cursor or its page token cannot be parsed."""


@dataclass(frozen=True)
class PageState:
    """One frame of a pagination cursor."""

    resource_type_id: str
    resource_id: str = ""
    token: str = ""

    def matches(self, other: PageState) -> bool:
        return (
            self.resource_type_id == other.resource_type_id
            and self.resource_id == other.resource_id
        )

    def to_dict(self) -> dict[str, str]:
        return {
            KEY_TOKEN: self.token,
            KEY_RESOURCE_TYPE_ID: self.resource_type_id,
            KEY_RESOURCE_ID: self.resource_id,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> PageState:
        if not isinstance(raw, dict):
            raise CursorDecodeError(f"cursor frame must be an object, got {type(raw).__name__}")
        values: dict[str, str] = {}
        for key in (KEY_TOKEN, KEY_RESOURCE_TYPE_ID, KEY_RESOURCE_ID):
            value = raw.get(key, "")
            if not isinstance(value, str):
                raise CursorDecodeError(f"cursor frame field {key!r} must be a string")
            values[key] = value
        if not values[KEY_RESOURCE_TYPE_ID]:
            raise CursorDecodeError("cursor frame is missing resource_type_id")
        return cls(
            resource_type_id=values[KEY_RESOURCE_TYPE_ID],
            resource_id=values[KEY_RESOURCE_ID],
            token=values[KEY_TOKEN],
        )


class PaginationBag:
    """Stack of PageState frames; the current frame is the top of the stack."""

    def __init__(
        self, states: list[PageState] | None = None, current: PageState | None = None
    ) -> None:
        self._states: list[PageState] = list(states or [])
        self._current = current

    @property
    def current(self) -> PageState | None:
        return self._current

    @property
    def states(self) -> tuple[PageState, ...]:
        """Enclosing frames, outermost first, excluding the current one."""
        return tuple(self._states)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PaginationBag):
            return NotImplemented
        return self._states == other._states and self._current == other._current

    def __repr__(self) -> str:
        return f"PaginationBag(states={self._states!r}, current={self._current!r})"

    def push(self, state: PageState) -> None:
        """Make ``state`` the current frame.

        A no-op when the current frame already lists the same resource type
        under the same parent. Otherwise any existing current frame is kept
        below the new one and becomes current again once it is popped.
        """
        if self._current is not None:
            if self._current.matches(state):
                return
            self._states.append(self._current)
        self._current = state

    def pop(self) -> PageState | None:
        """Remove and return the current frame, restoring the enclosing one."""
        popped = self._current
        self._current = self._states.pop() if self._states else None
        return popped

    def set_token(self, token: str) -> None:
        if self._current is None:
            raise CursorDecodeError("cannot set a page token on an empty cursor")
        self._current = PageState(
            resource_type_id=self._current.resource_type_id,
            resource_id=self._current.resource_id,
            token=token,
        )


def encode_cursor(bag: PaginationBag) -> str:
    """Serialize a bag; an empty bag serializes to ``""``."""
    if bag.current is None:
        return ""
    payload = {
        KEY_STATES: [state.to_dict() for state in bag.states],
        KEY_CURRENT_STATE: bag.current.to_dict(),
    }
    return json.dumps(payload, separators=(",", ":"))


def decode_cursor(serialized: str, resource_type: str) -> PaginationBag:
    """Parse a serialized cursor for a listing of ``resource_type``.

    Args:
        serialized: Cursor previously returned by this module, or ``""``.
        resource_type: Resource type id of the listing being resumed.

    Returns:
        The decoded bag; empty when ``serialized`` is empty.

    Raises:
        CursorDecodeError: If the cursor is malformed or its current frame
            belongs to a different resource type.
    """
    if not serialized:
        return PaginationBag()
    try:
        payload = json.loads(serialized)
    except json.JSONDecodeError as exc:
        raise CursorDecodeError(f"malformed cursor: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise CursorDecodeError("malformed cursor: expected a JSON object")

    raw_states = payload.get(KEY_STATES, [])
    if not isinstance(raw_states, list):
        raise CursorDecodeError("malformed cursor: states must be a list")
    states = [PageState.from_dict(raw) for raw in raw_states]

    raw_current = payload.get(KEY_CURRENT_STATE)
    if raw_current is None:
        if states:
            raise CursorDecodeError("malformed cursor: enclosing frames without a current frame")
        return PaginationBag()
    current = PageState.from_dict(raw_current)

    if current.resource_type_id != resource_type:
        raise CursorDecodeError(
            f"cursor belongs to resource type {current.resource_type_id!r},"
            f" not {resource_type!r}"
        )
    return PaginationBag(states=states, current=current)


def current_page_number(bag: PaginationBag) -> int:
    """Return the page to request next.

    An absent frame, an empty token and the token ``"0"`` all mean the
    first page.

    Raises:
        CursorDecodeError: If the token is not an unsigned integer.
    """
    if bag.current is None or not bag.current.token:
        return FIRST_PAGE
    token = bag.current.token
    if not (token.isascii() and token.isdigit()):
        raise CursorDecodeError(f"page token {token!r} is not an unsigned integer")
    return int(token) or FIRST_PAGE


def next_page_number(fetched_count: int, page: int, page_size: int) -> int:
    """Infer the next page from the size of the page just fetched.

    A full page (exactly ``page_size`` records) implies another page may
    follow; anything shorter, including an empty page, was the last one.

    Returns:
        ``page + 1`` to continue, or ``0`` to stop.
    """
    if page_size > 0 and fetched_count == page_size:
        return page + 1
    return 0


def open_page(cursor: str, resource_type: str, resource_id: str = "") -> tuple[PaginationBag, int]:
    """Decode ``cursor`` for a listing and work out which page to fetch.

    Pushes a frame for ``resource_type`` when the cursor has none yet.

    Returns:
        A tuple of (bag, page) ready for fetching and then ``advance_cursor``.

    Raises:
        CursorDecodeError: If the cursor was issued for a different parent
            resource than ``resource_id``.
    """
    bag = decode_cursor(cursor, resource_type)
    if bag.current is not None and bag.current.resource_id != resource_id:
        raise CursorDecodeError(
            f"cursor belongs to {resource_type} listing under {bag.current.resource_id!r},"
            f" not {resource_id!r}"
        )
    page = current_page_number(bag)
    if bag.current is None:
        bag.push(PageState(resource_type_id=resource_type, resource_id=resource_id))
    return bag, page


def advance_cursor(bag: PaginationBag, next_page_token: str) -> str:
    """Record the next page on the current frame and serialize the bag.

    An empty ``next_page_token`` finishes the current listing: its frame is
    popped and the enclosing position, if any, is returned. ``""`` means
    there is nothing left to fetch.

    Raises:
        CursorDecodeError: If a token is given but the bag has no frame.
    """
    if not next_page_token:
        bag.pop()
    else:
        bag.set_token(next_page_token)
    return encode_cursor(bag)


def page_token(next_page: int) -> str:
    """Render a next-page number as a cursor token; ``0`` becomes ``""``."""
    return str(next_page) if next_page > 0 else ""
