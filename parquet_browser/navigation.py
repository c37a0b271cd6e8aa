"""
Selection state and the transitions that move it.

Three panes share one cursor: the row group list, the column chunk list of the
selected row group, and the detail view of the selected column chunk. Every
transition is a pure function returning a new ``SelectionState``; the metadata
is only read to learn list lengths.
"""

import enum
from dataclasses import dataclass, replace


class ActivePane(enum.Enum):
    ROW_GROUP_BROWSER = "row_group_browser"
    COLUMN_BROWSER = "column_browser"
    COLUMN_CHUNK_DETAIL = "column_chunk_detail"

    def next(self):
        panes = list(ActivePane)
        return panes[(panes.index(self) + 1) % len(panes)]


class InputEvent(enum.Enum):
    MOVE_NEXT = "move_next"
    MOVE_PREV = "move_prev"
    TOGGLE_PANE = "toggle_pane"
    EXIT = "exit"


KEY_EVENTS = {
    "q": InputEvent.EXIT,
    "Q": InputEvent.EXIT,
    "CTRL_C": InputEvent.EXIT,
    "DOWN": InputEvent.MOVE_NEXT,
    "UP": InputEvent.MOVE_PREV,
    "TAB": InputEvent.TOGGLE_PANE,
}


def event_for_key(key):
    return KEY_EVENTS.get(key)


@dataclass(frozen=True)
class SelectionState:
    active_pane: ActivePane = ActivePane.ROW_GROUP_BROWSER
    row_group_index: int = 0
    column_index: int = 0
    exiting: bool = False


def _step(state, metadata, delta):
    if state.active_pane is ActivePane.ROW_GROUP_BROWSER:
        index = (state.row_group_index + delta) % metadata.num_row_groups
        if index == state.row_group_index:
            return state
        # Column lists differ per row group, so the old column index is stale.
        return replace(state, row_group_index=index, column_index=0)
    if state.active_pane is ActivePane.COLUMN_BROWSER:
        count = metadata.column_count(state.row_group_index)
        return replace(state, column_index=(state.column_index + delta) % count)
    return state


def move_next(state, metadata):
    return _step(state, metadata, 1)


def move_prev(state, metadata):
    return _step(state, metadata, -1)


def toggle_pane(state):
    return replace(state, active_pane=state.active_pane.next())


def request_exit(state):
    return replace(state, exiting=True)


def apply(state, metadata, event):
    """Return the state that results from ``event``; unknown events are ignored."""
    if event is InputEvent.MOVE_NEXT:
        return move_next(state, metadata)
    if event is InputEvent.MOVE_PREV:
        return move_prev(state, metadata)
    if event is InputEvent.TOGGLE_PANE:
        return toggle_pane(state)
    if event is InputEvent.EXIT:
        return request_exit(state)
    return state
