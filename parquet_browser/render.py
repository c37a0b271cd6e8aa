"""
Rich rendering of the three browser panes.

Rendering only reads the metadata and the selection; it never changes them.
"""

import io

from rich.console import Console, Group
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from parquet_browser.navigation import ActivePane
from parquet_browser.stats import project

HEADER_HEIGHT = 4
FOOTER_HEIGHT = 1
HIGHLIGHT_SYMBOL = "> "
HIGHLIGHT_STYLE = "bold black on white"
UNDEFINED_TEXT = "undefined"
HELP_TEXT = "UP / DOWN select   TAB switch pane   s sample values   q quit"


def format_size(num_bytes):
    size = float(num_bytes)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if size < 1024 or unit == "GiB":
            break
        size /= 1024
    if unit == "B":
        return f"{num_bytes} B"
    return f"{size:.1f} {unit}"


def visible_window(count, selected, height):
    """Return the [start, end) slice of a list that keeps ``selected`` on screen."""
    height = max(1, height)
    if count <= height:
        return 0, count
    start = min(max(0, selected - height // 2), count - height)
    return start, start + height


def _border_style(state, pane):
    return "green" if state.active_pane is pane else "white"


def _list_lines(labels, selected, height):
    start, end = visible_window(len(labels), selected, height)
    lines = []
    for index in range(start, end):
        if index == selected:
            line = Text(HIGHLIGHT_SYMBOL, style=HIGHLIGHT_STYLE)
            line.append_text(labels[index])
            line.stylize(HIGHLIGHT_STYLE)
        else:
            line = Text(" " * len(HIGHLIGHT_SYMBOL))
            line.append_text(labels[index])
        lines.append(line)
    return Text("\n").join(lines)


def file_info_panel(metadata):
    info = Table(show_header=False, box=None, padding=(0, 2))
    info.add_column("Key", style="bold green")
    info.add_column("Value")
    info.add_column("Key", style="bold green")
    info.add_column("Value")
    info.add_row(
        "Row Count", str(metadata.num_rows),
        "Row Groups", str(metadata.num_row_groups),
    )
    info.add_row(
        "Created By", metadata.created_by or UNDEFINED_TEXT,
        "Footer", f"{format_size(metadata.serialized_size)} (format {metadata.format_version})",
    )
    return Panel(info, title=Text(metadata.file_name), border_style="blue")


def row_group_panel(metadata, state, height):
    labels = [
        Text.assemble(
            f"Row Group {index}",
            ("  ", ""),
            (f"{row_group.num_rows} rows, {format_size(row_group.total_byte_size)}", "cyan"),
        )
        for index, row_group in enumerate(metadata.row_groups)
    ]
    return Panel(
        _list_lines(labels, state.row_group_index, height),
        title="Row Groups",
        border_style=_border_style(state, ActivePane.ROW_GROUP_BROWSER),
    )


def column_panel(metadata, state, height):
    row_group = metadata.row_group(state.row_group_index)
    labels = [
        Text.assemble(
            (column.name, "bold"),
            "  ",
            (column.physical_type.value, "magenta"),
        )
        for column in row_group.columns
    ]
    return Panel(
        _list_lines(labels, state.column_index, height),
        title="Column Chunks",
        border_style=_border_style(state, ActivePane.COLUMN_BROWSER),
    )


def _or_undefined(value):
    return UNDEFINED_TEXT if value is None else str(value)


def detail_panel(metadata, state, sample_text=None):
    column = metadata.column(state.row_group_index, state.column_index)
    stats = project(column)

    details = Table(show_header=False, box=None, padding=(0, 1))
    details.add_column("Key", style="bold green")
    details.add_column("Value")
    details.add_row("physical type", Text(column.physical_type.value, style="bold magenta"))
    details.add_row("compression", column.compression)
    details.add_row("encodings", ", ".join(column.encodings) or UNDEFINED_TEXT)
    details.add_row("values", str(column.num_values))
    details.add_row("compressed", format_size(column.total_compressed_size))
    details.add_row("uncompressed", format_size(column.total_uncompressed_size))
    details.add_row("min", Text(_or_undefined(stats.min)))
    details.add_row("max", Text(_or_undefined(stats.max)))
    details.add_row("nulls", _or_undefined(stats.null_count))
    details.add_row("distinct_values", _or_undefined(stats.distinct_count))

    parts = [details, Text("")]
    if sample_text is None:
        parts.append(Text("press s to sample values", style="dim"))
    else:
        parts.append(Text(sample_text, style="cyan"))
    return Panel(
        Group(*parts),
        title=Text(column.name),
        border_style=_border_style(state, ActivePane.COLUMN_CHUNK_DETAIL),
    )


def compose(metadata, state, height, sample_text=None):
    """Build the full-screen layout for one frame."""
    body_height = max(1, height - HEADER_HEIGHT - FOOTER_HEIGHT)
    list_height = max(1, body_height - 2)

    layout = Layout()
    layout.split_column(
        Layout(file_info_panel(metadata), name="header", size=HEADER_HEIGHT),
        Layout(name="body"),
        Layout(Text(HELP_TEXT, style="dim", justify="center"), name="footer", size=FOOTER_HEIGHT),
    )
    layout["body"].split_row(
        Layout(row_group_panel(metadata, state, list_height), name="row_groups"),
        Layout(column_panel(metadata, state, list_height), name="columns"),
        Layout(detail_panel(metadata, state, sample_text), name="detail"),
    )
    return layout


def render_frame(metadata, state, width, height, sample_text=None):
    """Render one frame to a string of ANSI-styled lines."""
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=width,
        height=height,
        force_terminal=True,
        color_system="standard",
        legacy_windows=False,
    )
    console.print(compose(metadata, state, height, sample_text), end="")
    return buffer.getvalue().rstrip("\n")
