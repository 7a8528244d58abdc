"""Shared output formatting with ASCII boxes. NO class - just functions."""

BOX_WIDTH = 60


def _truncate(text: str, max_len: int = 50) -> str:
    """Truncate text with ellipsis if too long."""
    return text[:max_len-3] + "..." if len(text) > max_len else text


def _top(title: str) -> str:
    return f"╭─ {title} " + "─" * max(0, BOX_WIDTH - len(title) - 4) + "╮"


def _bottom() -> str:
    return "╰" + "─" * (BOX_WIDTH - 1) + "╯"


def _row(text: str) -> str:
    line = f"│ {text}"
    return line + " " * max(0, BOX_WIDTH - len(line)) + "│"


def success_box(title: str, rows: list[tuple[str, str]], next_cmd: str | None = None) -> None:
    """Print a summary box of label/value rows with an optional Next: hint."""
    print(_top(title))
    for label, value in rows:
        print(_row(f"{label}: {_truncate(str(value), BOX_WIDTH - len(label) - 6)}"))
    print(_bottom())
    if next_cmd:
        print(f"Next: {next_cmd}")


def error_box(title: str, message: str, fix_cmd: str | None = None) -> None:
    """Print an error box with optional Fix: suggestion."""
    print(_top(title))
    print(_row(_truncate(message, BOX_WIDTH - 4)))
    print(_bottom())
    if fix_cmd:
        print(f"Fix: {fix_cmd}")


def table(headers: list[str], rows: list[list[str]]) -> None:
    """Print a simple boxed table."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[:len(widths)]):
            widths[i] = max(widths[i], len(str(cell)))

    header_line = "│ " + " │ ".join(h.ljust(widths[i]) for i, h in enumerate(headers)) + " │"
    sep_line = "├" + "─" + "─┼─".join("─" * w for w in widths) + "─┤"

    print("╭" + "─" * (len(header_line) - 2) + "╮")
    print(header_line)
    print(sep_line)
    for row in rows:
        cells = [str(row[i]).ljust(w) if i < len(row) else " " * w for i, w in enumerate(widths)]
        print("│ " + " │ ".join(cells) + " │")
    print("╰" + "─" * (len(header_line) - 2) + "╯")


def progress_bar(value: float, width: int = 20) -> str:
    """Return ASCII bar for a value in [0, 1]."""
    filled = int(max(0.0, min(1.0, value)) * width)
    return "█" * filled + "░" * (width - filled)
