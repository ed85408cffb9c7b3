"""
Helpers that render capture lengths and GIF sizes for the progress log.
"""

KIB = 1024
MIB = 1024 * 1024


def format_duration(seconds: float) -> str:
    """
    Renders a capture length to a tenth of a second.

    Screen recordings are short, so hours are never shown:
    4.27 -> "4.3s", 65.5 -> "1m05.5s".
    """
    seconds = round(max(seconds, 0.0), 1)
    minutes, remainder = divmod(seconds, 60)
    if minutes:
        return f"{int(minutes)}m{remainder:04.1f}s"
    return f"{remainder:.1f}s"


def formatted_size(size_bytes: int) -> str:
    """Size of the written GIF: bytes, KB or MB with one decimal."""
    size_bytes = max(size_bytes, 0)
    if size_bytes < KIB:
        return f"{size_bytes} B"
    if size_bytes < MIB:
        return f"{size_bytes / KIB:.1f} KB"
    return f"{size_bytes / MIB:.1f} MB"
