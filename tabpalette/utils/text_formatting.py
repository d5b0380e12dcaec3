"""
Text formatting utilities for tabpalette.
"""


def truncate_title(text: str, max_len: int = 48) -> str:
    """
    Truncate title text to a maximum length with ellipsis.

    Args:
        text: The text to truncate
        max_len: Maximum length before truncation (default: 48)

    Returns:
        Truncated text with "..." if it was too long, otherwise original text
    """
    if len(text) > max_len:
        return text[: max_len - 3] + "..."
    return text


def truncate_path(path: str, max_len: int = 30) -> str:
    """
    Truncate a folder path from the left so the innermost folders stay visible.

    Args:
        path: The folder path to shorten
        max_len: Maximum length before truncation (default: 30)

    Returns:
        "..." followed by the tail of the path when it was too long
    """
    if len(path) > max_len:
        return "..." + path[-(max_len - 3):]
    return path
