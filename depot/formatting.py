"""Display helpers for the dashboard."""

FILE_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def _trim(value: float, places: int) -> str:
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_file_size(size: int) -> str:
    """1536 -> "1.5 KB"."""
    if size <= 0:
        return "0 Bytes"
    exponent = 0
    while size >= 1024 ** (exponent + 1) and exponent < len(FILE_SIZE_UNITS) - 1:
        exponent += 1
    return f"{_trim(size / 1024 ** exponent, 2)} {FILE_SIZE_UNITS[exponent]}"


def format_number(value) -> str:
    """Abbreviate large quantities: 1500 -> "1.5K", 2000000 -> "2M"."""
    if value >= 1_000_000:
        return _trim(value / 1_000_000, 1) + "M"
    if value >= 1000:
        return _trim(value / 1000, 1) + "K"
    return str(value)
