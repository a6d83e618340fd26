"""Number formatting helpers."""


def format_number_with_dots(n: int) -> str:
    """Group the decimal digits of ``n`` in threes separated by dots."""
    text = str(n)
    chunks = [text[max(0, end - 3):end] for end in range(len(text), 0, -3)]
    return ".".join(reversed(chunks))