"""Shared utility helpers for socgen."""


def format_address(value: int, width: int = 8) -> str:
    """Format an address as a zero-padded lowercase hex literal.

    Examples:
        >>> format_address(0xB1000000)
        '0xb1000000'
        >>> format_address(0x800, width=0)
        '0x800'
    """
    return f"0x{value:0{width}x}"


def filter_none(data: dict) -> dict:
    """Remove keys with None values from a dictionary.

    Required for Pydantic v2 compatibility: passing None explicitly
    to fields with defaults causes validation errors. Filtering None
    values lets Pydantic use its own defaults.
    """
    return {k: v for k, v in data.items() if v is not None}
