"""
price_converter.py - Native to reference currency conversion

Pure functions only: no state, no side effects. All arithmetic is integer
arithmetic and truncates toward zero, so results are directly comparable to
thresholds expressed at native precision.

Functions:
- normalize_price: scale an oracle answer to native decimals
- get_price: normalized price read from a PriceFeed
- get_conversion_rate: reference value of a native amount
"""

from .core import NATIVE_DECIMALS, NATIVE_UNIT_SCALE, PriceFeed, PriceQuote


def normalize_price(quote: PriceQuote) -> int:
    """
    Scale a quote's answer to NATIVE_DECIMALS.

    Non-positive answers normalize to 0 so that a broken oracle can never
    produce a negative reference value.

    Example:
        normalize_price(PriceQuote(2000_00000000, 8))  # 2000 * 10**18
    """
    if quote.answer <= 0:
        return 0
    if quote.decimals <= NATIVE_DECIMALS:
        return quote.answer * 10 ** (NATIVE_DECIMALS - quote.decimals)
    return quote.answer // 10 ** (quote.decimals - NATIVE_DECIMALS)


def get_price(feed: PriceFeed) -> int:
    """Latest price of one whole native unit, normalized to native decimals."""
    return normalize_price(feed.current_price_quote())


def get_conversion_rate(native_amount: int, quote: PriceQuote) -> int:
    """
    Convert a native amount to reference currency units.

    Args:
        native_amount: Amount in the smallest native denomination (int >= 0)
        quote: Price of one whole native unit

    Returns:
        Reference amount at native precision, floored.

    Raises:
        ValueError: If native_amount is not a non-negative int

    Example:
        # 1 coin at 2000.00000000 -> 2000 * 10**18
        get_conversion_rate(10**18, PriceQuote(2000_00000000, 8))
    """
    if not isinstance(native_amount, int) or isinstance(native_amount, bool):
        raise ValueError(f"native_amount must be int, got {type(native_amount)}")
    if native_amount < 0:
        raise ValueError(f"native_amount must be non-negative, got {native_amount}")
    # Divide by the fixed unit scale, never by the quote
    return native_amount * normalize_price(quote) // NATIVE_UNIT_SCALE
