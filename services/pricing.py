"""Monthly fee parsing for imported daycare listings.

Raw fees arrive as free text ("$1500/month", "475-500", "N/A"). ``parse_price``
extracts the numeric price used for range filtering and
``format_price_string`` produces the display string: ``"475$ - 500$"`` for a
range, ``"1500$"`` for a single value and ``"NO"`` when unknown.
"""
import math
import re

from models.daycare import PRICE_UNKNOWN

_UNKNOWN_WORDS = ('n/a', 'na', 'none', '-', '--', 'no')
_NON_NUMERIC = re.compile(r'[^0-9.]')


def _to_number(text):
    cleaned = _NON_NUMERIC.sub('', text or '')
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _format_number(number):
    return str(int(number)) if float(number).is_integer() else str(number)


def _clean(value):
    if value is None:
        return ''
    return re.sub(r'/month', '', str(value), flags=re.IGNORECASE).strip()


def parse_price(value):
    """Numeric monthly price; the lower bound for ranges, 0 when unknown."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0
    text = _clean(value)
    if '-' in text:
        text = text.split('-')[0]
    return _to_number(text) or 0


def format_price_string(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f'{_format_number(value)}$' if math.isfinite(value) and value > 0 else PRICE_UNKNOWN

    text = _clean(value)
    if not text or text.lower() in _UNKNOWN_WORDS:
        return PRICE_UNKNOWN

    if '-' in text:
        parts = [part.strip() for part in text.split('-')]
        low, high = _to_number(parts[0]), _to_number(parts[1])
        if low and high and low > 0 and high > 0:
            return f'{_format_number(low)}$ - {_format_number(high)}$'

    number = _to_number(text)
    if number and number > 0:
        return f'{_format_number(number)}$'
    return text
