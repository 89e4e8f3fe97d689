from decimal import Decimal, ROUND_HALF_UP
import re

NUMERIC_REGEX = re.compile(r'^-?\d+(\.\d+)?$')

THOUSANDS_SEPARATORS = [
    ' ', '\u00A0', '\u202F', '\u2007', ','
]


def normalize_numeric_input(value, error_label='Value'):
    """Strip currency symbols and thousands separators, return an ASCII decimal string."""
    if value is None:
        raise ValueError(f'{error_label} is required')

    normalized = str(value).strip()
    if not normalized:
        raise ValueError(f'{error_label} is required')

    for symbol in ('₱', '$', 'PHP'):
        normalized = normalized.replace(symbol, '')

    # Comma is treated as thousands separator, NOT decimal separator
    for sep in THOUSANDS_SEPARATORS:
        normalized = normalized.replace(sep, '')

    return normalized


def parse_decimal_input(value, allow_negative=False, quantize='0.01', error_label='Value'):
    """
    Parser for money/numeric form inputs.
    Returns Decimal value (optionally quantized).
    """
    normalized = normalize_numeric_input(value, error_label)

    if normalized.startswith('-'):
        if not allow_negative:
            raise ValueError(f'{error_label} cannot be negative')
    elif normalized.startswith('+'):
        normalized = normalized[1:]

    if not NUMERIC_REGEX.match(normalized):
        raise ValueError(f'{error_label} is not a valid number')

    decimal_value = Decimal(normalized)

    if quantize:
        decimal_value = decimal_value.quantize(Decimal(quantize), rounding=ROUND_HALF_UP)

    return decimal_value


def to_decimal(value, quantize='0.01'):
    """
    Safe conversion to Decimal with Round Half Up.
    None or empty becomes zero.
    """
    if value is None or value == '':
        value = 0

    decimal_value = Decimal(str(value))

    if quantize:
        decimal_value = decimal_value.quantize(Decimal(quantize), rounding=ROUND_HALF_UP)

    return decimal_value
