"""
Numeric input sanitization.

Form and API input arrives as free text typed on Japanese keyboards:
full-width digits, ideographic spaces, thousands separators and the
occasional full-width decimal point. Everything here turns that text into
int or Decimal before it reaches model validation or the requirements
engine. Blank or unparseable input becomes None.
"""
import re
from decimal import Decimal, InvalidOperation

FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")
FULLWIDTH_MINUS = str.maketrans({"ー": "-", "−": "-", "－": "-"})
FULLWIDTH_POINT = str.maketrans({"。": ".", "．": "."})

WHITESPACE_RE = re.compile(r"[\s　]+")


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _to_number(text):
    if not text:
        return None
    try:
        if "." in text:
            return Decimal(text)
        return int(text)
    except (ValueError, InvalidOperation):
        return None


def sanitize_with_comma(value):
    """
    Sanitize a value where thousands separators are allowed.

        sanitize_with_comma("１,２３４.５６") -> Decimal("1234.56")
        sanitize_with_comma("　1 , 2 3 4　") -> 1234
    """
    if _is_blank(value):
        return None
    if isinstance(value, (int, Decimal)):
        return value
    if isinstance(value, float):
        return Decimal(str(value))

    text = str(value).translate(FULLWIDTH_DIGITS).translate(FULLWIDTH_POINT)
    text = WHITESPACE_RE.sub("", text)
    text = text.replace(",", "")
    return _to_number(text)


def sanitize_without_comma(value):
    """
    Sanitize a value where a comma is not a valid character.

    A comma makes the whole value invalid so that a misplaced separator in
    a quantity field is rejected rather than silently reinterpreted.
    """
    if _is_blank(value):
        return None
    if isinstance(value, (int, Decimal)):
        return value
    if isinstance(value, float):
        return Decimal(str(value))

    text = str(value).translate(FULLWIDTH_DIGITS).translate(FULLWIDTH_POINT)
    text = WHITESPACE_RE.sub("", text)
    if "," in text:
        return None
    return _to_number(text)


def sanitize_numeric_params(data, with_comma=(), without_comma=()):
    """
    Return a copy of ``data`` with the named fields sanitized.

    Fields that are missing or blank are left untouched so that required
    field validation still reports them.
    """
    if not data:
        return data

    cleaned = dict(data)
    for field in with_comma:
        if not _is_blank(cleaned.get(field)):
            cleaned[field] = sanitize_with_comma(cleaned[field])
    for field in without_comma:
        if not _is_blank(cleaned.get(field)):
            cleaned[field] = sanitize_without_comma(cleaned[field])
    return cleaned


def normalize_count(value):
    """
    Normalize an integer count typed by a user.

    Text input loses every separator, decimal points included
    ("１,０００" -> 1000). Numeric input is truncated.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        return int(value)

    text = str(value).translate(FULLWIDTH_DIGITS).translate(FULLWIDTH_MINUS)
    text = re.sub(r"[,\s　．。.]", "", text)
    try:
        return int(text)
    except ValueError:
        return None


def normalize_decimal(value):
    """
    Normalize a decimal quantity typed by a user.

        normalize_decimal("１２３。５") -> Decimal("123.5")
        normalize_decimal("1,000") -> Decimal("1000")
    """
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))

    text = str(value).translate(FULLWIDTH_DIGITS).translate(FULLWIDTH_MINUS).translate(FULLWIDTH_POINT)
    text = re.sub(r"[,\s　]", "", text)
    try:
        return Decimal(text)
    except InvalidOperation:
        return None
