from datetime import date, datetime
from typing import Union


LOCALE_DATE_FORMATS = ("%m/%d/%Y", "%d/%m/%Y")


def today() -> date:
    return date.today()


def parse_record_date(value: Union[str, date, datetime, None]) -> date:
    """
    Accept the date shapes found in backups: ISO dates, ISO timestamps and
    browser locale strings such as 1/19/2026 (month first, then day first).
    """
    if value is None:
        raise ValueError("date is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        raise ValueError("date is required")

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in LOCALE_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Unrecognised date: {text!r}")
