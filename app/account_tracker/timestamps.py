import datetime
import os
from zoneinfo import ZoneInfo

from app.logger import logger

DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "UTC")
DISPLAY_FORMAT = "%d/%m/%Y %H:%M"
INVALID_DATE = "Invalid Date"


def get_display_timezone() -> datetime.tzinfo:
    if DISPLAY_TIMEZONE.upper() == "UTC":
        return datetime.UTC
    return ZoneInfo(DISPLAY_TIMEZONE)


def format_datetime(moment: datetime.datetime, tz: datetime.tzinfo | None = None) -> str:
    """Format an aware datetime as day/month/year hour:minute in the display timezone."""
    return moment.astimezone(tz or get_display_timezone()).strftime(DISPLAY_FORMAT)


def format_timestamp(epoch_text: str, tz: datetime.tzinfo | None = None) -> str:
    """
    Convert an epoch-seconds string sent by the services into a display string.
    Unparseable input yields INVALID_DATE instead of raising.
    """
    try:
        seconds = int(str(epoch_text).strip(), 10)
        moment = datetime.datetime.fromtimestamp(seconds, tz=datetime.UTC)
        return format_datetime(moment, tz)
    except (ValueError, OverflowError, OSError):
        logger.warning(f"Cannot convert timestamp {epoch_text!r}")
        return INVALID_DATE
