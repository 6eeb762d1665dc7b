import datetime
from dataclasses import dataclass
from enum import Enum

from app.account_tracker.structures import LookupResult
from app.account_tracker.timestamps import format_datetime, format_timestamp

THOUSANDS_SEPARATOR = "\u202f"  # narrow no-break space, fr-FR grouping


class BannedState(str, Enum):
    CLEAN = "clean"
    BANNED = "banned"


@dataclass(frozen=True)
class AccountViewModel:
    """Render-ready fields derived from a LookupResult."""
    nickname: str
    account_id: str
    level: int
    region: str
    likes: str
    created_at: str
    last_login_at: str
    verified_at: str
    banned_state: BannedState
    ban_period: str | None
    avatar_filename: str | None

    @property
    def is_banned(self) -> bool:
        return self.banned_state is BannedState.BANNED


def format_count(value: int) -> str:
    return f"{value:,}".replace(",", THOUSANDS_SEPARATOR)


def format_ban_period(months: int) -> str | None:
    if months <= 0:
        return None
    return f"{months} month" if months == 1 else f"{months} months"


def project(result: LookupResult, now: datetime.datetime, tz: datetime.tzinfo | None = None) -> AccountViewModel:
    """
    Build the view model for a lookup result.
    ``now`` is the moment the check is displayed, it is not read from the clock here.
    """
    profile = result["profile"]
    ban = result["ban"]
    banned = ban["is_banned"] == 1
    avatar = result["avatar"]
    return AccountViewModel(
        nickname=profile["nickname"],
        account_id=profile["account_id"],
        level=profile["level"],
        region=profile["region"],
        likes=format_count(profile["like_count"]),
        created_at=format_timestamp(profile["created_at"], tz),
        last_login_at=format_timestamp(profile["last_login_at"], tz),
        verified_at=format_datetime(now, tz),
        banned_state=BannedState.BANNED if banned else BannedState.CLEAN,
        ban_period=format_ban_period(ban["period_months"]) if banned else None,
        avatar_filename=avatar.filename if avatar is not None else None,
    )
