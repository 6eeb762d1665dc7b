from typing import Any, TypedDict

from app.account_tracker.media import ImageHandle


class ProfileRecord(TypedDict):
    """
    Basic account information returned by the profile service (``basicInfo``).
    """
    account_id: str
    nickname: str
    level: int
    last_login_at: str  # epoch seconds
    created_at: str  # epoch seconds
    avatar_asset_id: int
    rank: int
    like_count: int
    region: str


class BanRecord(TypedDict):
    """
    Ban status returned by the ban-check service (``data``).
    period_months is only meaningful when is_banned is 1, 0 means indefinite.
    """
    nickname: str
    region: str
    is_banned: int
    ban_id: str
    period_months: int


class LookupResult(TypedDict):
    profile: ProfileRecord
    ban: BanRecord
    avatar: ImageHandle | None


def as_int(value: Any) -> int:
    """
    Strict integer conversion for payload fields.
    Accepts ints, integral floats and base-10 strings. Booleans, fractions, NaN and infinities are rejected.
    """
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected an integer, got {value!r}")
        return int(value)
    if isinstance(value, str):
        return int(value.strip(), 10)
    raise TypeError(f"expected an integer, got {value!r}")


def parse_profile(payload: Any) -> ProfileRecord:
    """Raises KeyError, TypeError, ValueError or OverflowError when the payload is malformed."""
    info = payload["basicInfo"]
    return ProfileRecord(
        account_id=str(info["accountId"]),
        nickname=str(info["nickname"]),
        level=as_int(info["level"]),
        last_login_at=str(info["lastLoginAt"]),
        created_at=str(info["createAt"]),
        avatar_asset_id=as_int(info["headPic"]),
        rank=as_int(info["rank"]),
        like_count=as_int(info["liked"]),
        region=str(info["region"]),
    )


def parse_ban(payload: Any) -> BanRecord:
    """Raises KeyError, TypeError, ValueError or OverflowError when the payload is malformed."""
    data = payload["data"]
    is_banned = as_int(data["is_banned"])
    if is_banned not in (0, 1):
        raise ValueError(f"is_banned must be 0 or 1, got {is_banned}")
    return BanRecord(
        nickname=str(data["nickname"]),
        region=str(data["region"]),
        is_banned=is_banned,
        ban_id=str(data["id"]),
        period_months=as_int(data["period"]),
    )
