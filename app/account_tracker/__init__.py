import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable
from urllib.parse import quote

from app.logger import logger
from app.account_tracker.errors import (
    AccountLookupError,
    BanCheckFailed,
    FetchError,
    InvalidIdentifier,
    ProfileUnavailable,
)
from app.account_tracker.http_session import close_session, fetch_binary, fetch_json, get_session
from app.account_tracker.media import ImageHandle
from app.account_tracker.structures import BanRecord, LookupResult, ProfileRecord, parse_ban, parse_profile

PROFILE_URL = os.getenv("PROFILE_URL", "https://glob-info.vercel.app/info")
BAN_CHECK_URL = os.getenv("BAN_CHECK_URL", "https://api-check-ban.vercel.app/check_ban")
AVATAR_URL = os.getenv("AVATAR_URL", "https://genitems.vercel.app/openitems")


async def fetch_profile(uid: str) -> ProfileRecord:
    payload = await fetch_json(PROFILE_URL, params={"uid": uid})
    try:
        return parse_profile(payload)
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        logger.error(f"Profile: malformed response for {uid}: {payload!r}")
        raise FetchError(PROFILE_URL, reason=f"malformed profile: {e!r}") from e


async def fetch_ban_status(uid: str) -> BanRecord:
    url = f"{BAN_CHECK_URL.rstrip('/')}/{quote(uid, safe='')}"
    payload = await fetch_json(url)
    try:
        return parse_ban(payload)
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        logger.error(f"Ban check: malformed response for {uid}: {payload!r}")
        raise FetchError(url, reason=f"malformed ban status: {e!r}") from e


async def fetch_avatar(avatar_asset_id: int) -> ImageHandle:
    return await fetch_binary(AVATAR_URL, params={"id": str(avatar_asset_id)})


@dataclass(frozen=True)
class LookupStep:
    """
    One request of the lookup.
    ``run`` receives the uid and what the previous steps produced.
    A step without ``error`` is optional: its failure leaves None in the result.
    """
    name: str
    run: Callable[[str, dict[str, Any]], Awaitable[Any]]
    error: type[AccountLookupError] | None = None


LOOKUP_STEPS: tuple[LookupStep, ...] = (
    LookupStep("profile", lambda uid, done: fetch_profile(uid), ProfileUnavailable),
    LookupStep("ban", lambda uid, done: fetch_ban_status(uid), BanCheckFailed),
    LookupStep("avatar", lambda uid, done: fetch_avatar(done["profile"]["avatar_asset_id"])),
)


async def lookup_account(identifier: str) -> LookupResult:
    """
    Run the profile, ban status and avatar requests in order for ``identifier``.
    :param identifier:
        The UID typed by the user, surrounding whitespace is ignored.
    :return:
        The aggregated result. The avatar is None when it could not be downloaded.
    :raises InvalidIdentifier: the identifier is blank, nothing is requested.
    :raises ProfileUnavailable: the profile request failed.
    :raises BanCheckFailed: the ban status request failed.
    """
    uid = (identifier or "").strip()
    if not uid:
        raise InvalidIdentifier(identifier or "")

    done: dict[str, Any] = {}
    for step in LOOKUP_STEPS:
        try:
            done[step.name] = await step.run(uid, done)
        except FetchError as e:
            if step.error is None:
                logger.warning(f"Lookup {uid}: optional step {step.name} failed, continuing: {e}")
                done[step.name] = None
                continue
            logger.warning(f"Lookup {uid}: step {step.name} failed: {e}")
            raise step.error(uid) from e

    logger.debug(f"Lookup {uid} completed (banned={done['ban']['is_banned']}, avatar={done['avatar'] is not None})")
    return LookupResult(profile=done["profile"], ban=done["ban"], avatar=done["avatar"])


__all__ = [
    "AccountLookupError",
    "BanCheckFailed",
    "BanRecord",
    "FetchError",
    "ImageHandle",
    "InvalidIdentifier",
    "LookupResult",
    "LookupStep",
    "LOOKUP_STEPS",
    "ProfileRecord",
    "ProfileUnavailable",
    "close_session",
    "fetch_avatar",
    "fetch_ban_status",
    "fetch_profile",
    "get_session",
    "lookup_account",
]
