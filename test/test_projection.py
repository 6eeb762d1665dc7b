import datetime
import unittest
from unittest import mock

import app.account_tracker.timestamps as timestamps
from app.account_tracker.media import ImageHandle
from app.account_tracker.projection import BannedState, format_count, project
from app.account_tracker.structures import BanRecord, LookupResult, ProfileRecord
from app.account_tracker.timestamps import INVALID_DATE, format_datetime, format_timestamp

NOW = datetime.datetime(2025, 6, 15, 18, 30, 45, tzinfo=datetime.UTC)


def make_result(is_banned: int = 0, period_months: int = 0, avatar: ImageHandle | None = None,
                like_count: int = 12345) -> LookupResult:
    profile = ProfileRecord(
        account_id="1234567890",
        nickname="FF_Player",
        level=64,
        last_login_at="1717243200",
        created_at="1609459200",
        avatar_asset_id=902000061,
        rank=315,
        like_count=like_count,
        region="EU",
    )
    ban = BanRecord(
        nickname="FF_Player",
        region="EU",
        is_banned=is_banned,
        ban_id="1234567890",
        period_months=period_months,
    )
    return LookupResult(profile=profile, ban=ban, avatar=avatar)


class TestTimestamps(unittest.TestCase):

    def test_epoch_is_formatted_day_first(self):
        self.assertEqual(format_timestamp("1609459200", datetime.UTC), "01/01/2021 00:00")

    def test_timezone_is_applied(self):
        paris_winter = datetime.timezone(datetime.timedelta(hours=1))
        self.assertEqual(format_timestamp("1609459200", paris_winter), "01/01/2021 01:00")

    def test_surrounding_whitespace_is_accepted(self):
        self.assertEqual(format_timestamp(" 1717243200 ", datetime.UTC), "01/06/2024 12:00")

    def test_invalid_input_yields_sentinel(self):
        for value in ("", "abc", "12abc", "1.5", "99999999999999999999"):
            self.assertEqual(format_timestamp(value, datetime.UTC), INVALID_DATE, value)

    def test_epoch_overflowing_in_display_timezone_yields_sentinel(self):
        # 9999-12-31 23:59:59 UTC is the last representable second, +1h rolls past year 9999
        plus_one = datetime.timezone(datetime.timedelta(hours=1))
        self.assertEqual(format_timestamp("253402300799", datetime.UTC), "31/12/9999 23:59")
        self.assertEqual(format_timestamp("253402300799", plus_one), INVALID_DATE)

    def test_project_survives_out_of_range_dates(self):
        result = make_result()
        result["profile"]["created_at"] = "253402300799"
        view_model = project(result, NOW, datetime.timezone(datetime.timedelta(hours=1)))
        self.assertEqual(view_model.created_at, INVALID_DATE)

    def test_default_timezone_comes_from_configuration(self):
        with mock.patch.object(timestamps, "DISPLAY_TIMEZONE", "UTC"):
            self.assertEqual(format_timestamp("1609459200"), "01/01/2021 00:00")

    def test_format_datetime(self):
        self.assertEqual(format_datetime(NOW, datetime.UTC), "15/06/2025 18:30")


class TestProjection(unittest.TestCase):

    def test_banned_with_period(self):
        view_model = project(make_result(is_banned=1, period_months=3), NOW, datetime.UTC)
        self.assertIs(view_model.banned_state, BannedState.BANNED)
        self.assertTrue(view_model.is_banned)
        self.assertEqual(view_model.ban_period, "3 months")

    def test_single_month_is_singular(self):
        view_model = project(make_result(is_banned=1, period_months=1), NOW, datetime.UTC)
        self.assertEqual(view_model.ban_period, "1 month")

    def test_banned_without_period_omits_it(self):
        view_model = project(make_result(is_banned=1, period_months=0), NOW, datetime.UTC)
        self.assertIs(view_model.banned_state, BannedState.BANNED)
        self.assertIsNone(view_model.ban_period)

    def test_clean_account_never_shows_period(self):
        for period in (0, 1, 12):
            view_model = project(make_result(is_banned=0, period_months=period), NOW, datetime.UTC)
            self.assertIs(view_model.banned_state, BannedState.CLEAN)
            self.assertIsNone(view_model.ban_period)

    def test_fields_are_formatted(self):
        view_model = project(make_result(like_count=1234567), NOW, datetime.UTC)
        self.assertEqual(view_model.created_at, "01/01/2021 00:00")
        self.assertEqual(view_model.last_login_at, "01/06/2024 12:00")
        self.assertEqual(view_model.verified_at, "15/06/2025 18:30")
        self.assertEqual(view_model.likes, "1\u202f234\u202f567")
        self.assertEqual(view_model.nickname, "FF_Player")
        self.assertEqual(view_model.account_id, "1234567890")
        self.assertEqual(view_model.level, 64)
        self.assertEqual(view_model.region, "EU")

    def test_small_counts_are_not_grouped(self):
        self.assertEqual(format_count(999), "999")
        self.assertEqual(format_count(0), "0")

    def test_avatar_filename(self):
        self.assertIsNone(project(make_result(), NOW, datetime.UTC).avatar_filename)
        avatar = ImageHandle(b"img", content_type="image/webp")
        self.assertEqual(project(make_result(avatar=avatar), NOW, datetime.UTC).avatar_filename, "avatar.webp")

    def test_projection_is_pure(self):
        result = make_result(is_banned=1, period_months=6)
        self.assertEqual(project(result, NOW, datetime.UTC), project(result, NOW, datetime.UTC))
        self.assertEqual(result["ban"]["period_months"], 6)


if __name__ == '__main__':
    unittest.main()
