import asyncio
import unittest
from types import SimpleNamespace
from unittest import mock

import app.cogs.account_check as account_check
from app.account_tracker.errors import AccountLookupError, ProfileUnavailable
from app.account_tracker.media import ImageHandle
from app.account_tracker.state import SearchState
from app.cogs.account_check import SUPERSEDED_MESSAGE, AccountCheck
from test_projection import make_result


def make_context(user_id: int = 42) -> SimpleNamespace:
    return SimpleNamespace(
        author=SimpleNamespace(id=user_id, mention=f"<@{user_id}>"),
        defer=mock.AsyncMock(),
        respond=mock.AsyncMock(),
    )


class TestAccountCheckCog(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.cog = AccountCheck(mock.MagicMock())
        self.patches = [mock.patch("app.views.ADMIN_CONTACT_URL", "")]
        for patch in self.patches:
            patch.start()

    async def asyncTearDown(self):
        for patch in self.patches:
            patch.stop()

    async def test_completed_check_keeps_no_state_or_avatar(self):
        avatar = ImageHandle(b"\x89PNG", content_type="image/png")
        actx = make_context()
        lookup = mock.AsyncMock(return_value=make_result(is_banned=1, period_months=3, avatar=avatar))
        with mock.patch.object(account_check, "lookup_account", lookup):
            await self.cog.run_check(actx, "1234567890")

        actx.defer.assert_awaited_once()
        kwargs = actx.respond.await_args.kwargs
        self.assertEqual(kwargs["file"].filename, "avatar.png")
        self.assertEqual(kwargs["embed"].title, "FF_Player")
        self.assertTrue(avatar.released)
        self.assertEqual(self.cog.states, {})

    async def test_lookup_error_is_reported_and_state_dropped(self):
        actx = make_context()
        lookup = mock.AsyncMock(side_effect=ProfileUnavailable("1234567890"))
        with mock.patch.object(account_check, "lookup_account", lookup):
            await self.cog.run_check(actx, "1234567890")

        embed = actx.respond.await_args.kwargs["embed"]
        self.assertIn("UID not found", embed.description)
        self.assertNotIn("ephemeral", actx.respond.await_args.kwargs)
        self.assertEqual(self.cog.states, {})

    async def test_blank_uid_is_answered_privately_without_lookup(self):
        actx = make_context()
        lookup = mock.AsyncMock()
        with mock.patch.object(account_check, "lookup_account", lookup):
            await self.cog.run_check(actx, "   ")

        lookup.assert_not_awaited()
        actx.defer.assert_not_awaited()
        self.assertTrue(actx.respond.await_args.kwargs["ephemeral"])
        self.assertIn("valid UID", actx.respond.await_args.kwargs["embed"].description)
        self.assertEqual(self.cog.states, {})

    async def test_unexpected_error_moves_state_to_error_then_drops_it(self):
        actx = make_context()
        lookup = mock.AsyncMock(side_effect=RuntimeError("boom"))
        with mock.patch.object(account_check, "lookup_account", lookup), \
                mock.patch.object(SearchState, "fail", autospec=True, side_effect=SearchState.fail) as fail:
            with self.assertRaises(RuntimeError):
                await self.cog.run_check(actx, "1234567890")

        fail.assert_called_once()
        self.assertIsInstance(fail.call_args.args[2], AccountLookupError)
        self.assertEqual(self.cog.states, {})

    async def test_superseded_check_is_discarded(self):
        release_first = asyncio.Event()
        first_avatar = ImageHandle(b"first")
        second_avatar = ImageHandle(b"second")

        async def fake_lookup(uid: str):
            if uid == "1":
                await release_first.wait()
                return make_result(avatar=first_avatar)
            return make_result(avatar=second_avatar)

        first_ctx, second_ctx = make_context(), make_context()
        with mock.patch.object(account_check, "lookup_account", fake_lookup):
            first = asyncio.create_task(self.cog.run_check(first_ctx, "1"))
            await asyncio.sleep(0)
            await self.cog.run_check(second_ctx, "2")
            release_first.set()
            await first

        first_ctx.respond.assert_awaited_once_with(SUPERSEDED_MESSAGE)
        self.assertIn("file", second_ctx.respond.await_args.kwargs)
        self.assertTrue(first_avatar.released)
        self.assertTrue(second_avatar.released)
        self.assertEqual(self.cog.states, {})


if __name__ == '__main__':
    unittest.main()
