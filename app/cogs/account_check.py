import datetime
from typing import TYPE_CHECKING

from discord import Cog, Colour, Option
from discord.ext import commands

from app.account_tracker import AccountLookupError, InvalidIdentifier, lookup_account
from app.account_tracker.projection import project
from app.account_tracker.state import SearchState
from app.lib.extension_context import CheckApplicationContext as ApplicationContext
from app.logger import logger
from app.views import build_account_embed, build_account_view, build_error_embed

if TYPE_CHECKING:
    from app.bot import UidBanCheckerBot

SUPERSEDED_MESSAGE = "⏭️ A newer search replaced this one."


class AccountCheck(Cog):
    def __init__(self, bot: "UidBanCheckerBot"):
        self.bot = bot
        # only users with a /check in flight have an entry
        self.states: dict[int, SearchState] = {}

    def cog_unload(self):
        for state in self.states.values():
            state.reset()
        self.states.clear()

    def _forget(self, user_id: int, state: SearchState, token: int) -> None:
        """Drop the user's state once its latest search has been answered."""
        if not state.is_current(token):
            return
        state.reset()
        if self.states.get(user_id) is state:
            del self.states[user_id]

    @commands.slash_command(name="check", description="Check whether a Free Fire UID is banned.")
    async def check(
            self,
            actx: ApplicationContext,
            uid: Option(str, "UID of the account to check")
    ):
        await self.run_check(actx, uid)

    async def run_check(self, actx: ApplicationContext, uid: str):
        """
        Look up the profile, ban status and avatar of a UID and reply with the account card.
        A newer /check from the same user supersedes this one.
        """
        user_id = actx.author.id
        state = self.states.setdefault(user_id, SearchState())
        token = state.begin(uid)
        try:
            if not (uid or "").strip():
                state.fail(token, InvalidIdentifier(uid or ""))
                await actx.respond(embed=build_error_embed(state.error), ephemeral=True)
                return

            await actx.defer()
            try:
                result = await lookup_account(uid)
            except AccountLookupError as e:
                if state.fail(token, e):
                    await actx.respond(embed=build_error_embed(state.error))
                else:
                    await actx.respond(SUPERSEDED_MESSAGE)
                actx.log_message = f"{actx.author.mention} checked UID `{uid}`: {e}"
                actx.log_color = Colour.orange()
                return
            except Exception:
                state.fail(token, AccountLookupError(uid))
                raise

            if not state.succeed(token, result):
                await actx.respond(SUPERSEDED_MESSAGE)
                return

            view_model = project(result, datetime.datetime.now(datetime.UTC))
            kwargs = {"embed": build_account_embed(view_model)}
            if result["avatar"] is not None:
                kwargs["file"] = result["avatar"].as_file()
            view = build_account_view(view_model)
            if view is not None:
                kwargs["view"] = view
            await actx.respond(**kwargs)

            actx.log_message = f"{actx.author.mention} checked UID `{view_model.account_id}` " \
                               f"({view_model.nickname}): {view_model.banned_state.value}"
            actx.log_color = Colour.red() if view_model.is_banned else Colour.green()
            logger.info(f"UID {view_model.account_id} checked by {user_id}: {view_model.banned_state.value}")
        finally:
            self._forget(user_id, state, token)

    @Cog.listener()
    async def on_ready(self):
        if not self.bot.__ready__:
            self.bot.cogs_ready.ready_up("account_check")


def setup(bot: "UidBanCheckerBot"):
    bot.add_cog(AccountCheck(bot))
    logger.debug("AccountCheck loaded successfully.")
