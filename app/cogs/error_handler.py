from typing import TYPE_CHECKING

from discord.ext import commands

from app.logger import logger
from app.lib.extension_context import CheckApplicationContext as ApplicationContext

if TYPE_CHECKING:
    from app.bot import UidBanCheckerBot


class ErrorHandler(commands.Cog):
    def __init__(self, bot: "UidBanCheckerBot"):
        self.bot = bot

    @commands.Cog.listener()
    async def on_application_command_error(self, actx: ApplicationContext, error: commands.CommandError):
        if hasattr(actx.command, "on_error"):
            return

        if isinstance(error, commands.NotOwner):
            await actx.respond("❌ Sorry, only the bot owner can run this command.", ephemeral=True)
        elif isinstance(error, commands.MissingPermissions):
            await actx.respond("❌ You don't have the permissions required to run this command.", ephemeral=True)
        else:
            logger.error(f"Unhandled error in application command: {error}", exc_info=error, stack_info=True)
            await actx.respond("❌ This command is not available right now.", ephemeral=True)

    @commands.Cog.listener()
    async def on_ready(self):
        if not self.bot.__ready__:
            self.bot.cogs_ready.ready_up("error_handler")


def setup(bot: "UidBanCheckerBot"):
    bot.add_cog(ErrorHandler(bot))
    logger.debug("ErrorHandler loaded successfully.")
