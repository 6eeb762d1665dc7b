import datetime
from typing import TYPE_CHECKING

from discord import Cog, Colour, Embed
from discord.ext import commands

from app.logger import logger
from app.lib.extension_context import CheckApplicationContext as ApplicationContext

if TYPE_CHECKING:
    from app.bot import UidBanCheckerBot


class GeneralCog(Cog):
    def __init__(self, bot: "UidBanCheckerBot"):
        self.bot = bot

    @commands.slash_command(name="ping", description="Check the bot latency.")
    async def ping(self, actx: ApplicationContext):
        """
        This command checks the bot's latency.
        It replies with the current latency in milliseconds.
        """
        latency = round(self.bot.latency * 1000)
        embed = Embed(
            title="🏓 Pong",
            description=f"Latency: {latency} ms",
            colour=Colour.blue(),
            timestamp=datetime.datetime.now(datetime.UTC)
        )
        await actx.respond(embed=embed)

    @Cog.listener()
    async def on_ready(self):
        if not self.bot.__ready__:
            self.bot.cogs_ready.ready_up("general")


def setup(bot: "UidBanCheckerBot"):
    bot.add_cog(GeneralCog(bot))
    logger.debug("GeneralCog loaded successfully.")
