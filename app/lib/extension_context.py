import datetime
from typing import Optional

from discord import TextChannel, ApplicationContext, Colour, Embed


class CheckApplicationContext(ApplicationContext):
    log_channel: Optional[TextChannel] = None
    log_message: Optional[str] = None
    log_color: Optional[Colour] = None

    async def send_log(self, message: str | None = None, color: Colour = None):
        """Report the command to the audit channel, when one is configured."""
        message = message or self.log_message
        if not self.log_channel or not message:
            return
        embed = Embed(
            title=self.command.qualified_name if self.command else "command",
            description=message,
            color=color or self.log_color or Colour.default(),
            timestamp=datetime.datetime.now(datetime.UTC)
        )
        embed.set_author(name=self.author.name, icon_url=self.author.display_avatar.url)
        embed.set_footer(text="ID: " + str(self.author.id))
        await self.log_channel.send(embed=embed)
