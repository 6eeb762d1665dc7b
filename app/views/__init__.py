import os

import discord
from discord import ButtonStyle, Colour, Embed
from discord.ui import Button, View

from app.account_tracker.projection import AccountViewModel

ADMIN_CONTACT_URL = os.getenv("ADMIN_CONTACT_URL", "")


def build_account_embed(view_model: AccountViewModel) -> Embed:
    """Render the account status card."""
    if view_model.is_banned:
        status = "🚫 ACCOUNT BANNED"
        description = "This account is currently banned"
        colour = Colour.red()
    else:
        status = "✅ ACCOUNT CLEAN"
        description = "This account is not banned, you can play normally"
        colour = Colour.green()

    embed = Embed(
        title=view_model.nickname,
        description=f"UID: `{view_model.account_id}`",
        colour=colour,
    )
    embed.add_field(name="Level", value=str(view_model.level), inline=True)
    embed.add_field(name="Region", value=view_model.region, inline=True)
    embed.add_field(name="Likes", value=view_model.likes, inline=True)
    embed.add_field(name="Account created", value=view_model.created_at, inline=True)
    embed.add_field(name="Last login", value=view_model.last_login_at, inline=True)
    embed.add_field(name="Status", value=f"**{status}**\n{description}", inline=False)
    if view_model.ban_period:
        embed.add_field(name="Ban period", value=view_model.ban_period, inline=True)
    if view_model.avatar_filename:
        embed.set_thumbnail(url=f"attachment://{view_model.avatar_filename}")
    embed.set_footer(text=f"Verified at {view_model.verified_at}")
    return embed


def build_error_embed(message: str) -> Embed:
    return Embed(description=f"⚠️ {message}", colour=Colour.orange())


class BanAppealView(View):
    """Link button pointing banned players to the admins."""

    def __init__(self, contact_url: str, timeout: float | None = None):
        super().__init__(timeout=timeout)
        # noinspection PyTypeChecker
        self.add_item(Button(label="Contact admin to unban", style=ButtonStyle.link, url=contact_url, emoji="💬"))


def build_account_view(view_model: AccountViewModel, contact_url: str | None = None) -> discord.ui.View | None:
    url = ADMIN_CONTACT_URL if contact_url is None else contact_url
    if view_model.is_banned and url:
        return BanAppealView(url)
    return None
