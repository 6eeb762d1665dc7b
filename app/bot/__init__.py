import asyncio
import os
import sys
import traceback
from pathlib import Path

from discord import Intents, NoEntryPointError, ExtensionFailed, Activity, ActivityType, Interaction
from discord.ext.commands import Bot

from app.account_tracker import close_session
from app.lib.extension_context import CheckApplicationContext as ApplicationContext
from app.logger import logger

COGS_PATH = Path("./app/cogs")
if not COGS_PATH.exists():
    COGS_PATH.mkdir(parents=True, exist_ok=True)

prefix = "ubc&"
OWNER_IDS = [int(x) for x in os.getenv("OWNER_IDS", "").split(",") if x]
LOG_CHANNEL_ID = int(os.getenv("LOG_CHANNEL_ID", "0") or 0)
COGS = [p.stem for p in COGS_PATH.glob("*.py") if not p.stem.startswith("_")]


class Ready:
    """Tracks which cogs have finished loading."""

    def __init__(self):
        if COGS is None or len(COGS) == 0:
            logger.warning("No cogs found to load")
        for cog in COGS:
            setattr(self, cog, False)

    def ready_up(self, cog: str):
        setattr(self, cog, True)
        logger.info(f"{cog} is ready")

    def all_ready(self) -> bool:
        if not COGS or len(COGS) == 0:
            return True
        return all(getattr(self, cog) for cog in COGS)


class UidBanCheckerBot(Bot):
    def __init__(self):
        super().__init__(
            command_prefix=prefix,
            owner_ids=OWNER_IDS,
            intents=Intents.default()
        )
        self.version = None
        self.token = os.getenv("API_KEY")
        if not self.token:
            raise RuntimeError("API_KEY not found in environment variables. Please set it in your .env file.")
        self.cogs_ready = Ready()
        self.__ready__ = False
        self.owner_ids = OWNER_IDS
        self.owner_id = OWNER_IDS[0] if OWNER_IDS else None
        self.before_invoke(self._inject_log_channel)
        self.after_invoke(self._auto_log)
        self.auto_sync_commands = True

    def run(self, version: str):
        self.version = version
        logger.info("Starting UID Ban Checker version %s", self.version)
        logger.info("Running setup . . .")
        self.setup_cogs()
        logger.info("Setup complete. Running bot . . .")
        super().run(self.token, reconnect=True)

    def setup_cogs(self):
        if COGS is not None and len(COGS) != 0:
            for cog in COGS:
                try:
                    logger.debug("Loading cog: %s", cog)
                    self.load_extension(f"app.cogs.{cog}")
                except (NoEntryPointError, ExtensionFailed) as e:
                    logger.error("Ignoring %s (load failed): %s", cog, e, exc_info=True)
                    traceback.print_exception(type(e), e, e.__traceback__, file=sys.stderr)
                else:
                    logger.debug("Cog %s loaded successfully", cog)
                    self.cogs_ready.ready_up(cog)
        else:
            logger.warning("No cogs found to load, assuming all are ready.")
            self.__ready__ = True

    async def on_connect(self):
        if self.auto_sync_commands:
            await self.sync_commands()
        logger.info(f"Bot {self.user} connected to Discord.")

    async def on_ready(self):
        if not self.__ready__:
            while not self.cogs_ready.all_ready():
                await asyncio.sleep(0.5)
            self.__ready__ = True
        logger.info("UID Ban Checker is ready!")
        await self.change_presence(activity=Activity(type=ActivityType.watching, name="/check"))

    async def get_application_context(
            self, interaction: Interaction, cls=ApplicationContext
    ):
        return await super().get_application_context(interaction, cls=cls)

    async def close(self):
        await close_session()
        logger.info("HTTP session closed.")
        await super().close()

    async def _inject_log_channel(self, actx: ApplicationContext) -> None:
        """Injects the audit log channel into the context if it is configured."""
        actx.log_channel = self.get_channel(LOG_CHANNEL_ID) if LOG_CHANNEL_ID else None

    # noinspection PyMethodMayBeStatic
    async def _auto_log(self, actx: ApplicationContext) -> None:
        """Automatically logs the command usage to the log channel."""
        await actx.send_log()
