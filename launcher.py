from dotenv import load_dotenv
load_dotenv(".env")
import info
from app.bot import UidBanCheckerBot

bot = UidBanCheckerBot()

if __name__ == "__main__":
    bot.run(info.__version__)
