import inspect
import logging.handlers
import os
from pathlib import Path

LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
LOG_FILE = LOG_DIR / "uid_ban_checker.log"
LOG_DIR.mkdir(parents=True, exist_ok=True)


class ClassNameFilter(logging.Filter):
    def filter(self, record):
        rel_path = os.path.relpath(os.path.abspath(record.pathname), os.getcwd())
        app_index = rel_path.find("app" + os.sep)
        if app_index != -1:
            rel_path = rel_path[app_index + len("app" + os.sep):]
        if rel_path.endswith(".py"):
            rel_path = rel_path[:-3]
        record.relpath = rel_path.replace("\\", ".").replace("/", ".")
        record.classname = ""
        frame = inspect.currentframe()
        while frame:
            code = frame.f_code
            if code.co_name == record.funcName:
                self_obj = frame.f_locals.get("self")
                if self_obj:
                    record.classname = self_obj.__class__.__name__
                    break
            frame = frame.f_back
        return True


class SmartClassFormatter(logging.Formatter):
    def format(self, record):
        if not getattr(record, "classname", ""):
            record.classname = "-"
        if not hasattr(record, "relpath"):
            record.relpath = record.module
        return super().format(record)


handler = logging.handlers.TimedRotatingFileHandler(
    LOG_FILE, when="midnight", interval=1, backupCount=5, encoding="utf-8"
)
console = logging.StreamHandler()

fmt = "%(asctime)s - [%(levelname)s] - %(relpath)s.%(classname)s.%(funcName)s(): %(message)s {%(lineno)d}"
formatter = SmartClassFormatter(fmt)

handler.setFormatter(formatter)
console.setFormatter(formatter)

logger = logging.getLogger("UidBanChecker")
logger.setLevel(os.getenv("LOG_LEVEL", "DEBUG").upper())
logger.addFilter(ClassNameFilter())
logger.addHandler(handler)
logger.addHandler(console)
logger.propagate = False
