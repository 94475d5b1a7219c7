import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

CONSOLE_THEME = Theme(
    {
        "logging.level.warning": "yellow",
        "logging.level.debug": "blue",
        "logging.level.info": "white",
        "logging.level.error": "red",
    }
)

RICH_CONSOLE = Console(theme=CONSOLE_THEME)

RICH_HANDLER_CONFIG = {"show_time": False, "rich_tracebacks": True, "tracebacks_show_locals": False}

QUIET_LOGGERS = ("asyncio", "aiohttp")


class RichFileHandler(RichHandler):
    """RichHandler writing to a file it opens and closes itself."""

    def __init__(self, filename: Path, **kwargs):
        self.stream = open(filename, "a", encoding="utf8")
        super().__init__(**kwargs, console=Console(file=self.stream))

    def close(self) -> None:
        try:
            self.stream.close()
        finally:
            super().close()


def setup_logger(
    *,
    log_file: Optional[Union[Path, str]] = None,
    log_level: int = logging.INFO,
    datetime_as_suffix: bool = True,
    use_rich_console: bool = True,
) -> Optional[Path]:
    """Attaches rich handlers to the root logger and returns the log file path if one is used."""

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    if use_rich_console:
        console_handler = RichHandler(**RICH_HANDLER_CONFIG, level=log_level, console=RICH_CONSOLE)
        logger.addHandler(console_handler)

    if not log_file:
        return None

    log_file_path = Path(log_file)
    if datetime_as_suffix:
        current_time = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file_path = log_file_path.parent / f"{log_file_path.stem}_{current_time}.log"

    log_file_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RichFileHandler(log_file_path, **RICH_HANDLER_CONFIG, level=logging.DEBUG)
    logger.addHandler(file_handler)
    return log_file_path
