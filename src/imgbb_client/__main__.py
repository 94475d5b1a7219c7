import logging
import sys

from .imgbb_uploader import main

logger = logging.getLogger(__name__)


def run() -> None:
    try:
        main()
        sys.exit(0)
    except KeyboardInterrupt:
        print()
        logger.warning("Script stopped by user")
        sys.exit(0)
    except Exception:
        logger.exception("Fatal error. Exiting...")
        sys.exit(1)


if __name__ == "__main__":
    run()
