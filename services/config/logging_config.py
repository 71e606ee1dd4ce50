import logging
import sys

# Console-only logger for the whole `services` tree; modules log via logging.getLogger(__name__)
logger = logging.getLogger("services")

formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stdout handler to the `services` logger at `level`."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # calling again replaces the handler rather than stacking a second one
    logger.handlers.clear()

    logger.addHandler(console_handler)
    return logger
