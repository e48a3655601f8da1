import logging
import colorlog


def setup_logging(level: str = "INFO", name: str = "") -> logging.Logger:
    """Attach a colored stream handler to the root (or named) logger once."""

    logger = logging.getLogger(name or None)
    logger.setLevel(level.upper())

    # Avoid duplicate handlers on reload
    if any(getattr(h, "_dm_handler", False) for h in logger.handlers):
        return logger

    handler = colorlog.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(
        '%(log_color)s%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'bold_red',
        }
    ))
    handler._dm_handler = True

    logger.addHandler(handler)
    return logger
