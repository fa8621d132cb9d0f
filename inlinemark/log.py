"""Logging setup for the command line."""

import logging

_HANDLER_NAME = "inlinemark-console"


def configure_logging(
    stream_level: int = logging.INFO,
    ignore_libs: list[str] | None = None,
) -> None:
    """Send log records to stderr with a short ``LEVEL: message`` format.

    Calling it again replaces the handler installed by the previous call.
    Loggers named in *ignore_libs* are raised to WARNING so third-party
    chatter stays out of the output.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(stream_level)

    for handler in list(root_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(stream_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root_logger.addHandler(console_handler)

    for name in ignore_libs or []:
        logging.getLogger(name).setLevel(logging.WARNING)
