import logging
import os
from typing import Any, Callable, Iterable


def setup_logger(log_file_path:str, logger_name:str, min_level:int=logging.DEBUG, log_format:str='%(asctime)s - %(levelname)s: %(message)s') -> logging.Logger:
    """Sets up a logger to save logs to the given filepath."""

    # Init a logger and set the lowest level to DEBUG (so all logs are captured)
    logger:logging.Logger = logging.getLogger(logger_name)
    logger.setLevel(min_level)

    # Prevent double logging if root logger is used
    logger.propagate = False

    # Avoid duplicate handlers if setup is called multiple times
    if not logger.handlers:

        # Create the output dir if it doesn't exist
        # NOTE: default path if log file path is None or empty string
        if log_file_path is None or not log_file_path:
            log_file_path = './logger_output.log'

        log_dir:str = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # Create a file handler
        file_handler:logging.FileHandler = logging.FileHandler(log_file_path, encoding='utf-8')
        logger.addHandler(file_handler)

        # Set the format for logs
        formatter:logging.Formatter = logging.Formatter(log_format)
        file_handler.setFormatter(formatter)

    # Return the logger
    return logger


def release_all(
    resources:Iterable[Any],
    release:Callable[[Any], None],
    on_error:Callable[[Any, Exception], None]|None=None,
) -> None:
    """Best-effort release of [resources] in the order given.

        NOTE:
            - Every resource is attempted, even if an earlier release raised
            - Release failures are swallowed (passed to [on_error] if given, e.g. for a warning log); they never
              replace the error that caused the cleanup, which means bugs in close() logic go unreported to the caller
    """
    for resource in resources:
        try:
            release(resource)
        except Exception as e:
            if on_error is not None:
                try: on_error(resource, e)
                except Exception: pass
