import logging

from .general import setup_logger


class Loggable(object):
    """Mixin with the standard "[calling_function]: [message|Exception]" logging helpers.

        NOTE: every helper is a no-op unless init_logging() was called with enable_logging=True
    """

    enable_logging:bool                                     # Whether logging is enabled for this instance
    logger:logging.Logger|None                              # Logger for debug/info/etc


    def init_logging(
            self,
            enable_logging:bool,
            log_file_path:str,
            logger_name:str,
            logger_min_level:int,
            logger_format:str,
        ) -> None:
        """Sets [self.enable_logging] and, if enabled, sets up [self.logger]."""
        self.enable_logging = enable_logging
        self.logger = None

        if enable_logging:
            self.logger = setup_logger(
                log_file_path=log_file_path,
                logger_name=logger_name,
                min_level=logger_min_level,
                log_format=logger_format,
            )


    def _log(
        self,
        level:int,
        fmt:str,
        *args,
        exc:BaseException|None=None,
        stacklevel:int=2,
    ) -> None:
        """Helper func to standardize logging format (or do nothing if not [self.enable_logging] or not [self.logger])."""

        # Check if enable logging is True
        if not getattr(self, "enable_logging", False): return

        # Make sure self.logger is not None
        logger:logging.Logger = getattr(self, "logger", None)
        if logger is None: return

        # Write to the log
        logger.log(level, fmt, *args, exc_info=exc, stacklevel=stacklevel)


    def log_debug(self, calling_func:str, message:str, stacklevel:int=3) -> None:
        """Logs a DEBUG message."""
        self._log(logging.DEBUG, "%s: %s", calling_func, message, stacklevel=stacklevel)


    def log_warning(self, calling_func:str, message:str, stacklevel:int=3) -> None:
        """Logs a WARNING message."""
        self._log(logging.WARNING, "%s error (non-critical): %s", calling_func, message, stacklevel=stacklevel)


    def log_error(self, calling_func:str, exception:BaseException, stacklevel:int=3) -> None:
        """Logs an ERROR message."""
        self._log(logging.ERROR, "%s failed: %s - %s", calling_func, type(exception).__name__, exception, exc=exception, stacklevel=stacklevel)
