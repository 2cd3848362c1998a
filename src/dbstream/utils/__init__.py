from .general import setup_logger, release_all
from .loggable import Loggable
