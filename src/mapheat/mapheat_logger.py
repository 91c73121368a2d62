# This module configures logging for mapheat modules

# To use it, set up the following in the top of your module
# note you can control logger.level at module level
# if logger.level is not set in the module, the level is set here
#
# import logging
# from .mapheat_logger import Logger
# logger = logging.getLogger(__name__)
# #logger.level = logging.DEBUG
# LOGGER = Logger()
#
# then, in code, use
# logger.info(message)
#

import logging
import logging.handlers

logger = logging.getLogger(__name__)

log_level = logging.INFO

LOG_FORMAT = '%(asctime)s %(levelname)s mapheat %(module)s:%(lineno)d: %(message)s'

class Logger:
  def __init__(self, level=None, syslog=False):
    handlers = [logging.StreamHandler()]
    if syslog:
      handlers.append(logging.handlers.SysLogHandler())

    logging.basicConfig (
        level=level or log_level,
        format=LOG_FORMAT,
        handlers=handlers
    )

def set_all_loggers(level):
  """Raise every mapheat logger to at least the given level."""
  for name in list(logging.root.manager.loggerDict):
    if name.startswith("mapheat"):
      logging.getLogger(name).setLevel(level)
