import logging


logger = logging.getLogger('reptimer')
logger.addHandler(logging.NullHandler())
