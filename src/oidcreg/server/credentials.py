import logging

from oidcreg.util import rndstr

logger = logging.getLogger(__name__)

# 16 bytes gives 128 bits of entropy.
MIN_SIZE = 16


class RandomStringGenerator(object):
    """
    Produces url safe random strings from the operating system's
    cryptographically strong random source. Instances share no state.
    """

    def __init__(self, size: int = MIN_SIZE, prefix: str = ""):
        if size < MIN_SIZE:
            logger.warning("Random string size %d raised to %d", size, MIN_SIZE)
            size = MIN_SIZE
        self.size = size
        self.prefix = prefix

    def next(self) -> str:
        return "{}{}".format(self.prefix, rndstr(self.size))

    __call__ = next
