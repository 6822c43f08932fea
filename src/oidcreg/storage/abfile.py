import logging
import os
import time
from typing import Optional

from cryptojwt.utils import importer
from filelock import FileLock

from oidcreg.util import JSON
from oidcreg.util import QPKey

logger = logging.getLogger(__name__)

LOCK_SUFFIX = ".lock"


class AbstractFileSystem(object):
    """
    FileSystem implements a simple file based database.
    It has a dictionary like interface.
    Each key maps one-to-one to a file on disc, where the content of the
    file is the value.
    ONLY goes one level deep.
    """

    def __init__(
        self, fdir: Optional[str] = "", key_conv: Optional[str] = "", value_conv: Optional[str] = ""
    ):
        """
        :param fdir: The root of the directory
        :param key_conv: Converts to/from the key used by callers to something
            that can be used as a file name. The value is the dotted path of a
            class with the methods 'serialize'/'deserialize'.
        :param value_conv: As with key_conv but for the value written to the file.
        """
        self.fdir = fdir
        self.fmtime = {}
        self.storage = {}

        if key_conv:
            self.key_conv = importer(key_conv)()
        else:
            self.key_conv = QPKey()

        if value_conv:
            self.value_conv = importer(value_conv)()
        else:
            self.value_conv = JSON()

        os.makedirs(self.fdir, exist_ok=True)
        self.synch()

    def _fname(self, fkey):
        return os.path.join(self.fdir, fkey)

    def lock(self):
        """A lock covering the whole directory."""
        return FileLock(os.path.join(self.fdir, "_dir{}".format(LOCK_SUFFIX)))

    def get(self, item, default=None):
        try:
            return self[item]
        except KeyError:
            return default

    def __getitem__(self, item):
        fkey = self.key_conv.serialize(item)

        if self.is_changed(fkey):
            logger.info("File content change in %s", fkey)
            self.storage[fkey] = self._read_info(self._fname(fkey))

        return self.storage[fkey]

    def __setitem__(self, key, value):
        os.makedirs(self.fdir, exist_ok=True)

        fkey = self.key_conv.serialize(key)
        fname = self._fname(fkey)
        with FileLock("{}{}".format(fname, LOCK_SUFFIX)):
            with open(fname, "w") as fp:
                fp.write(self.value_conv.serialize(value))

        self.storage[fkey] = value
        self.fmtime[fkey] = self.get_mtime(fname)
        logger.debug('Wrote to "%s"', key)

    def __delitem__(self, key):
        fkey = self.key_conv.serialize(key)
        fname = self._fname(fkey)
        if os.path.isfile(fname):
            with FileLock("{}{}".format(fname, LOCK_SUFFIX)):
                os.unlink(fname)

        self.storage.pop(fkey, None)
        self.fmtime.pop(fkey, None)

    def __contains__(self, item):
        return os.path.isfile(self._fname(self.key_conv.serialize(item)))

    def keys(self):
        self.synch()
        for k in self.storage.keys():
            yield self.key_conv.deserialize(k)

    @staticmethod
    def get_mtime(fname):
        try:
            mtime = os.stat(fname).st_mtime_ns
        except OSError:
            # The file might be right in the middle of being written
            time.sleep(1)
            mtime = os.stat(fname).st_mtime_ns

        return mtime

    def is_changed(self, fkey):
        """
        Find out if this item has been modified since it was last read.

        :param fkey: A file name in the directory
        :return: True/False
        """
        fname = self._fname(fkey)
        if not os.path.isfile(fname):
            raise KeyError(fkey)

        mtime = self.get_mtime(fname)
        if mtime > self.fmtime.get(fkey, -1):
            self.fmtime[fkey] = mtime
            return True
        return False

    def _read_info(self, fname):
        with FileLock("{}{}".format(fname, LOCK_SUFFIX)):
            with open(fname, "r") as fp:
                info = fp.read().strip()
        return self.value_conv.deserialize(info)

    def synch(self):
        """
        Goes through the directory and updates the local cache based on
        the content of the directory.
        """
        os.makedirs(self.fdir, exist_ok=True)
        _present = set()
        for fkey in os.listdir(self.fdir):
            fname = self._fname(fkey)
            if not os.path.isfile(fname) or fkey.endswith(LOCK_SUFFIX):
                continue
            _present.add(fkey)
            if fkey in self.storage and not self.is_changed(fkey):
                continue
            try:
                self.storage[fkey] = self._read_info(fname)
            except ValueError as err:
                logger.warning("Bad content in %s (%s)", fname, err)
                self.fmtime.pop(fkey, None)

        for fkey in set(self.storage.keys()).difference(_present):
            del self.storage[fkey]
            self.fmtime.pop(fkey, None)
