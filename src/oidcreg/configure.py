import logging
import os
from typing import Dict
from typing import List
from typing import Optional

from oidcreg.util import load_config_file

DEFAULT_FILE_ATTRIBUTE_NAMES = ["filename", "fdir", "logging_file"]

logger = logging.getLogger(__name__)


def add_path_to_filename(filename, base_path):
    if filename == "" or filename.startswith("/"):
        return filename
    else:
        return os.path.join(base_path, filename)


def add_base_path(conf: dict, base_path: str, attributes: List[str]):
    for key, val in conf.items():
        if not val:
            continue

        if key in attributes and isinstance(val, str):
            conf[key] = add_path_to_filename(val, base_path)
        elif isinstance(val, dict):
            conf[key] = add_base_path(val, base_path, attributes)

    return conf


def _conv(val, domain, port):
    if isinstance(val, str) and ("{domain}" in val or "{port}" in val):
        return val.format(domain=domain, port=port)

    return val


def set_domain_and_port(conf: dict, domain: str, port: int):
    for key, val in conf.items():
        if not val:
            continue

        if isinstance(val, list):
            conf[key] = [_conv(v, domain=domain, port=port) for v in val]
        elif isinstance(val, dict):
            conf[key] = set_domain_and_port(val, domain, port)
        else:
            conf[key] = _conv(val, domain=domain, port=port)
    return conf


class Base(dict):
    """Configuration base class"""

    parameter = {}

    def __init__(
        self,
        conf: Dict,
        base_path: str = "",
        file_attributes: Optional[List[str]] = None,
        domain: Optional[str] = "",
        port: Optional[int] = 0,
    ):
        dict.__init__(self)
        if file_attributes is None:
            file_attributes = DEFAULT_FILE_ATTRIBUTE_NAMES

        if base_path:
            # this adds a base path to all paths in the configuration
            add_base_path(conf, base_path, file_attributes)

        self.domain = domain or conf.get("domain", "127.0.0.1")
        self.port = port or conf.get("port", 80)

        self.conf = set_domain_and_port(conf, self.domain, self.port)

    def __getattr__(self, item, default=None):
        if item in self:
            return self[item]
        else:
            return default

    def __setattr__(self, key, value):
        super(Base, self).__setitem__(key, value)

    def get(self, item, default=None):
        return self.__getattr__(item, default)

    def items(self):
        for key in self.keys():
            if key.startswith("__") and key.endswith("__"):
                continue
            yield key, getattr(self, key)


def create_from_config_file(
    cls,
    filename: str,
    base_path: Optional[str] = "",
    domain: Optional[str] = "",
    port: Optional[int] = 0,
):
    """
    Reads a YAML, JSON or Python configuration file and instantiates a
    configuration class from it. Relative file names in the configuration
    are taken to be relative to the configuration file.
    """
    _cnf = load_config_file(filename)
    if not base_path:
        base_path = os.path.dirname(os.path.abspath(filename))

    return cls(_cnf, base_path=base_path, domain=domain, port=port)
