import importlib
import json
import os
import secrets
import sys
from urllib.parse import quote_plus
from urllib.parse import unquote_plus
from urllib.parse import urlsplit

import yaml
from cryptojwt.utils import importer


def rndstr(size=16):
    """
    Returns a string of random url safe characters

    :param size: The number of random bytes used, the string is longer
    :return: string
    """
    return secrets.token_urlsafe(size)


def instantiate(cls, **kwargs):
    if isinstance(cls, str):
        return importer(cls)(**kwargs)
    else:
        return cls(**kwargs)


def execute(spec, **kwargs):
    """
    Instantiates a class from a specification of the form::

        {"class": "dotted.path.Class", "kwargs": {...}}

    The class can also be given as a class reference. Keyword arguments
    given in the specification override those passed in.
    """
    _kwargs = dict(kwargs)
    _kwargs.update(spec.get("kwargs", {}))
    return instantiate(spec["class"], **_kwargs)


def load_yaml_config(filename):
    """Load a YAML configuration file."""
    with open(filename, "rt", encoding="utf-8") as file:
        config_dict = yaml.safe_load(file)
    return config_dict


def load_config_file(filename):
    if filename.endswith(".yaml"):
        _cnf = load_yaml_config(filename)
    elif filename.endswith(".json"):
        with open(filename, "rt", encoding="utf-8") as fp:
            _cnf = json.load(fp)
    elif filename.endswith(".py"):
        head, tail = os.path.split(filename)
        tail = tail[:-3]
        sys.path.append(head)
        module = importlib.import_module(tail)
        _cnf = getattr(module, "CONFIG")
    else:
        raise ValueError("Unknown file type")

    return _cnf


def host_of(uri):
    return urlsplit(uri).hostname or ""


# Converters

class QPKey:
    def serialize(self, str):
        return quote_plus(str)

    def deserialize(self, str):
        return unquote_plus(str)


class JSON:
    def serialize(self, str):
        return json.dumps(str)

    def deserialize(self, str):
        return json.loads(str)
