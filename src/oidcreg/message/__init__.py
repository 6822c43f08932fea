import copy
import json
from collections.abc import MutableMapping

from cryptojwt.utils import as_unicode

from oidcreg.exception import DecodeError
from oidcreg.exception import MissingRequiredAttribute
from oidcreg.exception import NotAllowedValue
from oidcreg.exception import WrongValueType

ERRTXT = "On '%s': %s"


class Message(MutableMapping):
    """
    Represents a basic protocol message/item in OAuth2/OIDC.

    The known parameters are described in c_param as
    (type, required, serializer, deserializer, null_allowed) tuples.
    Parameters not in c_param are kept as they are.
    """

    c_param = {}
    c_default = {}
    c_allowed_values = {}

    def __init__(self, set_defaults=True, **kwargs):
        if set_defaults:
            self._dict = copy.deepcopy(self.c_default)
        else:
            self._dict = {}
        self.from_dict(kwargs)

    def __iter__(self):
        return iter(self._dict)

    def type(self):
        """
        Return the type of protocol message this is

        :return: The name of the message
        """
        return self.__class__.__name__

    def from_dict(self, dictionary, **kwargs):
        for key, val in dictionary.items():
            self._add_value(key, val)
        return self

    def _add_value(self, key, val):
        try:
            vtyp, _, _, _deser, null_allowed = self.c_param[key]
        except KeyError:
            self._dict[key] = val
            return

        if val is None:
            if null_allowed:
                self._dict[key] = val
            return

        if isinstance(vtyp, list):
            _item_typ = vtyp[0]
            if isinstance(val, str) and _deser:
                val = _deser(val)
            if not isinstance(val, list):
                raise WrongValueType(ERRTXT % (key, "expected a list"))
            for item in val:
                if not self._type_check(_item_typ, item):
                    raise WrongValueType(ERRTXT % (key, "wrong type of list item"))
            self._dict[key] = list(val)
        elif self._type_check(vtyp, val):
            self._dict[key] = val
        else:
            raise WrongValueType(ERRTXT % (key, "expected {}".format(vtyp.__name__)))

    @staticmethod
    def _type_check(typ, val):
        if typ is int:
            # bool is a subclass of int
            return isinstance(val, int) and not isinstance(val, bool)
        return isinstance(val, typ)

    def to_dict(self):
        """
        Return a dictionary representation of the class

        :return: A dict
        """
        _res = {}
        for key, val in self._dict.items():
            _ser = self.c_param.get(key, (None, None, None, None, None))[2]
            if isinstance(val, Message):
                _res[key] = val.to_dict()
            elif _ser:
                _res[key] = _ser(val)
            else:
                _res[key] = copy.deepcopy(val)
        return _res

    def to_json(self, indent=None):
        return json.dumps(self.to_dict(), indent=indent)

    def from_json(self, txt, **kwargs):
        try:
            _dict = json.loads(as_unicode(txt))
        except (TypeError, ValueError, RecursionError) as err:
            raise DecodeError("Not a JSON document: {}".format(err))

        if not isinstance(_dict, dict):
            raise DecodeError("JSON document is not an object")

        return self.from_dict(_dict)

    def __str__(self):
        return "{}".format(self.to_dict())

    def verify(self, **kwargs):
        """
        Make sure all the required values are there and that the values are
        of the correct type and allowed.
        """
        for attribute, (_, required, _, _, _) in self.c_param.items():
            if required and attribute not in self._dict:
                raise MissingRequiredAttribute(attribute, "%s" % self)

        for attribute, allowed in self.c_allowed_values.items():
            if attribute not in self._dict:
                continue
            _val = self._dict[attribute]
            if isinstance(_val, list):
                _bad = [v for v in _val if v not in allowed]
            elif _val not in allowed:
                _bad = [_val]
            else:
                _bad = []
            if _bad:
                raise NotAllowedValue(ERRTXT % (attribute, "Not allowed value: {}".format(_bad)))

        return True

    def __getitem__(self, item):
        return self._dict[item]

    def __setitem__(self, key, value):
        self._add_value(key, value)

    def __delitem__(self, key):
        del self._dict[key]

    def __len__(self):
        return len(self._dict)

    def __contains__(self, item):
        return item in self._dict

    def __eq__(self, other):
        if not isinstance(other, Message):
            return False
        if self.type() != other.type():
            return False
        return self._dict == other._dict

    def extra(self):
        """
        Return the extra parameters that this instance has.

        :return: A dictionary containing only the extras.
        """
        return {k: v for k, v in self._dict.items() if k not in self.c_param}

    def copy(self):
        return copy.deepcopy(self)


def sp_sep_list_deserializer(val):
    if isinstance(val, str):
        return val.split()
    return val


def sp_sep_list_serializer(vals):
    if isinstance(vals, str):
        return vals
    return " ".join(vals)


SINGLE_REQUIRED_STRING = (str, True, None, None, False)
SINGLE_OPTIONAL_STRING = (str, False, None, None, False)
SINGLE_OPTIONAL_INT = (int, False, None, None, False)
SINGLE_OPTIONAL_BOOLEAN = (bool, False, None, None, False)
SINGLE_OPTIONAL_DICT = (dict, False, None, None, False)
OPTIONAL_LIST_OF_STRINGS = ([str], False, None, None, False)
REQUIRED_LIST_OF_STRINGS = ([str], True, None, None, False)
OPTIONAL_LIST_OF_SP_SEP_STRINGS = (
    [str],
    False,
    sp_sep_list_serializer,
    sp_sep_list_deserializer,
    False,
)
