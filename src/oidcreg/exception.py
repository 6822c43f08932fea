class OidcRegError(Exception):
    def __init__(self, errmsg, content_type="", *args):
        Exception.__init__(self, errmsg, *args)
        self.content_type = content_type


class MessageException(OidcRegError):
    pass


class DecodeError(MessageException):
    pass


class MissingRequiredAttribute(MessageException):
    def __init__(self, attr, message=""):
        Exception.__init__(self, attr)
        self.message = message

    def __str__(self):
        return "Missing required attribute '{}'".format(self.args[0])


class NotAllowedValue(MessageException):
    pass


class WrongValueType(MessageException):
    pass


class StoreError(OidcRegError):
    pass


class ReconciliationError(OidcRegError):
    pass


class ConfigurationError(OidcRegError):
    pass
