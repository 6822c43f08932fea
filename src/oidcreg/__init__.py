__version__ = "0.1.0"

# Lowest 32 bit integer. Clients with a lower evaluation order are matched first.
HIGHEST_PRECEDENCE = -(2**31)


def truncate(txt, size=256):
    """
    Shortens a text so it can safely be written to a log.

    :param txt: The text, bytes are decoded leniently
    :param size: Max number of characters kept
    :return: string
    """
    if isinstance(txt, bytes):
        txt = txt.decode("utf-8", errors="replace")
    else:
        txt = "{}".format(txt)

    if len(txt) > size:
        return "{}...".format(txt[:size])
    return txt
