from . import exceptions
import re


def unique(iterable):
    """Drop repeated items, keeping the first occurrence of each"""
    seen = set()
    ret = []
    for item in iterable:
        if item not in seen:
            seen.add(item)
            ret.append(item)
    return ret


def list_wrap(value):
    """Make a list of attribute values from a single value or a list of values"""
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value]
    return [str(value)]


def collapse_whitespace(s):
    """Collapse all whitespace sequences down to a single space"""
    return re.sub(r'\s+', ' ', s).strip()


def get_one_result(results):
    n = len(results)
    if n == 0:
        raise exceptions.NoSearchResults()
    elif n > 1:
        raise exceptions.MultipleSearchResults()
    else:
        return results[0]
