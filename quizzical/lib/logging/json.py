import typing as t

from quizzical.lib.json import JSONEncoder as BaseJSONEncoder
from quizzical.lib.json import JSONValue


class JSONEncoder(BaseJSONEncoder):
    """Encodes log extras; a value with no JSON form is logged as its repr"""

    def default(self, o: t.Any) -> JSONValue:
        try:
            return super().default(o)
        except TypeError:
            return repr(o)
