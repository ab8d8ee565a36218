"""Business codes carried inside the response envelope."""

from typing import Any


class Errno(Exception):
    """
    A business outcome: code, message and optional data.

    Instances are treated as immutable values. ``with_data`` returns a copy,
    so the module-level constants can be shared between requests. An Errno
    can also be raised from a handler; the router turns it into an aborted
    request carrying this error.
    """

    def __init__(self, code: int, msg: str, data: Any = None):
        super().__init__(msg)
        self.code = code
        self.msg = msg
        self.data = data

    def with_data(self, data: Any) -> "Errno":
        """Return a copy of this errno carrying ``data``."""
        return Errno(self.code, self.msg, data)

    def with_msg(self, msg: str) -> "Errno":
        """Return a copy of this errno with a different message."""
        return Errno(self.code, msg, self.data)

    @property
    def is_ok(self) -> bool:
        return self.code == OK.code

    def __eq__(self, other):
        if not isinstance(other, Errno):
            return NotImplemented
        return (self.code, self.msg, self.data) == (other.code, other.msg, other.data)

    def __hash__(self):
        return hash((self.code, self.msg))

    def __repr__(self) -> str:
        return f"Errno(code={self.code}, msg={self.msg!r})"


OK = Errno(0, "OK")

ERR_SERVER = Errno(10101, "Internal Server Error")
ERR_MANY_REQUEST = Errno(10102, "Too Many Requests")
ERR_PARAM_BIND = Errno(10103, "Parameter Bind Error")
ERR_AUTHORIZATION = Errno(10104, "Authorization Error")
