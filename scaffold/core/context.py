"""Request context handed to every route handler."""

from typing import Any, Dict, List, Optional, Type, TypeVar
from dataclasses import dataclass, field
import logging

from pydantic import BaseModel, ValidationError
from starlette.requests import Request

from scaffold.errno import ERR_PARAM_BIND, Errno
from scaffold.exceptions import ContextReleasedError
from scaffold.schemas.journal import Journal

ModelT = TypeVar("ModelT", bound=BaseModel)

_STATE_KEY = "scaffold"


@dataclass
class RequestState:
    """
    Per-request state shared by every Context of the same request.

    Lives on ``request.state`` so middleware and handlers, which each hold
    their own Context, see the same values.
    """
    payload: Optional[Errno] = None
    alias: str = ""
    journal: Optional[Journal] = None
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    aborted: bool = False
    abort_error: Optional[Errno] = None
    errors: List[Exception] = field(default_factory=list)
    response_headers: Dict[str, str] = field(default_factory=dict)
    raw_body: bytes = b""
    logger: Optional[logging.Logger] = None


def get_state(request: Request) -> RequestState:
    state = getattr(request.state, _STATE_KEY, None)
    if state is None:
        state = RequestState()
        setattr(request.state, _STATE_KEY, state)
    return state


class Context:
    """
    Thin per-handler wrapper around a Starlette request.

    A Context is created for a single handler invocation and released when
    that handler returns; the values it reads and writes outlive it on the
    request state.
    """

    def __init__(self, request: Request):
        self._request: Optional[Request] = request

    @property
    def request(self) -> Request:
        if self._request is None:
            raise ContextReleasedError("context used after release")
        return self._request

    @property
    def _state(self) -> RequestState:
        return get_state(self.request)

    def init(self, logger: Optional[logging.Logger] = None) -> None:
        """Reset the request state; called once when the request enters the pipeline."""
        setattr(self.request.state, _STATE_KEY, RequestState(logger=logger))

    def release(self) -> None:
        self._request = None

    # ---- request accessors ----

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def host(self) -> str:
        return self.request.url.netloc

    @property
    def path(self) -> str:
        return self.request.url.path

    @property
    def uri(self) -> str:
        query = self.request.url.query
        return f"{self.path}?{query}" if query else self.path

    def header(self) -> Dict[str, str]:
        return dict(self.request.headers)

    def get_header(self, key: str) -> str:
        return self.request.headers.get(key, "")

    def set_header(self, key: str, value: str) -> None:
        """Queue a header for the outgoing response."""
        self._state.response_headers[key] = value

    def pending_headers(self) -> Dict[str, str]:
        return dict(self._state.response_headers)

    def query(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.request.query_params.get(key, default)

    def param(self, key: str) -> Optional[str]:
        value = self.request.path_params.get(key)
        return None if value is None else str(value)

    def raw_data(self) -> bytes:
        return self._state.raw_body

    def should_bind_json(self, model: Type[ModelT]) -> ModelT:
        """
        Validate the JSON body against a Pydantic model.

        Raises:
            Errno: ERR_PARAM_BIND carrying the validation message
        """
        try:
            return model.model_validate_json(self.raw_data() or b"{}")
        except ValidationError as e:
            raise ERR_PARAM_BIND.with_data(_errors(e)) from e

    def should_bind_query(self, model: Type[ModelT]) -> ModelT:
        """Validate query parameters against a Pydantic model."""
        try:
            return model.model_validate(dict(self.request.query_params))
        except ValidationError as e:
            raise ERR_PARAM_BIND.with_data(_errors(e)) from e

    # ---- payload and abort ----

    @property
    def payload(self) -> Optional[Errno]:
        return self._state.payload

    def set_payload(self, payload: Errno) -> None:
        self._state.payload = payload

    def abort(self) -> None:
        self._state.aborted = True

    def abort_with_error(self, err: Errno) -> None:
        state = self._state
        state.aborted = True
        state.abort_error = err

    def add_error(self, err: Exception) -> None:
        """Record a framework-level error without aborting."""
        self._state.errors.append(err)

    @property
    def is_aborted(self) -> bool:
        return self._state.aborted

    @property
    def abort_error(self) -> Optional[Errno]:
        return self._state.abort_error

    @property
    def errors(self) -> List[Exception]:
        return list(self._state.errors)

    # ---- journal, alias, identity ----

    @property
    def journal(self) -> Optional[Journal]:
        return self._state.journal

    def set_journal(self, journal: Optional[Journal]) -> None:
        self._state.journal = journal

    def disable_journal(self) -> None:
        self._state.journal = None

    @property
    def alias(self) -> str:
        return self._state.alias

    def set_alias(self, alias: str) -> None:
        self._state.alias = alias

    @property
    def user_id(self) -> Optional[int]:
        return self._state.user_id

    def set_user_id(self, user_id: int) -> None:
        self._state.user_id = user_id

    @property
    def user_name(self) -> Optional[str]:
        return self._state.user_name

    def set_user_name(self, user_name: str) -> None:
        self._state.user_name = user_name

    @property
    def logger(self) -> logging.Logger:
        return self._state.logger or logging.getLogger(__name__)


def _errors(e: ValidationError) -> List[Dict[str, Any]]:
    return [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"], "code": err["type"]}
        for err in e.errors()
    ]
