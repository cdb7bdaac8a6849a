"""Raw-token extraction strategies.

Each strategy pulls the token string out of an inbound request and
raises ``NoTokenError`` when it is not there. Exactly one is active per
token policy.
"""

from collections.abc import Awaitable, Callable

from fastapi import Request

from tokengate.exceptions import NoTokenError

BEARER_PREFIX = "Bearer "
FORM_FIELD = "token"
COOKIE_NAME = "authorization"

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

TokenExtractor = Callable[[Request | None], Awaitable[str]]


async def get_bearer_token(request: Request | None) -> str:
    """Read ``Authorization: Bearer <token>``."""
    if request is not None:
        header = request.headers.get("Authorization", "")
        if header.startswith(BEARER_PREFIX) and header[len(BEARER_PREFIX) :]:
            return header[len(BEARER_PREFIX) :]
    raise NoTokenError()


async def get_form_token(request: Request | None) -> str:
    """Read the ``token`` field from the query string or a form body."""
    if request is not None:
        if token := request.query_params.get(FORM_FIELD):
            return token
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(_FORM_CONTENT_TYPES):
            form = await request.form()
            token = form.get(FORM_FIELD)
            if isinstance(token, str) and token:
                return token
    raise NoTokenError()


async def get_cookie_token(request: Request | None) -> str:
    """Read the ``authorization`` cookie."""
    if request is not None:
        if token := request.cookies.get(COOKIE_NAME):
            return token
    raise NoTokenError()


_EXTRACTORS: dict[str, TokenExtractor] = {
    "bearer": get_bearer_token,
    "form": get_form_token,
    "cookie": get_cookie_token,
}


def extractor_for(source: str) -> TokenExtractor:
    """Return the extraction strategy registered under *source*."""
    try:
        return _EXTRACTORS[source]
    except KeyError:
        raise ValueError(f"Unknown token source: {source!r}") from None
