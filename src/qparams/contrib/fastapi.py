"""FastAPI dependency that decodes the request query into a model.

Requires the ``fastapi`` extra::

    from fastapi import Depends, FastAPI
    from qparams.contrib.fastapi import query_model

    app = FastAPI()

    @app.get("/users")
    def list_users(opts: UserQuery = Depends(query_model(UserQuery))):
        return opts.filter
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from fastapi import HTTPException, Request

from ..decoder import Decoder
from ..exceptions import TypeConversionErrors

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


def query_model(
    model: type[T], *, decoder: Decoder | None = None
) -> Callable[[Request], T]:
    """Create a dependency returning a fresh *model* decoded from the query.

    Conversion errors become a 422 whose detail lists every message.
    """
    active = decoder or Decoder()

    def dependency(request: Request) -> T:
        destination = model()
        try:
            active.decode_query_string(destination, request.url.query)
        except TypeConversionErrors as err:
            raise HTTPException(status_code=422, detail=err.messages) from err
        return destination

    return dependency
