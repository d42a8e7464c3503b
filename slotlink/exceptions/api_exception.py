from typing import Any, Type

from fastapi import HTTPException


class APIException(HTTPException):
    status_code: int
    detail: str
    description: str | None = None

    def __init__(self) -> None:
        super().__init__(self.status_code, self.detail)


def responses(default_type: Type[Any], *args: Type[APIException]) -> dict[int | str, dict[str, Any]]:
    """Build the OpenAPI ``responses`` of a route from its possible exceptions."""

    exceptions: dict[int, list[Type[APIException]]] = {}
    for exc in args:
        exceptions.setdefault(exc.status_code, []).append(exc)

    return {
        200: {"model": default_type},
        **{
            code: {
                "description": " / ".join(e.description or e.detail for e in excs),
                "content": {
                    "application/json": {"examples": {e.__name__: {"value": {"detail": e.detail}} for e in excs}}
                },
            }
            for code, excs in exceptions.items()
        },
    }
