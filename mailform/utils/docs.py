from collections import defaultdict
from typing import Any

from ..exceptions.contact import ContactError
from ..schemas.contact import ErrorResponse


def responses(default: type, *errors: type[ContactError]) -> dict[int | str, dict[str, Any]]:
    """Build the `responses` argument of a route from its success model and the errors it may return."""

    descriptions: dict[int, list[str]] = defaultdict(list)
    for error in errors:
        descriptions[error.status_code].append(f"{error.detail}: {error.description}")

    return {
        200: {"model": default},
        **{
            code: {"model": ErrorResponse, "description": "<br>".join(lines)}
            for code, lines in sorted(descriptions.items())
        },
    }
