from fastapi import HTTPException

from vspress.models.context import PressContext


def raise_for_errors(ctx: PressContext) -> None:
    """Turn the last error notification of a handler into an HTTP error"""
    errors = ctx.errors
    if errors:
        raise HTTPException(status_code=errors[-1].status_code, detail=errors[-1].message)
