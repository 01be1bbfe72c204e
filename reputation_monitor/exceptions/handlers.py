import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import (
    CredentialsMissingError,
    GroupNotFoundError,
    HotelNotFoundError,
    ThemeAnalysisError,
    ThemesNotConfiguredError,
)

logger = logging.getLogger(__name__)


async def credentials_missing_handler(
    _request: Request, exc: CredentialsMissingError
) -> JSONResponse:
    logger.error("Review fetch rejected, missing keys: %s", ", ".join(exc.missing_keys))
    return JSONResponse(
        status_code=503,
        content={"detail": str(exc), "missing_keys": exc.missing_keys, "results": []},
    )


async def hotel_not_found_handler(_request: Request, exc: HotelNotFoundError) -> JSONResponse:
    logger.info("Hotel not found: %s", exc.hotel_id)
    return JSONResponse(status_code=404, content={"detail": "Hotel not found"})


async def group_not_found_handler(_request: Request, exc: GroupNotFoundError) -> JSONResponse:
    logger.info("Group not found: %s", exc.group_id)
    return JSONResponse(status_code=404, content={"detail": "Group not found"})


async def themes_not_configured_handler(
    _request: Request, exc: ThemesNotConfiguredError
) -> JSONResponse:
    logger.error("Theme analysis requested without %s", "ANTHROPIC_API_KEY")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


async def theme_analysis_error_handler(
    _request: Request, exc: ThemeAnalysisError
) -> JSONResponse:
    logger.error("Theme analysis failed: %s", exc.message)
    return JSONResponse(
        status_code=502,
        content={"detail": f"Theme analysis failed: {exc.message}"},
    )
