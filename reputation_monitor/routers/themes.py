from fastapi import APIRouter, HTTPException

from reputation_monitor.dependencies import HotelStoreDep, ThemeServiceDep, ThemeStoreDep
from reputation_monitor.exceptions.custom import HotelNotFoundError
from reputation_monitor.schemas.themes import ReviewTheme, ThemesRequest

router = APIRouter()


@router.post("/themes", response_model=ReviewTheme)
async def generate_themes(request: ThemesRequest, service: ThemeServiceDep) -> ReviewTheme:
    return await service.generate(request.hotel_id)


@router.get("/hotels/{hotel_id}/themes", response_model=ReviewTheme)
async def get_latest_themes(
    hotel_id: str, hotels: HotelStoreDep, themes: ThemeStoreDep
) -> ReviewTheme:
    if hotels.get(hotel_id) is None:
        raise HotelNotFoundError(hotel_id)
    theme = themes.latest(hotel_id)
    if theme is None:
        raise HTTPException(status_code=404, detail="No themes generated yet")
    return theme
