"""Branding, localization and display preference stubs."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from src.api.deps import jf_response
from src.auth import RequestContext, get_request_context
from src.constants import CACHE_MAX_AGE_LOCALIZATION

router = APIRouter()

Authenticated = Annotated[RequestContext, Depends(get_request_context)]

COUNTRIES = [
    {
        "DisplayName": "United States",
        "Name": "US",
        "ThreeLetterISORegionName": "USA",
        "TwoLetterISORegionName": "US",
    },
]

CULTURES = [
    {
        "DisplayName": "English",
        "Name": "English",
        "ThreeLetterISOLanguageName": "eng",
        "ThreeLetterISOLanguageNames": ["eng"],
        "TwoLetterISOLanguageName": "en",
    },
]

LOCALIZATION_OPTIONS = [{"Name": "English", "Value": "en-US"}]

PARENTAL_RATINGS = [{"Name": "Unrated", "Value": 0}]


def _cached(value) -> Response:
    response = jf_response(value)
    response.headers["cache-control"] = f"max-age={CACHE_MAX_AGE_LOCALIZATION}"
    return response


# ==================== BRANDING ====================


@router.get("/Branding/Configuration")
async def branding_configuration() -> Response:
    return jf_response({"LoginDisclaimer": "", "CustomCss": "", "SplashscreenEnabled": False})


@router.get("/Branding/Css")
@router.get("/Branding/Css.css")
async def branding_css() -> Response:
    return Response(content="", media_type="text/css")


# ==================== LOCALIZATION ====================


@router.get("/Localization/Countries")
async def localization_countries() -> Response:
    return _cached(COUNTRIES)


@router.get("/Localization/Cultures")
async def localization_cultures() -> Response:
    return _cached(CULTURES)


@router.get("/Localization/Options")
async def localization_options() -> Response:
    return _cached(LOCALIZATION_OPTIONS)


@router.get("/Localization/ParentalRatings")
async def localization_parental_ratings() -> Response:
    return _cached(PARENTAL_RATINGS)


# ==================== DISPLAY PREFERENCES ====================


def default_display_preferences(preferences_id: str) -> dict:
    return {
        "Id": preferences_id,
        "SortBy": "SortName",
        "RememberIndexing": False,
        "PrimaryImageHeight": 250,
        "PrimaryImageWidth": 250,
        "CustomPrefs": {
            "chromecastVersion": "stable",
            "skipForwardLength": "30000",
            "skipBackLength": "10000",
            "enableNextVideoInfoOverlay": "False",
            "tvhome": "null",
            "dashboardTheme": "null",
        },
        "ScrollDirection": "Horizontal",
        "ShowBackdrop": True,
        "RememberSorting": False,
        "SortOrder": "Ascending",
        "ShowSidebar": False,
        "Client": "emby",
    }


@router.get("/DisplayPreferences/{preferences_id}")
async def get_display_preferences(preferences_id: str, context: Authenticated) -> Response:
    return jf_response(default_display_preferences(preferences_id))


@router.post("/DisplayPreferences/{preferences_id}")
async def update_display_preferences(preferences_id: str, context: Authenticated) -> Response:
    return Response(status_code=204)
