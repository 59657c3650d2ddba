"""
FastAPI Endpoints for the Link Shortener Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request parsing (Pydantic models)
- Translating service exceptions into HTTP responses
- Delegating to the service layer

Design Principles:
- Thin endpoints: all business logic lives in services
- Store failures become a generic 500; details go to the log, not the client
- The redirect router is mounted last so /{short_code} never shadows
  /api/links, /healthz or the docs
"""

import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from shortlink.api.dependencies import get_link_store, get_settings
from shortlink.api.schemas import CreateLinkRequest, LinkResponse
from shortlink.core.exceptions import (
    DatabaseError,
    EmptyURLError,
    InvalidShortCodeError,
    ShortCodeNotFoundError,
    ShortCodeTakenError,
)
from shortlink.core.setting import Settings
from shortlink.db.interface import LinkStore
from shortlink.services.allocation_service import LinkAllocationService
from shortlink.services.link_service import LinkService
from shortlink.services.resolution_service import LinkResolutionService

logger = logging.getLogger(__name__)

SERVER_ERROR_DETAIL = "Server error"
NOT_FOUND_DETAIL = "Link not found"

router = APIRouter(prefix="/api/links")
redirect_router = APIRouter()


def _server_error(action: str, error: DatabaseError) -> HTTPException:
    logger.error(f"Failed to {action}: {error}", exc_info=error.original_error)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=SERVER_ERROR_DETAIL
    )


@router.post(
    "",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short link",
    description="Takes a long URL and an optional custom code and returns the new link"
)
async def create_link(
    body: CreateLinkRequest,
    store: LinkStore = Depends(get_link_store),
    settings: Settings = Depends(get_settings)
) -> LinkResponse:
    """
    Create a new short link.

    Raises:
        HTTPException 400: If the URL is empty or the custom code is malformed
        HTTPException 409: If the custom code is already taken
        HTTPException 500: If the store fails or no free code could be found
    """
    allocation_service = LinkAllocationService(
        store,
        max_attempts=settings.MAX_ALLOCATION_ATTEMPTS,
        code_length=settings.SHORT_CODE_LENGTH
    )

    try:
        link = await allocation_service.allocate(body.url, body.short_code)
    except (EmptyURLError, InvalidShortCodeError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except ShortCodeTakenError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except DatabaseError as e:
        raise _server_error("create link", e)

    return LinkResponse.model_validate(link)


@router.get(
    "",
    response_model=List[LinkResponse],
    summary="List links",
    description="Returns every link, newest first"
)
async def list_links(store: LinkStore = Depends(get_link_store)) -> List[LinkResponse]:
    try:
        links = await LinkService(store).list_links()
    except DatabaseError as e:
        raise _server_error("list links", e)

    return [LinkResponse.model_validate(link) for link in links]


@router.get(
    "/{short_code}",
    response_model=LinkResponse,
    summary="Get link statistics",
    description="Returns a single link including its click count"
)
async def get_link(
    short_code: str,
    store: LinkStore = Depends(get_link_store)
) -> LinkResponse:
    """
    Raises:
        HTTPException 404: If short code not found
    """
    try:
        link = await LinkService(store).get_link(short_code)
    except ShortCodeNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_DETAIL
        )
    except DatabaseError as e:
        raise _server_error("get link", e)

    return LinkResponse.model_validate(link)


@router.delete(
    "/{short_code}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a link",
    description="Permanently removes a link; its code can be reused afterwards"
)
async def delete_link(
    short_code: str,
    store: LinkStore = Depends(get_link_store)
) -> Response:
    """
    Raises:
        HTTPException 404: If short code not found
    """
    try:
        await LinkService(store).delete_link(short_code)
    except ShortCodeNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_DETAIL
        )
    except DatabaseError as e:
        raise _server_error("delete link", e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@redirect_router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    response_class=RedirectResponse,
    summary="Redirect to original URL",
    description="Takes a short code and redirects to the original long URL"
)
async def redirect_to_url(
    short_code: str,
    background_tasks: BackgroundTasks,
    store: LinkStore = Depends(get_link_store)
) -> Response:
    """
    Redirect to the original URL for a given short code.

    The click counter is updated by a background task after the redirect
    has been sent.

    Returns:
        RedirectResponse (HTTP 302), or a plain-text 404/503 page
    """
    resolution_service = LinkResolutionService(store, dispatch=background_tasks.add_task)

    try:
        original_url = await resolution_service.resolve(short_code)
    except ShortCodeNotFoundError:
        return PlainTextResponse(NOT_FOUND_DETAIL, status_code=status.HTTP_404_NOT_FOUND)
    except DatabaseError as e:
        logger.error(f"Failed to resolve {short_code}: {e}", exc_info=e.original_error)
        return PlainTextResponse(
            "Service temporarily unavailable",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
