"""
User Resource API Endpoints

REST API endpoints for the user collection: CRUD, upsert, JSON Patch,
paging and capability discovery.
"""
import logging
from fastapi import APIRouter, HTTPException, Query, Depends, Request, Response
from userhub.modules.users.api.formatters import read_body, render, wants_xml, XML_MEDIA_TYPE, JSON_MEDIA_TYPE
from userhub.modules.users.api.links import LinkBuilder
from userhub.modules.users.domain.exceptions import UserResourceError
from userhub.modules.users.schemas import PaginationHeader
from userhub.modules.users.services.user_service import (
    UserService,
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
)

logger = logging.getLogger("userhub.users.api")

router = APIRouter(prefix="/users", tags=["users"])

ALLOWED_COLLECTION_METHODS = ("POST", "GET", "OPTIONS")

# totalCount / totalPages are not computed from the store
PLACEHOLDER_TOTAL_COUNT = 1
PLACEHOLDER_TOTAL_PAGES = 1


def get_user_service(request: Request) -> UserService:
    """Service instance wired by the application factory."""
    return request.app.state.user_service


@router.api_route("/{user_id}", methods=["GET", "HEAD"], name="get_user_by_id")
async def get_user_by_id(
    user_id: str,
    request: Request,
    service: UserService = Depends(get_user_service),
):
    """
    Get user details by ID.

    HEAD answers with the same status and headers and no body.
    """
    logger.debug(f"[user_endpoints.get_user_by_id] user_id={user_id}, method={request.method}")

    try:
        user = await service.get_user(user_id)
    except UserResourceError:
        raise
    except Exception as e:
        logger.error(f"[user_endpoints.get_user_by_id] ERROR: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if request.method == "HEAD":
        media_type = XML_MEDIA_TYPE if wants_xml(request) else JSON_MEDIA_TYPE
        return Response(status_code=200, media_type=media_type)
    return render(request, user, xml_root="User")


@router.post("", status_code=201, name="create_user")
async def create_user(
    request: Request,
    service: UserService = Depends(get_user_service),
):
    """
    Create a new user.

    Responds 201 with the new id and a Location pointing at the user.
    """
    logger.debug("[user_endpoints.create_user] ENTRY")

    try:
        payload = await read_body(request)
        user = await service.create_user(payload)
    except UserResourceError:
        raise
    except Exception as e:
        logger.error(f"[user_endpoints.create_user] ERROR: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    location = LinkBuilder(request).uri_for("get_user_by_id", user_id=user.id)
    return render(request, user.id, status_code=201, headers={"Location": location}, xml_root="Guid")


@router.put("/{user_id}", name="update_user")
async def update_user(
    user_id: str,
    request: Request,
    service: UserService = Depends(get_user_service),
):
    """
    Replace the user at `user_id`, creating it when it does not exist.

    204 when an existing user was replaced. 201 when a user was created; its
    Location is this PUT route, since the client chose the identifier.
    """
    logger.debug(f"[user_endpoints.update_user] user_id={user_id}")

    try:
        payload = await read_body(request)
        outcome = await service.replace_user(user_id, payload)
    except UserResourceError:
        raise
    except Exception as e:
        logger.error(f"[user_endpoints.update_user] ERROR: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if not outcome.inserted:
        return Response(status_code=204)

    location = LinkBuilder(request).uri_for("update_user", user_id=outcome.user_id)
    return render(request, outcome.user_id, status_code=201, headers={"Location": location}, xml_root="Guid")


@router.patch("/{user_id}", status_code=204, name="partially_update_user")
async def partially_update_user(
    user_id: str,
    request: Request,
    service: UserService = Depends(get_user_service),
):
    """Apply a JSON Patch document to the user."""
    logger.debug(f"[user_endpoints.partially_update_user] user_id={user_id}")

    try:
        document = await read_body(request)
        await service.patch_user(user_id, document)
    except UserResourceError:
        raise
    except Exception as e:
        logger.error(f"[user_endpoints.partially_update_user] ERROR: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return Response(status_code=204)


@router.delete("/{user_id}", status_code=204, name="delete_user")
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    """Delete user."""
    logger.debug(f"[user_endpoints.delete_user] user_id={user_id}")

    try:
        await service.delete_user(user_id)
    except UserResourceError:
        raise
    except Exception as e:
        logger.error(f"[user_endpoints.delete_user] ERROR: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return Response(status_code=204)


@router.get("", name="get_users")
async def get_users(
    request: Request,
    page_number: int = Query(DEFAULT_PAGE_NUMBER, alias="pageNumber", description="1-based page number"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize", description="Users per page (max 20)"),
    service: UserService = Depends(get_user_service),
):
    """
    List one page of users.

    Paging metadata goes in the X-Pagination header; the body is the list.
    """
    logger.debug(f"[user_endpoints.get_users] page_number={page_number}, page_size={page_size}")

    try:
        result = await service.list_users(page_number, page_size)
    except UserResourceError:
        raise
    except Exception as e:
        logger.error(f"[user_endpoints.get_users] ERROR: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    page = result.page
    links = LinkBuilder(request)
    previous_page_link = None
    if page.page_number > 1:
        previous_page_link = links.uri_for(
            "get_users", query={"pageNumber": page.page_number - 1, "pageSize": page.page_size}
        )
    pagination = PaginationHeader(
        previous_page_link=previous_page_link,
        next_page_link=links.uri_for(
            "get_users", query={"pageNumber": page.page_number + 1, "pageSize": page.page_size}
        ),
        total_count=PLACEHOLDER_TOTAL_COUNT,
        page_size=page.page_size,
        current_page=page.page_number,
        total_pages=PLACEHOLDER_TOTAL_PAGES,
    )
    headers = {"X-Pagination": pagination.model_dump_json(by_alias=True)}
    return render(request, result.items, headers=headers, xml_root="ArrayOfUser")


@router.options("", name="get_options")
async def get_options():
    """Advertise the methods allowed on the collection."""
    logger.debug("[user_endpoints.get_options] ENTRY")
    return Response(status_code=200, headers={"Allow": ", ".join(ALLOWED_COLLECTION_METHODS)})
