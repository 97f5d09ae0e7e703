"""
Category API Routes

Create, list, rename and delete categories. All routes require a token.
"""

from fastapi import APIRouter, Depends, Query, status

from bookstore.api.dependencies import get_category_service, get_current_user_id
from bookstore.api.schemas import CategoryRequest, CategoryResponse, WebResponse
from bookstore.services import CategoryService

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
    dependencies=[Depends(get_current_user_id)],
)


@router.post(
    "",
    response_model=WebResponse[CategoryResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    request: CategoryRequest,
    service: CategoryService = Depends(get_category_service),
):
    category = await service.create(request.name)
    return WebResponse(data=CategoryResponse.from_category(category), message="category created")


@router.get(
    "",
    response_model=WebResponse[list[CategoryResponse]],
    response_model_exclude_none=True,
)
async def list_categories(
    page: int = Query(1, description="Page number"),
    size: int = Query(10, description="Items per page"),
    service: CategoryService = Depends(get_category_service),
):
    """List categories. Out-of-range paging values fall back to defaults."""
    result = await service.list_categories(page, size)
    return WebResponse(
        data=[CategoryResponse.from_category(c) for c in result.items],
        page=result.page,
        size=result.size,
        total_items=result.total_items,
        total_pages=result.total_pages,
    )


@router.put(
    "/{category_id}",
    response_model=WebResponse[CategoryResponse],
    response_model_exclude_none=True,
)
async def update_category(
    category_id: int,
    request: CategoryRequest,
    service: CategoryService = Depends(get_category_service),
):
    category = await service.update(category_id, request.name)
    return WebResponse(data=CategoryResponse.from_category(category), message="category updated")


@router.delete(
    "/{category_id}",
    response_model=WebResponse,
    response_model_exclude_none=True,
)
async def delete_category(
    category_id: int,
    service: CategoryService = Depends(get_category_service),
):
    await service.delete(category_id)
    return WebResponse(message="category deleted")
