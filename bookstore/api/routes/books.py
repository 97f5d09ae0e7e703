"""
Book API Routes

CRUD operations for the catalog plus aggregate statistics. Create and update
take a multipart form with the cover image as a file part.
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from loguru import logger

from bookstore.api.dependencies import get_book_service, get_current_user_id
from bookstore.api.schemas import (
    BookPriceStatsResponse,
    BookResponse,
    BookStatsResponse,
    WebResponse,
)
from bookstore.services import BookChanges, BookService
from bookstore.utils import upload_to_base64

router = APIRouter(
    prefix="/books",
    tags=["books"],
    dependencies=[Depends(get_current_user_id)],
)


# =============================================================================
# Statistics
# =============================================================================

@router.get(
    "/stats/total",
    response_model=WebResponse[BookStatsResponse],
    response_model_exclude_none=True,
)
async def total_books(service: BookService = Depends(get_book_service)):
    """Number of books in the catalog."""
    total = await service.total_books()
    return WebResponse(data=BookStatsResponse(total_books=total))


@router.get(
    "/stats/price",
    response_model=WebResponse[BookPriceStatsResponse],
    response_model_exclude_none=True,
)
async def price_stats(service: BookService = Depends(get_book_service)):
    """Highest, lowest and average book price."""
    stats = await service.price_stats()
    return WebResponse(
        data=BookPriceStatsResponse(
            max_price=stats.max_price,
            min_price=stats.min_price,
            avg_price=stats.avg_price,
        )
    )


# =============================================================================
# CRUD Endpoints
# =============================================================================

@router.post(
    "",
    response_model=WebResponse[BookResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_book(
    title: str = Form(..., min_length=1, max_length=255),
    author: str = Form(..., min_length=1, max_length=100),
    price: Decimal = Form(..., gt=0),
    category_id: int = Form(..., gt=0),
    year: Optional[int] = Form(None),
    image: UploadFile = File(...),
    service: BookService = Depends(get_book_service),
):
    """Create a book; the uploaded image is stored as base64 text."""
    logger.info(f"Creating book: {title} by {author}")

    encoded = await upload_to_base64(image)
    book = await service.create(
        title=title,
        author=author,
        price=price,
        category_id=category_id,
        image=encoded,
        year=year,
    )
    return WebResponse(data=BookResponse.from_book(book), message="book created")


@router.get(
    "",
    response_model=WebResponse[list[BookResponse]],
    response_model_exclude_none=True,
)
async def list_books(
    page: int = Query(1, description="Page number"),
    size: int = Query(10, description="Items per page"),
    service: BookService = Depends(get_book_service),
):
    """List books with pagination."""
    result = await service.list_books(page, size)
    return WebResponse(
        data=[BookResponse.from_book(b) for b in result.items],
        page=result.page,
        size=result.size,
        total_items=result.total_items,
        total_pages=result.total_pages,
    )


@router.get(
    "/{book_id}",
    response_model=WebResponse[BookResponse],
    response_model_exclude_none=True,
)
async def get_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
):
    """Get a book with its category."""
    book = await service.get(book_id)
    return WebResponse(data=BookResponse.from_book(book))


@router.put(
    "/{book_id}",
    response_model=WebResponse[BookResponse],
    response_model_exclude_none=True,
)
async def update_book(
    book_id: int,
    title: Optional[str] = Form(None, min_length=1, max_length=255),
    author: Optional[str] = Form(None, min_length=1, max_length=100),
    price: Optional[Decimal] = Form(None, gt=0),
    category_id: Optional[int] = Form(None, gt=0),
    year: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    service: BookService = Depends(get_book_service),
):
    """Update the fields present in the form; a new image replaces the old one."""
    changes = BookChanges(
        title=title,
        author=author,
        price=price,
        year=year,
        category_id=category_id,
        image=await upload_to_base64(image) if image is not None else None,
    )
    book = await service.update(book_id, changes)
    return WebResponse(data=BookResponse.from_book(book), message="book updated")


@router.delete(
    "/{book_id}",
    response_model=WebResponse,
    response_model_exclude_none=True,
)
async def delete_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
):
    await service.delete(book_id)
    return WebResponse(message="book deleted")
