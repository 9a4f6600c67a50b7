"""
Inkwell Backend - Blog Route Handlers
=====================================

What:  /blogs endpoints: create, sampled fetch, listings, search, and the
       get/update/delete-by-id routes.
How:   Each handler pulls the collection from the database gateway dependency
       and delegates to a service. Errors are raised as application exceptions
       and rendered by the global handlers in main.py.

Route order matters: the fixed paths (/blogs/latest, /blogs/ids, ...) are
declared before /blogs/{blog_id} so they are not captured as ids.
"""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorCollection

from inkwell.database import get_blog_collection
from inkwell.schemas.blog import (
    BlogCreate,
    BlogCreatedResponse,
    BlogResponse,
    BlogUpdate,
    CategoryCount,
    EmailRequest,
    ErrorResponse,
    FetchRequest,
    MessageResponse,
    SearchRequest,
)
from inkwell.services.blog_service import blog_service
from inkwell.services.query_service import query_service
from inkwell.services.search_service import search_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blogs", tags=["Blogs"])

ERRORS_400 = {400: {"description": "Invalid input", "model": ErrorResponse}}
ERRORS_404 = {404: {"description": "Blog not found", "model": ErrorResponse}}
ERRORS_500 = {500: {"description": "Database error", "model": ErrorResponse}}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=BlogCreatedResponse,
    responses={**ERRORS_400, **ERRORS_500},
    summary="Create a blog",
)
async def create_blog(
    payload: BlogCreate,
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> BlogCreatedResponse:
    return await blog_service.create_blog(collection, payload)


@router.post(
    "/fetch",
    response_model=Dict[str, List[BlogResponse]],
    response_model_exclude_unset=True,
    responses={**ERRORS_400, **ERRORS_500},
    summary="Random blogs per category",
    description=(
        "Body: {\"categories\": {\"Tech\": 3, \"Travel\": 2}, \"random\": 4}. "
        "Returns up to the requested number of random blogs for each category, "
        "plus a `random` list across all categories when requested."
    ),
)
async def fetch_blogs(
    payload: FetchRequest,
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> Dict[str, List[BlogResponse]]:
    return await query_service.sample_by_categories(
        collection, payload.categories, payload.random
    )


@router.get(
    "/latest",
    response_model=List[BlogResponse],
    response_model_exclude_unset=True,
    responses=ERRORS_500,
    summary="Newest blogs",
)
async def latest_blogs(
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> List[BlogResponse]:
    return await query_service.latest(collection)


@router.get(
    "/popular",
    response_model=List[BlogResponse],
    response_model_exclude_unset=True,
    responses=ERRORS_500,
    summary="Most reacted blogs",
)
async def popular_blogs(
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> List[BlogResponse]:
    return await query_service.popular(collection)


@router.get(
    "/featured",
    response_model=List[BlogResponse],
    response_model_exclude_unset=True,
    responses=ERRORS_500,
    summary="Editor-picked blogs (FEATURED_BLOG_IDS)",
)
async def featured_blogs(
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> List[BlogResponse]:
    return await query_service.featured(collection)


@router.get(
    "/category-count",
    response_model=List[CategoryCount],
    responses=ERRORS_500,
    summary="Number of blogs per category",
)
async def category_count(
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> List[CategoryCount]:
    return await query_service.category_counts(collection)


@router.get(
    "/category",
    response_model=List[BlogResponse],
    response_model_exclude_unset=True,
    responses={**ERRORS_400, **ERRORS_500},
    summary="Paginated blogs of one category",
    description=(
        "Case-insensitive exact category match, newest first. Each item carries a "
        "`description` taken from the first paragraph, quote or header block."
    ),
)
async def blogs_by_category(
    category: Optional[str] = Query(default=None, description="Category name (any case)"),
    page: int = Query(default=1, description="1-based page number"),
    limit: Optional[int] = Query(default=None, description="Items per page"),
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> List[BlogResponse]:
    return await query_service.by_category(collection, category, page=page, limit=limit)


@router.get(
    "/ids",
    response_model=List[BlogResponse],
    response_model_exclude_unset=True,
    responses=ERRORS_500,
    summary="Identifiers of every blog",
)
async def blog_ids(
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> List[BlogResponse]:
    return await query_service.all_ids(collection)


@router.post(
    "/my-blogs",
    response_model=List[BlogResponse],
    response_model_exclude_unset=True,
    responses={**ERRORS_400, **ERRORS_500},
    summary="Blogs written by one author email",
)
async def my_blogs(
    payload: EmailRequest,
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> List[BlogResponse]:
    return await blog_service.list_author_blogs(collection, payload.email)


@router.post(
    "/search",
    response_model=List[BlogResponse],
    response_model_exclude_unset=True,
    responses={**ERRORS_400, **ERRORS_500},
    summary="Fuzzy search",
)
async def search_blogs(
    payload: SearchRequest,
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> List[BlogResponse]:
    return await search_service.search(collection, payload.query)


@router.get(
    "/{blog_id}",
    response_model=BlogResponse,
    response_model_exclude_unset=True,
    responses={**ERRORS_404, **ERRORS_500},
    summary="Get a blog by id",
)
async def get_blog(
    blog_id: str,
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> BlogResponse:
    return await blog_service.get_blog(collection, blog_id)


@router.put(
    "/{blog_id}",
    response_model=MessageResponse,
    responses={**ERRORS_400, **ERRORS_404, **ERRORS_500},
    summary="Update the provided fields of a blog",
)
async def update_blog(
    blog_id: str,
    payload: BlogUpdate,
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> MessageResponse:
    return await blog_service.update_blog(collection, blog_id, payload)


@router.delete(
    "/{blog_id}",
    response_model=MessageResponse,
    responses={**ERRORS_404, **ERRORS_500},
    summary="Delete a blog",
)
async def delete_blog(
    blog_id: str,
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> MessageResponse:
    return await blog_service.delete_blog(collection, blog_id)
