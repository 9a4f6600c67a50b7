"""
Inkwell Backend - Reaction Route Handlers
=========================================

    PATCH /blogs/react/{blog_id}   toggle the caller's like
    POST  /blog/react-status       has this email liked the blog?
"""

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorCollection

from inkwell.database import get_blog_collection
from inkwell.schemas.blog import (
    EmailRequest,
    ErrorResponse,
    ReactionResponse,
    ReactionStatus,
    ReactStatusRequest,
)
from inkwell.services.reaction_service import reaction_service

router = APIRouter(tags=["Reactions"])


@router.patch(
    "/blogs/react/{blog_id}",
    response_model=ReactionResponse,
    responses={
        400: {"description": "Email missing", "model": ErrorResponse},
        404: {"description": "Blog not found", "model": ErrorResponse},
    },
    summary="Toggle a reaction",
)
async def toggle_reaction(
    blog_id: str,
    payload: EmailRequest,
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> ReactionResponse:
    return await reaction_service.toggle(collection, blog_id, payload.email)


@router.post(
    "/blog/react-status",
    response_model=ReactionStatus,
    responses={
        400: {"description": "Blog id missing", "model": ErrorResponse},
        404: {"description": "Blog not found", "model": ErrorResponse},
    },
    summary="Reaction status of one email",
)
async def reaction_status(
    payload: ReactStatusRequest,
    collection: AsyncIOMotorCollection = Depends(get_blog_collection),
) -> ReactionStatus:
    return await reaction_service.status(collection, payload.blog_id, payload.email)
