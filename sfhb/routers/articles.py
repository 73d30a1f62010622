from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response
from pydantic import BaseModel, ValidationError

from sfhb.domain.articles import article_to_dict
from sfhb.services.article_service import (
    ArticleService,
    ArticleNotFoundError,
    ForbiddenError,
    InvalidArticleIdError,
    StorageUnavailableError,
)

router = APIRouter(tags=["articles"])
logger = logging.getLogger(__name__)

STORAGE_ERROR_DETAIL = "Storage unavailable"


class ArticleIn(BaseModel):
    """Writer payload. Unknown keys (id, created, ...) are ignored."""

    title: str | None = None
    type: str | None = None
    content: str | None = None


def _get_article_service(request: Request) -> ArticleService:
    svc = getattr(getattr(request.app, "state", None), "article_service", None)
    if not svc:
        raise RuntimeError("ArticleService not configured")
    return svc


async def _authorized_payload(
    request: Request,
    x_session_token: str | None = Header(default=None),
) -> ArticleIn:
    """Check the writer token, then decode the body. A bad token never reaches the body."""
    svc = _get_article_service(request)
    try:
        svc.authorize(x_session_token)
    except ForbiddenError:
        logger.warning("Rejected article create from %s: bad token", _client_host(request))
        raise HTTPException(403, "Forbidden")
    raw = await request.body()
    try:
        return ArticleIn.model_validate_json(raw or b"{}")
    except ValidationError:
        raise HTTPException(422, "Invalid article payload")


@router.get("/articles")
def list_articles(request: Request):
    svc = _get_article_service(request)
    try:
        articles = svc.list_articles()
    except StorageUnavailableError:
        raise HTTPException(500, STORAGE_ERROR_DETAIL)
    return [article_to_dict(a) for a in articles]


@router.get("/article/{article_id}")
def get_article(article_id: str, request: Request):
    svc = _get_article_service(request)
    try:
        article = svc.get_article(article_id)
    except InvalidArticleIdError:
        raise HTTPException(400, "Invalid article id")
    except ArticleNotFoundError:
        raise HTTPException(404, "Article not found")
    except StorageUnavailableError:
        raise HTTPException(500, STORAGE_ERROR_DETAIL)
    return article_to_dict(article)


@router.post("/article")
def create_article(
    request: Request,
    payload: ArticleIn = Depends(_authorized_payload),
    x_session_token: str | None = Header(default=None),
):
    svc = _get_article_service(request)
    try:
        article = svc.create_article(payload.title, payload.type, payload.content, token=x_session_token)
    except ForbiddenError:
        logger.warning("Rejected article create from %s: bad token", _client_host(request))
        raise HTTPException(403, "Forbidden")
    except StorageUnavailableError:
        raise HTTPException(500, STORAGE_ERROR_DETAIL)
    return article_to_dict(article)


@router.delete("/article/{article_id}", status_code=204)
def delete_article(
    article_id: str,
    request: Request,
    x_session_token: str | None = Header(default=None),
):
    svc = _get_article_service(request)
    try:
        svc.delete_article(article_id, token=x_session_token)
    except ForbiddenError:
        logger.warning("Rejected article delete from %s: bad token", _client_host(request))
        raise HTTPException(403, "Forbidden")
    except InvalidArticleIdError:
        raise HTTPException(400, "Invalid article id")
    except ArticleNotFoundError:
        raise HTTPException(404, "Article not found")
    except StorageUnavailableError:
        raise HTTPException(500, STORAGE_ERROR_DETAIL)
    return Response(status_code=204)


def _client_host(request: Request) -> str:
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
