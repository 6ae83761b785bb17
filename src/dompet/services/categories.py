"""Category lifecycle: create, list, delete."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session

from ..domain.repositories import CategoryRepository
from ..errors import NotFound, ValidationError
from ..infra.repositories.category import SQLModelCategoryRepository
from ..logging_config import get_logger
from ..models.category import Category
from .rules import require_category_type

logger = get_logger(__name__)


def _repository(session: Session) -> CategoryRepository:
    return SQLModelCategoryRepository(session)


def list_categories(session: Session, category_type: Optional[str] = None) -> list[Category]:
    if category_type is not None:
        category_type = require_category_type(category_type).value
    return _repository(session).list_all(category_type)


def get_category(session: Session, category_id: int) -> Category:
    category = _repository(session).get_by_id(category_id)
    if category is None:
        raise NotFound("Category", category_id)
    return category


def create_category(session: Session, name: str, category_type: str) -> Category:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Category name is required.", errors={"name": ["Required."]})
    category = _repository(session).create(
        Category(name=cleaned, type=require_category_type(category_type).value)
    )
    logger.info("Category created", extra={"category_id": category.id, "type": category.type})
    return category


def delete_category(session: Session, category_id: int) -> Category:
    """Hard-delete a category; its transactions become uncategorized."""

    category = get_category(session, category_id)
    _repository(session).delete(category)
    logger.info("Category deleted", extra={"category_id": category_id})
    return category
