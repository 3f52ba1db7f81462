import asyncio
import math
from typing import Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from services.catalog_service.models import Brand, Category, SubCategory
from services.catalog_service.repository import CatalogRepository
from shared.api import InvalidIdentifierError, NotFoundError, ValidationError
from shared.media import MediaUploader
from shared.observability import ecomm_product_queries_total
from shared.persistence import is_valid_id, populate
from .models import Product
from .query import ProductQuery, build_filters
from .repository import ProductRepository
from .schemas import ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)

PRODUCT_FIELDS = (
    "name", "description", "size", "color", "quantity", "base_price",
    "discount_price", "final_price", "images", "active", "created_at",
)
REFERENCE_FIELDS = ("name",)

# Query criterion -> (model, field as named in the query string, label)
NAME_LOOKUPS = (
    ("category_id", Category, "category", "Category"),
    ("sub_category_id", SubCategory, "sub_category", "SubCategory"),
    ("brand_id", Brand, "brand", "Brand"),
)

# Payload field -> (model attribute, referenced model)
REFERENCES = {
    "category": ("category_id", Category),
    "sub_category": ("sub_category_id", SubCategory),
    "brand": ("brand_id", Brand),
}


def product_document(product: Product) -> dict:
    """Product with category/subCategory/brand populated to {id, name}."""
    document = populate(product, PRODUCT_FIELDS)
    document["category"] = populate(product.category, REFERENCE_FIELDS)
    document["subCategory"] = populate(product.sub_category, REFERENCE_FIELDS)
    document["brand"] = populate(product.brand, REFERENCE_FIELDS)
    return document


class ProductService:

    @staticmethod
    async def _resolve_references(db: AsyncSession, values: dict) -> dict:
        """Swap category/sub_category/brand ids in a payload for model columns,
        checking each id is well-formed and exists."""
        supplied = {field: values.pop(field) for field in list(values) if field in REFERENCES}
        if any(not is_valid_id(ref_id) for ref_id in supplied.values() if ref_id is not None):
            raise InvalidIdentifierError("Invalid category, subcategory, or brand ID")
        for field, ref_id in supplied.items():
            if ref_id is None:
                continue
            column, model = REFERENCES[field]
            if not await CatalogRepository.get_by_id(db, model, ref_id):
                raise NotFoundError(f"{model.__name__} not found")
            values[column] = ref_id
        return values

    @staticmethod
    async def _get_or_404(db: AsyncSession, product_id: str) -> Product:
        if not is_valid_id(product_id):
            raise InvalidIdentifierError("Product ID is Invalid")
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    async def create_product(
        db: AsyncSession, uploader: MediaUploader, data: ProductCreate, image_paths: Sequence[str]
    ) -> dict:
        values = await ProductService._resolve_references(db, data.model_dump())
        if not image_paths:
            raise ValidationError("No files uploaded")

        images = await uploader.upload_many(image_paths)
        product = await ProductRepository.create_product(db, Product(**values, images=images))
        logger.info("product_created", product_id=product.id, images=len(images))
        return product_document(product)

    @staticmethod
    async def get_product(db: AsyncSession, product_id: str) -> dict:
        return product_document(await ProductService._get_or_404(db, product_id))

    @staticmethod
    async def update_product(
        db: AsyncSession,
        uploader: MediaUploader,
        product_id: str,
        data: ProductUpdate,
        image_paths: Sequence[str],
    ) -> dict:
        product = await ProductService._get_or_404(db, product_id)
        values = await ProductService._resolve_references(db, data.model_dump(exclude_unset=True))

        old_images = list(product.images or [])
        new_images = []
        if image_paths:
            new_images = await uploader.upload_many(image_paths)
            values["images"] = new_images

        for field, value in values.items():
            setattr(product, field, value)
        try:
            product = await ProductRepository.update_product(db, product)
        except Exception:
            # the stored product still points at the old images
            if new_images:
                await uploader.delete_many(new_images)
            raise
        if new_images:
            await uploader.delete_many(old_images)
        logger.info("product_updated", product_id=product_id, fields=sorted(values))
        return product_document(product)

    @staticmethod
    async def delete_product(db: AsyncSession, uploader: MediaUploader, product_id: str) -> None:
        product = await ProductService._get_or_404(db, product_id)
        images = list(product.images or [])
        await ProductRepository.delete_product(db, product)
        await uploader.delete_many(images)
        logger.info("product_deleted", product_id=product_id)

    @staticmethod
    async def resolve_names(query: ProductQuery) -> dict:
        """Resolve category/subCategory/brand names to ids, concurrently."""
        lookups = [
            (criterion, label, CatalogRepository.find_id_by_name(model, getattr(query, attr)))
            for criterion, model, attr, label in NAME_LOOKUPS
            if getattr(query, attr)
        ]
        ids = await asyncio.gather(*(lookup for _, _, lookup in lookups))

        resolved = {}
        for (criterion, label, _), ref_id in zip(lookups, ids):
            if ref_id is None:
                raise NotFoundError(f"{label} not found")
            resolved[criterion] = ref_id
        return resolved

    @staticmethod
    async def list_products(db: AsyncSession, query: ProductQuery) -> dict:
        resolved = await ProductService.resolve_names(query)
        filters = build_filters(query.criteria(**resolved))

        total = await ProductRepository.count_products(db, filters)
        if total == 0:
            ecomm_product_queries_total.labels(result="empty").inc()
            return {
                "total": 0,
                "status": "Fail",
                "message": "No products found in the specified price range",
                "data": [],
            }

        total_pages = math.ceil(total / query.limit)
        pagination = {
            "total": total,
            "page": query.page,
            "limit": query.limit,
            "skip": query.skip,
            "total_pages": total_pages,
        }
        if query.page > total_pages:
            ecomm_product_queries_total.labels(result="page_out_of_range").inc()
            return {
                "total": total,
                "status": "Fail",
                "message": "No Page Found",
                "data": [],
                "pagination": pagination,
            }

        products = await ProductRepository.find_products(
            db, filters, query.order_by(), query.skip, query.limit
        )
        ecomm_product_queries_total.labels(result="hit").inc()
        return {
            "total": total,
            "message": "Products fetched successfully",
            "data": [product_document(product) for product in products],
            "pagination": pagination,
        }
