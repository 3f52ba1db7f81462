import os
import tempfile
from contextlib import contextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from pydantic import ValidationError as SchemaError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.api import ApiResponse, ValidationError
from shared.config.database import get_db
from shared.media import MediaUploader, get_uploader
from shared.security import require_admin
from .query import ProductQuery
from .schemas import ProductCreate, ProductEnvelope, ProductListEnvelope, ProductUpdate
from .service import ProductService

router = APIRouter()
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health")
async def health_check():
    return {"service": "product", "status": "running"}


def _form_values(**fields) -> dict:
    return {name: value for name, value in fields.items() if value is not None}


def _schema_error(exc: SchemaError) -> ValidationError:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return ValidationError(f"{location}: {first['msg']}")


async def product_create_form(
    name: str = Form(None),
    description: Optional[str] = Form(None),
    category: str = Form(None),
    sub_category: str = Form(None, alias="subCategory"),
    brand: str = Form(None),
    size: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    quantity: int = Form(None),
    base_price: Optional[float] = Form(None, alias="basePrice"),
    discount_price: Optional[float] = Form(None, alias="discountPrice"),
    final_price: float = Form(None, alias="finalPrice"),
    active: Optional[bool] = Form(None),
) -> ProductCreate:
    try:
        return ProductCreate(**_form_values(
            name=name, description=description, category=category, sub_category=sub_category,
            brand=brand, size=size, color=color, quantity=quantity, base_price=base_price,
            discount_price=discount_price, final_price=final_price, active=active,
        ))
    except SchemaError as exc:
        raise _schema_error(exc)


async def product_update_form(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    sub_category: Optional[str] = Form(None, alias="subCategory"),
    brand: Optional[str] = Form(None),
    size: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    quantity: Optional[int] = Form(None),
    base_price: Optional[float] = Form(None, alias="basePrice"),
    discount_price: Optional[float] = Form(None, alias="discountPrice"),
    final_price: Optional[float] = Form(None, alias="finalPrice"),
    active: Optional[bool] = Form(None),
) -> ProductUpdate:
    try:
        return ProductUpdate(**_form_values(
            name=name, description=description, category=category, sub_category=sub_category,
            brand=brand, size=size, color=color, quantity=quantity, base_price=base_price,
            discount_price=discount_price, final_price=final_price, active=active,
        ))
    except SchemaError as exc:
        raise _schema_error(exc)


@contextmanager
def spooled_to_disk(files: Optional[List[UploadFile]]):
    """Write uploaded files to a temp dir and yield their local paths, in order."""
    files = [f for f in (files or []) if f.filename]
    with tempfile.TemporaryDirectory(prefix="product-images-") as tmpdir:
        paths = []
        for index, upload in enumerate(files):
            path = os.path.join(tmpdir, f"{index:03d}-{os.path.basename(upload.filename)}")
            with open(path, "wb") as fh:
                fh.write(upload.file.read())
            paths.append(path)
        yield paths


@router.get("/", response_model=ProductListEnvelope)
async def list_products(
    response: Response,
    category: Optional[str] = Query(default=None),
    sub_category: Optional[str] = Query(default=None, alias="subCategory"),
    brand: Optional[str] = Query(default=None),
    size: Optional[str] = Query(default=None),
    min_price: Optional[str] = Query(default=None, alias="minPrice"),
    max_price: Optional[str] = Query(default=None, alias="maxPrice"),
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    sort_order: Optional[str] = Query(default="asc", alias="sortOrder"),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    query = ProductQuery.from_params(
        category=category, sub_category=sub_category, brand=brand, size=size,
        min_price=min_price, max_price=max_price, sort_by=sort_by, sort_order=sort_order,
        page=page, limit=limit,
    )
    result = await ProductService.list_products(db, query)
    response.headers["X-Total-Count"] = str(result.pop("total"))
    return result


@router.post("/", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED)
async def create_product(
    _admin=Depends(require_admin),
    payload: ProductCreate = Depends(product_create_form),
    images: Optional[List[UploadFile]] = File(None),
    db: AsyncSession = Depends(get_db),
    uploader: MediaUploader = Depends(get_uploader),
):
    with spooled_to_disk(images) as paths:
        product = await ProductService.create_product(db, uploader, payload, paths)
    return {"message": "New Product Created Successfully", "record": product}


@router.get("/{product_id}", response_model=ProductEnvelope)
async def get_product(product_id: str, db: AsyncSession = Depends(get_db)):
    product = await ProductService.get_product(db, product_id)
    return {"message": "Single Record Fetched Successfully", "record": product}


@router.put("/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: str,
    _admin=Depends(require_admin),
    payload: ProductUpdate = Depends(product_update_form),
    images: Optional[List[UploadFile]] = File(None),
    db: AsyncSession = Depends(get_db),
    uploader: MediaUploader = Depends(get_uploader),
):
    with spooled_to_disk(images) as paths:
        product = await ProductService.update_product(db, uploader, product_id, payload, paths)
    return {"message": "Product updated successfully", "record": product}


@router.delete("/{product_id}", response_model=ApiResponse)
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(get_db),
    uploader: MediaUploader = Depends(get_uploader),
    _admin=Depends(require_admin),
):
    await ProductService.delete_product(db, uploader, product_id)
    return {"message": "product deleted successfully"}
