"""
Product API endpoints

CRUD over products. Create and update take multipart form fields plus an
optional ``image`` file; every failure answers with a structured JSON body.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.api.dependencies import get_product_service
from app.infrastructure.exceptions import (
    ConflictError,
    NotFoundError,
    ProductValidationError,
    StoreError,
    UploadError,
)
from app.infrastructure.response import (
    error_response,
    not_found_response,
    product_response,
    validation_error_response,
)
from app.infrastructure.storage import ImageUpload
from app.services.core import ProductService

logger = logging.getLogger(__name__)

router = APIRouter()


def _json(body: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def _read_image(image: Optional[UploadFile]) -> Optional[ImageUpload]:
    """Read the uploaded file now, an empty file part means no image"""
    if image is None:
        return None
    data = image.file.read()
    if not data and not image.filename:
        return None
    return ImageUpload(data=data, content_type=image.content_type, filename=image.filename)


def _form_payload(**fields: Optional[str]) -> Dict[str, str]:
    return {name: value for name, value in fields.items() if value is not None}


@router.get("/products")
def list_products(service: ProductService = Depends(get_product_service)):
    """
    List all products, newest first
    """
    try:
        products = service.list_products()
        return _json([product.to_dict() for product in products])
    except Exception as e:
        logger.exception("Failed to retrieve products")
        return _json(
            error_response("Failed to retrieve products", str(e)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


@router.get("/products/{product_id}")
def get_product(product_id: str, service: ProductService = Depends(get_product_service)):
    try:
        return _json(service.get_product(product_id).to_dict())
    except NotFoundError:
        return _json(not_found_response(), status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.exception(f"Failed to retrieve product {product_id}")
        return _json(
            error_response("Failed to retrieve product", str(e)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


@router.post("/products")
def create_product(
        item_name: Optional[str] = Form(None, alias="itemName"),
        sell_price: Optional[str] = Form(None, alias="sellPrice"),
        product_type: Optional[str] = Form(None, alias="type"),
        primary_unit: Optional[str] = Form(None, alias="primaryUnit"),
        custom_unit: Optional[str] = Form(None, alias="customUnit"),
        gst_enabled: Optional[str] = Form(None, alias="gstEnabled"),
        image: Optional[UploadFile] = File(None),
        service: ProductService = Depends(get_product_service),
):
    """
    Create a product

    Returns:
        201 ``{message, product}``; 400 ``{errors}`` for invalid fields;
        400 ``{error, details}`` when the image or barcode allocation fails
    """
    payload = _form_payload(
        itemName=item_name,
        sellPrice=sell_price,
        type=product_type,
        primaryUnit=primary_unit,
        customUnit=custom_unit,
        gstEnabled=gst_enabled,
    )
    try:
        product = service.create_product(payload, _read_image(image))
        return _json(
            product_response(product.to_dict(), "Product created successfully"),
            status.HTTP_201_CREATED,
        )
    except ProductValidationError as e:
        return _json(validation_error_response(e.errors), status.HTTP_400_BAD_REQUEST)
    except (UploadError, ConflictError) as e:
        logger.error(f"Product creation error: {str(e)}")
        return _json(error_response("Failed to create product", str(e)), status.HTTP_400_BAD_REQUEST)
    except StoreError as e:
        logger.error(f"Product creation error: {str(e)}")
        return _json(
            error_response("Failed to create product", str(e)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except Exception as e:
        logger.exception("Product creation error")
        return _json(error_response("Failed to create product", str(e)), status.HTTP_400_BAD_REQUEST)


@router.put("/products/{product_id}")
def update_product(
        product_id: str,
        item_name: Optional[str] = Form(None, alias="itemName"),
        sell_price: Optional[str] = Form(None, alias="sellPrice"),
        product_type: Optional[str] = Form(None, alias="type"),
        primary_unit: Optional[str] = Form(None, alias="primaryUnit"),
        custom_unit: Optional[str] = Form(None, alias="customUnit"),
        gst_enabled: Optional[str] = Form(None, alias="gstEnabled"),
        image: Optional[UploadFile] = File(None),
        service: ProductService = Depends(get_product_service),
):
    """
    Update a product; a new ``image`` replaces the stored one

    Returns:
        200 ``{message, product}``; 404 for an unknown id; 400 for invalid
        fields or a failed upload
    """
    payload = _form_payload(
        itemName=item_name,
        sellPrice=sell_price,
        type=product_type,
        primaryUnit=primary_unit,
        customUnit=custom_unit,
        gstEnabled=gst_enabled,
    )
    try:
        product = service.update_product(product_id, payload, _read_image(image))
        return _json(product_response(product.to_dict(), "Product updated successfully"))
    except NotFoundError:
        return _json(not_found_response(), status.HTTP_404_NOT_FOUND)
    except ProductValidationError as e:
        return _json(validation_error_response(e.errors), status.HTTP_400_BAD_REQUEST)
    except (UploadError, ConflictError) as e:
        logger.error(f"Product update error: {str(e)}")
        return _json(error_response("Failed to update product", str(e)), status.HTTP_400_BAD_REQUEST)
    except StoreError as e:
        logger.error(f"Product update error: {str(e)}")
        return _json(
            error_response("Failed to update product", str(e)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except Exception as e:
        logger.exception("Product update error")
        return _json(error_response("Failed to update product", str(e)), status.HTTP_400_BAD_REQUEST)


@router.delete("/products/{product_id}")
def delete_product(product_id: str, service: ProductService = Depends(get_product_service)):
    """
    Delete a product together with its image

    Returns:
        200 ``{message, product}`` with the removed record; 404 for an unknown id
    """
    try:
        product = service.delete_product(product_id)
        return _json(product_response(product.to_dict(), "Product deleted successfully"))
    except NotFoundError:
        return _json(not_found_response(), status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.exception(f"Failed to delete product {product_id}")
        return _json(
            error_response("Failed to delete product", str(e)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
