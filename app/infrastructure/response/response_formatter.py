from typing import Any, Dict, List, Optional


def product_response(product: Dict[str, Any], message: str) -> Dict[str, Any]:
    """
    Successful single-product response

    Args:
        product: serialized product
        message: human readable outcome

    Returns:
        Dict[str, Any]: ``{"message", "product"}``
    """
    return {
        "message": message,
        "product": product,
    }


def validation_error_response(errors: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Response listing every field violation

    Returns:
        Dict[str, Any]: ``{"errors": [...]}``
    """
    return {"errors": errors}


def error_response(error: str, details: Optional[str] = None) -> Dict[str, Any]:
    """
    Generic failure response

    Args:
        error: short summary of what failed
        details: underlying cause, if any

    Returns:
        Dict[str, Any]: ``{"error", "details"}``; details omitted when empty
    """
    body: Dict[str, Any] = {"error": error}
    if details:
        body["details"] = details
    return body


def not_found_response(entity: str = "Product") -> Dict[str, Any]:
    return error_response(f"{entity} not found")
