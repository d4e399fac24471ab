from .loader import (
    BrandData,
    list_brands,
    load_brand_data,
    load_brand_rules,
    load_grading_scale,
)

__all__ = [
    "BrandData",
    "list_brands",
    "load_brand_data",
    "load_brand_rules",
    "load_grading_scale",
]
