import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from brand_review.config import get_foundry_config
from brand_review.errors import BrandNotFoundError

logger = logging.getLogger(__name__)

BRAND_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass
class BrandData:
    brand_rules: Dict[str, Any]
    scoring_rubric: Dict[str, Any]
    grading_scale: Dict[str, Any]


def _data_dir(base_dir: Optional[Path]) -> Path:
    return Path(base_dir) if base_dir else get_foundry_config().brand_data_dir


def _brand_dir(brand_id: str, base_dir: Optional[Path]) -> Path:
    if not brand_id or not BRAND_ID_PATTERN.match(brand_id):
        raise BrandNotFoundError(brand_id)
    return _data_dir(base_dir) / "brands" / brand_id


def _read_json(path: Path) -> Dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must hold a JSON object, got {type(data).__name__}")
    return data


def load_brand_data(brand_id: str = "OAD", base_dir: Optional[Path] = None) -> Optional[BrandData]:
    """
    Load the three brand documents used for prompt assembly.

    Returns None when any of them is missing or malformed; callers fall
    back to the generic prompt in that case.
    """
    try:
        brand_dir = _brand_dir(brand_id, base_dir)
        return BrandData(
            brand_rules=_read_json(brand_dir / "brand-rules.json"),
            scoring_rubric=_read_json(brand_dir / "scoring-rubric.json"),
            grading_scale=_read_json(_data_dir(base_dir) / "shared" / "grading-scale.json"),
        )
    except (OSError, ValueError, BrandNotFoundError) as e:
        logger.error("Error loading brand data for %s: %s", brand_id, e)
        return None


def load_brand_rules(brand_id: str, base_dir: Optional[Path] = None) -> Dict[str, Any]:
    path = _brand_dir(brand_id, base_dir) / "brand-rules.json"
    if not path.is_file():
        raise BrandNotFoundError(brand_id)
    return _read_json(path)


def load_grading_scale(base_dir: Optional[Path] = None) -> Optional[Dict[str, Any]]:
    try:
        return _read_json(_data_dir(base_dir) / "shared" / "grading-scale.json")
    except (OSError, ValueError) as e:
        logger.warning("Grading scale unavailable, using default: %s", e)
        return None


def list_brands(base_dir: Optional[Path] = None) -> List[str]:
    brands_dir = _data_dir(base_dir) / "brands"
    if not brands_dir.is_dir():
        return []
    return sorted(
        p.name for p in brands_dir.iterdir()
        if p.is_dir() and (p / "brand-rules.json").is_file()
    )
