"""
Lender Catalog Loading

Reads the lender configuration file for host applications. The engine itself
only ever receives the built LenderCatalog.
"""

import json
import logging
from pathlib import Path

from .models import LenderCatalog

logger = logging.getLogger(__name__)

DEFAULT_LENDERS_FILE = Path(__file__).resolve().parent.parent / "data" / "lenders.json"


def load_catalog(path: str | Path | None = None) -> LenderCatalog:
    """
    Load lenders from a JSON file.

    A missing or unreadable file is logged and yields an empty catalog, so the
    host still starts and every analysis returns no eligible lenders.
    """
    lenders_file = Path(path) if path else DEFAULT_LENDERS_FILE

    try:
        data = json.loads(lenders_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Error loading lender data from {lenders_file}: {e}")
        return LenderCatalog.empty()

    catalog = LenderCatalog.from_dict(data)
    logger.info(f"Loaded {len(catalog)} lenders from {lenders_file}")
    return catalog
