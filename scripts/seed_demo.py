"""Seed demo users, products and orders for exercising the Click webhooks.

Usage:
    python -m scripts.seed_demo                  # seed default records below
    python -m scripts.seed_demo path/to/seed.json

JSON file format:
{
  "users": [{"id": 1, "name": "Demo User", "phone": "998901234567"}],
  "products": [{"id": 1, "title": "Course", "price": 5000}],
  "orders": [{"id": "order-1", "user_id": 1, "product_id": 1}]
}

Records whose id already exists are skipped.
"""
from __future__ import annotations
import sys, json, logging
from pathlib import Path

# Allow running from project root or scripts folder
CURRENT_DIR = Path(__file__).resolve().parent
BACKEND_ROOT = CURRENT_DIR.parent
sys.path.append(str(BACKEND_ROOT))

from db.session import SessionLocal, create_tables  # type: ignore
from models.order import Order  # type: ignore
from models.product import Product  # type: ignore
from models.user import User  # type: ignore

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
logger = logging.getLogger("seed_demo")

DEFAULT_SEED = {
    "users": [
        {"id": 1, "name": "Demo User", "phone": "998901234567"},
    ],
    "products": [
        {"id": 1, "title": "Demo Course", "description": "Sample product", "price": 5000},
    ],
    "orders": [
        {"id": "demo-order-1", "user_id": 1, "product_id": 1},
    ],
}

# Insert order matters for the foreign keys
MODELS = (("users", User), ("products", Product), ("orders", Order))

def load_input(path: Path | None) -> dict:
    if not path:
        return DEFAULT_SEED
    return json.loads(path.read_text())

def seed(data: dict) -> tuple[int, int]:
    inserted = 0
    skipped = 0
    with SessionLocal() as db:
        for key, model in MODELS:
            for item in data.get(key, []):
                if db.get(model, item["id"]) is not None:
                    skipped += 1
                    continue
                db.add(model(**item))
                inserted += 1
            db.flush()
        db.commit()
    logger.info("Inserted %d records, skipped %d (already existed).", inserted, skipped)
    return inserted, skipped

if __name__ == "__main__":
    arg = sys.argv[1] if len(sys.argv) > 1 else None
    json_path = Path(arg) if arg else None
    if json_path and not json_path.exists():
        logger.error("JSON file not found: %s", json_path)
        sys.exit(1)
    create_tables()
    seed(load_input(json_path))
    logger.info("Done.")
