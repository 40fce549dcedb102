"""
Registry reader for the Twitch game client's SQLite databases.

Both GameProductInfo.sqlite and GameInstallInfo.sqlite keep their rows in a
table called DbSet with PascalCase column names (ProductAsin, InstallDirectory
...). Columns are matched to dataclass fields by name, ignoring case and
underscores, so added or reordered columns don't break decoding.
"""
from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from dataclasses import fields
from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Type, TypeVar

from .errors import SchemaMismatchError, SourceUnavailableError
from .models import Install, Product

logger = logging.getLogger(__name__)

TABLE = "DbSet"

PRODUCT_REQUIRED = ("id", "product_asin", "product_title")
INSTALL_REQUIRED = ("id", "product_asin", "install_directory", "installed")

T = TypeVar("T")

def _norm(name: str) -> str:
    return name.replace("_", "").lower()

def column_map(model: Type[T], columns: Sequence[str]) -> Dict[str, int]:
    """Map each dataclass field to the index of its column, when present."""
    by_norm = {_norm(c): i for i, c in enumerate(columns)}
    out: Dict[str, int] = {}
    for f in fields(model):
        idx = by_norm.get(_norm(f.name))
        if idx is not None:
            out[f.name] = idx
    return out

def _read_table(db_path: Path, label: str) -> Tuple[List[str], List[tuple]]:
    if not db_path.exists():
        raise SourceUnavailableError(f"{label} missing: {db_path}")
    try:
        with closing(sqlite3.connect(str(db_path))) as conn:
            cur = conn.execute(f"select * from {TABLE};")
            columns = [d[0] for d in cur.description]
            rows = cur.fetchall()
    except sqlite3.OperationalError as e:
        if "no such table" in str(e):
            raise SchemaMismatchError(f"{label} has no {TABLE} table: {db_path}") from e
        raise SourceUnavailableError(f"{label} unreadable: {db_path}: {e}") from e
    except sqlite3.DatabaseError as e:
        raise SourceUnavailableError(f"{label} unreadable: {db_path}: {e}") from e
    logger.debug("Read %d rows from %s", len(rows), db_path)
    return columns, rows

def decode_rows(model: Type[T], columns: Sequence[str], rows: Sequence[tuple],
                required: Sequence[str], *, source: str = "") -> List[T]:
    cmap = column_map(model, columns)
    missing = [name for name in required if name not in cmap]
    if missing:
        raise SchemaMismatchError(
            f"{source or model.__name__} is missing columns: {', '.join(missing)}"
        )
    items: List[T] = []
    for n, row in enumerate(rows):
        values = {name: row[idx] for name, idx in cmap.items()}
        if any(values.get(name) is None for name in required):
            logger.warning("Skipping %s row %d with empty required column", source or model.__name__, n)
            continue
        items.append(model(**values))
    return items

def load_products(db_path: Path) -> List[Product]:
    columns, rows = _read_table(db_path, "Product info")
    products = decode_rows(Product, columns, rows, PRODUCT_REQUIRED, source=str(db_path))
    for p in products:
        if p.product_icon_url is None:
            p.product_icon_url = ""
    return products

def load_installs(db_path: Path) -> List[Install]:
    columns, rows = _read_table(db_path, "Install info")
    installs = decode_rows(Install, columns, rows, INSTALL_REQUIRED, source=str(db_path))
    for i in installs:
        try:
            i.installed = int(i.installed)
        except (TypeError, ValueError):
            logger.warning("Install %s has non-integer Installed value %r", i.id, i.installed)
            i.installed = 0
    return installs
