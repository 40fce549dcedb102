import io
import logging
import os
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

import requests
from PIL import Image

logger = logging.getLogger(__name__)

def is_windows() -> bool:
    return os.name == "nt"

def image_filename(url: str) -> Optional[str]:
    """Last path segment of an image URL, used as the local file name."""
    name = unquote(urlsplit(url).path.rsplit("/", 1)[-1])
    name = Path(name).name
    return name or None

def download_thumbnail(url: str, image_dir: Path, size: int = 200,
                       session: Optional[requests.Session] = None, timeout: float = 15.0) -> Optional[Path]:
    """
    Fetch an icon into image_dir, shrunk to fit a size x size tile.
    Files already on disk are reused. Returns None when the URL is unusable
    or the download is not an image.
    """
    name = image_filename(url) if url else None
    if not name:
        return None
    target = image_dir / name
    if target.exists():
        return target

    getter = session or requests
    try:
        resp = getter.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Unable to download %s: %s", url, e)
        return None

    try:
        with Image.open(io.BytesIO(resp.content)) as im:
            fmt = im.format or "PNG"
            im.thumbnail((size, size))
            out = im.convert("RGB") if fmt == "JPEG" and im.mode not in ("RGB", "L") else im
            image_dir.mkdir(parents=True, exist_ok=True)
            out.save(target, format=fmt)
    except (OSError, ValueError) as e:
        logger.warning("Not a usable image %s: %s", url, e)
        return None
    return target
