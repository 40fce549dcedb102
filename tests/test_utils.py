from __future__ import annotations

import io

import requests
from PIL import Image

from twitchshelf.utils import download_thumbnail, image_filename


def _png(w=600, h=800):
    buf = io.BytesIO()
    Image.new("RGB", (w, h), (12, 34, 56)).save(buf, format="PNG")
    return buf.getvalue()


class _Resp:
    def __init__(self, content=b"", status=200):
        self.content = content
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}")


class _Session:
    def __init__(self, resp):
        self.resp = resp
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        return self.resp


def test_image_filename():
    assert image_filename("https://cdn.example/a/b/icon%20x.png?v=2") == "icon x.png"
    assert image_filename("https://cdn.example/") is None


def test_thumbnail_is_shrunk_and_reused(tmp_path):
    session = _Session(_Resp(_png()))
    path = download_thumbnail("https://cdn.example/i/box.png", tmp_path / "images", 200, session=session)
    assert path == tmp_path / "images" / "box.png"
    with Image.open(path) as im:
        assert max(im.size) == 200

    again = download_thumbnail("https://cdn.example/i/box.png", tmp_path / "images", 200, session=session)
    assert again == path
    assert len(session.urls) == 1


def test_http_error_and_garbage_give_none(tmp_path):
    assert download_thumbnail("https://x/a.png", tmp_path, session=_Session(_Resp(status=404))) is None
    assert download_thumbnail("https://x/b.png", tmp_path, session=_Session(_Resp(b"not an image"))) is None
    assert not (tmp_path / "b.png").exists()
