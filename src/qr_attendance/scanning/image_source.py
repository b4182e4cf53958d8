from __future__ import annotations

import logging
from typing import Any, BinaryIO, Callable, Iterable, Iterator, Sequence

from PIL import Image, UnidentifiedImageError

from .source import CodeSource

logger = logging.getLogger(__name__)


def pyzbar_decode(image: Image.Image) -> Sequence[Any]:
    # Imported on use: pyzbar loads the zbar shared library at import time.
    from pyzbar.pyzbar import decode

    return decode(image)


class ImageCodeSource(CodeSource):
    """Decodes the first QR symbol of each uploaded image.

    Images without a readable symbol are skipped.
    """

    def __init__(
        self,
        images: Iterable[BinaryIO],
        *,
        decoder: Callable[[Image.Image], Sequence[Any]] = pyzbar_decode,
    ):
        self._images = images
        self._decoder = decoder
        self._closed = False

    def codes(self) -> Iterator[str]:
        for stream in self._images:
            if self._closed:
                return
            try:
                img = Image.open(stream).convert("RGB")
            except UnidentifiedImageError:
                logger.warning("Skipping upload that is not an image")
                continue
            decoded = self._decoder(img)
            if not decoded:
                continue
            yield decoded[0].data.decode("utf-8").strip()

    def close(self) -> None:
        self._closed = True
