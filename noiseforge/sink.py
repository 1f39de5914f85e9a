"""Image sinks: hand a finished pixel buffer to Pillow."""

import logging
from pathlib import Path

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def to_image(buffer):
    """Wrap an (h, w, 4) uint8 buffer as a PIL Image in RGBA mode."""
    # (h, w, 4) uint8 is inferred as RGBA
    return Image.fromarray(np.ascontiguousarray(buffer, dtype=np.uint8))


class FileSink:
    """Persist pixel buffers to an image file.

    Called as ``sink(buffer, width, height)``; returns True on success and
    False (after logging the reason) when the buffer does not match the
    dimensions or the file cannot be written. The format follows the file
    extension, PNG when there is none.
    """

    def __init__(self, path):
        self.path = Path(path)

    def __call__(self, buffer, width, height):
        if buffer.shape != (height, width, 4):
            logger.error("Buffer shape %s does not match %dx%d RGBA",
                         buffer.shape, width, height)
            return False

        image = to_image(buffer)
        fmt = None if self.path.suffix else 'PNG'
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            image.save(str(self.path), format=fmt)
        except (OSError, ValueError) as exc:
            logger.error("Failed to save noise texture at %s: %s",
                         self.path, exc)
            return False

        logger.info("Noise texture written to %s", self.path)
        return True
