#
# fill textures for bar charts
#

import concurrent.futures
import logging
import os
import pathlib
from dataclasses import dataclass

import numpy as np
import PIL.Image

import util

log = logging.getLogger(__name__)


class TextureError(OSError):
    pass


TEXTURE_LIST = [
    dict(label="Sandpaper", id="paper", fn="paper.ppm"),
    dict(label="Wood", id="wood", fn="wood.ppm"),
    dict(label="Brick", id="brick", fn="brick.ppm"),
]


@dataclass(frozen=True)
class TextureData:
    label: str
    id: str
    image: PIL.Image.Image


def texture_dir():
    return os.getenv("CHARTTICKS_TEXTURES") or util.resource("assets/image")

def load_texture(path):
    """
    Open and fully decode an image file as RGB.
    """
    try:
        with PIL.Image.open(path) as im:
            # convert() forces the lazy decode while the file is still open
            return im.convert("RGB")
    except (OSError, ValueError) as oops:
        raise TextureError(f"failed to load texture {path}: {oops}") from oops

@util.Timer("load textures")
def load_textures(directory=None):
    """
    Load every texture in TEXTURE_LIST from directory. Either all of them
    load or TextureError is raised for the first one that failed.
    """
    directory = pathlib.Path(directory or texture_dir())
    log.debug("loading %d textures from %s", len(TEXTURE_LIST), directory)

    def load(entry):
        image = load_texture(directory / entry["fn"])
        return TextureData(entry["label"], entry["id"], image)

    with concurrent.futures.ThreadPoolExecutor() as pool:
        # map re-raises the first failure in list order
        return list(pool.map(load, TEXTURE_LIST))

def tile(texture, width, height):
    """
    Fill a (height, width, 3) uint8 array by repeating the texture.
    """
    if width < 0 or height < 0:
        raise ValueError(f"tile size must not be negative, got {width}x{height}")
    im = np.asarray(texture.image, dtype=np.uint8)
    th, tw = im.shape[:2]
    reps = (-(-height // th), -(-width // tw), 1)
    return np.tile(im, reps)[:height, :width]
