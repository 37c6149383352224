"""Image pretreatment filters: sharpen, smooth, edge and emboss.

Images are 8-bit numpy arrays, either grey (H, W) or colour (H, W, C) with
the channels in blue, green, red (and alpha) order.  Every filter returns a
new array of the same shape and dtype.
"""

from __future__ import annotations

import math
from typing import Callable

import numpy as np

Pretreatment = Callable[[np.ndarray], np.ndarray]

_NAMES = ("none", "", "sharpen", "smooth", "Edge", "Emboss")

_SHARPEN_KERNEL = np.array([[0, -1, 0], [-1, 5, -1], [0, -1, 0]], dtype=float)
_EMBOSS_KERNEL = np.array([[-2, -1, 0], [-1, 1, 1], [0, 1, 2]], dtype=float)
_BOX_KERNEL = np.full((3, 3), 1.0 / 9.0)

_GAUSS_SIZE = 7
_SOBEL_SMOOTH = np.array([1, 6, 15, 20, 15, 6, 1], dtype=float)
_SOBEL_DERIV = np.array([-1, -4, -5, 0, 5, 4, 1], dtype=float)
_CANNY_LOW = 3.0
_CANNY_HIGH = 9.0
_TAN_22_5 = math.tan(math.pi / 8)
_TAN_67_5 = math.tan(3 * math.pi / 8)


def _as_image(image: np.ndarray) -> np.ndarray:
    arr = np.asarray(image)
    if arr.dtype != np.uint8:
        raise TypeError("images must be 8-bit unsigned arrays")
    if arr.ndim not in (2, 3) or arr.size == 0:
        raise ValueError("images must be non-empty 2-D or 3-D arrays")
    if arr.ndim == 3 and arr.shape[2] not in (1, 3, 4):
        raise ValueError("colour images must have 1, 3 or 4 channels")
    return arr


def _to_uint8(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def _correlate(plane: np.ndarray, kernel: np.ndarray, border: str) -> np.ndarray:
    """Correlate a 2-D float plane with a kernel, padding with the given mode."""
    kh, kw = kernel.shape
    ph, pw = kh // 2, kw // 2
    padded = np.pad(plane, ((ph, kh - 1 - ph), (pw, kw - 1 - pw)), mode=border)
    height, width = plane.shape
    out = np.zeros((height, width), dtype=float)
    for (dy, dx), weight in np.ndenumerate(kernel):
        if weight:
            out += weight * padded[dy:dy + height, dx:dx + width]
    return out


def _per_channel(image: np.ndarray, apply: Callable[[np.ndarray], np.ndarray]) -> np.ndarray:
    if image.ndim == 2:
        return _to_uint8(apply(image.astype(float)))
    planes = [apply(image[..., c].astype(float)) for c in range(image.shape[2])]
    return _to_uint8(np.stack(planes, axis=-1))


def _gaussian_kernel(size: int) -> np.ndarray:
    sigma = 0.3 * ((size - 1) * 0.5 - 1) + 0.8
    offsets = np.arange(size, dtype=float) - (size - 1) / 2
    weights = np.exp(-(offsets ** 2) / (2 * sigma ** 2))
    return weights / weights.sum()


def _to_gray(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return image
    if image.shape[2] == 1:
        return image[..., 0]
    blue = image[..., 0].astype(float)
    green = image[..., 1].astype(float)
    red = image[..., 2].astype(float)
    return _to_uint8(0.114 * blue + 0.587 * green + 0.299 * red)


def _dilate(mask: np.ndarray) -> np.ndarray:
    padded = np.pad(mask, 1)
    height, width = mask.shape
    out = np.zeros_like(mask)
    for dy in range(3):
        for dx in range(3):
            out |= padded[dy:dy + height, dx:dx + width]
    return out


def _canny(plane: np.ndarray, low: float, high: float) -> np.ndarray:
    """Canny edge map of a grey plane, using 7x7 Sobel gradients."""
    data = plane.astype(float)
    gx = _correlate(data, np.outer(_SOBEL_SMOOTH, _SOBEL_DERIV), "edge")
    gy = _correlate(data, np.outer(_SOBEL_DERIV, _SOBEL_SMOOTH), "edge")
    ax, ay = np.abs(gx), np.abs(gy)
    mag = ax + ay

    pm = np.pad(mag, 1)
    left, right = pm[1:-1, :-2], pm[1:-1, 2:]
    up, down = pm[:-2, 1:-1], pm[2:, 1:-1]
    up_left, down_right = pm[:-2, :-2], pm[2:, 2:]
    up_right, down_left = pm[:-2, 2:], pm[2:, :-2]

    horizontal = ay <= ax * _TAN_22_5
    vertical = ay > ax * _TAN_67_5
    falling = gx * gy > 0
    is_max = np.where(
        horizontal,
        (mag > left) & (mag >= right),
        np.where(
            vertical,
            (mag > up) & (mag >= down),
            np.where(
                falling,
                (mag > up_left) & (mag >= down_right),
                (mag > up_right) & (mag >= down_left),
            ),
        ),
    )
    candidate = is_max & (mag > low)
    edges = candidate & (mag > high)
    while True:
        grown = candidate & _dilate(edges)
        if np.array_equal(grown, edges):
            return edges
        edges = grown


def sharpen(image: np.ndarray) -> np.ndarray:
    """Sharpen with a 3x3 Laplacian-style kernel."""
    src = _as_image(image)
    return _per_channel(src, lambda p: _correlate(p, _SHARPEN_KERNEL, "reflect"))


def smooth(image: np.ndarray) -> np.ndarray:
    """Blur with a 7x7 Gaussian."""
    src = _as_image(image)
    kernel = _gaussian_kernel(_GAUSS_SIZE)

    def blur(plane: np.ndarray) -> np.ndarray:
        rows = _correlate(plane, kernel[np.newaxis, :], "reflect")
        return _correlate(rows, kernel[:, np.newaxis], "reflect")

    return _per_channel(src, blur)


def edge(image: np.ndarray) -> np.ndarray:
    """Keep the source pixels on detected edges and black out the rest."""
    src = _as_image(image)
    gray = _to_gray(src)
    blurred = _to_uint8(_correlate(gray.astype(float), _BOX_KERNEL, "reflect"))
    edges = _canny(blurred, _CANNY_LOW, _CANNY_HIGH)
    mask = edges if src.ndim == 2 else edges[..., np.newaxis]
    return np.where(mask, src, 0).astype(np.uint8)


def emboss(image: np.ndarray) -> np.ndarray:
    """Emboss with a diagonal 3x3 kernel."""
    src = _as_image(image)
    return _per_channel(src, lambda p: _correlate(p, _EMBOSS_KERNEL, "reflect"))


def _identity(image: np.ndarray) -> np.ndarray:
    return image


_FILTERS: dict[str, Pretreatment] = {
    "sharpen": sharpen,
    "smooth": smooth,
    "Edge": edge,
    "Emboss": emboss,
}


def pretreatment_names() -> list[str]:
    """Names of the available pretreatments, in menu order."""
    return list(_NAMES)


def get_pretreatment(name: str) -> Pretreatment:
    """The filter of that name; unknown names and "none" leave images unchanged."""
    return _FILTERS.get(name, _identity)