"""
Rendering of a finished Grid: Pillow raster images, SVG documents via
svgwrite, and block-character text for terminals.

Each module occupies a ``size / count`` cell, where ``count`` is the side
length plus the quiet-zone border on both sides.
"""

import math
from pathlib import Path

import svgwrite
from PIL import Image, ImageDraw

from . import config
from .encoder import Grid


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _dark_modules(grid: Grid):
    for r, row in enumerate(grid.rows()):
        for c, dark in enumerate(row):
            if dark:
                yield r, c


def to_image(grid: Grid, size: int = None, fg: str = None, bg: str = None,
             border: int = None) -> Image.Image:
    """
    Paint the grid onto a ``size`` x ``size`` RGB image.

    Cell edges are rounded outward (left/top rounded, right/bottom taken from
    the ceiling of the next edge) so adjacent dark cells never leave a
    sub-pixel seam between them.
    """
    size = size or config.DEFAULT_SIZE
    fg = fg or config.DEFAULT_FG
    bg = bg or config.DEFAULT_BG
    border = config.DEFAULT_BORDER if border is None else border

    cell = size / (grid.side_length + 2 * border)
    img = Image.new("RGB", (size, size), bg)
    draw = ImageDraw.Draw(img)

    for r, c in _dark_modules(grid):
        x = _round_half_up((c + border) * cell)
        y = _round_half_up((r + border) * cell)
        w = math.ceil((c + border + 1) * cell) - x
        h = math.ceil((r + border + 1) * cell) - y
        if w > 0 and h > 0:
            draw.rectangle([x, y, x + w - 1, y + h - 1], fill=fg)
    return img


def to_svg(grid: Grid, size: int = None, fg: str = None, bg: str = None,
           border: int = None) -> str:
    """One background rect plus one rect per dark module, in user units."""
    size = size or config.DEFAULT_SIZE
    fg = fg or config.DEFAULT_FG
    bg = bg or config.DEFAULT_BG
    border = config.DEFAULT_BORDER if border is None else border

    cell = size / (grid.side_length + 2 * border)
    dwg = svgwrite.Drawing(size=(size, size))
    dwg.viewbox(0, 0, size, size)
    dwg.add(dwg.rect(insert=(0, 0), size=("100%", "100%"), fill=bg))
    for r, c in _dark_modules(grid):
        dwg.add(dwg.rect(insert=((c + border) * cell, (r + border) * cell),
                         size=(cell, cell), fill=fg))
    return dwg.tostring()


def to_text(grid: Grid, border: int = 4) -> str:
    """Convert grid to text with quiet zone border."""
    width = grid.side_length + 2 * border
    blank = "  " * width
    lines = [blank] * border
    for row in grid.rows():
        line = "  " * border
        line += "".join("██" if dark else "  " for dark in row)
        line += "  " * border
        lines.append(line)
    lines.extend([blank] * border)
    return "\n".join(lines)


def save(grid: Grid, filename, size: int = None, fg: str = None, bg: str = None,
         border: int = None) -> Path:
    """Write an .svg document or any raster format Pillow knows by suffix."""
    path = Path(filename)
    if path.suffix.lower() == ".svg":
        path.write_text(to_svg(grid, size, fg, bg, border), encoding="utf-8")
    else:
        to_image(grid, size, fg, bg, border).save(path)
    return path
