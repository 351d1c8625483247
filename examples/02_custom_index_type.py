"""Teaching the range engine about a user-defined type.

A ``Tile`` is a half-open block of rows and columns, as an image tiler would
produce.  Registering a normalizer lets tiles take part in range expressions
next to the built-in forms.
"""

from dataclasses import dataclass

from indexarith import (
    UnsupportedType,
    range_expr,
    region,
    register_normalizer,
    reverse_range_expr,
    unit_range,
)


@dataclass(frozen=True)
class Tile:
    row: int
    col: int
    height: int
    width: int


@register_normalizer(Tile)
def tile_to_region(tile: Tile):
    return region(
        unit_range(tile.row, tile.row + tile.height - 1),
        unit_range(tile.col, tile.col + tile.width - 1),
    )


@dataclass(frozen=True)
class Unregistered:
    value: int


def halo(tile: Tile, image, margin: int = 2):
    """Tile grown by ``margin`` on every side, clipped to the image."""
    return range_expr("(t ± m) ∩ img", t=tile, m=margin, img=image)


if __name__ == "__main__":
    image = region(range(64), range(48))
    tiles = [Tile(0, 0, 16, 16), Tile(16, 32, 16, 16), Tile(48, 32, 16, 16)]
    for tile in tiles:
        print(tile, "->", halo(tile, image))

    overlap = range_expr("a ∩ b", a=Tile(0, 0, 10, 10), b=Tile(5, 5, 10, 10))
    assert overlap == region(unit_range(5, 9), unit_range(5, 9))
    print("overlap of two tiles:", overlap)
    print("scanned bottom-up:", reverse_range_expr("t", t=Tile(4, 4, 2, 3)))

    try:
        range_expr("x + 1", x=Unregistered(3))
    except UnsupportedType as exc:
        print("unregistered types are rejected:", exc)
