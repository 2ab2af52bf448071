"""
Deadblock piece definitions: the 12 pentominoes and their rotations/reflections.

Offsets are ``(x, y)`` pairs, where x is the column delta and y the row delta
from a placement's anchor.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Optional, Tuple

from .bitboard import BOARD_HEIGHT, BOARD_WIDTH, coords_to_mask
from .errors import UnknownShapeIdentifier

Offset = Tuple[int, int]
Offsets = Tuple[Offset, ...]

PIECE_SIZE = 5
ROTATIONS = (0, 1, 2, 3)
FLIPS = (False, True)


@dataclass(frozen=True)
class Piece:
    """A pentomino shape from the catalog."""
    id: str
    name: str
    offsets: Offsets  # canonical (x, y) cells
    flexibility: int  # 1 = hardest to fit, 12 = easiest

    def __post_init__(self):
        """Validate piece after initialization."""
        if len(set(self.offsets)) != PIECE_SIZE:
            raise ValueError(f"Piece {self.id} must have {PIECE_SIZE} distinct cells")


# Canonical layouts, same cell lists the game client ships.
_CATALOG_OFFSETS: Dict[str, Offsets] = {
    "F": ((0, 0), (0, 1), (1, 1), (2, 1), (1, 2)),
    "I": ((0, 0), (0, 1), (0, 2), (0, 3), (0, 4)),
    "L": ((0, 0), (0, 1), (0, 2), (0, 3), (1, 3)),
    "N": ((0, 1), (0, 2), (0, 3), (1, 0), (1, 1)),
    "P": ((0, 0), (1, 0), (0, 1), (1, 1), (0, 2)),
    "T": ((0, 0), (1, 0), (2, 0), (1, 1), (1, 2)),
    "U": ((0, 0), (0, 1), (1, 1), (2, 0), (2, 1)),
    "V": ((0, 0), (0, 1), (0, 2), (1, 2), (2, 2)),
    "W": ((0, 0), (0, 1), (1, 1), (1, 2), (2, 2)),
    "X": ((1, 0), (0, 1), (1, 1), (2, 1), (1, 2)),
    "Y": ((0, 1), (1, 0), (1, 1), (1, 2), (1, 3)),
    "Z": ((0, 0), (1, 0), (1, 1), (1, 2), (2, 2)),
}

# How easily each shape squeezes into a crowded board. X needs a full plus,
# I needs five in a row; P and L fit almost anywhere.
FLEXIBILITY_RANK: Dict[str, int] = {
    "X": 1, "I": 2, "U": 3, "W": 4, "V": 5, "T": 6,
    "F": 7, "Z": 8, "N": 9, "Y": 10, "L": 11, "P": 12,
}
MAX_FLEXIBILITY = max(FLEXIBILITY_RANK.values())

SHAPE_IDS: Tuple[str, ...] = tuple(_CATALOG_OFFSETS)
ALL_SHAPES: FrozenSet[str] = frozenset(SHAPE_IDS)
TOTAL_PIECES = len(SHAPE_IDS)

PIECES: Dict[str, Piece] = {
    shape_id: Piece(shape_id, f"Pentomino {shape_id}", offsets, FLEXIBILITY_RANK[shape_id])
    for shape_id, offsets in _CATALOG_OFFSETS.items()
}


def get_piece(shape_id: str) -> Piece:
    """Look up a catalog piece, failing fast on unknown ids."""
    try:
        return PIECES[shape_id]
    except (KeyError, TypeError):
        raise UnknownShapeIdentifier(shape_id) from None


def validate_shapes(shape_ids: Iterable[str]) -> FrozenSet[str]:
    """Return the ids as a frozenset, raising on any id outside the catalog."""
    shapes = frozenset(shape_ids)
    for shape_id in shapes:
        if shape_id not in PIECES:
            raise UnknownShapeIdentifier(shape_id)
    return shapes


def available_from_used(used_shapes: Iterable[str]) -> FrozenSet[str]:
    """AvailableSet for the side to move: every catalog shape not yet consumed."""
    return ALL_SHAPES - validate_shapes(used_shapes)


def ordered_shapes(shape_ids: Iterable[str]) -> List[str]:
    """Catalog order for a set of shape ids, for reproducible iteration."""
    shapes = validate_shapes(shape_ids)
    return [shape_id for shape_id in SHAPE_IDS if shape_id in shapes]


def normalize_offsets(offsets: Iterable[Offset]) -> Offsets:
    """
    Shift offsets so that min x = 0 and min y = 0.

    Returns:
        Sorted tuple of offsets for canonical ordering
    """
    offsets = list(offsets)
    if not offsets:
        return ()
    min_x = min(x for x, _ in offsets)
    min_y = min(y for _, y in offsets)
    return tuple(sorted((x - min_x, y - min_y) for x, y in offsets))


def rotate_offsets(offsets: Iterable[Offset]) -> List[Offset]:
    """Quarter turn: (x, y) -> (-y, x)."""
    return [(-y, x) for x, y in offsets]


def reflect_offsets(offsets: Iterable[Offset]) -> List[Offset]:
    """Mirror across the vertical axis: (x, y) -> (-x, y)."""
    return [(-x, y) for x, y in offsets]


def transform_offsets(offsets: Iterable[Offset], rotation: int, flipped: bool) -> Offsets:
    """Apply an optional reflection followed by ``rotation`` quarter turns."""
    cells = list(offsets)
    if flipped:
        cells = reflect_offsets(cells)
    for _ in range(rotation):
        cells = rotate_offsets(cells)
    return normalize_offsets(cells)


class PlacementTemplate(NamedTuple):
    """An orientation pinned to one in-bounds anchor."""
    anchor_row: int
    anchor_col: int
    mask: int
    cells: Tuple[Tuple[int, int], ...]  # absolute (row, col)


class OrientationCache:
    """
    Memoized orientations keyed by (shape, rotation, flipped).

    Entries are derived deterministically from immutable catalog data, so the
    cache never invalidates and concurrent population can at worst recompute
    an entry. Each engine component takes a cache instance; ``DEFAULT_CACHE``
    is shared when none is given.
    """

    def __init__(self):
        self._offsets: Dict[Tuple[str, int, bool], Offsets] = {}
        self._placements: Dict[Tuple[str, int, bool], Tuple[PlacementTemplate, ...]] = {}

    def orientation(self, shape_id: str, rotation: int = 0, flipped: bool = False) -> Offsets:
        """Offsets for one (rotation, flip) of a shape."""
        if rotation not in ROTATIONS:
            raise ValueError(f"rotation must be in 0..3, got {rotation}")
        key = (shape_id, rotation, bool(flipped))
        cached = self._offsets.get(key)
        if cached is None:
            piece = get_piece(shape_id)
            cached = transform_offsets(piece.offsets, rotation, bool(flipped))
            self._offsets[key] = cached
        return cached

    def orientations(self, shape_id: str) -> List[Offsets]:
        """
        Distinct orientations of a shape, in flip -> rotation order.

        Symmetric shapes collapse: I has 2, X has 1, asymmetric shapes have 8.
        """
        seen = set()
        result = []
        for flipped in FLIPS:
            for rotation in ROTATIONS:
                offsets = self.orientation(shape_id, rotation, flipped)
                if offsets in seen:
                    continue
                seen.add(offsets)
                result.append(offsets)
        return result

    def placements(self, shape_id: str, rotation: int, flipped: bool) -> Tuple[PlacementTemplate, ...]:
        """
        Every anchor at which this orientation stays on the board, row-major.

        Overlap is not considered here; the board decides that.
        """
        key = (shape_id, rotation, bool(flipped))
        cached = self._placements.get(key)
        if cached is None:
            offsets = self.orientation(shape_id, rotation, flipped)
            width = max(x for x, _ in offsets) + 1
            height = max(y for _, y in offsets) + 1
            templates = []
            for row in range(BOARD_HEIGHT - height + 1):
                for col in range(BOARD_WIDTH - width + 1):
                    cells = tuple((row + y, col + x) for x, y in offsets)
                    templates.append(PlacementTemplate(row, col, coords_to_mask(cells), cells))
            cached = tuple(templates)
            self._placements[key] = cached
        return cached

    def warm(self) -> "OrientationCache":
        """Populate every entry up front."""
        for shape_id in SHAPE_IDS:
            for flipped in FLIPS:
                for rotation in ROTATIONS:
                    self.placements(shape_id, rotation, flipped)
        return self


DEFAULT_CACHE = OrientationCache()


def orientations(shape_id: str, cache: Optional[OrientationCache] = None) -> List[Offsets]:
    """Distinct orientations of ``shape_id`` from the given (or shared) cache."""
    return (cache or DEFAULT_CACHE).orientations(shape_id)
