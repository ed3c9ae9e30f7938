from typing import Callable, List, NamedTuple, Optional
from itertools import chain
from eaglekit.common import PanelError, detach
from eaglekit.defs import Layer
from eaglekit.eagle import EagleBoard
from eaglekit.geometry import GeometricElement, extractElements
from eaglekit.library import PackageLibraryIndex
from eaglekit.units import Unit

class MissingOutline(PanelError):
    pass

class DegenerateOutline(PanelError):
    pass

class OutlineBox(NamedTuple):
    minX: float
    minY: float
    maxX: float
    maxY: float

    @property
    def width(self) -> float:
        return self.maxX - self.minX

    @property
    def height(self) -> float:
        return self.maxY - self.minY

    def __str__(self) -> str:
        return f"Size=({self.width}, {self.height}), ({self.minX}, {self.minY}) - ({self.maxX}, {self.maxY})"

def collectComponentGeometry(board: EagleBoard, index: PackageLibraryIndex) \
        -> List[GeometricElement]:
    """
    Geometry of all placed elements in board coordinates
    """
    return list(chain.from_iterable(index.lookup(p) for p in board.placements()))

def collectPlainGeometry(board: EagleBoard, unit: Unit) -> List[GeometricElement]:
    return list(chain.from_iterable(extractElements(p, unit) for p in board.plains()))

def collectOutline(board: EagleBoard, index: PackageLibraryIndex, unit: Unit,
                   layer: int = Layer.Dimension) -> List[GeometricElement]:
    """
    Collect all geometry on the outline layer, both from placed elements and
    from the plain sections
    """
    geometry = chain(collectComponentGeometry(board, index),
                     collectPlainGeometry(board, unit))
    return [e for e in geometry if e.layer == layer]

def findBoundingBox(elements: List[GeometricElement]) -> OutlineBox:
    """
    Return a bounding box of all given elements
    """
    if len(elements) == 0:
        raise MissingOutline("No board outline found")
    return OutlineBox(
        minX=min(e.minX() for e in elements),
        minY=min(e.minY() for e in elements),
        maxX=max(e.maxX() for e in elements),
        maxY=max(e.maxY() for e in elements))

def resolveOutline(board: EagleBoard, index: PackageLibraryIndex, unit: Unit,
                   layer: int = Layer.Dimension,
                   reporter: Optional[Callable[[str], None]] = None) -> OutlineBox:
    """
    Find the board outline, compute its bounding box and remove the outline
    nodes from the document. The panel gets a single new outline once it is
    built.

    The removal is destructive; resolving the outline of an already resolved
    board fails with MissingOutline.
    """
    elements = collectOutline(board, index, unit, layer)
    if len(elements) == 0:
        raise MissingOutline(f"No board outline found on layer {int(layer)}")
    outline = findBoundingBox(elements)
    if outline.width <= 0 or outline.height <= 0:
        raise DegenerateOutline(f"Board outline has zero size: {outline}")
    for e in elements:
        if reporter is not None:
            reporter(f"Outline: {e.describe()}")
        detach(e.node)
    return outline
