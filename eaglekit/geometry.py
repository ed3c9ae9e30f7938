from dataclasses import dataclass
from typing import Callable, List, Optional
from lxml import etree
from eaglekit.units import Unit

@dataclass(frozen=True, eq=False)
class GeometricElement:
    """
    A bounding primitive of a document node in millimeters: either a segment or
    a point (both endpoints equal).

    node is the node the coordinates were read from. For elements placed via a
    component, template is the package-local node and placement is the element
    node that supplied the offset.
    """
    x1: float
    y1: float
    x2: float
    y2: float
    layer: Optional[int]
    node: etree._Element
    template: Optional[etree._Element] = None
    placement: Optional[etree._Element] = None

    def minX(self) -> float:
        return min(self.x1, self.x2)

    def maxX(self) -> float:
        return max(self.x1, self.x2)

    def minY(self) -> float:
        return min(self.y1, self.y2)

    def maxY(self) -> float:
        return max(self.y1, self.y2)

    def shiftedBy(self, placement: etree._Element, unit: Unit,
                  sign: int = 1) -> Optional["GeometricElement"]:
        """
        Move the element by the position of placement multiplied by sign (use 1
        to bring a package-local template into board coordinates). Return None
        when the placement carries no position.
        """
        ox = unit.value(placement, "x")
        oy = unit.value(placement, "y")
        if ox is None or oy is None:
            return None
        return GeometricElement(
            x1=self.x1 + sign * ox, y1=self.y1 + sign * oy,
            x2=self.x2 + sign * ox, y2=self.y2 + sign * oy,
            layer=self.layer, node=self.node,
            template=self.node if self.template is None else self.template,
            placement=placement)

    def describe(self) -> str:
        parent = self.node.getparent()
        parentName = "unknown" if parent is None \
                     else parent.get("name", parent.tag)
        name = self.node.get("name", self.node.tag)
        layer = "" if self.layer is None else f"[{self.layer}]"
        return f"{parentName}/{name}{layer}: ({self.x1}, {self.y1})-({self.x2}, {self.y2})"

    def __repr__(self) -> str:
        return f"<GeometricElement {self.describe()}>"

def readLayer(node: etree._Element) -> Optional[int]:
    layer = node.get("layer")
    if layer is None:
        return None
    try:
        return int(layer)
    except ValueError:
        return None

def segmentShape(node: etree._Element, unit: Unit) -> Optional[GeometricElement]:
    coords = [unit.value(node, a) for a in ("x1", "y1", "x2", "y2")]
    if any(c is None for c in coords):
        return None
    x1, y1, x2, y2 = coords
    return GeometricElement(x1, y1, x2, y2, readLayer(node), node)

def pointShape(node: etree._Element, unit: Unit) -> Optional[GeometricElement]:
    x = unit.value(node, "x")
    y = unit.value(node, "y")
    if x is None or y is None:
        return None
    return GeometricElement(x, y, x, y, readLayer(node), node)

Extractor = Callable[[etree._Element, Unit], Optional[GeometricElement]]

# The first shape that matches wins
SHAPES: List[Extractor] = [segmentShape, pointShape]

def extractElement(node: etree._Element, unit: Unit) -> Optional[GeometricElement]:
    """
    Read the geometry of a node. Nodes without coordinates (most of the
    annotations, signals, etc.) yield None.
    """
    for shape in SHAPES:
        element = shape(node, unit)
        if element is not None:
            return element
    return None

def extractElements(nodes, unit: Unit) -> List[GeometricElement]:
    return [e for e in (extractElement(n, unit) for n in nodes) if e is not None]


class SegmentKey:
    """
    Geometry of a node compared regardless of the orientation of its endpoints.
    Use it as a key in sets or dictionaries to find coincident segments.
    """
    def __init__(self, element: GeometricElement) -> None:
        self.element = element
        self.coords = (element.x1, element.y1, element.x2, element.y2)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SegmentKey):
            return NotImplemented
        x1, y1, x2, y2 = other.coords
        return self.coords == (x1, y1, x2, y2) or self.coords == (x2, y2, x1, y1)

    def __hash__(self) -> int:
        x1, y1, x2, y2 = self.coords
        return hash(x1) ^ hash(y1) ^ hash(x2) ^ hash(y2)

    def __repr__(self) -> str:
        return f"<SegmentKey {self.coords}>"

class ElementComparer:
    """
    Structural equality of document nodes based on their geometry
    """
    def __init__(self, unit: Unit) -> None:
        self.unit = unit

    def key(self, node: etree._Element) -> Optional[SegmentKey]:
        element = extractElement(node, self.unit)
        if element is None:
            return None
        return SegmentKey(element)

    def equals(self, a: etree._Element, b: etree._Element) -> bool:
        ka, kb = self.key(a), self.key(b)
        if ka is None or kb is None:
            return False
        return ka == kb

    def hash(self, node: etree._Element) -> int:
        key = self.key(node)
        return 0 if key is None else hash(key)
