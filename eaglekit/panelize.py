from copy import deepcopy
from dataclasses import dataclass
from enum import Enum
from itertools import count
from typing import Callable, Iterator, List, NamedTuple, Optional, Set, Tuple

import numpy as np
from lxml import etree
from shapely.geometry import LineString, box

from eaglekit.common import (PanelError, normalize, addWire, addText,
    setLength, rectToRing, detach)
from eaglekit.defs import (Layer, NAME_LAYER_REMAP, COORD_X_ATTRIBUTES,
    COORD_Y_ATTRIBUTES, REFERENCE_ATTRIBUTES)
from eaglekit.eagle import EagleBoard, children
from eaglekit.geometry import ElementComparer, SegmentKey, readLayer
from eaglekit.library import PackageLibraryIndex
from eaglekit.outline import OutlineBox, resolveOutline
from eaglekit.units import Unit

Reporter = Callable[[str], None]

def noReport(message: str) -> None:
    pass

class Fit(Enum):
    """
    Decides which copies of the board are placed in the target area:

    - Start: a copy is placed when it starts strictly inside the target area
    - Inside: a copy is placed only when it ends strictly inside the target area
    """
    Start = "start"
    Inside = "inside"

class TileOffset(NamedTuple):
    xOffset: float
    yOffset: float
    index: int

    @property
    def suffix(self) -> str:
        return f"_{self.index}"

def axisOffsets(size: float, target: float, fit: Fit = Fit.Start) -> Iterator[float]:
    """
    Yield offsets of board copies along a single axis: 0, size, 2 * size, ...
    """
    if size <= 0:
        raise PanelError(f"Cannot tile a board of size {size}")
    for k in count():
        offset = k * size
        end = offset + size if fit == Fit.Inside else offset
        if not end < target:
            return
        yield offset

def tileOffsets(boardWidth: float, boardHeight: float, targetWidth: float,
                targetHeight: float, fit: Fit = Fit.Start) -> Iterator[TileOffset]:
    """
    Yield offsets of the board copies in the target area row by row. The
    original board at (0, 0) is not part of the sequence; the copies are
    numbered from 1.
    """
    index = 1
    for yOffset in axisOffsets(boardHeight, targetHeight, fit):
        for xOffset in axisOffsets(boardWidth, targetWidth, fit):
            if xOffset == 0 and yOffset == 0:
                continue
            yield TileOffset(xOffset, yOffset, index)
            index += 1

def prolongCut(cut, prolongation):
    """
    Given a cut (Shapely LineString) it tangentially prolongs it by prolongation
    """
    c = list([np.array(x) for x in cut.coords])
    c[0] += normalize(c[0] - c[1]) * prolongation
    c[-1] += normalize(c[-1] - c[-2]) * prolongation
    return LineString(c)

def remapNameLayer(node: etree._Element) -> None:
    layer = readLayer(node)
    if layer in NAME_LAYER_REMAP:
        node.set("layer", str(int(NAME_LAYER_REMAP[layer])))

def realizeName(node: etree._Element, root: etree._Element, name: Optional[str],
                plain: etree._Element) -> None:
    """
    Turn the NAME attribute of a duplicated element into a plain text showing
    the element name and move it to plain.
    """
    if name is None or node is root:
        return
    if node.tag != "attribute" or node.get("name") != "NAME":
        return
    node.tag = "text"
    node.text = name
    del node.attrib["name"]
    detach(node)
    plain.append(node)

def renameReferences(node: etree._Element, suffix: str) -> None:
    for attribute in REFERENCE_ATTRIBUTES:
        value = node.get(attribute)
        if value is not None:
            node.set(attribute, value + suffix)

def shiftAttribute(node: etree._Element, attribute: str, offset: float,
                   unit: Unit) -> None:
    value = unit.value(node, attribute)
    if value is not None:
        setLength(node, attribute, value + offset, unit)

def offsetCoordinates(node: etree._Element, xOffset: float, yOffset: float,
                      unit: Unit) -> None:
    for attribute in COORD_X_ATTRIBUTES:
        shiftAttribute(node, attribute, xOffset, unit)
    for attribute in COORD_Y_ATTRIBUTES:
        shiftAttribute(node, attribute, yOffset, unit)

def duplicateNode(source: etree._Element, tile: TileOffset, plain: etree._Element,
                  unit: Unit) -> etree._Element:
    """
    Make a copy of source for the given tile. The copy is moved by the tile
    offset, its name and references to elements get the tile suffix, name
    layers are moved to placement layers and NAME attributes become texts in
    plain.

    The copy is not inserted into the document; NAME texts are.
    """
    dup = deepcopy(source)
    name = dup.get("name")
    # NAME attributes leave the copy during the pass, so we iterate a snapshot
    for node in list(dup.iter(tag=etree.Element)):
        remapNameLayer(node)
        realizeName(node, dup, name, plain)
        renameReferences(node, tile.suffix)
        offsetCoordinates(node, tile.xOffset, tile.yOffset, unit)
    if name is not None:
        dup.set("name", name + tile.suffix)
    return dup


@dataclass
class GuideSettings:
    layer: int = Layer.Milling
    lineWidth: float = 0.254
    postLength: float = 5.0
    markers: bool = False
    markerText: str = "V-CUT"
    markerSize: float = 1.27
    markerOffset: float = 1.0


class Panel:
    """
    Panelization of a single board document. The panel is built in place:

    1. resolveOutline() finds the board size and removes its outline,
    2. makeGrid() fills the target area with copies of the board,
    3. renderOutline() and renderGuides() draw the panel outline and the cut
       guides.
    """
    def __init__(self, board: EagleBoard, unit: Unit,
                 reporter: Reporter = noReport) -> None:
        self.board = board
        self.unit = unit
        self.report = reporter
        self.index = PackageLibraryIndex.build(board, unit)
        self.outline: Optional[OutlineBox] = None
        self.outlineLayer: int = Layer.Dimension
        self.tiles: List[TileOffset] = []
        self.maxXOffset = 0.0
        self.maxYOffset = 0.0
        self.hGuides: Set[float] = set() # Keep guides as numbers and render them
        self.vGuides: Set[float] = set() # at the end to span the whole panel
        self.guideSettings = GuideSettings()

    def resolveOutline(self, layer: int = Layer.Dimension) -> OutlineBox:
        """
        Find the board outline on the given layer and remove it from the board
        """
        self.outlineLayer = layer
        self.outline = resolveOutline(self.board, self.index, self.unit, layer,
            self.report)
        self.report(f"Original board: {self.outline}")
        return self.outline

    def _requireOutline(self) -> OutlineBox:
        if self.outline is None:
            raise PanelError("The board outline has to be resolved first")
        return self.outline

    def _sources(self) -> List[Tuple[etree._Element, List[etree._Element]]]:
        """
        Return (destination, nodes) pairs of all nodes to duplicate. Plain nodes
        stay in their section, elements and signals go to the primary sections.
        """
        plains = children(self.board.plains())
        elements = [(self.board.elements, nodes)
            for _, nodes in children(self.board.elementSections())]
        signals = [(self.board.signals, nodes)
            for _, nodes in children(self.board.signalSections())]
        return plains + elements + signals

    def makeGrid(self, targetWidth: float, targetHeight: float,
                 fit: Fit = Fit.Start) -> List[TileOffset]:
        """
        Fill the target area with copies of the board. Return the list of
        created tiles. The copies are aligned to the outline of the original
        board; the leftover area that cannot hold a whole copy stays empty.

        Also registers the guides between the rows and columns of the grid.
        """
        outline = self._requireOutline()
        sources = self._sources()
        tiles = []
        for tile in tileOffsets(outline.width, outline.height,
                                targetWidth, targetHeight, fit):
            for destination, nodes in sources:
                for node in nodes:
                    destination.append(
                        duplicateNode(node, tile, self.board.plain, self.unit))
            self.report(f"Dup[{tile.index}]: ({tile.xOffset}, {tile.yOffset})")
            self.maxXOffset = max(self.maxXOffset, tile.xOffset)
            self.maxYOffset = max(self.maxYOffset, tile.yOffset)
            tiles.append(tile)
        self.tiles.extend(tiles)

        for y in axisOffsets(outline.height, targetHeight, fit):
            if y > 0:
                self.addGuideH(outline.minY + y)
        for x in axisOffsets(outline.width, targetWidth, fit):
            if x > 0:
                self.addGuideV(outline.minX + x)

        width, height = self.panelSize()
        self.report(f"Totally panelized: Count={len(self.tiles) + 1}, " +
                    f"Size=({width}, {height}), ({outline.minX}, {outline.minY}) - " +
                    f"({outline.minX + width}, {outline.minY + height})")
        return tiles

    def panelSize(self) -> Tuple[float, float]:
        outline = self._requireOutline()
        return outline.width + self.maxXOffset, outline.height + self.maxYOffset

    def panelBBox(self):
        """
        Return bounding box of the panel as a shapely box.
        """
        outline = self._requireOutline()
        width, height = self.panelSize()
        return box(outline.minX, outline.minY,
                   outline.minX + width, outline.minY + height)

    def addGuideH(self, pos: float) -> None:
        """
        Adds a horizontal cut guide at pos (millimeters).
        """
        self.hGuides.add(pos)

    def addGuideV(self, pos: float) -> None:
        """
        Adds a vertical cut guide at pos (millimeters).
        """
        self.vGuides.add(pos)

    def renderOutline(self, width: Optional[float] = None) -> List[etree._Element]:
        """
        Draw the panel outline as four wires (bottom, right, top, left) on the
        outline layer.
        """
        if width is None:
            width = self.guideSettings.lineWidth
        corners = rectToRing(self.panelBBox().bounds)
        wires = []
        for start, end in zip(corners, corners[1:] + corners[:1]):
            wires.append(addWire(self.board.plain, start, end, width,
                self.outlineLayer, self.unit))
        return wires

    def _renderGuide(self, line: LineString) -> etree._Element:
        s = self.guideSettings
        prolonged = prolongCut(line, s.postLength)
        start, end = prolonged.coords[0], prolonged.coords[-1]
        return addWire(self.board.plain, start, end, s.lineWidth, s.layer,
            self.unit)

    def _renderMarker(self, position, rotation: Optional[str] = None) -> etree._Element:
        s = self.guideSettings
        return addText(self.board.plain, s.markerText, position, s.markerSize,
            s.layer, self.unit, rotation)

    def renderGuides(self) -> List[etree._Element]:
        """
        Draw the registered cut guides across the whole panel. The guides
        overlap the panel by the post length on both sides.
        """
        s = self.guideSettings
        minx, miny, maxx, maxy = self.panelBBox().bounds
        nodes = []
        for y in sorted(self.hGuides):
            nodes.append(self._renderGuide(LineString([(minx, y), (maxx, y)])))
            if s.markers:
                nodes.append(self._renderMarker(
                    (maxx + s.postLength + s.markerOffset, y)))
        for x in sorted(self.vGuides):
            nodes.append(self._renderGuide(LineString([(x, miny), (x, maxy)])))
            if s.markers:
                nodes.append(self._renderMarker(
                    (x, miny - s.postLength - s.markerOffset), "R90"))
        return nodes

    def removeDuplicateSegments(self) -> List[etree._Element]:
        """
        Remove wires in the primary plain that coincide with another wire on the
        same layer. Return the removed nodes.
        """
        comparer = ElementComparer(self.unit)
        seen: Set[Tuple[Optional[int], SegmentKey]] = set()
        removed = []
        for node in list(self.board.plain.iterfind("wire")):
            key = comparer.key(node)
            if key is None:
                continue
            identity = (key.element.layer, key)
            if identity in seen:
                detach(node)
                removed.append(node)
            else:
                seen.add(identity)
        if len(removed) > 0:
            self.report(f"Removed {len(removed)} duplicate wires")
        return removed
