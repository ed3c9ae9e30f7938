from typing import Optional, Tuple
import numpy as np
from lxml import etree
from eaglekit.units import Unit, formatNumber

Box = Tuple[float, float, float, float]

class PanelError(RuntimeError):
    pass

def normalize(vector):
    """ Return a vector with unit length """
    vec = np.array([vector[0], vector[1]])
    return vec / np.linalg.norm(vector)

def setLength(node: etree._Element, attribute: str, value: float, unit: Unit) -> None:
    """
    Store a length given in millimeters into an attribute in document units
    """
    node.set(attribute, formatNumber(unit.raw(value)))

def addWire(container: etree._Element, start, end, width: float, layer: int,
            unit: Unit) -> etree._Element:
    """
    Append a wire from start to end (millimeters) to the container
    """
    wire = etree.SubElement(container, "wire")
    setLength(wire, "x1", start[0], unit)
    setLength(wire, "y1", start[1], unit)
    setLength(wire, "x2", end[0], unit)
    setLength(wire, "y2", end[1], unit)
    setLength(wire, "width", width, unit)
    wire.set("layer", str(int(layer)))
    return wire

def addText(container: etree._Element, text: str, position, size: float,
            layer: int, unit: Unit, rotation: Optional[str] = None) -> etree._Element:
    """
    Append a plain text at position (millimeters) to the container
    """
    node = etree.SubElement(container, "text")
    setLength(node, "x", position[0], unit)
    setLength(node, "y", position[1], unit)
    setLength(node, "size", size, unit)
    node.set("layer", str(int(layer)))
    if rotation is not None:
        node.set("rot", rotation)
    node.text = text
    return node

def rectToRing(box: Box):
    """
    Given a box (minx, miny, maxx, maxy), return its corners counter-clockwise
    starting in the bottom left one
    """
    minx, miny, maxx, maxy = box
    return [
        (minx, miny),
        (maxx, miny),
        (maxx, maxy),
        (minx, maxy)
    ]

def detach(node: etree._Element) -> bool:
    """
    Remove node from its parent. Return False if it was already detached.
    """
    parent = node.getparent()
    if parent is None:
        return False
    parent.remove(node)
    return True
