import pytest
from lxml import etree
from eaglekit.library import *
from eaglekit.units import Unit

def test_build(board):
    index = PackageLibraryIndex.build(board, Unit())
    assert len(index.packages) == 1
    assert "rcl/R0805" in index
    # Two pads, one wire and one text; the description has no geometry
    templates = index.packages["rcl/R0805"]
    assert [t.node.tag for t in templates] == ["smd", "smd", "wire", "text"]
    assert templates[0].x1 == pytest.approx(-0.95)

def test_lookup(board):
    index = PackageLibraryIndex.build(board, Unit())
    placement = board.elements.find("element[@name='R1']")
    elements = index.lookup(placement)
    assert len(elements) == 4
    pad = elements[0]
    assert (pad.x1, pad.y1) == (pytest.approx(4.05), pytest.approx(4))
    assert all(e.placement is placement for e in elements)
    wire = elements[2]
    assert (wire.minX(), wire.maxX()) == (pytest.approx(4.6), pytest.approx(5.4))
    assert wire.y1 == pytest.approx(4.6)

def test_lookupDropsUnplaced(board):
    index = PackageLibraryIndex.build(board, Unit())
    placement = etree.Element("element", name="R2", library="rcl", package="R0805")
    assert index.lookup(placement) == []

def test_undefinedPackage(board):
    index = PackageLibraryIndex.build(board, Unit())
    placement = etree.Element("element", name="U1", library="rcl",
        package="SOT23", x="0", y="0")
    with pytest.raises(UndefinedPackageReference):
        index.lookup(placement)
