import pytest
from lxml import etree
from eaglekit.eagle import *

def test_primarySections(board):
    assert board.plain.tag == "plain"
    assert board.elements.getparent() is board.board
    assert board.elements.find("element[@name='R1']") is not None
    assert board.elements.find("element[@name='R2']") is None
    assert [(lib, p.get("name")) for lib, p in board.packages()] == [("rcl", "R0805")]

def test_missingSectionsAreCreatedOnAccess():
    tree = parseBoard("<eagle><drawing><board/></drawing></eagle>")
    board = EagleBoard(tree)
    assert len(board.board) == 0
    assert board.placements() == []
    assert len(board.board) == 0
    signals = board.signals
    assert board.signals is signals
    board.plain
    board.elements
    assert [n.tag for n in board.board] == ["signals", "plain", "elements"]

def test_multipleBoards():
    tree = parseBoard("""<eagle><drawing>
        <board><plain/></board>
        <board><elements><element name="A"/></elements><plain/></board>
        </drawing></eagle>""")
    board = EagleBoard(tree)
    assert board.plain.getparent() is board.boards[0]
    assert board.elements.getparent() is board.boards[1]
    assert len(board.plains()) == 2
    assert board.elements.find("element[@name='A']") is not None

def test_noBoard():
    with pytest.raises(DocumentError):
        EagleBoard(parseBoard("<eagle><drawing><schematic/></drawing></eagle>"))

def test_children(board):
    pairs = children([board.plain])
    etree.SubElement(board.plain, "wire")
    assert len(pairs[0][1]) == 5
    assert len(board.plain) == 6

def test_saveAndLoad(tree, tmp_path):
    path = tmp_path / "board.brd"
    saveBoard(path, tree)
    assert path.read_bytes().startswith(b"<?xml")
    loaded = EagleBoard(loadBoard(path))
    assert loaded.elements.find("element[@name='R1']").get("x") == "5"
    assert dumpBoard(loaded.tree) == dumpBoard(tree)
