from typing import List, Tuple, Union
from lxml import etree
from eaglekit.common import PanelError

# Access to EAGLE board documents (.brd). The board is an XML tree:
#
#   eagle/drawing/grid[@unitdist]
#   eagle/drawing/board/plain/*
#   eagle/drawing/board/libraries/library/packages/package/*
#   eagle/drawing/board/elements/element
#   eagle/drawing/board/signals/signal/*

class DocumentError(PanelError):
    pass

def loadBoard(path) -> etree._ElementTree:
    """
    Load an EAGLE board file into an XML tree
    """
    parser = etree.XMLParser(remove_blank_text=True)
    return etree.parse(str(path), parser)

def parseBoard(source: Union[str, bytes]) -> etree._ElementTree:
    """
    Parse a board from its textual representation
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    parser = etree.XMLParser(remove_blank_text=True)
    return etree.ElementTree(etree.fromstring(source, parser))

def saveBoard(path, tree: etree._ElementTree) -> None:
    with open(path, "wb") as f:
        f.write(dumpBoard(tree))

def dumpBoard(tree: etree._ElementTree) -> bytes:
    return etree.tostring(tree, encoding="utf-8", xml_declaration=True,
        pretty_print=True)

def children(containers: List[etree._Element]) -> List[Tuple[etree._Element, List[etree._Element]]]:
    """
    Materialize the children of each container. The lists stay valid even when
    the tree is modified afterwards.
    """
    return [(c, list(c)) for c in containers]

class EagleBoard:
    """
    A loaded board document with resolved sections. The primary containers are
    the first plain, elements and signals sections found across the boards;
    they are the insertion targets for everything synthesized by the
    panelizer. A missing primary section is created in the first board on
    first access, so reading a board never modifies it.
    """
    def __init__(self, tree: etree._ElementTree) -> None:
        self.tree = tree
        root = tree.getroot()
        self.boards = root.findall("drawing/board")
        if len(self.boards) == 0:
            raise DocumentError("The document contains no board (drawing/board)")
        self.board = self.boards[0]

    @property
    def plain(self) -> etree._Element:
        return self._primary("plain")

    @property
    def elements(self) -> etree._Element:
        return self._primary("elements")

    @property
    def signals(self) -> etree._Element:
        return self._primary("signals")

    def _primary(self, section: str) -> etree._Element:
        for board in self.boards:
            node = board.find(section)
            if node is not None:
                return node
        # EAGLE omits empty sections in some versions
        return etree.SubElement(self.board, section)

    def plains(self) -> List[etree._Element]:
        return [p for b in self.boards for p in b.findall("plain")]

    def elementSections(self) -> List[etree._Element]:
        return [e for b in self.boards for e in b.findall("elements")]

    def signalSections(self) -> List[etree._Element]:
        return [s for b in self.boards for s in b.findall("signals")]

    def placements(self) -> List[etree._Element]:
        return [e for s in self.elementSections() for e in s.findall("element")]

    def packages(self):
        """
        Yield (library name, package node) for each package in all libraries
        """
        for board in self.boards:
            for library in board.iterfind("libraries/library"):
                for package in library.iterfind("packages/package"):
                    yield library.get("name"), package
