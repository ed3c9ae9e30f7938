from typing import Dict, List, Tuple
from lxml import etree
from eaglekit.common import PanelError
from eaglekit.eagle import EagleBoard
from eaglekit.geometry import GeometricElement, extractElements
from eaglekit.units import Unit

class UndefinedPackageReference(PanelError):
    pass

def packageKey(library: str, package: str) -> str:
    return f"{library}/{package}"

class PackageLibraryIndex:
    """
    Package-local geometry of all packages in the board libraries indexed by
    "<library>/<package>". Nodes without geometry (e.g., descriptions) are not
    indexed.
    """
    def __init__(self, packages: Dict[str, Tuple[GeometricElement, ...]],
                 unit: Unit) -> None:
        self.packages = packages
        self.unit = unit

    @staticmethod
    def build(board: EagleBoard, unit: Unit) -> "PackageLibraryIndex":
        packages = {}
        for libraryName, package in board.packages():
            key = packageKey(libraryName, package.get("name"))
            packages[key] = tuple(extractElements(package, unit))
        return PackageLibraryIndex(packages, unit)

    def __contains__(self, key: str) -> bool:
        return key in self.packages

    def templates(self, placement: etree._Element) -> Tuple[GeometricElement, ...]:
        key = packageKey(placement.get("library"), placement.get("package"))
        if key not in self:
            raise UndefinedPackageReference(
                f"Element '{placement.get('name')}' refers to package '{key}' " +
                "which is not defined in the board libraries")
        return self.packages[key]

    def lookup(self, placement: etree._Element) -> List[GeometricElement]:
        """
        Return the geometry of a placed element in board coordinates
        """
        shifted = (t.shiftedBy(placement, self.unit) for t in self.templates(placement))
        return [e for e in shifted if e is not None]
