import re
from typing import Optional

class UnitError(RuntimeError):
    pass

class UnsupportedUnit(UnitError):
    pass

class MalformedNumericAttribute(UnitError):
    pass

# Define unit conversion constants, base unit is a millimeter
mm = 1.0
mic = 0.001 * mm
cm = 10 * mm
mil = 0.0254 * mm
inch = 1000 * mil

# Units EAGLE accepts in the unitdist attribute of a grid
DOCUMENT_UNITS = {
    "mm": mm,
    "mic": mic,
    "mil": mil,
    "inch": inch
}

UNIT_SPLIT = re.compile(r"\s*(-?\s*\d+(\.\d*)?)\s*(\w+)?$")

def unitFactor(unit: str) -> float:
    try:
        return DOCUMENT_UNITS[unit]
    except KeyError:
        raise UnsupportedUnit(f"Unsupported unit '{unit}', use one of " +
            ", ".join(DOCUMENT_UNITS.keys())) from None

def convert(rawValue: float, unit: str) -> float:
    """
    Convert a raw value expressed in unit into millimeters
    """
    return rawValue * unitFactor(unit)

def convertBack(value: float, unit: str) -> float:
    """
    Convert a value in millimeters into the given unit
    """
    return value / unitFactor(unit)

def formatNumber(value: float) -> str:
    """
    Format a number for an XML attribute. Trailing zeroes are stripped and the
    precision is limited to avoid noise like 10.000000000000002. Values are
    rounded to 6 decimals, which is finer than the EAGLE resolution; a copied
    coordinate may differ from its source below that precision.
    """
    s = f"{value:.6f}".rstrip("0").rstrip(".")
    if s in ("-0", ""):
        return "0"
    return s

def readLength(unitStr) -> float:
    """
    Read a user-specified length (e.g., "5mm", "100 mil") and return it in
    millimeters. A bare number is taken as millimeters.
    """
    unitDir = {
        "mm": mm,
        "cm": cm,
        "mic": mic,
        "mil": mil,
        "inch": inch,
        "in": inch
    }
    if isinstance(unitStr, bool):
        raise UnitError(f"Got '{unitStr}', a length was expected")
    if isinstance(unitStr, (int, float)):
        return float(unitStr)
    if not isinstance(unitStr, str):
        raise UnitError(f"Got '{unitStr}', a length with units was expected")
    match = UNIT_SPLIT.match(unitStr)
    if not match:
        raise UnitError(f"Cannot read quantity '{unitStr}'")
    amount = float(match.group(1).replace(" ", ""))
    if match.group(3) is None:
        return amount
    try:
        return amount * unitDir[match.group(3)]
    except KeyError:
        raise UnitError(f"Unknown unit in '{unitStr}'") from None

class Unit:
    """
    Reads numeric attributes of document nodes and converts them into
    millimeters. All nodes of a document share a single source unit.
    """
    def __init__(self, unit: str = "mm") -> None:
        self.factor = unitFactor(unit)
        self.name = unit

    @staticmethod
    def fromDocument(tree) -> "Unit":
        """
        Build the unit based on the first grid declaration that carries
        unitdist. Documents without it are in millimeters.
        """
        for grid in tree.getroot().iterfind("drawing/grid"):
            unitDist = grid.get("unitdist")
            if unitDist is not None:
                return Unit(unitDist)
        return Unit("mm")

    def value(self, node, attribute: str) -> Optional[float]:
        """
        Return attribute value in millimeters or None if it is not present
        """
        raw = node.get(attribute)
        if raw is None:
            return None
        try:
            return float(raw) * self.factor
        except ValueError:
            raise MalformedNumericAttribute(
                f"Attribute '{attribute}' of <{node.tag}> is not a number: '{raw}'") from None

    def raw(self, value: float) -> float:
        """
        Convert millimeters into the document unit
        """
        return value / self.factor

    def __repr__(self) -> str:
        return f"<Unit: {self.name}>"
