from typing import Any
from eaglekit.units import readLength

class PresetError(RuntimeError):
    pass

class SectionBase:
    def __init__(self, description):
        self.description = description

    def validate(self, x: str) -> Any:
        raise NotImplementedError("Validate was not overridden for SectionBase")

class SLength(SectionBase):
    def validate(self, x):
        return readLength(x)

class SNum(SectionBase):
    def validate(self, x):
        if isinstance(x, bool):
            raise PresetError(f"Got {x}, expected a number")
        return int(x)

class SLayerNum(SNum):
    def validate(self, x):
        val = super().validate(x)
        if val < 1 or val > 255:
            raise PresetError(f"{x} is not a valid layer number")
        return val

class SChoiceBase(SectionBase):
    def __init__(self, vals, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.vals = vals

    def validate(self, s):
        if s not in self.vals:
            c = ", ".join(self.vals)
            raise PresetError(f"'{s}' is not allowed Use one of {c}.")
        return s

class SChoice(SChoiceBase):
    def __init__(self, vals, *args, **kwargs):
        super().__init__(vals, *args, **kwargs)

class SBool(SChoiceBase):
    def __init__(self, *args, **kwargs):
        super().__init__(["True", "False"], *args, **kwargs)

    def validate(self, s):
        if isinstance(s, bool):
            return s
        if isinstance(s, str):
            sl = str(s).lower()
            if sl in ["1", "true", "yes"]:
                return True
            if sl in ["0", "false", "no"]:
                return False
            raise PresetError(f"Uknown boolean value '{s}'")
        raise PresetError(f"Got {s}, expected boolean value")


def validateSection(name, sectionDefinition, section):
    try:
        for key, validator in sectionDefinition.items():
            if key not in section:
                continue
            section[key] = validator.validate(section[key])
    except Exception as e:
        raise PresetError(f"Error in section {name}: {e}")
    return section

SOURCE_SECTION = {
    "units": SChoice(
        ["document", "mm"],
        "Read the unit of coordinates from the document grid or assume millimeters"),
    "outlinelayer": SLayerNum(
        "Layer holding the board outline"),
}

LAYOUT_SECTION = {
    "fit": SChoice(
        ["start", "inside"],
        "Place a board copy when it starts inside the target area (start) or only when it fits inside it (inside)"),
}

GUIDES_SECTION = {
    "layer": SLayerNum(
        "Layer of the cut guides"),
    "width": SLength(
        "Stroke width of the panel outline and the cut guides"),
    "postlength": SLength(
        "Length by which the guides overlap the panel"),
    "markers": SBool(
        "Place a text marker next to each guide"),
}

POST_SECTION = {
    "dedupe": SBool(
        "Remove coincident wires after panelization"),
}

DEBUG_SECTION = {
    "trace": SBool(
        "Print the stack trace on error"),
}

SECTIONS = {
    "source": SOURCE_SECTION,
    "layout": LAYOUT_SECTION,
    "guides": GUIDES_SECTION,
    "post": POST_SECTION,
    "debug": DEBUG_SECTION,
}

def ppSource(section):
    validateSection("source", SOURCE_SECTION, section)

def ppLayout(section):
    validateSection("layout", LAYOUT_SECTION, section)

def ppGuides(section):
    validateSection("guides", GUIDES_SECTION, section)

def ppPost(section):
    validateSection("post", POST_SECTION, section)

def ppDebug(section):
    validateSection("debug", DEBUG_SECTION, section)
