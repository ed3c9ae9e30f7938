from eaglekit.panelize import Panel, Fit, Reporter, noReport
from eaglekit.panelize_ui_sections import *
from eaglekit.eagle import EagleBoard
from eaglekit.units import Unit
from enum import Enum
import commentjson
import json
import os

PKG_BASE = os.path.dirname(__file__)
PRESET_LIB = os.path.join(PKG_BASE, "resources/panelizePresets")


def encodePreset(value):
    """
    Convert a preset into its stringified version.
    """
    if value is None:
        return "none"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return f"{value}mm"
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ",".join([encodePreset(x) for x in value])
    if isinstance(value, dict):
        return {encodePreset(k): encodePreset(v) for k, v in value.items()}
    raise RuntimeError(f"Cannot serialize {value} of type {type(value)}")

def dumpPreset(preset):
    """
    Pretty prints a preset into string (containing JSON) so that it can be
    loaded back again
    """
    return json.dumps(encodePreset(preset), indent=4)

def validatePresetLayout(preset):
    if not isinstance(preset, dict):
        raise PresetError("Preset is not a dictionary")
    for name, section in preset.items():
        if not isinstance(section, dict):
            raise PresetError(f"Section '{name}' is not a dictionary")

def postProcessPreset(preset):
    process = {
        "source": ppSource,
        "layout": ppLayout,
        "guides": ppGuides,
        "post": ppPost,
        "debug": ppDebug
    }
    for name, section in preset.items():
        process[name](section)

def loadPreset(path):
    """
    Load a preset from path and perform simple validation on its structure.
    Automatically resolves built-in styles (prefixed with :, omitting suffix).
    """
    if path.startswith(":"):
        presetName = path
        path = os.path.join(PRESET_LIB, path[1:] + ".json")
        if not os.path.exists(path):
            raise RuntimeError(f"Uknown built-in preset '{presetName}'")
    try:
        with open(path, "r") as f:
            preset = commentjson.load(f)
            validatePresetLayout(preset)
            return preset
    except OSError:
        raise RuntimeError(f"Cannot open preset '{path}'")
    except PresetError as e:
        raise PresetError(f"{path}: {e}")

def mergePresets(a, b):
    """
    Merge b into a. Values from b overwrite values from a.
    """
    for category in b:
        if category not in a:
            a[category] = {}
        for key, value in b[category].items():
            a[category][key] = value

def loadPresetChain(chain):
    """
    Given a list of preset names (or paths), load the whole chain.
    """
    assert len(chain) > 0

    preset = loadPreset(chain[0])
    for p in chain[1:]:
        newPreset = loadPreset(p)
        mergePresets(preset, newPreset)
    return preset

def validateSections(preset):
    """
    Perform a logic validation of the given preset - all sections are present
    and no unknown ones are given.
    """
    VALID_SECTIONS = list(SECTIONS.keys())
    extraSections = set(preset.keys()).difference(VALID_SECTIONS)
    if len(extraSections) != 0:
        raise PresetError(f"Extra sections {', '.join(extraSections)} in preset")
    missingSections = set(VALID_SECTIONS).difference(preset.keys())
    if len(missingSections) != 0:
        raise PresetError(f"Missing sections {', '.join(missingSections)} in preset")

def obtainPreset(presetPaths, validate=True, **kwargs):
    """
    Given a preset paths from the user and the overrides in the form of named
    arguments, construt the preset.

    Ensures a valid preset is always found
    """
    presetChain = [":default"] + list(presetPaths)
    preset = loadPresetChain(presetChain)
    for name, section in kwargs.items():
        if section is not None:
            mergePresets(preset, {name: section})
    if validate:
        validateSections(preset)
    postProcessPreset(preset)
    return preset

def readUnit(specification, board: EagleBoard) -> Unit:
    """
    Build the unit of document coordinates based on the source section
    """
    try:
        type = specification["units"]
        if type == "document":
            return Unit.fromDocument(board.tree)
        if type == "mm":
            return Unit("mm")
        raise PresetError(f"Unknown units '{type}' in source specification.")
    except KeyError as e:
        raise PresetError(f"Missing parameter '{e}' in section 'source'")

def setupGuides(specification, panel: Panel) -> None:
    try:
        settings = panel.guideSettings
        settings.layer = specification["layer"]
        settings.lineWidth = specification["width"]
        settings.postLength = specification["postlength"]
        settings.markers = specification["markers"]
    except KeyError as e:
        raise PresetError(f"Missing parameter '{e}' in section 'guides'")

def buildLayout(preset, panel: Panel, targetWidth: float, targetHeight: float):
    """
    Resolve the board outline and fill the target area with board copies.
    Return the list of created tiles.
    """
    try:
        panel.resolveOutline(preset["source"]["outlinelayer"])
        fit = Fit(preset["layout"]["fit"])
    except KeyError as e:
        raise PresetError(f"Missing parameter '{e}' in preset")
    return panel.makeGrid(targetWidth, targetHeight, fit)

def buildPostprocessing(specification, panel: Panel) -> None:
    try:
        if specification["dedupe"]:
            panel.removeDuplicateSegments()
    except KeyError as e:
        raise PresetError(f"Missing parameter '{e}' in section 'post'")

def panelizeBoard(tree, preset, targetWidth: float, targetHeight: float,
                  reporter: Reporter = noReport) -> Panel:
    """
    Panelize a loaded board document in place according to the preset
    """
    board = EagleBoard(tree)
    unit = readUnit(preset["source"], board)
    panel = Panel(board, unit, reporter)
    setupGuides(preset["guides"], panel)
    buildLayout(preset, panel, targetWidth, targetHeight)
    panel.renderOutline()
    panel.renderGuides()
    buildPostprocessing(preset["post"], panel)
    return panel
