import pytest
from eaglekit.panelize_ui_impl import *
from eaglekit.panelize import Fit
from eaglekit.common import PanelError
from eaglekit.eagle import parseBoard
from eaglekit.outline import MissingOutline
from eaglekit.units import UnsupportedUnit

def test_presetLayout():
    with pytest.raises(PresetError):
        validatePresetLayout([])
    validatePresetLayout({})
    with pytest.raises(PresetError):
        validatePresetLayout({"a": []})
    validatePresetLayout({"a": {"b": 43}})

def test_merge():
    # Merge into empty
    a = {}
    mergePresets(a, {"a": {}})
    assert a == {"a": {}}

    mergePresets(a, {"a": {
        "value": 42,
        "otherValue": 70
    }})
    assert a == {"a": {
        "value": 42,
        "otherValue": 70
    }}

    mergePresets(a, {"a": {
        "value": 43
    }})
    assert a == {"a": {
        "value": 43,
        "otherValue": 70
    }}

def test_defaultPreset():
    preset = obtainPreset([])
    assert set(preset.keys()) == set(SECTIONS.keys())
    assert preset["source"] == {"units": "document", "outlinelayer": 20}
    assert preset["layout"]["fit"] == "start"
    assert preset["guides"]["layer"] == 46
    assert preset["guides"]["width"] == pytest.approx(0.254)
    assert preset["guides"]["postlength"] == pytest.approx(5)
    assert preset["guides"]["markers"] is False
    assert preset["post"]["dedupe"] is False

def test_builtinPresetChain():
    preset = obtainPreset([":vcuts"])
    assert preset["guides"]["markers"] is True
    assert preset["guides"]["layer"] == 46

def test_unknownBuiltinPreset():
    with pytest.raises(RuntimeError):
        obtainPreset([":nonexistent"])

def test_overrides():
    preset = obtainPreset([],
        guides={"markers": "yes", "postlength": "100mil", "layer": "47"},
        layout={"fit": "inside"},
        post=None)
    assert preset["guides"]["markers"] is True
    assert preset["guides"]["postlength"] == pytest.approx(2.54)
    assert preset["guides"]["layer"] == 47
    assert preset["guides"]["width"] == pytest.approx(0.254)
    assert Fit(preset["layout"]["fit"]) == Fit.Inside

@pytest.mark.parametrize("section, value", [
    ("layout", {"fit": "center"}),
    ("guides", {"markers": "maybe"}),
    ("guides", {"width": "3 furlongs"}),
    ("guides", {"layer": "0"}),
    ("source", {"units": "mil"}),
])
def test_invalidValues(section, value):
    with pytest.raises(PresetError):
        obtainPreset([], **{section: value})

def test_extraSection(tmp_path):
    path = tmp_path / "extra.json"
    path.write_text('// comment\n{ "tabs": { "width": "3mm" } }')
    with pytest.raises(PresetError):
        obtainPreset([str(path)])

def test_presetFromFile(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text('// Thin guides\n{ "guides": { "width": "0.1mm" } }')
    preset = obtainPreset([str(path)])
    assert preset["guides"]["width"] == pytest.approx(0.1)

def test_dumpPresetRoundtrip(tmp_path):
    preset = obtainPreset([":vcuts"])
    path = tmp_path / "dump.json"
    path.write_text(dumpPreset(preset))
    assert obtainPreset([str(path)]) == preset

def test_panelizeBoard(tree):
    messages = []
    preset = obtainPreset([":vcuts"])
    panel = panelizeBoard(tree, preset, 25, 20, messages.append)
    assert len(panel.tiles) == 8
    assert panel.panelSize() == (30, 24)
    board = panel.board
    assert len(board.elements) == 9
    assert len(board.signals) == 9
    outline = [w for w in board.plain.iter("wire") if w.get("layer") == "20"]
    assert len(outline) == 4
    guides = [w for w in board.plain.iter("wire") if w.get("layer") == "46"]
    assert len(guides) == 4
    markers = [t for t in board.plain.iter("text") if t.text == "V-CUT"]
    assert len(markers) == 4
    assert messages[-1].startswith("Totally panelized")

def test_panelizeBoardInMillimeters(boardFactory):
    # The document claims mils but the preset forces millimeters
    tree = boardFactory("mil")
    preset = obtainPreset([], source={"units": "mm"})
    panel = panelizeBoard(tree, preset, 25, 20)
    assert panel.unit.name == "mm"
    assert panel.panelSize() == (30, 24)

def test_panelizeBoardMissingOutline(tree):
    preset = obtainPreset([], source={"outlinelayer": "46"})
    with pytest.raises(PanelError):
        panelizeBoard(tree, preset, 25, 20)

def test_panelizeBoardFailsBeforeModification():
    tree = parseBoard(
        '<eagle><drawing><grid unitdist="parsec"/><board/></drawing></eagle>')
    with pytest.raises(UnsupportedUnit):
        panelizeBoard(tree, obtainPreset([]), 25, 20)
    assert len(tree.getroot().find("drawing/board")) == 0

    tree = parseBoard("<eagle><drawing><board/></drawing></eagle>")
    with pytest.raises(MissingOutline):
        panelizeBoard(tree, obtainPreset([]), 25, 20)
    assert len(tree.getroot().find("drawing/board")) == 0
