from enum import IntEnum

# EAGLE layer numbers used by the panelizer

class Layer(IntEnum):
    Top = 1
    Bottom = 16
    Pads = 17
    Vias = 18
    Unrouted = 19
    Dimension = 20
    tPlace = 21
    bPlace = 22
    tOrigins = 23
    bOrigins = 24
    tNames = 25
    bNames = 26
    tValues = 27
    bValues = 28
    Milling = 46
    Measures = 47
    Document = 48
    Reference = 49
    tDocu = 51
    bDocu = 52

# Name layers of duplicated boards are moved to the placement layers as the
# reference designators become plain texts
NAME_LAYER_REMAP = {
    Layer.tNames: Layer.tPlace,
    Layer.bNames: Layer.bPlace
}

COORD_X_ATTRIBUTES = ("x", "x1", "x2")
COORD_Y_ATTRIBUTES = ("y", "y1", "y2")

# Attributes referring to a placed component by its name
REFERENCE_ATTRIBUTES = ("element",)
