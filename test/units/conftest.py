import pytest
from eaglekit.eagle import parseBoard, EagleBoard

# A 10 x 8 mm board with a single resistor connected to GND
BOARD = """<?xml version="1.0" encoding="utf-8"?>
<eagle version="9.6.2">
<drawing>
<settings>
<setting alwaysvectorfont="no"/>
</settings>
<grid distance="0.1" unitdist="{unit}" unit="{unit}" style="lines"/>
<board>
<plain>
<wire x1="0" y1="0" x2="10" y2="0" width="0" layer="20"/>
<wire x1="10" y1="0" x2="10" y2="8" width="0" layer="20"/>
<wire x1="10" y1="8" x2="0" y2="8" width="0" layer="20"/>
<wire x1="0" y1="8" x2="0" y2="0" width="0" layer="20"/>
<text x="1" y="1" size="1.27" layer="25">LOGO</text>
</plain>
<libraries>
<library name="rcl">
<packages>
<package name="R0805">
<description>Chip resistor</description>
<smd name="1" x="-0.95" y="0" dx="1.3" dy="1.5" layer="1"/>
<smd name="2" x="0.95" y="0" dx="1.3" dy="1.5" layer="1"/>
<wire x1="-0.4" y1="0.6" x2="0.4" y2="0.6" width="0.127" layer="21"/>
<text x="-1" y="1" size="1.27" layer="25">&gt;NAME</text>
</package>
</packages>
</library>
</libraries>
<elements>
<element name="R1" library="rcl" package="R0805" value="10k" x="5" y="4">
<attribute name="NAME" x="4" y="5" size="1.27" layer="25"/>
<attribute name="VALUE" x="4" y="3" size="1.27" layer="27"/>
</element>
</elements>
<signals>
<signal name="GND">
<contactref element="R1" pad="1"/>
<wire x1="4.05" y1="4" x2="2" y2="4" width="0.25" layer="1"/>
</signal>
</signals>
</board>
</drawing>
</eagle>
"""

# A board whose outline is drawn by a component placed at (2, 3)
COMPONENT_OUTLINE_BOARD = """<?xml version="1.0" encoding="utf-8"?>
<eagle version="9.6.2">
<drawing>
<board>
<plain>
<circle x="3" y="3" radius="0.5" width="0.1" layer="21"/>
</plain>
<libraries>
<library name="frames">
<packages>
<package name="OUTLINE">
<wire x1="0" y1="0" x2="20" y2="0" width="0" layer="20"/>
<wire x1="20" y1="0" x2="20" y2="10" width="0" layer="20"/>
<wire x1="20" y1="10" x2="0" y2="10" width="0" layer="20"/>
<wire x1="0" y1="10" x2="0" y2="0" width="0" layer="20"/>
<text x="1" y="1" size="1" layer="51">frame</text>
</package>
</packages>
</library>
</libraries>
<elements>
<element name="F1" library="frames" package="OUTLINE" x="2" y="3"/>
</elements>
<signals/>
</board>
</drawing>
</eagle>
"""

def makeBoard(unit="mm", source=BOARD):
    return parseBoard(source.replace("{unit}", unit))

@pytest.fixture
def tree():
    return makeBoard()

@pytest.fixture
def board(tree):
    return EagleBoard(tree)

@pytest.fixture
def boardFactory():
    return makeBoard

@pytest.fixture
def componentBoard():
    return EagleBoard(makeBoard(source=COMPONENT_OUTLINE_BOARD))
