"""Pytest fixtures for symbol-tools tests."""

import json
from pathlib import Path

import pytest

from symbol_tools.config import Config

# Smallest useful library: one resistor, one pin
SIMPLE_R_LIBRARY = (
    '(kicad_symbol_lib (symbol "R" (property "Value" "10k") '
    '(pin passive line (at 0 0 0) (length 2.54) (name "1") (number "1"))))'
)

# A resistor laid out the way KiCad 7/8 writes it, with unit sub-symbols
DEVICE_LIBRARY = """(kicad_symbol_lib
  (version 20231120)
  (generator "kicad_symbol_editor")
  (symbol "Device:R"
    (pin_numbers hide)
    (pin_names (offset 0))
    (property "Reference" "R" (at 2.032 0 90) (effects (font (size 1.27 1.27))))
    (property "Value" "R" (at 0 0 90) (effects (font (size 1.27 1.27))))
    (property "Footprint" "" (at -1.778 0 90) (effects (font (size 1.27 1.27)) hide))
    (property "Datasheet" "~" (at 0 0 0) (effects (font (size 1.27 1.27)) hide))
    (property "ki_keywords" "R res resistor" (at 0 0 0) (effects (font (size 1.27 1.27)) hide))
    (symbol "R_0_1"
      (rectangle (start -1.016 -2.54) (end 1.016 2.54)
        (stroke (width 0.254) (type default))
        (fill (type none))
      )
    )
    (symbol "R_1_1"
      (pin passive line (at 0 3.81 270) (length 1.27)
        (name "~" (effects (font (size 1.27 1.27))))
        (number "1" (effects (font (size 1.27 1.27))))
      )
      (pin passive line (at 0 -3.81 90) (length 1.27)
        (name "~" (effects (font (size 1.27 1.27))))
        (number "2" (effects (font (size 1.27 1.27))))
      )
    )
  )
  (symbol "Device:LED"
    (property "Reference" "D" (at 0 2.54 0) (effects (font (size 1.27 1.27))))
    (property "Value" "LED" (at 0 -2.54 0) (effects (font (size 1.27 1.27))))
    (symbol "LED_0_1"
      (polyline
        (pts (xy -1.27 -1.27) (xy -1.27 1.27) (xy 1.27 0) (xy -1.27 -1.27))
        (stroke (width 0.254) (type default) (color 255 0 0 1))
        (fill (type outline))
      )
      (text "LED" (at 0 -3 0) (effects (font (size 1 1)) (justify left)))
    )
    (symbol "LED_1_1"
      (pin passive line (at -3.81 0 0) (length 2.54)
        (name "K" (effects (font (size 1.27 1.27))))
        (number "1" (effects (font (size 1.27 1.27))))
      )
      (pin passive line (at 3.81 0 180) (length 2.54)
        (name "A" (effects (font (size 1.27 1.27))))
        (number "2" (effects (font (size 1.27 1.27))))
      )
    )
  )
  (symbol "Device:R_Small"
    (extends "Device:R")
    (property "Reference" "R" (at 0 0 0) (effects (font (size 1.27 1.27))))
    (property "Value" "R_Small" (at 0 0 0) (effects (font (size 1.27 1.27))))
  )
)
"""

# Line plus pin in EasyEDA source units
EASYEDA_LINE_AND_PIN = {
    "shape": [
        "L~0~0~10~0~#880000~1",
        "P~0~0~1~~0~0",
    ]
}

# A two-pin part the way the EasyEDA API returns it
EASYEDA_RESISTOR = {
    "head": {"c_para": {"pre": "R?", "name": "RES_0603", "package": "0603"}},
    "BBox": {"x": 390, "y": 285, "width": 40, "height": 10},
    "shape": [
        "R~400~285~2~2~20~10~#880000~1~0~none~gge1~0",
        "P~show~0~1~390~290~180~gge2~0^^390~290^^M 390 290 h 10~#880000^^1~394~289~0~1~start~~~#0000FF^^1~394~294~0~1~start~~~#0000FF",
        "P~show~0~2~430~290~0~gge3~0^^430~290^^M 430 290 h -10~#880000^^1~426~289~0~2~end~~~#0000FF^^1~426~294~0~2~end~~~#0000FF",
    ],
}


@pytest.fixture
def simple_r_library() -> str:
    """Single-pin resistor library text."""
    return SIMPLE_R_LIBRARY


@pytest.fixture
def device_library() -> str:
    """Library text with R, LED and an R_Small that extends R."""
    return DEVICE_LIBRARY


@pytest.fixture
def device_library_file(tmp_path: Path) -> Path:
    """DEVICE_LIBRARY written to a .kicad_sym file."""
    path = tmp_path / "Device.kicad_sym"
    path.write_text(DEVICE_LIBRARY)
    return path


@pytest.fixture
def easyeda_line_and_pin() -> dict:
    return json.loads(json.dumps(EASYEDA_LINE_AND_PIN))


@pytest.fixture
def easyeda_resistor() -> dict:
    """EasyEDA record for a horizontal two-pin resistor."""
    return json.loads(json.dumps(EASYEDA_RESISTOR))


@pytest.fixture
def easyeda_payload_file(tmp_path: Path) -> Path:
    """API-style payload with the record JSON-encoded in dataStr."""
    path = tmp_path / "C25804.json"
    path.write_text(json.dumps({"result": {"dataStr": json.dumps(EASYEDA_RESISTOR)}}))
    return path


@pytest.fixture
def config() -> Config:
    """Default configuration."""
    return Config()


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch):
    """Run from an empty directory with no user config file."""
    monkeypatch.setattr("symbol_tools.config.USER_CONFIG_PATH", tmp_path / "no-user-config.toml")
    (tmp_path / ".git").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SYMBOL_TOOLS_UNITS", raising=False)
    return tmp_path
