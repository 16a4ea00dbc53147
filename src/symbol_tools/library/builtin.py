"""
Built-in component symbols.

All dimensions are in millimetres on a 2.54 mm grid. Each symbol is drawn
centred on (0, 0) and declares ``origin = (width/2, height/2)``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Tuple

from ..symbols import (
    Circle,
    Line,
    Path,
    Pin,
    PinKind,
    PinOrientation,
    Polygon,
    Polyline,
    Rect,
    Style,
    Symbol,
    SymbolSource,
    Text,
)
from .definition import ComponentDefinition, DefinitionOrigin

BLACK = "#000000"
BODY_FILL = "#FFFFCC"

_THIN = Style(stroke=BLACK, stroke_width=0.254)
_OUTLINE = Style(stroke=BLACK, stroke_width=0.254, fill="none")
_ARROW = Style(stroke=BLACK, stroke_width=0.127, fill=BLACK)
_HEAVY = Style(stroke=BLACK, stroke_width=0.508)


def _line(x1: float, y1: float, x2: float, y2: float, style: Style = _THIN) -> Line:
    return Line(x1, y1, x2, y2, style=style)


def _label(x: float, y: float, text: str, anchor: str = "middle") -> Text:
    return Text(x, y, text, font_size=1.27, anchor=anchor, baseline="middle")


def _pin(
    number: str,
    name: str,
    x: float,
    y: float,
    orientation: PinOrientation,
    length: float = 0.0,
    kind: PinKind = PinKind.PASSIVE,
    show_name: bool = True,
) -> Pin:
    return Pin(number, name, x, y, orientation, length, kind=kind, show_name=show_name)


L, R, U, D = PinOrientation.LEFT, PinOrientation.RIGHT, PinOrientation.UP, PinOrientation.DOWN


def _two_pin(x: float, names: Tuple[str, str] = ("1", "2")) -> Tuple[Pin, Pin]:
    return (_pin("1", names[0], -x, 0, L), _pin("2", names[1], x, 0, R))


def _symbol(width: float, height: float, graphics, pins, origin=None) -> Symbol:
    return Symbol(
        width=width,
        height=height,
        origin=origin or (width / 2, height / 2),
        graphics=tuple(graphics),
        pins=tuple(pins),
        source=SymbolSource.BUILTIN,
    )


def _define(
    name: str,
    description: str,
    category: str,
    keywords: List[str],
    reference: str,
    value: str,
    symbol: Symbol,
) -> ComponentDefinition:
    return ComponentDefinition(
        name=name,
        symbol=replace(symbol, name=name),
        description=description,
        category=category,
        keywords=keywords,
        default_reference=reference,
        default_value=value,
        origin=DefinitionOrigin.BUILTIN,
    )


# Passive components


def _resistor() -> Symbol:
    zigzag = [
        (-3.81, 0), (-3.048, 0), (-2.54, -1.016), (-1.524, 1.016), (-0.508, -1.016),
        (0.508, 1.016), (1.524, -1.016), (2.54, 1.016), (3.048, 0), (3.81, 0),
    ]
    return _symbol(
        7.62,
        2.54,
        [Polyline(zigzag, style=_OUTLINE), _label(0, -2, "${REF}"), _label(0, 2.5, "${VALUE}")],
        _two_pin(3.81),
    )


def _resistor_iec() -> Symbol:
    return _symbol(
        7.62,
        2.54,
        [
            Rect(-2.54, -0.762, 5.08, 1.524, style=_OUTLINE),
            _line(-3.81, 0, -2.54, 0),
            _line(2.54, 0, 3.81, 0),
            _label(0, -2, "${REF}"),
            _label(0, 2.5, "${VALUE}"),
        ],
        _two_pin(3.81),
    )


def _capacitor() -> Symbol:
    return _symbol(
        5.08,
        3.048,
        [
            _line(-0.508, -1.27, -0.508, 1.27),
            _line(0.508, -1.27, 0.508, 1.27),
            _line(-2.54, 0, -0.508, 0),
            _line(0.508, 0, 2.54, 0),
            _label(0, -2.5, "${REF}"),
            _label(0, 2.5, "${VALUE}"),
        ],
        _two_pin(2.54),
    )


def _capacitor_polarized() -> Symbol:
    return _symbol(
        5.08,
        3.048,
        [
            _line(-0.508, -1.27, -0.508, 1.27),
            Polyline([(0.508, -1.27), (0.762, -0.635), (0.762, 0.635), (0.508, 1.27)], style=_OUTLINE),
            _line(-2.54, 0, -0.508, 0),
            _line(0.762, 0, 2.54, 0),
            # Plus sign
            _line(-1.778, -0.508, -1.778, -1.27),
            _line(-2.159, -0.889, -1.397, -0.889),
            _label(0, -2.5, "${REF}"),
            _label(0, 2.5, "${VALUE}"),
        ],
        _two_pin(2.54, ("+", "-")),
    )


def _inductor() -> Symbol:
    humps = (
        "M -3.81 0 L -3.048 0 Q -3.048 -1.5 -2.286 -1.5 Q -1.524 -1.5 -1.524 0 "
        "Q -1.524 -1.5 -0.762 -1.5 Q 0 -1.5 0 0 Q 0 -1.5 0.762 -1.5 Q 1.524 -1.5 1.524 0 "
        "Q 1.524 -1.5 2.286 -1.5 Q 3.048 -1.5 3.048 0 L 3.81 0"
    )
    return _symbol(
        7.62,
        2.54,
        [Path(humps, style=_OUTLINE), _label(0, -2.5, "${REF}"), _label(0, 2, "${VALUE}")],
        _two_pin(3.81),
    )


# Discrete semiconductors


def _diode_body() -> list:
    return [
        Polygon([(-1.27, -1.27), (-1.27, 1.27), (1.27, 0)], style=_OUTLINE),
        _line(1.27, -1.27, 1.27, 1.27),
        _line(-2.54, 0, -1.27, 0),
        _line(1.27, 0, 2.54, 0),
    ]


def _diode() -> Symbol:
    return _symbol(
        5.08,
        2.54,
        _diode_body() + [_label(0, -2.5, "${REF}"), _label(0, 2.5, "${VALUE}")],
        _two_pin(2.54, ("A", "K")),
    )


def _led() -> Symbol:
    arrows = [
        _line(0, -1.778, 1.016, -2.794),
        Polygon([(1.016, -2.794), (0.508, -2.286), (0.762, -2.54)], style=_ARROW),
        _line(0.762, -1.524, 1.778, -2.54),
        Polygon([(1.778, -2.54), (1.27, -2.032), (1.524, -2.286)], style=_ARROW),
    ]
    return _symbol(
        5.08,
        3.81,
        _diode_body() + arrows + [_label(0, -3.5, "${REF}"), _label(0, 2.5, "${VALUE}")],
        _two_pin(2.54, ("A", "K")),
    )


def _bjt_pins() -> List[Pin]:
    return [
        _pin("1", "B", -2.54, 0, L, kind=PinKind.INPUT),
        _pin("2", "C", 2.54, -2.54, R),
        _pin("3", "E", 2.54, 2.54, R),
    ]


def _bjt(emitter_arrow: List[Tuple[float, float]]) -> Symbol:
    return _symbol(
        5.08,
        5.08,
        [
            _line(0, -1.778, 0, 1.778, _HEAVY),
            _line(0, 0.762, 1.778, 2.54),
            Polygon(emitter_arrow, style=_ARROW),
            _line(0, -0.762, 1.778, -2.54),
            _line(-2.54, 0, 0, 0),
            _line(1.778, 2.54, 2.54, 2.54),
            _line(1.778, -2.54, 2.54, -2.54),
            Circle(0.889, 0, 2.794, style=_OUTLINE),
            _label(3.5, 0, "${REF}", anchor="start"),
        ],
        _bjt_pins(),
    )


def _nmos() -> Symbol:
    return _symbol(
        5.08,
        5.08,
        [
            _line(-0.508, -1.778, -0.508, 1.778),
            # Channel segments
            _line(0.508, -1.778, 0.508, -0.762, _HEAVY),
            _line(0.508, -0.254, 0.508, 0.762, _HEAVY),
            _line(0.508, 1.27, 0.508, 1.778, _HEAVY),
            # Drain
            _line(0.508, -1.27, 2.54, -1.27),
            _line(2.54, -2.54, 2.54, -1.27),
            # Source
            _line(0.508, 1.524, 2.54, 1.524),
            _line(2.54, 2.54, 2.54, 1.524),
            _line(0.508, 0.254, 1.524, 0.254),
            Polygon([(1.524, 0.254), (1.016, 0), (1.016, 0.508)], style=_ARROW),
            _line(1.524, 0.254, 1.524, 1.524),
            _line(-2.54, 0, -0.508, 0),
            _label(3.5, 0, "${REF}", anchor="start"),
        ],
        [
            _pin("1", "G", -2.54, 0, L, kind=PinKind.INPUT),
            _pin("2", "D", 2.54, -2.54, R),
            _pin("3", "S", 2.54, 2.54, R),
        ],
    )


# Integrated circuits


def _opamp() -> Symbol:
    return _symbol(
        7.62,
        5.08,
        [
            Polygon([(-2.54, -2.54), (-2.54, 2.54), (2.54, 0)], style=_OUTLINE),
            _line(-1.778, 1.27, -1.016, 1.27),
            _line(-1.397, 0.889, -1.397, 1.651),
            _line(-1.778, -1.27, -1.016, -1.27),
            _line(-3.81, 1.27, -2.54, 1.27),
            _line(-3.81, -1.27, -2.54, -1.27),
            _line(2.54, 0, 3.81, 0),
            _label(0, -3.5, "${REF}"),
        ],
        [
            _pin("2", "+", -3.81, 1.27, L, kind=PinKind.INPUT),
            _pin("3", "-", -3.81, -1.27, L, kind=PinKind.INPUT),
            _pin("1", "OUT", 3.81, 0, R, kind=PinKind.OUTPUT),
        ],
    )


def _dip8() -> Symbol:
    body = Style(stroke=BLACK, stroke_width=0.254, fill=BODY_FILL)
    left = [_pin(str(i + 1), str(i + 1), -5.08, -3.81 + 2.54 * i, R, 2.54) for i in range(4)]
    right = [_pin(str(i + 5), str(i + 5), 5.08, 3.81 - 2.54 * i, L, 2.54) for i in range(4)]
    return _symbol(
        10.16,
        12.7,
        [
            Rect(-2.54, -5.08, 5.08, 10.16, style=body),
            Path("M -0.762 -5.08 A 0.762 0.762 0 0 1 0.762 -5.08", style=body),
            Circle(-1.778, -4.064, 0.381, style=Style(stroke="none", stroke_width=0, fill=BLACK)),
            _label(0, 0, "${REF}"),
        ],
        left + right,
    )


def _conn_01x02() -> Symbol:
    indicator = Style(stroke=BLACK, stroke_width=0.254, fill=BODY_FILL)
    return _symbol(
        5.08,
        5.08,
        [
            Rect(-1.27, -2.54, 2.54, 5.08, style=_OUTLINE),
            Rect(-1.27, -2.032, 1.27, 1.016, style=indicator),
            Rect(-1.27, 1.016, 1.27, 1.016, style=indicator),
            _label(0, -4, "${REF}"),
        ],
        [_pin("1", "1", -3.81, -1.524, R, 2.54), _pin("2", "2", -3.81, 1.524, R, 2.54)],
    )


# Power symbols


def _ground() -> Symbol:
    return _symbol(
        2.54,
        2.54,
        [
            _line(0, 0, 0, 1.27),
            _line(-1.27, 1.27, 1.27, 1.27),
            _line(-0.762, 1.778, 0.762, 1.778),
            _line(-0.254, 2.286, 0.254, 2.286),
        ],
        [_pin("1", "GND", 0, 0, U, kind=PinKind.POWER_IN, show_name=False)],
        origin=(1.27, 0),
    )


def _vcc() -> Symbol:
    return _symbol(
        2.54,
        2.54,
        [_line(0, 0, 0, -1.27), Circle(0, -1.778, 0.508, style=_OUTLINE), _label(0, -3, "VCC")],
        [_pin("1", "VCC", 0, 0, D, kind=PinKind.POWER_IN, show_name=False)],
        origin=(1.27, 2.54),
    )


def _supply_bar(net: str) -> Symbol:
    return _symbol(
        2.54,
        2.54,
        [_line(0, 0, 0, -1.27), _line(-1.016, -1.27, 1.016, -1.27), _label(0, -2.5, net)],
        [_pin("1", net, 0, 0, D, kind=PinKind.POWER_IN, show_name=False)],
        origin=(1.27, 2.54),
    )


PASSIVE = "Passive Components"
DISCRETE = "Discrete Semiconductors"
OPTO = "Optoelectronics"
ICS = "Integrated Circuits"
CONNECTORS = "Connectors"
POWER = "Power Symbols"

BUILTIN_COMPONENTS: Tuple[ComponentDefinition, ...] = (
    _define("Resistor", "Standard resistor symbol (US style)", PASSIVE,
            ["R", "res", "ohm"], "R?", "10k", _resistor()),
    _define("Resistor_IEC", "Standard resistor symbol (IEC/European style)", PASSIVE,
            ["R", "res", "ohm", "european"], "R?", "10k", _resistor_iec()),
    _define("Capacitor", "Non-polarized capacitor", PASSIVE,
            ["C", "cap", "farad"], "C?", "100nF", _capacitor()),
    _define("Capacitor_Polarized", "Polarized capacitor (electrolytic)", PASSIVE,
            ["C", "cap", "farad", "electrolytic", "polarized"], "C?", "10uF", _capacitor_polarized()),
    _define("Inductor", "Standard inductor symbol", PASSIVE,
            ["L", "ind", "coil", "henry"], "L?", "10uH", _inductor()),
    _define("Diode", "Standard diode symbol", DISCRETE,
            ["D", "diode", "rectifier"], "D?", "1N4148", _diode()),
    _define("LED", "Light Emitting Diode", OPTO,
            ["D", "LED", "light"], "D?", "LED", _led()),
    _define("NPN", "NPN Bipolar Transistor", DISCRETE,
            ["Q", "transistor", "BJT", "NPN"], "Q?", "2N2222",
            _bjt([(1.778, 2.54), (1.016, 1.778), (1.27, 2.286)])),
    _define("PNP", "PNP Bipolar Transistor", DISCRETE,
            ["Q", "transistor", "BJT", "PNP"], "Q?", "2N2907",
            _bjt([(0, 0.762), (0.762, 1.524), (0.508, 1.016)])),
    _define("NMOS", "N-Channel MOSFET", DISCRETE,
            ["Q", "MOSFET", "NMOS", "FET"], "Q?", "2N7000", _nmos()),
    _define("OpAmp", "Operational Amplifier (single)", ICS,
            ["U", "op-amp", "opamp", "amplifier"], "U?", "LM358", _opamp()),
    _define("IC_DIP8", "8-pin DIP IC (generic)", ICS,
            ["U", "IC", "DIP8", "chip"], "U?", "", _dip8()),
    _define("Conn_01x02", "2-pin connector", CONNECTORS,
            ["J", "connector", "header", "2pin"], "J?", "", _conn_01x02()),
    _define("GND", "Ground symbol", POWER,
            ["GND", "ground", "earth", "power"], "#GND", "GND", _ground()),
    _define("VCC", "VCC power symbol", POWER,
            ["VCC", "power", "+V", "supply"], "#VCC", "VCC", _vcc()),
    _define("VDD", "VDD power symbol", POWER,
            ["VDD", "power", "+V", "supply"], "#VDD", "VDD", _supply_bar("VDD")),
    _define("+3V3", "3.3V power symbol", POWER,
            ["3V3", "3.3V", "power", "supply"], "#+3V3", "+3V3", _supply_bar("+3V3")),
    _define("+5V", "5V power symbol", POWER,
            ["5V", "power", "supply"], "#+5V", "+5V", _supply_bar("+5V")),
)


def builtin_names() -> List[str]:
    return [definition.name for definition in BUILTIN_COMPONENTS]
