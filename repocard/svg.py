from __future__ import annotations
from typing import Any, Optional

from lxml import etree

SVG_NS = "http://www.w3.org/2000/svg"


def fmt(value: Any) -> str:
    """Attribute text for numbers: integral floats drop the fraction, others keep two decimals."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return f"{value:.2f}".rstrip("0").rstrip(".")
    return str(value)


def _attr_name(key: str) -> str:
    # class_ -> class, data_testid -> data-testid, stroke_width -> stroke-width
    return key.rstrip("_").replace("_", "-")


def _apply(node: etree._Element, attrs: dict) -> etree._Element:
    for key, value in attrs.items():
        if value is None:
            continue
        node.set(_attr_name(key), fmt(value))
    return node


def el(tag: str, text: Optional[str] = None, **attrs: Any) -> etree._Element:
    node = etree.Element(f"{{{SVG_NS}}}{tag}", nsmap={None: SVG_NS})
    if text is not None:
        node.text = text
    return _apply(node, attrs)


def sub(parent: etree._Element, tag: str, text: Optional[str] = None, **attrs: Any) -> etree._Element:
    node = etree.SubElement(parent, f"{{{SVG_NS}}}{tag}")
    if text is not None:
        node.text = text
    return _apply(node, attrs)


def to_string(node: Optional[etree._Element]) -> str:
    if node is None:
        return ""
    return etree.tostring(node, encoding="unicode")
