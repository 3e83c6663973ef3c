"""
XML helpers for GML elements.

ElementTree encodes a qualified name as ``{namespace}local``. These helpers
split that form and read the attributes the decoder cares about.
"""

from typing import Dict, Optional, Tuple
import xml.etree.ElementTree as ET

from ..core.constants import GML_ATTR_SRSNAME


def split_tag(tag: str) -> Tuple[Optional[str], str]:
    """
    Split an ElementTree tag into (namespace, local name).

    Examples:
        >>> split_tag("{http://www.opengis.net/gml/3.2}Point")
        ('http://www.opengis.net/gml/3.2', 'Point')

        >>> split_tag("gml:Point")
        (None, 'Point')
    """
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return None, tag.rsplit(":", 1)[-1]


def local_name(tag: str) -> str:
    return split_tag(tag)[1]


def first_text(elem: Optional[ET.Element]) -> Optional[str]:
    """
    Extract and strip the full text content of an element.

    Examples:
        >>> first_text(ET.fromstring('<gml:Null xmlns:gml="http://www.opengis.net/gml"> withheld </gml:Null>'))
        'withheld'

        >>> first_text(None)
        None
    """
    if elem is None:
        return None
    return "".join(elem.itertext()).strip()


def find_srs_name(attrs: Dict[str, str]) -> Optional[str]:
    """
    Find the srsName attribute, bare or namespace-qualified.

    Args:
        attrs: Attribute mapping as produced by ElementTree

    Returns:
        Trimmed srsName value, or None if absent or blank
    """
    for key, value in attrs.items():
        if local_name(key) == GML_ATTR_SRSNAME:
            value = value.strip()
            return value or None
    return None
