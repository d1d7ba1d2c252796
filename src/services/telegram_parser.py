"""
Envelope classification and typed fragment decoding.

Decoding is two-phase: classify() parses the document and names the
fragment the envelope carries, then decode_demand() / decode_price() turn
that fragment into a typed telegram. All functions here are pure.
"""
from typing import NamedTuple, Optional, Union
from xml.etree import ElementTree
from xml.etree.ElementTree import Element

from api.models.telegram import (
    Envelope,
    FragmentKind,
    InstantaneousDemand,
    InstantaneousDemandFragment,
    PriceCluster,
    PriceClusterFragment,
)
from utils.decoders import local_name
from utils.errors import DecodeError, MalformedInputError


class Classification(NamedTuple):
    """Result of the first decoding phase"""
    kind: Optional[FragmentKind]
    name: str
    envelope: Envelope
    fragment: Optional[Element]


def parse_document(body: Union[bytes, str]) -> Element:
    """
    Parse a telegram body into its root element

    Raises:
        MalformedInputError: if the body is empty or not well-formed XML
    """
    if isinstance(body, str):
        body = body.encode('utf-8')
    # The gateway may send whitespace ahead of the XML declaration
    body = body.lstrip()
    if not body:
        raise MalformedInputError("Empty telegram body")
    try:
        return ElementTree.fromstring(body)
    except ElementTree.ParseError as e:
        raise MalformedInputError(f"Malformed telegram XML: {e}")


def classify(body: Union[bytes, str]) -> Classification:
    """
    Identify the fragment kind nested in a telegram envelope

    The first child element of the root is the fragment. An element name
    outside FragmentKind is legal and comes back with kind None.

    Raises:
        MalformedInputError: if the document cannot be parsed
        DecodeError: if an envelope attribute is invalid
    """
    root = parse_document(body)
    envelope = Envelope.from_element(root)

    fragment = next(iter(root), None)
    if fragment is None:
        return Classification(kind=None, name='', envelope=envelope, fragment=None)

    name = local_name(fragment.tag)
    return Classification(
        kind=FragmentKind.from_name(name),
        name=name,
        envelope=envelope,
        fragment=fragment,
    )


def _require(classification: Classification, kind: FragmentKind) -> Element:
    if classification.kind is not kind or classification.fragment is None:
        raise DecodeError(f"Expected {kind.value} fragment, got {classification.name!r}")
    return classification.fragment


def decode_demand(classification: Classification) -> InstantaneousDemand:
    """Decode an InstantaneousDemand fragment"""
    element = _require(classification, FragmentKind.INSTANTANEOUS_DEMAND)
    return InstantaneousDemand(
        envelope=classification.envelope,
        fragment=InstantaneousDemandFragment.from_element(element),
    )


def decode_price(classification: Classification) -> PriceCluster:
    """Decode a PriceCluster fragment"""
    element = _require(classification, FragmentKind.PRICE_CLUSTER)
    return PriceCluster(
        envelope=classification.envelope,
        fragment=PriceClusterFragment.from_element(element),
    )
