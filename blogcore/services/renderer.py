"""
Content block renderer.

Maps typed content blocks to a tree of ``RenderNode`` objects, one node per
block and in the same order. ``render_html`` turns that tree into escaped
markup with BeautifulSoup. Rendering is pure and never raises: blocks with
missing optional fields produce empty output for those fields, and anything
outside the known block set becomes a visible "unsupported" paragraph.
"""

from collections.abc import Iterable
from functools import singledispatch
from typing import Any

from bs4 import BeautifulSoup, Tag
from pydantic import BaseModel, Field

from blogcore.schemas.content import (
    HeaderBlock,
    ImageBlock,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
    UnknownBlock,
    block_tag_name,
    parse_content,
)

DEFAULT_IMAGE_ALT = "Blog image"
UNSUPPORTED_CLASS = "unsupported-block"

LIST_MARKERS = {"ordered": ("ol", "decimal"), "unordered": ("ul", "disc")}


class RenderNode(BaseModel):
    """Presentation-neutral element: a tag name, its text, attributes and children."""

    tag: str
    text: str = ""
    attrs: dict[str, str] = Field(default_factory=dict)
    children: list["RenderNode"] = Field(default_factory=list)


def unsupported_node(tag_name: str) -> RenderNode:
    return RenderNode(
        tag="p",
        text=f"[Unsupported block type: {tag_name}]",
        attrs={"class": UNSUPPORTED_CLASS},
    )


@singledispatch
def render_block(block: Any) -> RenderNode:
    """
    Render a single block.

    Dispatches on the block's class; anything without a registered renderer
    falls back to the unsupported paragraph naming the block's tag.
    """
    return unsupported_node(block_tag_name(block))


@render_block.register
def _(block: HeaderBlock) -> RenderNode:
    return RenderNode(tag=f"h{block.data.level}", text=block.data.text)


@render_block.register
def _(block: ParagraphBlock) -> RenderNode:
    return RenderNode(tag="p", text=block.data.text)


@render_block.register
def _(block: ListBlock) -> RenderNode:
    tag, marker = LIST_MARKERS[block.data.style]
    return RenderNode(
        tag=tag,
        attrs={"style": f"list-style-type: {marker}"},
        children=[RenderNode(tag="li", text=item) for item in block.data.items],
    )


@render_block.register
def _(block: ImageBlock) -> RenderNode:
    caption = block.data.caption
    children = [
        RenderNode(tag="img", attrs={"src": block.data.url, "alt": caption or DEFAULT_IMAGE_ALT}),
    ]
    if caption:
        children.append(RenderNode(tag="figcaption", text=caption))
    return RenderNode(tag="figure", children=children)


@render_block.register
def _(block: QuoteBlock) -> RenderNode:
    children = [RenderNode(tag="p", text=block.data.text)]
    if block.data.caption:
        children.append(RenderNode(tag="footer", text=block.data.caption))
    return RenderNode(tag="blockquote", children=children)


@render_block.register
def _(block: UnknownBlock) -> RenderNode:
    return unsupported_node(block.type)


def render_blocks(blocks: Iterable[Any]) -> list[RenderNode]:
    """
    Render a document body.

    Args:
        blocks: Typed blocks, raw block dicts, or an editor document

    Returns:
        list[RenderNode]: One node per block, order preserved
    """
    if isinstance(blocks, dict) or blocks is None:
        blocks = parse_content(blocks)
    return [render_block(_typed(block)) for block in blocks]


def _typed(block: Any) -> Any:
    if isinstance(block, dict):
        return parse_content([block])[0]
    return block


def _to_tag(soup: BeautifulSoup, node: RenderNode) -> Tag:
    tag = soup.new_tag(node.tag, attrs=dict(node.attrs))
    if node.text:
        tag.string = node.text
    for child in node.children:
        tag.append(_to_tag(soup, child))
    return tag


def render_html(nodes: Iterable[RenderNode]) -> str:
    """
    Serialize render nodes to HTML.

    Text and attribute values are escaped by BeautifulSoup, so block content
    can never inject markup.

    Example:
        >>> render_html([RenderNode(tag="p", text="<b>hi</b>")])
        '<p>&lt;b&gt;hi&lt;/b&gt;</p>'
    """
    soup = BeautifulSoup("", "html.parser")
    for node in nodes:
        soup.append(_to_tag(soup, node))
    return str(soup)


class RenderedBlog(BaseModel):
    nodes: list[RenderNode]
    html: str


def render_document(blocks: Iterable[Any]) -> RenderedBlog:
    """Render a body to both the node tree and its HTML."""
    nodes = render_blocks(blocks)
    return RenderedBlog(nodes=nodes, html=render_html(nodes))
