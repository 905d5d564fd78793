"""Markup parser: email markup → document tree.

Parsing happens in two passes.  The first builds a light element tree
from the lexer's tokens, checking that every tag is closed in order.  The
second maps elements to ``DocumentNode`` objects through the same
component registry the renderer uses:

* an element's ``data-component-type`` wins when it names a registered
  type, and the registry's wrapper elements below it are unwrapped;
* otherwise the tag decides (``table`` → Section, ``tr`` → Row,
  ``td``/``th`` → Column, ``a`` → Link, ``img`` → Image, ``h1``-``h6`` →
  Heading, ``p``/``span`` → Text, ``hr`` → Divider, ``pre`` → CodeBlock)
  and unrecognized tags become the registry's fallback container;
* table sections (``tbody``, ``thead``, ``tfoot``) are transparent.

Leaf types never receive children: markup nested inside a leaf element is
flattened to its text, with ``<br>`` kept as a newline.  Text inside an
element that declares ``data-component-type`` is kept exactly; text of
untyped third-party markup is trimmed.

Usage
-----
::

    from mailblocks.parser import parse

    tree = parse(markup)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

from mailblocks.errors import MarkupParseError
from mailblocks.nodes.nodes import ComponentType, DocumentNode
from mailblocks.parser.lexer import MarkupLexer, Token, TokenType
from mailblocks.registry.attributes import ID_ATTR, TYPE_ATTR, css_to_style, prop_name
from mailblocks.registry.components import DEFAULT_REGISTRY, ComponentRegistry, ComponentSpec

logger = logging.getLogger(__name__)

#: Elements that never have a closing tag.
VOID_TAGS: frozenset[str] = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)

#: Elements whose content never becomes part of the tree.
IGNORED_TAGS: frozenset[str] = frozenset({"head", "script", "style", "title", "meta", "link", "template"})

_NUMERIC_PROPS = ("width", "height")
_FRAGMENT_LIMIT = 60


@dataclass
class Element:
    """A markup element of the intermediate tree."""

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    children: list[Union[Element, str]] = field(default_factory=list)
    line: int = 0
    col: int = 0

    def elements(self) -> list[Element]:
        return [c for c in self.children if isinstance(c, Element)]

    def find(self, tag: str) -> Element | None:
        """Return the first descendant with ``tag`` in document order."""
        for child in self.elements():
            if child.tag == tag:
                return child
            found = child.find(tag)
            if found is not None:
                return found
        return None


def _error(message: str, token: Token) -> MarkupParseError:
    fragment = token.text if len(token.text) <= _FRAGMENT_LIMIT else token.text[:_FRAGMENT_LIMIT] + "..."
    return MarkupParseError(
        message,
        path=f"{token.line}:{token.col}",
        fragment=fragment,
        line=token.line,
        col=token.col,
    )


def build_element_tree(tokens: list[Token]) -> Element:
    """Assemble tokens into an ``Element`` tree under a ``#document`` node.

    Raises
    ------
    MarkupParseError
        On a closing tag that does not match the innermost open element,
        or on elements left open at the end of input.
    """
    document = Element("#document", line=1, col=1)
    stack: list[tuple[Element, Token | None]] = [(document, None)]
    for token in tokens:
        parent = stack[-1][0]
        if token.type is TokenType.TEXT:
            parent.children.append(token.text)
        elif token.type is TokenType.START_TAG:
            element = Element(token.tag, dict(token.attrs), line=token.line, col=token.col)
            parent.children.append(element)
            if not token.self_closing and token.tag not in VOID_TAGS:
                stack.append((element, token))
        else:
            if token.tag in VOID_TAGS:
                continue
            if len(stack) == 1:
                raise _error(f"Unexpected closing tag </{token.tag}>", token)
            current, opened = stack[-1]
            if current.tag != token.tag:
                assert opened is not None
                raise _error(
                    f"Unbalanced markup: </{token.tag}> closes <{current.tag}> opened at "
                    f"{opened.line}:{opened.col}",
                    token,
                )
            stack.pop()
    if len(stack) > 1:
        _, opened = stack[-1]
        assert opened is not None
        raise _error(f"Unclosed tag <{opened.tag}>", opened)
    return document


class MarkupParser:
    """Parses email markup into a document tree.

    Parameters
    ----------
    registry:
        Component registry supplying the tag and type mappings.
    """

    def __init__(self, registry: ComponentRegistry = DEFAULT_REGISTRY) -> None:
        self._registry = registry
        self._used: set[str] = set()
        self._explicit: set[str] = set()
        self._counters: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, markup: str) -> DocumentNode:
        """Parse ``markup`` into a Root-topped tree.

        Raises
        ------
        MarkupParseError
            If tags are unbalanced or the document has no ``<body>``.
        """
        document = build_element_tree(MarkupLexer().tokenize(markup))
        body = document.find("body")
        if body is None:
            snippet = markup.strip()[:_FRAGMENT_LIMIT]
            raise MarkupParseError("Missing <body> element", path="1:1", fragment=snippet, line=1, col=1)

        self._used = set()
        self._explicit = set()
        self._counters = {}
        self._collect_ids(document)

        root_id = self._claim(body.attrs.get(ID_ATTR) or "root", "root")
        children: list[DocumentNode] = []
        head = document.find("head")
        if head is not None:
            children.extend(self._head_directives(head))
        for child in body.children:
            children.extend(self._convert(child))
        root = DocumentNode(
            root_id,
            ComponentType.ROOT,
            self._properties(body, self._registry[ComponentType.ROOT.value]),
            children=tuple(children),
        )
        logger.debug("Parsed markup into %d top-level node(s)", len(children))
        return root

    # ------------------------------------------------------------------
    # Ids
    # ------------------------------------------------------------------

    def _collect_ids(self, document: Element) -> None:
        """Record every explicit id so generated ids never shadow one."""
        pending = [document]
        while pending:
            current = pending.pop()
            node_id = current.attrs.get(ID_ATTR)
            if node_id:
                self._explicit.add(node_id)
            pending.extend(current.elements())

    def _claim(self, explicit: str | None, base: str) -> str:
        """Return a unique id.

        ``explicit`` is used when it is still free; a repeated explicit id
        becomes ``<id>-2``, ``<id>-3``...; elements without one get
        ``<base>-1``, ``<base>-2``...
        """
        if explicit and explicit not in self._used:
            self._used.add(explicit)
            return explicit
        if explicit:
            base, n = explicit, 1
        else:
            n = self._counters.get(base, 0)
        while True:
            n += 1
            candidate = f"{base}-{n}"
            if candidate not in self._used and candidate not in self._explicit:
                break
        if not explicit:
            self._counters[base] = n
        self._used.add(candidate)
        return candidate

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def _head_directives(self, head: Element) -> list[DocumentNode]:
        nodes = []
        for element in head.elements():
            if element.tag == "meta" and element.attrs.get("name", "").lower() == "preview":
                node_id = self._claim(element.attrs.get(ID_ATTR) or "preview-text", "preview")
                nodes.append(DocumentNode(
                    node_id, ComponentType.PREVIEW, content=element.attrs.get("content", "")
                ))
        return nodes

    def _resolve_type(self, element: Element) -> tuple[str, bool]:
        """Return ``(component_type, explicit)`` for ``element``."""
        declared = element.attrs.get(TYPE_ATTR)
        if declared and declared in self._registry and declared != ComponentType.ROOT.value:
            return declared, True
        if declared:
            logger.debug("Ignoring unknown component type %r on <%s>", declared, element.tag)
        return self._registry.type_for_tag(element.tag), False

    def _properties(self, element: Element, spec: ComponentSpec) -> dict[str, Any]:
        props: dict[str, Any] = {}
        if spec.tag_property is not None and element.tag in spec.allowed_tags:
            props[spec.tag_property] = element.tag
        fixed = set(spec.fixed_attrs)
        style: dict[str, str] | None = None
        for name, value in element.attrs.items():
            if name in (ID_ATTR, TYPE_ATTR) or (name, value) in fixed:
                continue
            if name == "style":
                style = css_to_style(value)
                continue
            key = prop_name(name)
            props[key] = int(value) if key in _NUMERIC_PROPS and value.isdigit() else value
        if style:
            props["style"] = style
        return props

    def _unwrap(self, element: Element, spec: ComponentSpec) -> list[Union[Element, str]]:
        """Return the children below ``spec.wrapper`` inside ``element``."""
        children = element.children
        for wrapper in spec.wrapper:
            inner = [c for c in children if isinstance(c, Element) or c.strip()]
            if len(inner) == 1 and isinstance(inner[0], Element) and inner[0].tag == wrapper:
                children = inner[0].children
            else:
                break
        return children

    def _convert(self, item: Union[Element, str]) -> list[DocumentNode]:
        if isinstance(item, str):
            text = item.strip()
            if not text:
                return []
            node_id = self._claim(None, "text")
            return [DocumentNode(node_id, ComponentType.TEXT, content=text)]

        element = item
        if element.tag in IGNORED_TAGS or element.tag == "br":
            return []
        if self._registry.is_transparent(element.tag):
            return [node for child in element.children for node in self._convert(child)]

        component_type, explicit = self._resolve_type(element)
        spec = self._registry[component_type]
        node_id = self._claim(element.attrs.get(ID_ATTR), element.tag)
        properties = self._properties(element, spec)
        children = self._unwrap(element, spec) if explicit else element.children

        if spec.container:
            nodes = tuple(node for child in children for node in self._convert(child))
            return [DocumentNode(node_id, component_type, properties, children=nodes)]

        if spec.void:
            return [DocumentNode(node_id, component_type, properties)]
        text = flatten_text(children)
        content = text if spec.preserve_whitespace or explicit else text.strip()
        return [DocumentNode(node_id, component_type, properties, content=content)]


def flatten_text(children: list[Union[Element, str]]) -> str:
    """Return the text of ``children`` with tags dropped and ``<br>`` as newline."""
    parts: list[str] = []
    for child in children:
        if isinstance(child, str):
            parts.append(child)
        elif child.tag == "br":
            parts.append("\n")
        elif child.tag not in IGNORED_TAGS:
            parts.append(flatten_text(child.children))
    return "".join(parts)


def parse(markup: str, registry: ComponentRegistry = DEFAULT_REGISTRY) -> DocumentNode:
    """Parse ``markup`` into a document tree; see :meth:`MarkupParser.parse`."""
    return MarkupParser(registry).parse(markup)
