"""Markup renderer: document tree → email markup.

Each node is emitted according to its ``ComponentSpec`` in the injected
component registry.  Every element carries ``data-component-id`` and
``data-component-type`` attributes, which let an editor map a click back to
its node and let the parser restore the tree exactly.

Usage
-----
::

    from mailblocks.renderer import render

    result = render(tree, settings, plain_text=True)
    result.markup      # complete XHTML document
    result.plain_text  # text/plain alternative
"""
from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Any

from mailblocks.nodes.nodes import ComponentType, DocumentNode
from mailblocks.registry.attributes import ID_ATTR, TYPE_ATTR, attr_name, style_to_css
from mailblocks.registry.components import DEFAULT_REGISTRY, ComponentRegistry
from mailblocks.renderer.plaintext import to_plain_text
from mailblocks.renderer.postprocess import postprocess
from mailblocks.settings import GlobalEmailSettings
from mailblocks.tree.queries import count_nodes, iter_nodes
from mailblocks.validator.validator import ensure_valid

logger = logging.getLogger(__name__)

DOCTYPE = (
    '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN" '
    '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">'
)
CHARSET_META = '<meta http-equiv="Content-Type" content="text/html; charset=UTF-8"/>'

#: Style applied under a Preview element's own style when it sits in the body.
HIDDEN_PREVIEW_STYLE: dict[str, str] = {
    "display": "none",
    "maxHeight": "0",
    "overflow": "hidden",
}

_INDENT = "  "  # 2 spaces per level


@dataclass(frozen=True)
class RenderResult:
    """Rendered email.

    Parameters
    ----------
    markup:
        The complete markup document.
    plain_text:
        Plain-text alternative, or ``None`` when not requested.
    """

    markup: str
    plain_text: str | None = None


def _attr_value(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


class Renderer:
    """Renders document trees to markup.

    Parameters
    ----------
    registry:
        Component registry supplying each type's emission rule.
    settings:
        Global settings; their colors and font form the body defaults.
    pretty:
        When ``True`` elements are placed on separate indented lines.
    """

    def __init__(
        self,
        registry: ComponentRegistry = DEFAULT_REGISTRY,
        settings: GlobalEmailSettings | None = None,
        pretty: bool = False,
    ) -> None:
        self._registry = registry
        self._settings = settings or GlobalEmailSettings()
        self._pretty = pretty

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, tree: DocumentNode, plain_text: bool = False) -> RenderResult:
        """Render ``tree`` as a complete email document.

        A tree whose top node is not a Root is wrapped in a synthetic Root.

        Raises
        ------
        StructuralError
            If the tree has an unknown component type, children under a
            leaf, or duplicate ids.
        """
        root = self._as_root(tree)
        ensure_valid(root, self._registry)

        pieces: list[tuple[int, str]] = [(0, DOCTYPE), (0, '<html xmlns="http://www.w3.org/1999/xhtml" lang="en">')]
        pieces.append((0, "<head>"))
        pieces.append((1, CHARSET_META))
        body_children: list[DocumentNode] = []
        for child in root.child_list():
            if child.component_type == ComponentType.PREVIEW.value:
                pieces.append((1, self._preview_meta(child)))
            else:
                body_children.append(child)
        pieces.append((0, "</head>"))

        body_style = {
            "backgroundColor": self._settings.background_color,
            "fontFamily": self._settings.font_family,
            "margin": "0",
            "padding": "0",
            **root.style,
        }
        body_props = {**root.properties, "style": body_style}
        pieces.append((0, self._open_tag("body", root, body_props, ())))
        for child in body_children:
            self._emit(child, 1, pieces)
        pieces.append((0, "</body>"))
        pieces.append((0, "</html>"))

        markup = postprocess(self._join(pieces))
        logger.debug("Rendered %d node(s) into %d characters", count_nodes(root), len(markup))
        text = to_plain_text(root) if plain_text else None
        return RenderResult(markup=markup, plain_text=text)

    def render_fragment(self, node: DocumentNode) -> str:
        """Render ``node`` and its subtree without the document wrapper."""
        ensure_valid(node, self._registry)
        pieces: list[tuple[int, str]] = []
        self._emit(node, 0, pieces)
        return self._join(pieces)

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def _as_root(self, tree: DocumentNode) -> DocumentNode:
        if tree.component_type == ComponentType.ROOT.value:
            return tree
        ids = {node.id for node in iter_nodes(tree)}
        root_id = "root"
        n = 1
        while root_id in ids:
            root_id = f"root-{n}"
            n += 1
        logger.debug("Wrapping %s %r in a synthetic Root", tree.component_type, tree.id)
        return DocumentNode(root_id, ComponentType.ROOT, children=(tree,))

    def _join(self, pieces: list[tuple[int, str]]) -> str:
        if not self._pretty:
            return "".join(text for _, text in pieces)
        return "\n".join(_INDENT * depth + text for depth, text in pieces) + "\n"

    def _attrs(
        self, node: DocumentNode, properties: dict[str, Any], fixed: tuple[tuple[str, str], ...]
    ) -> str:
        spec = self._registry[node.component_type]
        attrs: dict[str, str] = {ID_ATTR: node.id, TYPE_ATTR: node.component_type}
        attrs.update(fixed)
        style: dict[str, Any] | None = None
        for key, value in properties.items():
            if key == "style":
                style = value if isinstance(value, dict) else None
                continue
            if key == spec.tag_property:
                continue
            text = _attr_value(value)
            if text is None:
                logger.debug("Skipping non-scalar property %r on %r", key, node.id)
                continue
            attrs[attr_name(key)] = text
        if style:
            css = style_to_css(style)
            if css:
                attrs["style"] = css
        return "".join(f' {name}="{html.escape(value, quote=True)}"' for name, value in attrs.items())

    def _open_tag(
        self,
        tag: str,
        node: DocumentNode,
        properties: dict[str, Any],
        fixed: tuple[tuple[str, str], ...],
        void: bool = False,
    ) -> str:
        end = "/>" if void else ">"
        return f"<{tag}{self._attrs(node, properties, fixed)}{end}"

    def _content(self, node: DocumentNode) -> str:
        content = node.content or ""
        if node.inline_markup:
            return content
        return html.escape(content, quote=False)

    def _preview_meta(self, node: DocumentNode) -> str:
        content = html.escape(node.content or "", quote=True)
        return f'<meta name="preview" content="{content}" {ID_ATTR}="{html.escape(node.id, quote=True)}"/>'

    def _emit(self, node: DocumentNode, depth: int, pieces: list[tuple[int, str]]) -> None:
        spec = self._registry[node.component_type]
        tag = spec.tag_for(node.properties)
        properties = node.properties
        if node.component_type == ComponentType.PREVIEW.value:
            properties = {**properties, "style": {**HIDDEN_PREVIEW_STYLE, **node.style}}

        if spec.void:
            pieces.append((depth, self._open_tag(tag, node, properties, spec.fixed_attrs, void=True)))
            return

        opening = self._open_tag(tag, node, properties, spec.fixed_attrs)
        wrapper_open = "".join(f"<{w}>" for w in spec.wrapper)
        wrapper_close = "".join(f"</{w}>" for w in reversed(spec.wrapper))

        if not spec.container:
            # Leaves stay on one line so whitespace in content is untouched.
            pieces.append((depth, f"{opening}{wrapper_open}{self._content(node)}{wrapper_close}</{tag}>"))
            return

        pieces.append((depth, opening))
        for i, wrapper in enumerate(spec.wrapper):
            pieces.append((depth + 1 + i, f"<{wrapper}>"))
        inner = depth + 1 + len(spec.wrapper)
        for child in node.child_list():
            self._emit(child, inner, pieces)
        for i, wrapper in reversed(list(enumerate(spec.wrapper))):
            pieces.append((depth + 1 + i, f"</{wrapper}>"))
        pieces.append((depth, f"</{tag}>"))


def render(
    tree: DocumentNode,
    settings: GlobalEmailSettings | None = None,
    pretty: bool = False,
    plain_text: bool = False,
    registry: ComponentRegistry = DEFAULT_REGISTRY,
) -> RenderResult:
    """Render ``tree``; see :meth:`Renderer.render`."""
    return Renderer(registry=registry, settings=settings, pretty=pretty).render(tree, plain_text)
