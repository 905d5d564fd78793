"""Component type registry shared by the renderer and the parser.

The registry is a static, read-only table describing each component type:
whether it may hold children, whether an editor may select it, and how it
is emitted as markup (element tag, wrapper elements around its children,
fixed attributes).  The same table drives the reverse mapping from markup
tags back to component types, so that rendering and parsing stay
symmetric.

``DEFAULT_REGISTRY`` is the table used throughout the package; the
renderer and parser accept any ``ComponentRegistry`` as a constructor
argument.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from mailblocks.nodes.nodes import ComponentType

_TABLE_ATTRS: tuple[tuple[str, str], ...] = (
    ("role", "presentation"),
    ("width", "100%"),
    ("cellpadding", "0"),
    ("cellspacing", "0"),
    ("border", "0"),
)


@dataclass(frozen=True)
class ComponentSpec:
    """Emission and editing rules for a single component type.

    Parameters
    ----------
    name:
        The component type name, e.g. ``"Section"``.
    container:
        True if nodes of this type may hold children.
    editable:
        True if an editor should offer nodes of this type for selection.
    tag:
        Element emitted for the node itself.
    wrapper:
        Elements nested inside ``tag`` around the children (or content),
        outermost first.  ``("tbody", "tr", "td")`` for a table section.
    void:
        True for elements without a closing tag (``img``, ``hr``).
    fixed_attrs:
        Attributes always emitted on ``tag`` and ignored when parsing.
    parse_tags:
        Tags mapped to this type when markup carries no explicit
        ``data-component-type`` attribute.
    tag_property:
        Property whose value overrides ``tag`` (``"as"`` on headings).
    preserve_whitespace:
        True if content whitespace is significant (code blocks).
    """

    name: str
    container: bool = False
    editable: bool = True
    tag: str = "div"
    wrapper: tuple[str, ...] = ()
    void: bool = False
    fixed_attrs: tuple[tuple[str, str], ...] = ()
    parse_tags: tuple[str, ...] = ()
    tag_property: str | None = None
    preserve_whitespace: bool = False
    allowed_tags: tuple[str, ...] = field(default=())

    def tag_for(self, properties: Mapping[str, object]) -> str:
        """Return the element tag for a node with ``properties``."""
        if self.tag_property is not None:
            value = properties.get(self.tag_property)
            if isinstance(value, str) and value in self.allowed_tags:
                return value
        return self.tag


class ComponentRegistry(Mapping[str, ComponentSpec]):
    """Read-only mapping of component type name to ``ComponentSpec``.

    Parameters
    ----------
    specs:
        The component specs to register.  Names must be unique.
    fallback_type:
        Type assigned by the parser to unrecognized tags.
    transparent_tags:
        Tags the parser descends through without creating a node.
    """

    def __init__(
        self,
        specs: Iterable[ComponentSpec],
        fallback_type: str = ComponentType.SECTION.value,
        transparent_tags: Iterable[str] = ("tbody", "thead", "tfoot"),
    ) -> None:
        table: dict[str, ComponentSpec] = {}
        tag_map: dict[str, str] = {}
        for spec in specs:
            if spec.name in table:
                raise ValueError(f"Component type {spec.name!r} registered twice")
            table[spec.name] = spec
            for tag in spec.parse_tags:
                tag_map.setdefault(tag, spec.name)
        if fallback_type not in table:
            raise ValueError(f"Fallback type {fallback_type!r} is not registered")
        self._table = MappingProxyType(table)
        self._tag_map = MappingProxyType(tag_map)
        self._fallback_type = fallback_type
        self._transparent = frozenset(transparent_tags)

    def __getitem__(self, name: str) -> ComponentSpec:
        return self._table[str(name)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"ComponentRegistry({', '.join(self._table)})"

    @property
    def fallback_type(self) -> str:
        """Return the type the parser assigns to unrecognized tags."""
        return self._fallback_type

    def is_container(self, name: str) -> bool:
        """Return True if ``name`` is a registered container type."""
        spec = self._table.get(str(name))
        return spec is not None and spec.container

    def is_editable(self, name: str) -> bool:
        """Return True if ``name`` is a registered editable type."""
        spec = self._table.get(str(name))
        return spec is not None and spec.editable

    def is_transparent(self, tag: str) -> bool:
        """Return True if the parser should descend through ``tag``."""
        return tag in self._transparent

    def type_for_tag(self, tag: str) -> str:
        """Return the component type for ``tag``, or the fallback type."""
        return self._tag_map.get(tag.lower(), self._fallback_type)


DEFAULT_REGISTRY = ComponentRegistry(
    [
        ComponentSpec(
            name=ComponentType.ROOT.value,
            container=True,
            editable=False,
            tag="body",
        ),
        ComponentSpec(
            name=ComponentType.SECTION.value,
            container=True,
            tag="table",
            wrapper=("tbody", "tr", "td"),
            fixed_attrs=_TABLE_ATTRS,
            parse_tags=("table", "div", "center"),
        ),
        ComponentSpec(
            name=ComponentType.ROW.value,
            container=True,
            editable=False,
            tag="table",
            wrapper=("tbody", "tr"),
            fixed_attrs=_TABLE_ATTRS,
            parse_tags=("tr",),
        ),
        ComponentSpec(
            name=ComponentType.COLUMN.value,
            container=True,
            editable=False,
            tag="td",
            parse_tags=("td", "th"),
        ),
        ComponentSpec(name=ComponentType.TEXT.value, tag="p", parse_tags=("p", "span")),
        ComponentSpec(
            name=ComponentType.HEADING.value,
            tag="h2",
            parse_tags=("h1", "h2", "h3", "h4", "h5", "h6"),
            tag_property="as",
            allowed_tags=("h1", "h2", "h3", "h4", "h5", "h6"),
        ),
        ComponentSpec(name=ComponentType.BUTTON.value, tag="a"),
        ComponentSpec(name=ComponentType.LINK.value, tag="a", parse_tags=("a",)),
        ComponentSpec(name=ComponentType.IMAGE.value, tag="img", void=True, parse_tags=("img",)),
        ComponentSpec(
            name=ComponentType.DIVIDER.value,
            editable=False,
            tag="hr",
            void=True,
            parse_tags=("hr",),
        ),
        ComponentSpec(
            name=ComponentType.CODE_BLOCK.value,
            tag="pre",
            wrapper=("code",),
            parse_tags=("pre",),
            preserve_whitespace=True,
        ),
        ComponentSpec(name=ComponentType.MARKDOWN.value, tag="div"),
        ComponentSpec(name=ComponentType.PREVIEW.value, editable=False, tag="div"),
    ]
)
