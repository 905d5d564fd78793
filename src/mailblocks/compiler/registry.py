"""Builder registry keyed by ``(kind, variant)``.

Each block layout is an independent ``BlockBuilder`` subclass registered
under one or more ``(kind, variant)`` pairs with the ``register``
decorator::

    @builders.register("cta", "primary", "secondary", "outline")
    class CtaBuilder(BlockBuilder):
        def build(self, block, ctx):
            ...

The compiler looks builders up by the block's kind and resolved variant.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mailblocks.compiler.blocks import SemanticBlock
    from mailblocks.compiler.context import BuildContext
    from mailblocks.nodes.nodes import DocumentNode

logger = logging.getLogger(__name__)


class BlockBuilder(ABC):
    """Base class for layout builders.

    The contract for :meth:`build` is:

    * **Deterministic**: identical inputs produce deep-equal trees,
      including ids and placeholder URLs.
    * **Pure**: no I/O and no mutation of the block.
    * **Tolerant**: optional fields that are absent are skipped; only
      structurally required fields may raise ``MissingFieldError``.
    """

    @abstractmethod
    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        """Return the section node for ``block``."""


class BuilderNotFoundError(KeyError):
    """Raised when no builder is registered for a ``(kind, variant)`` pair."""

    def __init__(self, kind: str, variant: str) -> None:
        self.kind = kind
        self.variant = variant
        super().__init__(f"No builder registered for block kind {kind!r}, variant {variant!r}")


class BuilderAlreadyRegisteredError(ValueError):
    """Raised when attempting to register a ``(kind, variant)`` pair twice."""

    def __init__(self, kind: str, variant: str) -> None:
        self.kind = kind
        self.variant = variant
        super().__init__(
            f"A builder for block kind {kind!r}, variant {variant!r} is already registered. "
            "Deregister the existing entry first."
        )


class BuilderRegistry:
    """Registry of ``BlockBuilder`` classes keyed by ``(kind, variant)``."""

    def __init__(self) -> None:
        self._builders: dict[tuple[str, str], type[BlockBuilder]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self, kind: str, *variants: str
    ) -> Callable[[type[BlockBuilder]], type[BlockBuilder]]:
        """Return a class decorator registering the class for each variant.

        Raises
        ------
        BuilderAlreadyRegisteredError
            If a pair is already in use.
        TypeError
            If the decorated class does not subclass ``BlockBuilder``.
        """

        def decorator(cls: type[BlockBuilder]) -> type[BlockBuilder]:
            for variant in variants or ("default",):
                self.register_class(kind, variant, cls)
            return cls

        return decorator

    def register_class(self, kind: str, variant: str, cls: type[BlockBuilder]) -> None:
        """Register ``cls`` for ``(kind, variant)`` without decorator syntax."""
        key = (kind, variant)
        if key in self._builders:
            raise BuilderAlreadyRegisteredError(kind, variant)
        if not (isinstance(cls, type) and issubclass(cls, BlockBuilder)):
            raise TypeError(
                f"Cannot register {cls!r} for {kind!r}/{variant!r}: "
                "it must be a subclass of BlockBuilder."
            )
        self._builders[key] = cls
        logger.debug("Registered builder %s for %s/%s", cls.__qualname__, kind, variant)

    def deregister(self, kind: str, variant: str) -> None:
        """Remove the builder for ``(kind, variant)``.

        Raises
        ------
        BuilderNotFoundError
            If the pair is not registered.
        """
        if (kind, variant) not in self._builders:
            raise BuilderNotFoundError(kind, variant)
        del self._builders[(kind, variant)]
        logger.debug("Deregistered builder for %s/%s", kind, variant)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, kind: str, variant: str) -> type[BlockBuilder]:
        """Return the builder class for ``(kind, variant)``.

        Raises
        ------
        BuilderNotFoundError
            If the pair is not registered.
        """
        try:
            return self._builders[(kind, variant)]
        except KeyError:
            raise BuilderNotFoundError(kind, variant) from None

    def kinds(self) -> list[str]:
        """Return the sorted list of kinds with at least one builder."""
        return sorted({kind for kind, _ in self._builders})

    def variants(self, kind: str) -> list[str]:
        """Return the sorted variants registered for ``kind``."""
        return sorted(v for k, v in self._builders if k == kind)

    def __contains__(self, key: object) -> bool:
        return key in self._builders

    def __len__(self) -> int:
        return len(self._builders)

    def __repr__(self) -> str:
        return f"BuilderRegistry(builders={len(self._builders)})"


#: The registry populated by ``mailblocks.compiler.builders``.
builders = BuilderRegistry()
