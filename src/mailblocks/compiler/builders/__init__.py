"""Layout builders.  Importing this package registers every builder."""
from mailblocks.compiler.builders import editorial, grids, primitives, sections

__all__ = ["editorial", "grids", "primitives", "sections"]
