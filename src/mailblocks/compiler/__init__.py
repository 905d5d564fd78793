"""Block compiler: semantic content blocks to document trees."""
from __future__ import annotations

from mailblocks.compiler.blocks import BLOCK_SCHEMAS, BlockSchema, SemanticBlock
from mailblocks.compiler.compiler import (
    BlockCompiler,
    CompileOutput,
    compile_block,
    compile_email,
    compile_with_diagnostics,
)
from mailblocks.compiler.context import BuildContext, IdFactory
from mailblocks.compiler.helpers import fan_out_width, is_valid_image_url, placeholder_url
from mailblocks.compiler.registry import (
    BlockBuilder,
    BuilderAlreadyRegisteredError,
    BuilderNotFoundError,
    BuilderRegistry,
    builders,
)

__all__ = [
    "BLOCK_SCHEMAS",
    "BlockBuilder",
    "BlockCompiler",
    "BlockSchema",
    "BuildContext",
    "BuilderAlreadyRegisteredError",
    "BuilderNotFoundError",
    "BuilderRegistry",
    "CompileOutput",
    "IdFactory",
    "SemanticBlock",
    "builders",
    "compile_block",
    "compile_email",
    "compile_with_diagnostics",
    "fan_out_width",
    "is_valid_image_url",
    "placeholder_url",
]
