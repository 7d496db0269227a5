"""
gbdispatch - Configuration
==========================

Rendering configuration for the dispatch emitter. Configuration can come
from:
- Default values (defined here)
- Environment variables (GeneratorConfig.from_env)
- Command-line options (applied on top by the gbdgen CLI)

The defaults produce Rust match arms for a CPU type whose operand
accessors are associated items:

    0x22 => self.ld(Self::set_hl_inc_indirect, Self::a),

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class GeneratorConfig:
    """
    Configuration for dispatch code emission.

    Attributes:
        receiver: Expression the handler is called on (default: "self")
        scope_prefix: Prefix of scoped operand references (default: "Self::")
        write_prefix: Prefix marking read-modify-write references (default: "set_")
        operand_separator: Text between handler arguments (default: ", ")
        indent: Spaces before each match arm (default: 6)
        match_subject: Expression matched on in the match block (default: "opcode")
        fallback_arm: Final catch-all arm of the match block
        operands_argument: Argument of grouped arms (default: "&instr.operands")
    """

    # ═══════════════════════════════════════════════════════════════════════════
    # CALL SHAPE
    # ═══════════════════════════════════════════════════════════════════════════

    receiver: str = "self"
    scope_prefix: str = "Self::"
    write_prefix: str = "set_"
    operand_separator: str = ", "

    # ═══════════════════════════════════════════════════════════════════════════
    # LAYOUT
    # ═══════════════════════════════════════════════════════════════════════════

    indent: int = 6
    match_subject: str = "opcode"
    fallback_arm: str = "_ => unreachable!(),"
    operands_argument: str = "&instr.operands"

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """
        Create GeneratorConfig from environment variables.

        Environment variables (all optional):
            GBDISPATCH_RECEIVER: Handler receiver expression
            GBDISPATCH_SCOPE_PREFIX: Scoped reference prefix
            GBDISPATCH_WRITE_PREFIX: Read-modify-write reference prefix
            GBDISPATCH_SEPARATOR: Argument separator
            GBDISPATCH_INDENT: Arm indentation width (integer)
            GBDISPATCH_MATCH_SUBJECT: Match block subject expression
            GBDISPATCH_FALLBACK: Match block fallback arm

        Returns:
            GeneratorConfig with values from environment variables
        """
        config = cls()

        if receiver := os.environ.get("GBDISPATCH_RECEIVER"):
            config.receiver = receiver

        # Prefixes and separator may legitimately be set to empty strings
        if (scope_prefix := os.environ.get("GBDISPATCH_SCOPE_PREFIX")) is not None:
            config.scope_prefix = scope_prefix
        if (write_prefix := os.environ.get("GBDISPATCH_WRITE_PREFIX")) is not None:
            config.write_prefix = write_prefix
        if (separator := os.environ.get("GBDISPATCH_SEPARATOR")) is not None:
            config.operand_separator = separator

        if indent := os.environ.get("GBDISPATCH_INDENT"):
            try:
                config.indent = max(0, int(indent))
            except ValueError:
                pass  # Keep default

        if subject := os.environ.get("GBDISPATCH_MATCH_SUBJECT"):
            config.match_subject = subject
        if fallback := os.environ.get("GBDISPATCH_FALLBACK"):
            config.fallback_arm = fallback

        return config


_default_config: Optional[GeneratorConfig] = None


def get_default_config() -> GeneratorConfig:
    """
    Get the default emitter configuration.

    Creates from environment variables on first access.
    Can be overridden by calling set_default_config().
    """
    global _default_config
    if _default_config is None:
        _default_config = GeneratorConfig.from_env()
    return _default_config


def set_default_config(config: Optional[GeneratorConfig]) -> None:
    """Set the default emitter configuration (None re-reads the environment on next use)."""
    global _default_config
    _default_config = config
