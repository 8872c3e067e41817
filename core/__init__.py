"""Core shared configuration and logging utilities."""

from core.structured_logging import (
    configure_structured_logging,
    get_phase,
    get_run_id,
    phase_scope,
    set_run_id,
)
from core.docs_config import (
    ConfigValidationError,
    DocsConfig,
    load_docs_config,
    parse_docs_config,
)

__all__ = [
    "configure_structured_logging",
    "get_phase",
    "get_run_id",
    "phase_scope",
    "set_run_id",
    "ConfigValidationError",
    "DocsConfig",
    "load_docs_config",
    "parse_docs_config",
]
