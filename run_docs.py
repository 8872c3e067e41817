#!/usr/bin/env python3
"""
Generate static documentation for TypeORM entities.

Scans ``src/entities/**/*.ts`` (relative to the project root), extracts every
``@Entity()`` class and writes ``docs/index.html``. The page embeds a
Markdown export of the same model data.

Usage:
    python run_docs.py
    python run_docs.py --project-root ../api
    python run_docs.py --config docs.yml --write-markdown --write-json
"""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from core.docs_config import ConfigValidationError, DocsConfig, load_docs_config
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id
from extraction.extractor import EntityDocsError, collect_from_config, models_to_dict_list
from rendering.html import render_html
from rendering.markdown import render_markdown

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Every flag is optional; without flags the fixed default layout is used.
    """
    parser = argparse.ArgumentParser(
        description="TypeORM entity documentation generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_docs.py\n"
            "  python run_docs.py --project-root ../api --write-markdown\n"
        ),
    )
    parser.add_argument(
        "--project-root",
        default=None,
        help="Directory the entity and output paths are relative to. Default: current directory.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML or JSON config file with DocsConfig keys.",
    )
    parser.add_argument(
        "--entities-dir",
        default=None,
        help="Entity source directory. Default: src/entities",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Output directory. Default: docs",
    )
    parser.add_argument(
        "--write-markdown",
        action="store_true",
        default=None,
        help="Also write the Markdown export next to the HTML page.",
    )
    parser.add_argument(
        "--write-json",
        action="store_true",
        default=None,
        help="Also write the extracted models as JSON.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DocsConfig:
    """Build the run configuration from an optional config file and flags."""
    config = load_docs_config(args.config) if args.config else DocsConfig()
    if args.project_root is not None:
        config = config.with_overrides(project_root=os.path.abspath(args.project_root))
    elif not args.config:
        config = config.with_overrides(project_root=os.getcwd())
    return config.with_overrides(
        entities_dir=args.entities_dir,
        output_dir=args.output_dir,
        write_markdown=args.write_markdown,
        write_json=args.write_json,
    )


def generate_docs(config: DocsConfig) -> List[str]:
    """Run discovery, extraction, rendering and output for one configuration.

    Every output is rendered in memory before the output directory is
    created, so a failed run leaves no files behind.

    Returns:
        Paths of the written files, HTML page first.

    Raises:
        EntityDocsError: If no entity files or no entities were found.
    """
    with phase_scope("extract"):
        models, _ = collect_from_config(config)

    with phase_scope("render"):
        outputs = {
            config.html_path: render_html(
                models,
                title=config.title,
                markdown_filename=config.markdown_filename,
            )
        }
        if config.write_markdown:
            outputs[config.markdown_path] = render_markdown(models, title=config.title)
        if config.write_json:
            outputs[config.json_path] = (
                json.dumps(models_to_dict_list(models), indent=2, ensure_ascii=False) + "\n"
            )

    with phase_scope("write"):
        os.makedirs(config.output_path, exist_ok=True)
        for path, content in outputs.items():
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
            logger.debug("Wrote %s", path)

    return list(outputs)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = parse_args(argv)
    configure_structured_logging(logging.DEBUG if args.verbose else logging.INFO)
    set_run_id()

    try:
        config = build_config(args)
        logger.info("Scanning for entities in '%s'...", config.entities_dir)
        written = generate_docs(config)
    except (EntityDocsError, ConfigValidationError) as e:
        logger.error("Error generating documentation: %s", e)
        return 1
    except Exception as e:
        logger.error("Error generating documentation: %s", e, exc_info=True)
        return 1

    logger.info(
        "Documentation generated at %s",
        os.path.relpath(written[0], config.project_root),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
