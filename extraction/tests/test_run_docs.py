"""
End-to-end tests for run_docs.py

Runs the full discovery → extraction → rendering → write pipeline against
temporary project trees.
"""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

from core.docs_config import DocsConfig
from extraction.extractor import NoEntitiesFoundError, NoEntityFilesError
from run_docs import build_config, generate_docs, main, parse_args

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "entities"


class TestRunDocs(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.project = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _copy_fixtures(self):
        shutil.copytree(FIXTURES_DIR, self.project / "src" / "entities")

    def test_generates_html(self):
        self._copy_fixtures()

        exit_code = main(["--project-root", str(self.project)])

        self.assertEqual(exit_code, 0)
        html = (self.project / "docs" / "index.html").read_text(encoding="utf-8")
        self.assertIn('<div class="model-name">OrderItem</div>', html)
        self.assertIn('<a href="#OrderItem" class="target-link">OrderItem</a>', html)
        self.assertLess(html.index('id="customer"'), html.index('id="User"'))
        self.assertFalse((self.project / "docs" / "entities.json").exists())

    def test_optional_exports(self):
        self._copy_fixtures()
        config = DocsConfig(project_root=str(self.project), write_markdown=True, write_json=True)

        written = generate_docs(config)

        self.assertEqual(written[0], config.html_path)
        markdown = Path(config.markdown_path).read_text(encoding="utf-8")
        self.assertTrue(markdown.startswith("# TypeORM Entities Documentation\n\n## customer\n\n"))
        models = json.loads(Path(config.json_path).read_text(encoding="utf-8"))
        self.assertEqual([m["name"] for m in models], ["customer", "Order", "OrderItem", "User"])

    def test_no_files_writes_nothing(self):
        config = DocsConfig(project_root=str(self.project))

        with self.assertRaises(NoEntityFilesError):
            generate_docs(config)
        self.assertFalse((self.project / "docs").exists())
        self.assertEqual(main(["--project-root", str(self.project)]), 1)
        self.assertFalse((self.project / "docs").exists())

    def test_no_entities_writes_nothing(self):
        entities = self.project / "src" / "entities"
        entities.mkdir(parents=True)
        shutil.copy(FIXTURES_DIR / "helpers.ts", entities / "helpers.ts")

        with self.assertRaises(NoEntitiesFoundError):
            generate_docs(DocsConfig(project_root=str(self.project)))
        self.assertEqual(main(["--project-root", str(self.project)]), 1)
        self.assertFalse((self.project / "docs").exists())

    def test_invalid_config_file(self):
        config_path = self.project / "docs.yml"
        config_path.write_text("unknown_option: 1\n")

        self.assertEqual(main(["--config", str(config_path)]), 1)

    def test_build_config_from_file_and_flags(self):
        config_path = self.project / "docs.yml"
        config_path.write_text("entities_dir: models\ntitle: API Models\n")

        config = build_config(parse_args(["--config", str(config_path), "--output-dir", "site"]))

        self.assertEqual(config.project_root, os.path.abspath(str(self.project)))
        self.assertEqual(config.entities_dir, "models")
        self.assertEqual(config.output_dir, "site")
        self.assertEqual(config.title, "API Models")
        self.assertFalse(config.write_markdown)


if __name__ == "__main__":
    unittest.main()
