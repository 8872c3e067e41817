"""
Integration tests for extractor.py

Tests discovery, per-file extraction, model collection and sorting.
"""

import os
import tempfile
import unittest
from pathlib import Path

from core.docs_config import DocsConfig
from extraction.extractor import (
    ExtractionStats,
    NoEntitiesFoundError,
    NoEntityFilesError,
    EntityDocsError,
    collect_from_config,
    collect_models,
    discover_entity_files,
    entity_sort_key,
    extract_file,
    models_to_dict_list,
    sort_models,
)
from extraction.models import EntityRecord

FIXTURES_DIR = Path(__file__).parent / "fixtures"
ENTITIES_DIR = FIXTURES_DIR / "entities"


class TestExtractionStats(unittest.TestCase):
    """Test ExtractionStats class."""

    def test_creation(self):
        stats = ExtractionStats()
        self.assertEqual(stats.to_dict(), {
            "files_processed": 0,
            "files_without_entity": 0,
            "entities_extracted": 0,
            "fields_extracted": 0,
            "parse_errors": 0,
        })

    def test_str_representation(self):
        stats = ExtractionStats()
        stats.files_processed = 3
        self.assertIn("processed=3", str(stats))


class TestDiscoverEntityFiles(unittest.TestCase):
    """Test entity file discovery."""

    def test_discover_fixtures(self):
        files = discover_entity_files(str(ENTITIES_DIR))

        names = [os.path.relpath(f, ENTITIES_DIR.resolve()) for f in files]
        self.assertEqual(
            sorted(names),
            sorted(["Order.ts", "User.ts", "customer.ts", "helpers.ts", os.path.join("nested", "OrderItem.ts")]),
        )
        for f in files:
            self.assertTrue(os.path.isabs(f))
        self.assertEqual(files, sorted(files))

    def test_discover_excludes_hidden_dirs_and_other_extensions(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            os.makedirs(os.path.join(tmpdir, "models"))
            os.makedirs(os.path.join(tmpdir, ".cache"))
            Path(tmpdir, "models", "User.ts").write_text("export class User {}")
            Path(tmpdir, ".cache", "User.ts").write_text("export class User {}")
            Path(tmpdir, "models", "User.js").write_text("class User {}")

            files = discover_entity_files(tmpdir)

            self.assertEqual(len(files), 1)
            self.assertTrue(files[0].endswith(os.path.join("models", "User.ts")))

    def test_discover_missing_directory(self):
        self.assertEqual(discover_entity_files("/nonexistent/src/entities"), [])


class TestExtractFile(unittest.TestCase):
    """Test extracting from a single file."""

    def test_extract_entity_file(self):
        stats = ExtractionStats()
        entity = extract_file(str(ENTITIES_DIR / "User.ts"), stats=stats)

        self.assertEqual(entity.name, "User")
        self.assertEqual(len(entity.fields), 6)
        self.assertEqual(stats.entities_extracted, 1)
        self.assertEqual(stats.fields_extracted, 6)

    def test_extract_file_without_entity(self):
        stats = ExtractionStats()
        entity = extract_file(str(ENTITIES_DIR / "helpers.ts"), stats=stats)

        self.assertIsNone(entity)
        self.assertEqual(stats.files_processed, 1)
        self.assertEqual(stats.files_without_entity, 1)

    def test_extract_nonexistent_file(self):
        with self.assertRaises(FileNotFoundError):
            extract_file("/nonexistent/Entity.ts")

    def test_syntax_errors_are_not_fatal(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".ts", delete=False) as f:
            f.write("@Entity()\nexport class Broken {\n    @Column()\n    name: string;\n")
            temp_path = f.name
        try:
            stats = ExtractionStats()
            extract_file(temp_path, stats=stats)
            self.assertEqual(stats.files_processed, 1)
            self.assertGreater(stats.parse_errors, 0)
        finally:
            os.unlink(temp_path)


class TestCollectModels(unittest.TestCase):
    """Test the model collector."""

    def setUp(self):
        self.files = discover_entity_files(str(ENTITIES_DIR))

    def test_collect_fixtures_sorted(self):
        stats = ExtractionStats()
        models = collect_models(self.files, stats=stats)

        self.assertEqual([m.name for m in models], ["customer", "Order", "OrderItem", "User"])
        self.assertEqual(stats.files_processed, 5)
        self.assertEqual(stats.files_without_entity, 1)
        self.assertEqual(stats.entities_extracted, 4)

    def test_order_independent_of_discovery(self):
        forward = collect_models(self.files)
        backward = collect_models(list(reversed(self.files)))
        self.assertEqual([m.name for m in forward], [m.name for m in backward])

    def test_empty_file_list(self):
        with self.assertRaises(NoEntityFilesError) as ctx:
            collect_models([], source_label="src/entities")
        self.assertEqual(str(ctx.exception), "No entity files found in 'src/entities'.")

    def test_no_entities(self):
        with self.assertRaises(NoEntitiesFoundError) as ctx:
            collect_models([str(ENTITIES_DIR / "helpers.ts")])
        self.assertIsInstance(ctx.exception, EntityDocsError)
        self.assertIn("No valid entities found", str(ctx.exception))

    def test_read_error_aborts(self):
        with self.assertRaises(FileNotFoundError):
            collect_models([str(ENTITIES_DIR / "User.ts"), "/nonexistent/Gone.ts"])

    def test_collect_from_config(self):
        config = DocsConfig(project_root=str(FIXTURES_DIR), entities_dir="entities")
        models, stats = collect_from_config(config)

        self.assertEqual(len(models), 4)
        self.assertEqual(stats.entities_extracted, 4)

    def test_collect_from_config_without_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = DocsConfig(project_root=tmpdir)
            with self.assertRaises(NoEntityFilesError) as ctx:
                collect_from_config(config)
            self.assertIn("src/entities", str(ctx.exception))

    def test_models_to_dict_list(self):
        models = collect_models([str(ENTITIES_DIR / "User.ts")])
        result = models_to_dict_list(models)

        self.assertEqual(result[0]["name"], "User")
        self.assertEqual(result[0]["fields"][0], {
            "name": "id", "type": "unknown", "isPrimary": True, "isRequired": False,
        })


class TestSorting(unittest.TestCase):
    """Test locale-style ordering of entity names."""

    def test_case_insensitive_order(self):
        names = ["banana", "Apple", "cherry", "Banana"]
        ordered = [m.name for m in sort_models(EntityRecord(name=n) for n in names)]
        self.assertEqual(ordered, ["Apple", "banana", "Banana", "cherry"])

    def test_accents_sort_with_base_letter(self):
        names = ["Zone", "Éclair", "Eagle"]
        self.assertEqual(sorted(names, key=entity_sort_key), ["Eagle", "Éclair", "Zone"])

    def test_duplicates_coexist(self):
        models = sort_models([EntityRecord(name="User"), EntityRecord(name="User")])
        self.assertEqual(len(models), 2)


if __name__ == "__main__":
    unittest.main()
