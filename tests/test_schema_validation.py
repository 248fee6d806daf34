"""
phonobind Schema Validation Tests

Tests that the inspect schema is valid and matches the binding report.
"""

import json
from pathlib import Path

import jsonschema
import pytest

# Import validation functions from tools
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))
from validate_schema import load_schema, validate_document, SCHEMA_FILES

from phonobind.bindings import BINDINGS
from phonobind.utils import serialize_json


SCHEMA_DIR = Path(__file__).parent.parent / "schemas"


class TestSchemaLoading:
    """Test that all schemas load correctly."""

    def test_inspect_schema_loads(self):
        schema = load_schema("inspect")
        assert schema["title"] == "phonobind Binding Report"
        assert "classes" in schema["required"]

    def test_schema_is_valid_draft7(self):
        for name in SCHEMA_FILES:
            jsonschema.Draft7Validator.check_schema(load_schema(name))

    def test_invalid_schema_name_raises(self):
        with pytest.raises(ValueError, match="Unknown schema"):
            load_schema("invalid_schema")

    def test_every_schema_file_exists(self):
        for filename in SCHEMA_FILES.values():
            assert (SCHEMA_DIR / filename).is_file()


class TestInspectSchemaValidation:
    """Test inspect.schema.json validation."""

    @pytest.fixture
    def schema(self):
        return load_schema("inspect")

    @pytest.fixture
    def minimal_report(self):
        return {
            "module": "host",
            "classes": [
                {
                    "name": "Thing",
                    "parent": None,
                    "state": "initialized",
                    "members": ["info"],
                    "buffer": None,
                    "lifetime": "ManualRelease",
                },
            ],
            "enums": [
                {
                    "name": "Color",
                    "state": "initialized",
                    "case_insensitive": False,
                    "members": [{"label": "RED", "ordinal": 0}],
                },
            ],
            "functions": [],
        }

    def test_package_report_is_valid(self, schema):
        report = json.loads(serialize_json(BINDINGS.describe()))
        assert validate_document(report, schema) == []

    def test_valid_minimal_report(self, schema, minimal_report):
        assert validate_document(minimal_report, schema) == []

    def test_missing_required_field(self, schema, minimal_report):
        del minimal_report["enums"]
        errors = validate_document(minimal_report, schema)
        assert len(errors) == 1
        assert "'enums' is a required property" in errors[0]

    def test_unknown_state(self, schema, minimal_report):
        minimal_report["classes"][0]["state"] = "half-done"
        errors = validate_document(minimal_report, schema)
        assert errors
        assert errors[0].startswith("classes.0.state")

    def test_buffer_contract(self, schema, minimal_report):
        minimal_report["classes"][0]["buffer"] = {"readonly": True}
        assert validate_document(minimal_report, schema) == []

        minimal_report["classes"][0]["buffer"] = {"writable": True}
        assert validate_document(minimal_report, schema) != []

    def test_empty_enum_rejected(self, schema, minimal_report):
        minimal_report["enums"][0]["members"] = []
        assert validate_document(minimal_report, schema) != []

    def test_ordinal_must_be_integer(self, schema, minimal_report):
        minimal_report["enums"][0]["members"][0]["ordinal"] = "0"
        assert validate_document(minimal_report, schema) != []
