"""Tests for the command-line interface."""

import json
import pytest
from click.testing import CliRunner

from json_node.cli import main


@pytest.fixture
def document(temp_dir, customer_json):
    """Write the sample customer document to disk."""
    path = temp_dir / "customer.json"
    path.write_text(json.dumps(customer_json, indent=2), encoding="utf-8")
    return path


class TestCli:
    """Tests for the json-node command group."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_format_compact(self, temp_dir):
        """Test reformatting a document to compact text."""
        path = temp_dir / "doc.json"
        path.write_text('{\n  "a": 1,\n  "b": [1, 2]\n}', encoding="utf-8")

        result = self.runner.invoke(main, ["format", str(path)])

        assert result.exit_code == 0
        assert result.output.strip() == '{"a":1,"b":[1,2]}'

    def test_format_to_file_with_indent(self, temp_dir):
        """Test writing indented output to a file."""
        path = temp_dir / "doc.json"
        path.write_text('{"a":1}', encoding="utf-8")
        output = temp_dir / "out.json"

        result = self.runner.invoke(main, ["format", str(path), "--indent", "2", "--output", str(output)])

        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == '{\n  "a": 1\n}'

    def test_format_invalid_json(self, temp_dir):
        """Test that malformed documents fail with a non-zero exit code."""
        path = temp_dir / "bad.json"
        path.write_text('{"a": ', encoding="utf-8")

        result = self.runner.invoke(main, ["format", str(path)])

        assert result.exit_code == 1
        assert "JSON parsing failed" in result.output

    def test_get_typed_property(self, document):
        """Test printing a property read as a type."""
        result = self.runner.invoke(main, ["get", str(document), "customerId", "--type", "int"])

        assert result.exit_code == 0
        assert result.output.strip() == "42"

    def test_get_json_property(self, document):
        """Test printing a property as JSON text."""
        result = self.runner.invoke(main, ["get", str(document), "address"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"city": "Berlin", "postalCode": "12209"}

    def test_get_missing_property(self, document):
        """Test that missing properties are reported."""
        result = self.runner.invoke(main, ["get", str(document), "missing"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_info(self, document):
        """Test listing properties and depth."""
        result = self.runner.invoke(main, ["info", str(document)])

        assert result.exit_code == 0
        assert "Properties: 9" in result.output
        assert "Max depth: 4" in result.output
        assert "companyName" in result.output
