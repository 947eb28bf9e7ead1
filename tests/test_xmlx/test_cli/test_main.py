"""Tests for the CLI main module."""

import json
import logging

import pytest

from xmlx import __version__
from xmlx.cli.main import CLIConfig, create_argument_parser, format_results, main

DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'


@pytest.fixture(autouse=True)
def reset_logging():
    """Remove the handler installed by main() after each test."""
    yield
    package_logger = logging.getLogger("xmlx")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def xml_file(tmp_path):
    path = tmp_path / "doc.xml"
    path.write_text(
        '<catalog><book id="1">First</book><book id="2">Second</book>'
        "<shelf><book id=\"3\">Third</book></shelf></catalog>",
        encoding="utf-8"
    )
    return path


@pytest.fixture
def bad_file(tmp_path):
    path = tmp_path / "bad.xml"
    path.write_text("<a x=1/>", encoding="utf-8")
    return path


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self):
        """Test default configuration values."""
        config = CLIConfig()
        assert config.indent_prefix == ""
        assert config.save_doctype is True
        assert config.extended_entities is False
        assert config.output_format == "text"
        assert not config.serializer_config.is_pretty

    def test_config_from_file(self, tmp_path):
        """Test loading configuration from file."""
        config_path = tmp_path / "xmlx.json"
        config_path.write_text(json.dumps({
            "indent_prefix": "    ",
            "save_doctype": False,
            "extended_entities": True,
            "output_format": "json",
        }))
        config = CLIConfig.from_file(config_path)
        assert config.indent_prefix == "    "
        assert config.save_doctype is False
        assert config.extended_entities is True
        assert config.output_format == "json"
        assert config.serializer_config.indent_prefix == "    "

    def test_config_from_nonexistent_file(self, tmp_path, capsys):
        """Test handling non-existent config file."""
        config = CLIConfig.from_file(tmp_path / "nonexistent.json")
        assert config.output_format == "text"
        assert "Could not load config file" in capsys.readouterr().err

    def test_config_from_invalid_json(self, tmp_path, capsys):
        """Test handling a malformed config file."""
        config_path = tmp_path / "broken.json"
        config_path.write_text("{not json")
        config = CLIConfig.from_file(config_path)
        assert config.indent_prefix == ""
        assert "Could not load config file" in capsys.readouterr().err


class TestArgumentParser:
    """Test argument parser construction."""

    def test_format_arguments(self):
        """Test parsing format command arguments."""
        args = create_argument_parser().parse_args(
            ["format", "doc.xml", "--indent", "4", "--no-declaration", "-o", "out.xml"]
        )
        assert args.command == "format"
        assert args.indent == 4
        assert args.no_declaration is True
        assert str(args.output) == "out.xml"
        assert args.extended_entities is False

    def test_select_arguments(self):
        """Test parsing select command arguments."""
        args = create_argument_parser().parse_args(
            ["select", "doc.xml", "item", "-n", "p", "--recursive", "--first"]
        )
        assert (args.name, args.namespace) == ("item", "p")
        assert args.recursive and args.first
        assert args.format == "xml"

    def test_check_arguments(self):
        """Test parsing check command arguments."""
        args = create_argument_parser().parse_args(["-q", "check", "a.xml", "b.xml"])
        assert [str(p) for p in args.paths] == ["a.xml", "b.xml"]
        assert args.quiet is True
        assert args.format is None

    def test_version(self, capsys):
        """Test the version flag."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestFormatResults:
    """Test result formatting."""

    RESULTS = [
        {"file": "a.xml", "well_formed": True, "element_count": 3, "processing_time_ms": 1.5},
        {"file": "b.xml", "well_formed": False, "error": "XML syntax error: bad"},
    ]

    def test_json_format(self):
        """Test JSON output formatting."""
        assert json.loads(format_results(self.RESULTS, "json")) == self.RESULTS

    def test_text_format(self):
        """Test text output formatting."""
        output = format_results(self.RESULTS, "text")
        assert "Checked 2 files, 1 well-formed" in output
        assert "✓ a.xml" in output
        assert "Elements: 3" in output
        assert "✗ b.xml" in output
        assert "Error: XML syntax error: bad" in output

    def test_empty_results(self):
        """Test formatting empty results."""
        assert format_results([], "text") == "No results to display."
        assert format_results([], "json") == "[]"


class TestMain:
    """Test the main entry point."""

    def test_no_command(self, capsys):
        """Test running without a command."""
        assert main([]) == 1
        assert "usage:" in capsys.readouterr().out

    def test_format_to_stdout(self, tmp_path, capsys):
        """Test reformatting to standard output."""
        path = tmp_path / "doc.xml"
        path.write_text("<a>\n   <b/>\n</a>")
        assert main(["format", str(path), "--indent", "2"]) == 0
        assert capsys.readouterr().out == DECLARATION + "\n<a>\n  <b/>\n</a>\n\n"

    def test_format_compact_without_declaration(self, tmp_path, capsys):
        """Test minified output without a declaration."""
        path = tmp_path / "doc.xml"
        path.write_text("<a><b/></a>")
        assert main(["format", str(path), "--indent", "0", "--no-declaration"]) == 0
        assert capsys.readouterr().out == "<a><b/></a>\n"

    def test_format_to_file(self, tmp_path, capsys):
        """Test writing the formatted document to a file."""
        path = tmp_path / "doc.xml"
        path.write_text("<a/>")
        out = tmp_path / "out.xml"
        assert main(["format", str(path), "-o", str(out)]) == 0
        assert out.read_text(encoding="utf-8") == DECLARATION + "<a/>"
        assert "written to" in capsys.readouterr().err

    def test_format_extended_entities(self, tmp_path, capsys):
        """Test loading with the HTML entity set."""
        path = tmp_path / "doc.xml"
        path.write_text("<a>&copy;</a>")
        assert main(["format", str(path), "--extended-entities", "--no-declaration"]) == 0
        assert capsys.readouterr().out == "<a>©</a>\n"

    def test_format_error(self, bad_file, capsys):
        """Test reporting a malformed file."""
        assert main(["format", str(bad_file)]) == 1
        assert "XML syntax error" in capsys.readouterr().err

    def test_format_negative_indent(self, xml_file, capsys):
        """Test rejecting a negative indent."""
        assert main(["format", str(xml_file), "--indent", "-1"]) == 2
        assert "must not be negative" in capsys.readouterr().err

    def test_format_uses_config_file(self, tmp_path, capsys):
        """Test layout settings taken from the configuration file."""
        path = tmp_path / "doc.xml"
        path.write_text("<a><b/></a>")
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"indent_prefix": "\t", "save_doctype": False}))
        assert main(["--config", str(config_path), "format", str(path)]) == 0
        assert capsys.readouterr().out == "<a>\n\t<b/>\n</a>\n\n"

    def test_select_text(self, xml_file, capsys):
        """Test printing the text of top-level matches."""
        assert main(["select", str(xml_file), "catalog", "--format", "text"]) == 0
        assert capsys.readouterr().out == "FirstSecondThird\n"

    def test_select_recursive(self, xml_file, capsys):
        """Test recursive selection."""
        assert main(["select", str(xml_file), "book", "-r", "-f", "text"]) == 0
        assert capsys.readouterr().out == "First\nSecond\nThird\n"

    def test_select_first_xml(self, xml_file, capsys):
        """Test printing the first match as XML."""
        assert main(["select", str(xml_file), "book", "-r", "--first"]) == 0
        assert capsys.readouterr().out == '<book id="1">First</book>\n'

    def test_select_json(self, xml_file, capsys):
        """Test printing matches as JSON."""
        assert main(["select", str(xml_file), "book", "-r", "-f", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [item["attributes"][0]["value"] for item in data] == ["1", "2", "3"]

    def test_select_no_match(self, xml_file, capsys):
        """Test the exit code when nothing matches."""
        assert main(["select", str(xml_file), "book"]) == 1
        assert capsys.readouterr().out == ""

    def test_select_missing_file(self, tmp_path, capsys):
        """Test reporting an unreadable file."""
        assert main(["select", str(tmp_path / "missing.xml"), "a"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_check_all_well_formed(self, xml_file, capsys):
        """Test checking good files."""
        assert main(["check", str(xml_file)]) == 0
        output = capsys.readouterr().out
        assert "Checked 1 files, 1 well-formed" in output
        assert "Elements: 5" in output

    def test_check_with_failures(self, xml_file, bad_file, capsys):
        """Test checking a mix of good and bad files as JSON."""
        assert main(["check", str(xml_file), str(bad_file), "--format", "json"]) == 1
        results = json.loads(capsys.readouterr().out)
        assert [r["well_formed"] for r in results] == [True, False]
        assert "unquoted" in results[1]["error"]

    def test_check_missing_file(self, tmp_path, capsys):
        """Test checking a file that does not exist."""
        assert main(["check", str(tmp_path / "missing.xml"), "-f", "json"]) == 1
        results = json.loads(capsys.readouterr().out)
        assert results[0]["well_formed"] is False

    def test_verbose_logging(self, xml_file, capsys):
        """Test that --verbose enables debug logging."""
        assert main(["--verbose", "check", str(xml_file)]) == 0
        assert logging.getLogger("xmlx").level == logging.DEBUG

    def test_select_by_namespace_uri_or_alias(self, tmp_path, capsys):
        """Test that a namespace can be named by alias or by URI."""
        path = tmp_path / "ns.xml"
        path.write_text('<r xmlns:p="urn:p"><p:item>1</p:item><item>2</item></r>')
        assert main(["select", str(path), "item", "-r", "-n", "p", "-f", "text"]) == 0
        assert capsys.readouterr().out == "1\n"
        assert main(["select", str(path), "item", "-r", "-n", "urn:p", "-f", "text"]) == 0
        assert capsys.readouterr().out == "1\n"
