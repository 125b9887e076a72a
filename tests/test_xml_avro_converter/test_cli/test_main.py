"""Tests for the xml-avro-convert command-line interface."""

import json
import logging
import sys
from pathlib import Path

import pytest

from xml_avro_converter import __version__
from xml_avro_converter.cli.main import create_argument_parser, load_config, main

SCHEMA = {
    "type": "record",
    "name": "Document",
    "fields": [{"name": "Order", "type": {
        "type": "record",
        "name": "Order",
        "fields": [
            {"name": "id", "type": "int"},
            {"name": "placed", "type": ["null", "long"], "default": None},
        ],
    }}],
}


@pytest.fixture
def files(tmp_path: Path):
    """Write a schema and a document and return their paths."""
    schema_path = tmp_path / "order.avsc"
    schema_path.write_text(json.dumps(SCHEMA), encoding="utf-8")
    xml_path = tmp_path / "order.xml"
    xml_path.write_text('<Order id="7"><extra>x</extra></Order>', encoding="utf-8")
    return xml_path, schema_path


class TestArgumentParser:
    """Test argument parsing."""

    def test_schema_required(self, capsys) -> None:
        """Test a missing --schema is a usage error."""
        with pytest.raises(SystemExit) as excinfo:
            create_argument_parser().parse_args(["doc.xml"])

        assert excinfo.value.code == 2

    def test_version(self, capsys) -> None:
        """Test --version prints the package version."""
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])

        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_overrides_applied(self) -> None:
        """Test command-line flags override the configuration."""
        args = create_argument_parser().parse_args([
            "doc.xml", "-s", "s.avsc",
            "--reader", "etree",
            "--attribute-suffix", "_a",
            "--no-datetime-detection",
        ])
        config = load_config(args)

        assert config.tree.reader == "etree"
        assert config.tree.attribute_suffix == "_a"
        assert not config.encoder.enable_datetime_heuristic

    def test_config_file(self, tmp_path: Path) -> None:
        """Test settings are read from a JSON configuration file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"tree": {"attribute_suffix": "_x"}}), encoding="utf-8")
        args = create_argument_parser().parse_args(["doc.xml", "-s", "s.avsc", "-c", str(path)])

        assert load_config(args).tree.attribute_suffix == "_x"


class TestMain:
    """Test end-to-end command runs."""

    def test_prints_record(self, files, capsys) -> None:
        """Test the record is printed as JSON and warnings are counted."""
        xml_path, schema_path = files

        assert main([str(xml_path), "--schema", str(schema_path)]) == 0

        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"Order": {"id": 7, "placed": None}}
        assert "1 warning(s)" in captured.err

    def test_show_diagnostics(self, files, capsys) -> None:
        """Test diagnostics and metrics are added to the output."""
        xml_path, schema_path = files

        assert main([str(xml_path), "-s", str(schema_path), "--show-diagnostics", "-q"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["record"] == {"Order": {"id": 7, "placed": None}}
        assert output["diagnostics"][0]["code"] == "UNSCHEMATIZED_FIELD"
        assert output["metrics"]["fields_dropped"] == 1

    def test_output_file(self, files, tmp_path: Path, capsys) -> None:
        """Test --output writes the record to a file."""
        xml_path, schema_path = files
        output_path = tmp_path / "out.json"

        assert main([str(xml_path), "-s", str(schema_path), "-o", str(output_path)]) == 0

        assert json.loads(output_path.read_text(encoding="utf-8")) == {
            "Order": {"id": 7, "placed": None}
        }
        assert "Record written to" in capsys.readouterr().err

    def test_show_tree(self, files, capsys) -> None:
        """Test --show-tree prints the document tree to stderr."""
        xml_path, schema_path = files

        main([str(xml_path), "-s", str(schema_path), "--show-tree", "-q"])

        assert "| Order : None" in capsys.readouterr().err

    def test_missing_schema_file(self, files, tmp_path: Path, capsys) -> None:
        """Test an unreadable schema exits with status 1."""
        xml_path, _ = files

        assert main([str(xml_path), "-s", str(tmp_path / "missing.avsc")]) == 1
        assert "Error: Cannot read schema file" in capsys.readouterr().err

    def test_malformed_document(self, files, capsys) -> None:
        """Test malformed markup exits with status 1."""
        xml_path, schema_path = files
        xml_path.write_text("<Order>", encoding="utf-8")

        assert main([str(xml_path), "-s", str(schema_path)]) == 1
        assert "Malformed markup" in capsys.readouterr().err

    def test_invalid_config(self, files, tmp_path: Path, capsys) -> None:
        """Test an invalid configuration file exits with status 1."""
        xml_path, schema_path = files
        config_path = tmp_path / "config.json"
        config_path.write_text('{"tree": {"max_depth": 0}}', encoding="utf-8")

        assert main([str(xml_path), "-s", str(schema_path), "-c", str(config_path)]) == 1
        assert "max_depth must be > 0" in capsys.readouterr().err

    def test_logging_level_from_config(self, files, tmp_path: Path) -> None:
        """Test the configured logging level is used when no flag is given."""
        xml_path, schema_path = files
        config_path = tmp_path / "config.json"
        config_path.write_text('{"global_": {"logging_level": "DEBUG"}}', encoding="utf-8")

        main([str(xml_path), "-s", str(schema_path), "-c", str(config_path)])

        assert logging.getLogger("xml_avro_converter").level == logging.DEBUG

    def test_quiet_flag_overrides_config_level(self, files, tmp_path: Path) -> None:
        """Test -q wins over the configured logging level."""
        xml_path, schema_path = files
        config_path = tmp_path / "config.json"
        config_path.write_text('{"global_": {"logging_level": "DEBUG"}}', encoding="utf-8")

        main([str(xml_path), "-s", str(schema_path), "-c", str(config_path), "-q"])

        assert logging.getLogger("xml_avro_converter").level == logging.ERROR

    def test_default_logging_level(self, files) -> None:
        """Test the default configuration logs warnings and above."""
        xml_path, schema_path = files

        main([str(xml_path), "-s", str(schema_path)])

        assert logging.getLogger("xml_avro_converter").level == logging.WARNING


class TestAvroOutput:
    """Test --format avro."""

    def test_requires_output_file(self, files, capsys) -> None:
        """Test container output to stdout is a usage error."""
        xml_path, schema_path = files

        with pytest.raises(SystemExit) as excinfo:
            main([str(xml_path), "-s", str(schema_path), "--format", "avro"])

        assert excinfo.value.code == 2
        assert "--format avro requires --output" in capsys.readouterr().err

    @pytest.mark.parametrize("codec", ["null", "deflate"])
    def test_container_written(self, files, tmp_path: Path, capsys, codec: str) -> None:
        """Test the record is written as an Avro container file."""
        fastavro = pytest.importorskip("fastavro")
        xml_path, schema_path = files
        output_path = tmp_path / "out.avro"

        assert main([
            str(xml_path), "-s", str(schema_path),
            "--format", "avro", "--codec", codec, "-o", str(output_path),
        ]) == 0

        with output_path.open("rb") as f:
            assert list(fastavro.reader(f)) == [{"Order": {"id": 7, "placed": None}}]
        assert "Record written to" in capsys.readouterr().err

    def test_write_error(self, files, tmp_path: Path, capsys, monkeypatch) -> None:
        """Test a container write error exits with status 1."""
        xml_path, schema_path = files
        monkeypatch.setitem(sys.modules, "fastavro", None)

        assert main([
            str(xml_path), "-s", str(schema_path),
            "--format", "avro", "-o", str(tmp_path / "out.avro"),
        ]) == 1
        assert "requires fastavro" in capsys.readouterr().err
