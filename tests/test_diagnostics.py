"""
Tests for diagnostic sinks, the sink registry and YAML configuration.
"""

import logging

import pytest
import yaml

from densevec import (
    FileSink,
    Level,
    LoggingSink,
    ReturnCode,
    create_vector,
    get_diagnostic_sink,
    set_diagnostic_sink,
)
from densevec.config import ConfigError, DEFAULT_CONFIG, build_sink, configure, load_config
from densevec.diagnostics import DiagnosticContext, DiagnosticSink, format_record


# ============================================================
# Registry
# ============================================================

class TestRegistry:

    def test_no_sink_is_silent(self):
        """Without a sink failures only show up as return codes."""
        assert get_diagnostic_sink() is None
        v = create_vector(1, [1.0])
        assert v.set_coordinate(3, 1.0) is ReturnCode.INVALID_ARGUMENT

    def test_replacing_closes_previous(self, sink):
        """Registering a new sink closes the old one."""
        replacement = LoggingSink()
        assert set_diagnostic_sink(replacement) is ReturnCode.SUCCESS
        assert sink.closed
        assert get_diagnostic_sink() is replacement

    def test_reregistering_same_sink_keeps_it_open(self, sink):
        """Setting the current sink again does not close it."""
        set_diagnostic_sink(sink)
        assert not sink.closed

    def test_injected_sink_takes_precedence(self, sink, own_sink):
        """A per-vector sink receives that vector's failures."""
        v = create_vector(1, [1.0], sink=own_sink)
        v.scale(float("nan"))
        assert own_sink.codes == [ReturnCode.INVALID_ARGUMENT]
        assert sink.records == []

    def test_context_and_level(self, sink):
        """Records carry WARNING and the detecting function."""
        v = create_vector(1, [1.0])
        v.get_coordinate(1)

        code, level, context = sink.records[0]
        assert code is ReturnCode.INVALID_ARGUMENT
        assert level is Level.WARNING
        assert context.function == "get_coordinate"
        assert context.filename == "vector.py"
        assert context.lineno > 0

    def test_failing_sink_does_not_change_outcome(self, caplog):
        """A sink that raises is logged and ignored."""

        class BrokenSink(DiagnosticSink):
            def notify(self, code, level=Level.WARNING, context=None):
                raise RuntimeError("sink down")

        set_diagnostic_sink(BrokenSink())
        v = create_vector(1, [1.0])

        with caplog.at_level(logging.ERROR, logger="densevec.diagnostics.registry"):
            assert v.set_coordinate(9, 1.0) is ReturnCode.INVALID_ARGUMENT
        assert "sink down" in caplog.text


# ============================================================
# Sinks
# ============================================================

class TestLoggingSink:

    def test_format_record(self):
        """Message label plus location."""
        context = DiagnosticContext("vector.py", "scale", 12)
        assert format_record(ReturnCode.INFINITY_OVERFLOW, context) == \
            "INFINITY OVERFLOW in scale (vector.py:12)"
        assert format_record(ReturnCode.NOT_NUMBER) == "NOT NUMBER"

    def test_forwards_to_logger(self, caplog):
        """Failures arrive as WARNING records on densevec.diagnostics."""
        set_diagnostic_sink(LoggingSink())
        v = create_vector(2, [1.0, 2.0])

        with caplog.at_level(logging.WARNING, logger="densevec.diagnostics"):
            v.scale(float("inf"))

        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.levelno == logging.WARNING
        assert record.getMessage().startswith("INFINITY OVERFLOW in scale")

    def test_severe_maps_to_error(self, caplog):
        """SEVERE is logged at ERROR."""
        sink = LoggingSink("densevec.test")
        with caplog.at_level(logging.INFO, logger="densevec.test"):
            sink.notify(ReturnCode.UNKNOWN, Level.SEVERE)
            sink.notify(ReturnCode.UNKNOWN, Level.INFO)
        assert [r.levelno for r in caplog.records] == [logging.ERROR, logging.INFO]


class TestFileSink:

    def test_writes_one_line_per_failure(self, tmp_path):
        """Each notification is one line in the file."""
        path = tmp_path / "vector.log"
        file_sink = FileSink(str(path))
        set_diagnostic_sink(file_sink)

        v = create_vector(2, [1.0, 2.0])
        v.set_coordinate(7, 1.0)
        v.scale(float("inf"))
        set_diagnostic_sink(None)

        lines = path.read_text().splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("WARNING INVALID ARGUMENT in set_coordinate")
        assert lines[1].startswith("WARNING INFINITY OVERFLOW in scale")

    def test_rewrite_vs_append(self, tmp_path):
        """rewrite_if_exist truncates, otherwise appends."""
        path = tmp_path / "vector.log"
        path.write_text("previous run\n")

        appending = FileSink(str(path), rewrite_if_exist=False)
        appending.notify(ReturnCode.NOT_NUMBER)
        appending.close()
        assert path.read_text().splitlines() == ["previous run", "WARNING NOT NUMBER"]

        rewriting = FileSink(str(path))
        rewriting.notify(ReturnCode.NOT_NUMBER)
        rewriting.close()
        assert path.read_text().splitlines() == ["WARNING NOT NUMBER"]

    def test_closed_sink(self, tmp_path):
        """A closed sink reports FILE_NOT_FOUND and writes nothing."""
        path = tmp_path / "vector.log"
        file_sink = FileSink(str(path))
        file_sink.close()
        file_sink.close()
        assert file_sink.notify(ReturnCode.UNKNOWN) is ReturnCode.FILE_NOT_FOUND
        assert path.read_text() == ""


# ============================================================
# Configuration
# ============================================================

class TestConfig:

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """No config file anywhere means defaults."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("DENSEVEC_CONFIG", raising=False)
        monkeypatch.setattr("densevec.config.loader.CONFIG_PATH", tmp_path / "missing")

        assert load_config() == DEFAULT_CONFIG

    def test_yaml_overrides_defaults(self, tmp_path):
        """Only the keys present in YAML change."""
        path = tmp_path / "densevec.yaml"
        path.write_text(yaml.safe_dump({"diagnostics": {"sink": "logging", "level": "ERROR"}}))

        config = load_config(path)
        assert config["diagnostics"]["sink"] == "logging"
        assert config["diagnostics"]["level"] == "ERROR"
        assert config["diagnostics"]["path"] == DEFAULT_CONFIG["diagnostics"]["path"]

    def test_env_var_path(self, tmp_path, monkeypatch):
        """$DENSEVEC_CONFIG is searched first."""
        path = tmp_path / "custom.yaml"
        path.write_text("diagnostics:\n  sink: file\n")
        monkeypatch.setenv("DENSEVEC_CONFIG", str(path))

        assert load_config()["diagnostics"]["sink"] == "file"

    def test_missing_explicit_file(self, tmp_path):
        """An explicit path must exist."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_non_mapping_rejected(self, tmp_path):
        """Top level must be a mapping."""
        path = tmp_path / "bad.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_build_sinks(self, tmp_path):
        """Each sink kind builds the matching class."""
        assert build_sink({"sink": "none"}) is None
        assert isinstance(build_sink({"sink": "logging"}), LoggingSink)

        file_sink = build_sink({"sink": "file", "path": str(tmp_path / "x.log"), "level": "ERROR"})
        assert isinstance(file_sink, FileSink)
        assert file_sink.logger.level == logging.ERROR
        file_sink.close()

    @pytest.mark.parametrize("section", [
        {"sink": "syslog"},
        {"sink": "logging", "level": "LOUD"},
    ])
    def test_bad_values(self, section):
        """Unknown sink kinds and levels raise ConfigError."""
        with pytest.raises(ConfigError):
            build_sink(section)

    def test_configure_registers_sink(self, tmp_path):
        """configure() installs the configured sink process-wide."""
        log_path = tmp_path / "configured.log"
        path = tmp_path / "densevec.yaml"
        path.write_text(yaml.safe_dump({"diagnostics": {"sink": "file", "path": str(log_path)}}))

        configure(path)
        assert isinstance(get_diagnostic_sink(), FileSink)

        create_vector(0, [1.0])
        set_diagnostic_sink(None)
        assert "INVALID ARGUMENT in create_vector" in log_path.read_text()
