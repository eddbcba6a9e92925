"""Tests for config loading."""

from pathlib import Path

import pytest

from sqlexport.config import ExportConfig, load_config, read_sql
from sqlexport.errors import ConfigError

TOML = """
sql_type = "postgres"
connect_string = "host=localhost dbname=shop"
sql_file = "query.sql"
header_tmpl_file = "header.tmpl"
row_tmpl_file = "row.tmpl"
"""


class TestLoadConfig:
    def test_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(TOML, encoding="utf-8")
        cfg = load_config(path)
        assert cfg == ExportConfig(
            sql_type="postgres",
            connect_string="host=localhost dbname=shop",
            sql_file=Path("query.sql"),
            header_tmpl_file=Path("header.tmpl"),
            row_tmpl_file=Path("row.tmpl"),
        )
        assert cfg.output_encoding == "utf-8"
        assert cfg.batch_size == 1000

    def test_yaml_with_optional_keys(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "sql_type: sqlite\n"
            "connect_string: data.db\n"
            "sql_file: q.sql\n"
            "header_tmpl_file: h.tmpl\n"
            "row_tmpl_file: r.tmpl\n"
            "output_encoding: latin-1\n"
            "batch_size: 50\n",
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg.sql_type == "sqlite"
        assert cfg.output_encoding == "latin-1"
        assert cfg.batch_size == 50

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Open config file"):
            load_config(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("sql_type = ", encoding="utf-8")
        with pytest.raises(ConfigError, match="Parse config file"):
            load_config(path)

    def test_yaml_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)


class TestFromMapping:
    def setup_method(self):
        self.payload = {
            "sql_type": "sqlite",
            "connect_string": "x.db",
            "sql_file": "q.sql",
            "header_tmpl_file": "h.tmpl",
            "row_tmpl_file": "r.tmpl",
        }

    def test_missing_keys(self):
        del self.payload["sql_file"]
        self.payload["row_tmpl_file"] = ""
        with pytest.raises(ConfigError, match="Missing config keys: sql_file, row_tmpl_file"):
            ExportConfig.from_mapping(self.payload)

    def test_non_string_value(self):
        self.payload["connect_string"] = 5
        with pytest.raises(ConfigError, match="connect_string"):
            ExportConfig.from_mapping(self.payload)

    @pytest.mark.parametrize("batch_size", [0, -1, "10", True])
    def test_bad_batch_size(self, batch_size):
        self.payload["batch_size"] = batch_size
        with pytest.raises(ConfigError, match="batch_size"):
            ExportConfig.from_mapping(self.payload)

    def test_unknown_encoding(self):
        self.payload["output_encoding"] = "no-such-codec"
        with pytest.raises(ConfigError, match="output_encoding"):
            ExportConfig.from_mapping(self.payload)


def test_read_sql(tmp_path):
    path = tmp_path / "q.sql"
    path.write_text("SELECT 1\n", encoding="utf-8")
    assert read_sql(path) == "SELECT 1\n"
    with pytest.raises(ConfigError, match="Open sql file"):
        read_sql(tmp_path / "missing.sql")
