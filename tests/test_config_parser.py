"""tests for module config_parser"""

import os

from domaingen.config_parser import DEFAULT_CONFIG, ConfigParser


def write_config(path, text):
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def test_parse_full_config(tmp_path):
    """all known keys are read"""
    path = os.path.join(str(tmp_path), "config.txt")
    write_config(path, """# comment
length = 4
suffixes = fr, , io
max_rows_per_file = 1000
output_dir = out
archive_name = names
compression = stored
""")
    config = ConfigParser(path).parse_config()
    assert config["length"] == 4
    assert config["suffixes"] == ["fr", "io"]
    assert config["max_rows_per_file"] == 1000
    assert config["output_dir"] == "out"
    assert config["archive_name"] == "names.zip", ".zip should be appended"
    assert config["compression"] == "stored"


def test_invalid_values_keep_defaults(tmp_path):
    """bad values are ignored with a warning"""
    path = os.path.join(str(tmp_path), "config.txt")
    write_config(path, """length = 12
max_rows_per_file = -5
compression = lzma
mystery = 1
this line has no separator
suffixes = ,
""")
    config = ConfigParser(path).parse_config()
    assert config["length"] == DEFAULT_CONFIG["length"]
    assert config["max_rows_per_file"] == DEFAULT_CONFIG["max_rows_per_file"]
    assert config["compression"] == DEFAULT_CONFIG["compression"]
    assert config["suffixes"] == DEFAULT_CONFIG["suffixes"], "empty suffixes fall back to defaults"
    assert "mystery" not in config


def test_missing_config_creates_default(tmp_path):
    """a commented default file is written when none exists"""
    path = os.path.join(str(tmp_path), "config.txt")
    config = ConfigParser(path).parse_config()
    assert config == DEFAULT_CONFIG
    assert os.path.exists(path)

    reparsed = ConfigParser(path).parse_config()
    assert reparsed == DEFAULT_CONFIG, "the generated file should parse back to the defaults"
