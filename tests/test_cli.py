"""tests for module cli"""

import os
import zipfile

import pytest

from domaingen import cli


def test_merge_arguments_overrides_config():
    """command line values win over the config file"""
    args = cli.parse_arguments(["-l", "2", "-s", "com, io", "-m", "10", "-o", "out", "-n", "x.zip"])
    merged = cli.merge_arguments({"length": 3, "suffixes": ["net"], "max_rows_per_file": 50000}, args)
    assert merged["length"] == 2
    assert merged["suffixes"] == ["com", "io"]
    assert merged["max_rows_per_file"] == 10
    assert merged["output_dir"] == "out"
    assert merged["archive_name"] == "x.zip"


def test_merge_arguments_keeps_config_when_absent():
    """unset options leave the config untouched"""
    args = cli.parse_arguments([])
    config = {"length": 3, "suffixes": ["net"]}
    assert cli.merge_arguments(config, args) == config


def test_main_generates_archive(tmp_path, monkeypatch):
    """full run through the command line"""
    monkeypatch.chdir(tmp_path)
    exit_code = cli.main(["-l", "1", "-s", "com,net", "-m", "20", "-o", "out"])

    assert exit_code == 0
    assert os.path.exists("config.txt"), "default config should be created"
    assert os.path.exists("log.txt")
    with zipfile.ZipFile(os.path.join("out", "domains.zip")) as archive:
        assert archive.namelist() == ["domains_part_1.csv", "domains_part_2.csv", "domains_part_3.csv"]


def test_main_rejects_invalid_length(tmp_path, monkeypatch):
    """an out-of-range length exits with code 2 and writes nothing"""
    monkeypatch.chdir(tmp_path)
    assert cli.main(["-l", "9", "-s", "com", "-o", "out"]) == 2
    assert not os.path.exists("out")


def test_main_rejects_empty_suffixes(tmp_path, monkeypatch):
    """only-empty suffixes fail validation"""
    monkeypatch.chdir(tmp_path)
    assert cli.main(["-l", "1", "-s", " , ", "-o", "out"]) == 2


def test_parser_error_is_localized(capsys):
    """argparse errors are reported with the localized prefix"""
    with pytest.raises(SystemExit) as excinfo:
        cli.parse_arguments(["--length", "abc"])
    assert excinfo.value.code == 2
    assert "错误" in capsys.readouterr().err


def test_archive_name_option_gets_zip_extension():
    """-n without .zip is normalized the same way as the config file"""
    args = cli.parse_arguments(["-n", "names"])
    assert cli.merge_arguments({}, args)["archive_name"] == "names.zip"
    args = cli.parse_arguments(["-n", "names.ZIP"])
    assert cli.merge_arguments({}, args)["archive_name"] == "names.ZIP"


def test_main_score_generated_archive(tmp_path, monkeypatch, capsys):
    """--score reads a generated archive and writes best_domains.csv"""
    monkeypatch.chdir(tmp_path)
    assert cli.main(["-l", "1", "-s", "com", "-o", "out", "-n", "letters"]) == 0
    assert os.path.exists(os.path.join("out", "letters.zip"))
    capsys.readouterr()

    exit_code = cli.main(["--score", os.path.join("out", "letters.zip"), "--top", "3"])
    assert exit_code == 0
    output = capsys.readouterr().out
    assert "1. a.com (得分: 35)" in output
    assert "4." not in output.split("最佳域名")[1].split("共评估")[0], "only the top 3 are printed"
    with open("best_domains.csv", encoding="utf-8") as f:
        lines = f.read().splitlines()
    assert lines[0] == "domain,score"
    assert len(lines) == 27


def test_main_score_missing_source(tmp_path, monkeypatch):
    """a missing scoring source exits with code 2"""
    monkeypatch.chdir(tmp_path)
    assert cli.main(["--score", "nothing.zip"]) == 2
    assert not os.path.exists("best_domains.csv")
