"""tests for module scorer"""

import csv
import os

import pytest

from domaingen.archive_writer import BatchArchiveWriter
from domaingen.delivery import FileDelivery
from domaingen.enumerator import CombinationEnumerator
from domaingen.exceptions import InvalidInputError
from domaingen.scorer import (
    DomainEvaluator,
    iter_domains,
    load_and_evaluate_domains,
    score_domains,
)


def write_lines(path, lines):
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))


def test_filter_rules():
    """4+ consonants, non-letters and 16+ characters are dropped"""
    evaluator = DomainEvaluator()
    assert evaluator.evaluate_domain("bcdfg.com") is None, "5 consonants in a row"
    assert evaluator.evaluate_domain("xbcdx.com") is None, "4 consonants in a row"
    assert evaluator.evaluate_domain("aaa1.com") is None, "digits are not letters"
    assert evaluator.evaluate_domain("my-app.io") is None, "hyphen is not a letter"
    assert evaluator.evaluate_domain("abababababababab.com") is None, "16 characters"
    assert evaluator.evaluate_domain("abababababababa.com") is not None, "15 characters is allowed"
    assert evaluator.evaluate_domain("yyyy.com") is not None, "y counts as a vowel"


def test_score_arithmetic():
    """known names and their expected scores"""
    evaluator = DomainEvaluator()
    # good word 30 + 1 vowel 5 + 2 alternations 6 + short 20
    assert evaluator.evaluate_domain("web.com").score == 61
    # 3 vowels 15 + short 20
    assert evaluator.evaluate_domain("aaa.fr").score == 35
    # consonant run -15 + short 20
    assert evaluator.evaluate_domain("str.net").score == 5
    # 1 vowel 5 + 1 alternation 3 + short 20
    assert evaluator.evaluate_domain("abc.io").score == 28
    # 3 vowels 15 + 5 alternations 15 + short 5
    assert evaluator.evaluate_domain("banana.com").score == 35
    # good word 30 + 3 vowels 15 + 6 alternations 18, no length bonus at 7
    assert evaluator.evaluate_domain("digital.com").score == 63
    # 8 vowels 40 + 14 alternations 42
    assert evaluator.evaluate_domain("abababababababa.com").score == 82


def test_domain_is_lowercased():
    """scoring is case insensitive and reports the lowercased domain"""
    result = DomainEvaluator().evaluate_domain("AbC.COM")
    assert result.domain == "abc.com"
    assert result.score == 28


def test_sort_order_and_output_file(tmp_path):
    """results are sorted by score, ties keep input order, filtered names are gone"""
    source = os.path.join(str(tmp_path), "domains.csv")
    output = os.path.join(str(tmp_path), "best_domains.csv")
    write_lines(source, ["str.com", "web.com", "aaa.com", "bcdfg.com", "yyyy.com"])

    scores = score_domains(source, output)
    assert [(s.domain, s.score) for s in scores] == [
        ("web.com", 61), ("aaa.com", 35), ("yyyy.com", 35), ("str.com", 5),
    ]

    with open(output, encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["domain", "score"]
    assert rows[1:] == [["web.com", "61"], ["aaa.com", "35"], ["yyyy.com", "35"], ["str.com", "5"]]


def test_reads_generated_archive(tmp_path):
    """all domains_part entries of a generated zip are read in part order"""
    records = CombinationEnumerator().generate(1, ["com", "net"])
    BatchArchiveWriter(max_rows_per_file=5, delivery=FileDelivery(str(tmp_path))).write(records)
    archive = os.path.join(str(tmp_path), "domains.zip")

    domains = list(iter_domains(archive))
    assert len(domains) == 52
    assert domains[:3] == ["a.com", "a.net", "b.com"]
    assert domains[-1] == "z.net"

    scores = load_and_evaluate_domains(archive)
    assert len(scores) == 52, "single letters are never filtered"
    assert scores[0].domain in ("a.com", "a.net"), "a vowel scores highest"


def test_reads_loose_part_files_in_numeric_order(tmp_path):
    """directory sources use part number order, not string order"""
    write_lines(os.path.join(str(tmp_path), "domains_part_10.csv"), ["late.com"])
    write_lines(os.path.join(str(tmp_path), "domains_part_2.csv"), ["early.com", "", "next.com"])
    write_lines(os.path.join(str(tmp_path), "other.csv"), ["ignored.com"])

    assert list(iter_domains(str(tmp_path))) == ["early.com", "next.com", "late.com"]


def test_bad_sources():
    """missing files and broken archives are reported"""
    with pytest.raises(FileNotFoundError):
        list(iter_domains("/nonexistent/domains.zip"))


def test_broken_zip_rejected(tmp_path):
    """a .zip path that is not an archive is invalid input"""
    path = os.path.join(str(tmp_path), "broken.zip")
    write_lines(path, ["not a zip"])
    with pytest.raises(InvalidInputError):
        list(iter_domains(path))
