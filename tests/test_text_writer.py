"""
Tests for the text-writer command line.
"""

import io

import pytest

from text_writer import WriterConfig, main, parse_args, read_corpus


@pytest.fixture
def stdin(monkeypatch):
    def feed(text):
        monkeypatch.setattr("sys.stdin", io.StringIO(text))
    return feed


class TestReadCorpus:

    def test_joins_lines_without_terminators(self):
        assert read_corpus(io.StringIO("abc\r\ndef\nghi")) == "abcdefghi"

    def test_empty_stream(self):
        assert read_corpus(io.StringIO("")) == ""


class TestConfig:

    def test_parse_args(self):
        config = parse_args(["3", "100", "--seed", "5", "--dump", "--log-level", "info"])
        assert config == WriterConfig(order=3, length=100, seed=5, dump=True, log_level="INFO")

    def test_length_shorter_than_order(self):
        with pytest.raises(SystemExit) as exc:
            parse_args(["5", "2"])
        assert exc.value.code == 2

    def test_negative_order(self):
        with pytest.raises(ValueError):
            WriterConfig(order=-1, length=10)

    def test_unknown_log_level(self):
        with pytest.raises(ValueError):
            WriterConfig(order=1, length=10, log_level="chatty")


class TestMain:

    def test_generates_from_stdin(self, stdin, capsys):
        stdin("abc\nabc\n")
        assert main(["1", "7"]) == 0
        assert capsys.readouterr().out == "abcabca\n"

    def test_seeded_output_is_reproducible(self, stdin, capsys):
        corpus = "the quick brown fox jumps over the lazy dog\n" * 3

        stdin(corpus)
        main(["2", "80", "--seed", "11"])
        first = capsys.readouterr().out

        stdin(corpus)
        main(["2", "80", "--seed", "11"])
        second = capsys.readouterr().out

        assert first == second
        assert first.startswith("th")
        assert len(first.rstrip("\n")) == 80

    def test_dump_goes_to_stderr(self, stdin, capsys):
        stdin("abca")
        assert main(["1", "4", "--dump"]) == 0
        captured = capsys.readouterr()
        assert "Markov Model Order: 1" in captured.err
        assert "Markov Model Order" not in captured.out

    def test_corpus_shorter_than_order(self, stdin, capsys):
        stdin("ab")
        assert main(["3", "5"]) == 1
        assert capsys.readouterr().out == ""
