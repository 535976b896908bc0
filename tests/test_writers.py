import io
import logging

import pytest

from kinetic import writers


@pytest.fixture
def lines():
    return ["Informational message", "Ill-conditioned metric"]


def test_no_op_writer_silent(lines, capfd, caplog):
    writer = writers.NoOpWriter()
    with caplog.at_level(logging.DEBUG):
        writer(*lines)
        writer()
    captured = capfd.readouterr()
    assert captured.out == ""
    assert captured.err == ""
    assert len(caplog.records) == 0


def test_stream_writer(lines):
    stream = io.StringIO()
    writer = writers.StreamWriter(stream)
    writer(*lines)
    assert stream.getvalue() == "".join(f"{line}\n" for line in lines)


def test_stream_writer_prefix(lines):
    stream = io.StringIO()
    writer = writers.StreamWriter(stream, prefix="# ")
    writer(*lines)
    assert stream.getvalue().splitlines() == [f"# {line}" for line in lines]


def test_stream_writer_no_lines():
    stream = io.StringIO()
    writers.StreamWriter(stream)()
    assert stream.getvalue() == ""


def test_logging_writer(lines, caplog):
    writer = writers.LoggingWriter()
    with caplog.at_level(logging.DEBUG, logger=writers.logger.name):
        writer(*lines)
    assert [record.getMessage() for record in caplog.records] == lines
    assert all(record.levelno == logging.WARNING for record in caplog.records)


def test_logging_writer_custom_logger_and_level(lines, caplog):
    logger = logging.getLogger("kinetic.tests")
    writer = writers.LoggingWriter(logger, logging.INFO)
    with caplog.at_level(logging.INFO, logger=logger.name):
        writer(*lines)
    assert all(record.name == logger.name for record in caplog.records)
    assert all(record.levelno == logging.INFO for record in caplog.records)
    assert len(caplog.records) == len(lines)


def test_writer_abstract():
    with pytest.raises(TypeError):
        writers.Writer()


def test_logging_writer_default_logger():
    assert writers.LoggingWriter().logger is writers.logger
