import io

from trackhelix.logging import Logger

def test_indented_messages():
    stream = io.StringIO()
    logger = Logger(file=stream)
    logger.log("outer ", 1)
    with logger.indent:
        logger.log("inner")
    logger.log("back")
    assert stream.getvalue() == "outer 1\n    inner\nback\n"

def test_max_log_indent_suppresses_nested_sections():
    stream = io.StringIO()
    logger = Logger(max_log_indent=0, file=stream)
    logger.log("shown")
    with logger.indent:
        assert not logger.logging_enabled
        logger.log("hidden")
    assert stream.getvalue() == "shown\n"

def test_negative_max_log_indent_is_silent():
    stream = io.StringIO()
    logger = Logger(max_log_indent=-1, file=stream)
    with logger.timed("work"):
        logger.log("hidden")
    assert stream.getvalue() == ""

def test_timed_section():
    stream = io.StringIO()
    logger = Logger(file=stream)
    with logger.timed("fitting"):
        logger.log("step")
    lines = stream.getvalue().splitlines()
    assert lines[0] == "fitting:"
    assert lines[1] == "    step"
    assert lines[2].startswith("done fitting: ")
    assert lines[2].endswith("s")

def test_timed_section_records_elapsed_time():
    logger = Logger(file=io.StringIO())
    with logger.timed("solve") as timer:
        assert timer.elapsed is None
    assert timer.caption == "solve"
    assert timer.elapsed >= 0.0

def test_default_stream_is_current_stdout(capsys):
    logger = Logger()
    logger.log("to stdout")
    assert capsys.readouterr().out == "to stdout\n"
