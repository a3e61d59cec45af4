import io
import re

import pytest

from openrm.tensorrt.logger import (
    LogStream,
    Logger,
    Severity,
    TestResult,
    log_error,
    log_fatal,
    log_info,
    log_verbose,
    log_warn,
)

STAMP = r"\[\d\d/\d\d/\d{4}-\d\d:\d\d:\d\d\] "


def test_error_goes_to_stderr_with_prefix(capsys):
    Logger(Severity.WARNING).log(Severity.ERROR, "boom")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert re.fullmatch(STAMP + r"\[E\] \[TRT\] boom\n", captured.err)


def test_info_suppressed_below_reportable(capsys):
    Logger(Severity.WARNING).log(Severity.INFO, "quiet")
    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""


def test_verbose_logger_prints_info_to_stdout(capsys):
    Logger(Severity.VERBOSE).log(Severity.INFO, "hello")
    captured = capsys.readouterr()
    assert re.fullmatch(STAMP + r"\[I\] \[TRT\] hello\n", captured.out)
    assert captured.err == ""


def test_default_severity_is_warning():
    assert Logger().reportable_severity == Severity.WARNING


def test_logstream_explicit_stream_and_buffer_cleared():
    out = io.StringIO()
    stream = LogStream(Severity.VERBOSE, Severity.WARNING, out)
    stream.write("a")
    stream.write("b\n")
    stream.flush()
    stream.flush()
    lines = out.getvalue().splitlines()
    assert len(lines) == 2
    assert re.match(STAMP, lines[0])
    assert re.match(STAMP, lines[1])
    assert lines[0].split("] ", 1)[1] == "[W] ab"
    assert lines[1].split("] ", 1)[1] == "[W] "


def test_logstream_set_reportable_severity():
    out = io.StringIO()
    stream = LogStream(Severity.ERROR, Severity.INFO, out)
    stream.write("x")
    stream.flush()
    assert out.getvalue() == ""
    stream.set_reportable_severity(Severity.INFO)
    stream.flush()
    assert out.getvalue().endswith("[I] x")


def test_logstream_context_flushes_pending():
    out = io.StringIO()
    with LogStream(Severity.WARNING, Severity.INTERNAL_ERROR, out) as stream:
        stream.write("fatal")
    assert out.getvalue().endswith("[F] fatal")


def test_invalid_severity_raises():
    with pytest.raises(ValueError):
        LogStream(Severity.WARNING, 9)


@pytest.mark.parametrize(
    "factory, severity, logged",
    [
        (log_verbose, Severity.VERBOSE, False),
        (log_info, Severity.INFO, False),
        (log_warn, Severity.WARNING, True),
        (log_error, Severity.ERROR, True),
        (log_fatal, Severity.INTERNAL_ERROR, True),
    ],
)
def test_log_factories(factory, severity, logged):
    stream = factory(Logger(Severity.WARNING))
    assert stream.severity == severity
    assert stream.should_log is logged


def test_define_test_joins_arguments():
    atom = Logger.define_test("TensorRT.sample", ["prog", "--x", "1"])
    assert atom.cmdline == "prog --x 1"
    assert atom.started is False


def test_report_start_and_pass(capsys):
    atom = Logger.define_test("TensorRT.sample", "prog -v")
    Logger.report_test_start(atom)
    assert atom.started
    assert Logger.report_pass(atom) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "&&&& RUNNING TensorRT.sample # prog -v",
        "&&&& PASSED TensorRT.sample # prog -v",
    ]


def test_report_fail_and_waive(capsys):
    atom = Logger.define_test("t", "c")
    Logger.report_test_start(atom)
    assert Logger.report_test(atom, False) == 1
    assert Logger.report_waive(atom) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[1] == "&&&& FAILED t # c"
    assert out[2] == "&&&& WAIVED t # c"


def test_start_twice_raises():
    atom = Logger.define_test("t", "c")
    Logger.report_test_start(atom)
    with pytest.raises(RuntimeError):
        Logger.report_test_start(atom)


def test_end_without_start_raises():
    atom = Logger.define_test("t", "c")
    with pytest.raises(RuntimeError):
        Logger.report_fail(atom)


def test_end_with_running_raises():
    atom = Logger.define_test("t", "c")
    Logger.report_test_start(atom)
    with pytest.raises(ValueError):
        Logger.report_test_end(atom, TestResult.RUNNING)