"""Severity-filtered console logging and test-result reporting for inference tools."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Sequence, TextIO

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class Severity(IntEnum):
    """Message severity; a lower value is more severe."""

    INTERNAL_ERROR = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    VERBOSE = 4


class TestResult(Enum):
    """State of a reported test."""

    __test__ = False

    RUNNING = "RUNNING"
    PASSED = "PASSED"
    FAILED = "FAILED"
    WAIVED = "WAIVED"


_PREFIXES = {
    Severity.INTERNAL_ERROR: "[F] ",
    Severity.ERROR: "[E] ",
    Severity.WARNING: "[W] ",
    Severity.INFO: "[I] ",
    Severity.VERBOSE: "[V] ",
}


def _severity_stream(severity: Severity) -> TextIO:
    return sys.stdout if severity >= Severity.INFO else sys.stderr


def _timestamp() -> str:
    return time.strftime("[%m/%d/%Y-%H:%M:%S] ", time.localtime())


@dataclass
class TestAtom:
    """Handle describing one test whose progress is reported."""

    __test__ = False

    name: str
    cmdline: str
    started: bool = False


class LogStream:
    """Buffered message of one severity, written out on flush if severe enough.

    Messages at INFO or below go to stdout, more severe ones to stderr,
    unless a stream is given.
    """

    def __init__(self, reportable_severity, severity, stream: TextIO | None = None):
        self.severity = Severity(severity)
        self.should_log = self.severity <= Severity(reportable_severity)
        self.prefix = _PREFIXES[self.severity]
        self._stream = stream
        self._buffer: list[str] = []

    def write(self, text: str) -> int:
        self._buffer.append(str(text))
        return len(text)

    def flush(self) -> None:
        """Write the timestamped, prefixed buffer and empty it."""
        if not self.should_log:
            return
        out = self._stream if self._stream is not None else _severity_stream(self.severity)
        out.write(_timestamp() + self.prefix + "".join(self._buffer))
        self._buffer.clear()
        out.flush()

    def set_reportable_severity(self, severity) -> None:
        self.should_log = self.severity <= Severity(severity)

    def __enter__(self) -> LogStream:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._buffer:
            self.flush()


class Logger:
    """Logger that emits messages at or above a reportable severity."""

    def __init__(self, severity=Severity.WARNING):
        self.reportable_severity = Severity(severity)

    def log(self, severity, msg: str) -> None:
        with self.stream(severity) as out:
            out.write("[TRT] " + str(msg) + "\n")
            out.flush()

    def stream(self, severity) -> LogStream:
        """A message stream of the given severity filtered by this logger."""
        return LogStream(self.reportable_severity, severity)

    @staticmethod
    def define_test(name: str, cmdline: str | Sequence[str]) -> TestAtom:
        """A test handle; cmdline may be a string or a list of arguments."""
        if not isinstance(cmdline, str):
            cmdline = " ".join(str(arg) for arg in cmdline)
        return TestAtom(name, cmdline)

    @staticmethod
    def _report_result(atom: TestAtom, result: TestResult) -> None:
        out = _severity_stream(Severity.INFO)
        out.write(f"&&&& {result.value} {atom.name} # {atom.cmdline}\n")
        out.flush()

    @staticmethod
    def report_test_start(atom: TestAtom) -> None:
        if atom.started:
            raise RuntimeError(f"test {atom.name!r} has already started")
        Logger._report_result(atom, TestResult.RUNNING)
        atom.started = True

    @staticmethod
    def report_test_end(atom: TestAtom, result: TestResult) -> None:
        result = TestResult(result)
        if result is TestResult.RUNNING:
            raise ValueError("a finished test cannot be reported as running")
        if not atom.started:
            raise RuntimeError(f"test {atom.name!r} was never started")
        Logger._report_result(atom, result)

    @staticmethod
    def report_pass(atom: TestAtom) -> int:
        Logger.report_test_end(atom, TestResult.PASSED)
        return EXIT_SUCCESS

    @staticmethod
    def report_fail(atom: TestAtom) -> int:
        Logger.report_test_end(atom, TestResult.FAILED)
        return EXIT_FAILURE

    @staticmethod
    def report_waive(atom: TestAtom) -> int:
        Logger.report_test_end(atom, TestResult.WAIVED)
        return EXIT_SUCCESS

    @staticmethod
    def report_test(atom: TestAtom, passed: bool) -> int:
        return Logger.report_pass(atom) if passed else Logger.report_fail(atom)


def log_verbose(logger: Logger) -> LogStream:
    return LogStream(logger.reportable_severity, Severity.VERBOSE)


def log_info(logger: Logger) -> LogStream:
    return LogStream(logger.reportable_severity, Severity.INFO)


def log_warn(logger: Logger) -> LogStream:
    return LogStream(logger.reportable_severity, Severity.WARNING)


def log_error(logger: Logger) -> LogStream:
    return LogStream(logger.reportable_severity, Severity.ERROR)


def log_fatal(logger: Logger) -> LogStream:
    return LogStream(logger.reportable_severity, Severity.INTERNAL_ERROR)