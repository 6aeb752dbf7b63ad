import inspect
import re
from pathlib import Path

import pytest

from runxpkg import errors, stackerr

FILE = "test_stackerr.py"


@pytest.fixture(autouse=True)
def relative_paths(monkeypatch):
    monkeypatch.setattr(stackerr, "base_path", str(Path(__file__).parent))


def _here():
    return inspect.currentframe().f_back.f_lineno


def _normalize(text):
    return re.sub(re.escape(FILE) + r":\d+", FILE + ":N", text)


@pytest.mark.parametrize("spec", ["v", "s", ""])
def test_no_wrap_plain(spec):
    assert format(stackerr.errorf("test"), spec) == "test"


@pytest.mark.parametrize("spec", ["+v", "+s"])
def test_no_wrap_plus(spec):
    got = format(stackerr.errorf("test error"), spec)
    assert _normalize(got) == f"test error\n{FILE}:N test error"


def test_no_wrap_quoted():
    assert format(stackerr.errorf("test error"), "q") == '"test error"'


def test_no_wrap_plus_quoted():
    got = format(stackerr.errorf("test error"), "+q")
    assert _normalize(got) == f'"test error"\n{FILE}:N test error'


def test_wrapped_plain():
    wrapped = stackerr.errorf("wrapped")
    err = stackerr.errorf("test error: {}", wrapped)
    assert f"{err:v}" == "test error: wrapped"
    assert str(err) == "test error: wrapped"


@pytest.mark.parametrize("spec", ["+v", "+s"])
def test_wrapped_plus(spec):
    wrapped = stackerr.errorf("wrapped")
    got = format(stackerr.errorf("test error: {}", wrapped), spec)
    assert _normalize(got) == (
        f"test error: wrapped\n{FILE}:N test error: wrapped\n{FILE}:N wrapped"
    )


def test_wrapped_quoted():
    wrapped = stackerr.errorf("wrapped")
    err = stackerr.errorf("test error: {}", wrapped)
    assert f"{err:q}" == '"test error: wrapped"'


def test_wrapped_plus_quoted():
    wrapped = stackerr.errorf("wrapped")
    got = f"{stackerr.errorf('test error: {}', wrapped):+q}"
    assert _normalize(got) == (
        f'"test error: wrapped"\n{FILE}:N test error: wrapped\n{FILE}:N wrapped'
    )


def test_joined_plain():
    joined = errors.join(
        stackerr.errorf("err1"), stackerr.errorf("err2"), stackerr.errorf("err3")
    )
    assert str(joined) == "err1\nerr2\nerr3"


def _joined_error():
    joined = errors.join(
        stackerr.errorf("err1"), stackerr.errorf("err2"), stackerr.errorf("err3")
    )
    return stackerr.errorf("joined:\n{}", joined)


_JOINED_CHAIN = (
    f'{FILE}:N "joined:\\nerr1\\nerr2\\nerr3"\n'
    f"\t[0] {FILE}:N err1\n"
    f"\t[1] {FILE}:N err2\n"
    f"\t[2] {FILE}:N err3"
)


@pytest.mark.parametrize("spec", ["+v", "+s"])
def test_joined_plus(spec):
    got = format(_joined_error(), spec)
    assert _normalize(got) == "joined:\nerr1\nerr2\nerr3\n" + _JOINED_CHAIN


def test_joined_quoted():
    assert f"{_joined_error():q}" == '"joined:\\nerr1\\nerr2\\nerr3"'


def test_joined_plus_quoted():
    got = f"{_joined_error():+q}"
    assert _normalize(got) == '"joined:\\nerr1\\nerr2\\nerr3"\n' + _JOINED_CHAIN


def test_example_wrapped_exact_lines():
    user = "gcurtis"
    wrapped, line_wrapped = stackerr.errorf("wrong password"), _here()
    err, line_err = stackerr.errorf('login "{}": {}', user, wrapped), _here()
    assert f"error: {err:+v}" == (
        'error: login "gcurtis": wrong password\n'
        f'{FILE}:{line_err} login "gcurtis": wrong password\n'
        f"{FILE}:{line_wrapped} wrong password"
    )


def test_example_joined_exact_lines():
    err_a, line_a = stackerr.errorf("error a"), _here()
    err1, line1 = stackerr.errorf("error 1: {}", err_a), _here()
    err2, line2 = stackerr.errorf("error 2"), _here()
    err3, line3 = stackerr.errorf("error 3"), _here()
    joined = errors.join(err1, err2, err3)
    err, line = stackerr.errorf("joined errors:\n{}", joined), _here()
    assert f"error: {err:+v}" == (
        "error: joined errors:\nerror 1: error a\nerror 2\nerror 3\n"
        f'{FILE}:{line} "joined errors:\\nerror 1: error a\\nerror 2\\nerror 3"\n'
        f"\t[0] {FILE}:{line1} error 1: error a\n"
        f"\t    {FILE}:{line_a} error a\n"
        f"\t[1] {FILE}:{line2} error 2\n"
        f"\t[2] {FILE}:{line3} error 3"
    )


def test_several_wrapped_arguments():
    first = stackerr.errorf("first")
    second = stackerr.errorf("second")
    err = stackerr.errorf("{} and {}", first, second)
    assert err.errors == [first, second]
    got = stackerr.format_chain(err)
    assert _normalize(got) == (
        f"{FILE}:N first and second\n\t[0] {FILE}:N first\n\t[1] {FILE}:N second"
    )


def test_frame_records_caller():
    err, line = stackerr.errorf("here"), _here()
    frame = err.frame()
    assert frame.lineno == line
    assert frame.filename.endswith(FILE)


def test_chain_stops_at_unlocated_error():
    err = stackerr.errorf("outer: {}", ValueError("inner"))
    assert _normalize(stackerr.format_chain(err)) == f"{FILE}:N outer: inner"


def test_is():
    wrapped = stackerr.errorf("wrapped")
    err = stackerr.errorf("error: {}", wrapped)
    assert err.__cause__ is wrapped

    missing = FileNotFoundError("missing")
    err = stackerr.errorf("error: {}", missing)
    assert err.__cause__ is missing


def test_as():
    wrapped = FileNotFoundError(2, "error", "/test/path")
    err = stackerr.errorf("error: {}", wrapped)
    assert isinstance(err.__cause__, FileNotFoundError)
    assert err.__cause__.filename == "/test/path"