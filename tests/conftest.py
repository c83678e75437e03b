# tests/conftest.py
import pytest

from pyparsa.Cursor import Cursor
from pyparsa.Parser import as_parser
from pyparsa.Result import Ok, Err


def run_on(parser, input_str):
    """Run a parser over a fresh cursor, returning the result and the cursor."""
    cursor = Cursor(input_str, "test")
    return as_parser(parser).run(cursor), cursor


def assert_ok(res, value):
    assert isinstance(res, Ok), f"expected Ok({value!r}), got {res!r}"
    assert res.value == value


def assert_err(res, err_type):
    assert isinstance(res, Err), f"expected Err({err_type.__name__}), got {res!r}"
    assert isinstance(res.error, err_type), f"expected {err_type.__name__}, got {res.error!r}"


@pytest.fixture
def make_cursor():
    def _make(input_data, name="test"):
        return Cursor(input_data, name)

    return _make
