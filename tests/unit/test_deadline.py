import pytest

from guck.exceptions import Cancelled
from guck.services.deadline import Deadline


def test_no_time_limit():
    deadline = Deadline()

    deadline.check()
    assert deadline.remaining() is None
    assert deadline.git_kwargs() == {}
    assert deadline.cancelled is False


def test_time_limit_passed_to_git():
    deadline = Deadline(timeout=30)

    kwargs = deadline.git_kwargs()

    assert 0 < kwargs["kill_after_timeout"] <= 30


def test_expired():
    deadline = Deadline(timeout=0)

    assert deadline.expired is True
    with pytest.raises(Cancelled, match="exceeded"):
        deadline.check()


def test_cancel():
    deadline = Deadline(timeout=30)
    deadline.cancel()

    assert deadline.cancelled is True
    assert deadline.expired is False
    with pytest.raises(Cancelled, match="cancelled"):
        deadline.check()
