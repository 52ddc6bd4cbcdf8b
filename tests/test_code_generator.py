import re

import pytest

from quizroom.core.code_generator import JoinCodeGenerator


def test_codes_use_uppercase_alphanumerics():
    generator = JoinCodeGenerator()
    for _ in range(200):
        assert re.fullmatch(r"[A-Z0-9]{6}", generator.next_code())


def test_seeded_generators_repeat():
    first = JoinCodeGenerator(seed=7)
    second = JoinCodeGenerator(seed=7)
    assert [first.next_code() for _ in range(5)] == [second.next_code() for _ in range(5)]


def test_invalid_configuration():
    with pytest.raises(ValueError):
        JoinCodeGenerator(alphabet="")
    with pytest.raises(ValueError):
        JoinCodeGenerator(length=0)
