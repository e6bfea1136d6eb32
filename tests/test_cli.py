import pytest
from inquirer.errors import ValidationError

from src.console.cli import _positive_int_validator, _validate_file_exists, _validate_gas_price


@pytest.mark.parametrize("value", ["0.23", "0", " 1.5 ", "10"])
def test_gas_price_accepted(value):
    assert _validate_gas_price({}, value) is True


@pytest.mark.parametrize("value", ["", "abc", "-0.1", "nan", "NaN", "inf", "-Infinity"])
def test_gas_price_rejected(value):
    with pytest.raises(ValidationError):
        _validate_gas_price({}, value)


def test_file_in_working_directory(tmp_path, monkeypatch):
    (tmp_path / "my_wallets.json").write_text("[]", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert _validate_file_exists({}, "my_wallets.json") is True


def test_file_in_project_root_from_other_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert _validate_file_exists({}, "wallets.example.json") is True


@pytest.mark.parametrize("value", ["", "missing.json"])
def test_missing_file_rejected(tmp_path, monkeypatch, value):
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ValidationError):
        _validate_file_exists({}, value)


def test_positive_int_validator():
    validate = _positive_int_validator("number of votes")

    assert validate({}, "74") is True
    for value in ("0", "-3", "many"):
        with pytest.raises(ValidationError):
            validate({}, value)
