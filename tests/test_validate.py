import enum

import pytest

from dndreg.core.errors import ContractError, InvalidTypeError, RegistryError
from dndreg.core.validate import validate_source_contract, validate_target_contract, validate_type
from handlers import NormalSource, NormalTarget, SourceWithoutEndDrag


class ItemTypes(enum.Enum):
    CARD = "card"
    NOTE = "note"


@pytest.mark.parametrize("tag", ["drag", "", ItemTypes.CARD])
def test_single_tags_pass(tag):
    validate_type(tag)
    validate_type(tag, True)


def test_sequences_only_when_allowed():
    validate_type(["a", ItemTypes.NOTE], True)
    validate_type(("a", "a"), True)  # duplicates are kept as-is
    validate_type([], True)
    with pytest.raises(InvalidTypeError, match="string or a symbol"):
        validate_type(["a", "b"])


def test_nested_sequences_are_rejected():
    with pytest.raises(InvalidTypeError, match="string or a symbol"):
        validate_type(["a", ["b"]], True)


@pytest.mark.parametrize("bad", [42, None, 1.5, {"a": 1}, {"a"}, b"drag"])
def test_wrong_shapes_are_rejected(bad):
    with pytest.raises(InvalidTypeError, match="sequence of either"):
        validate_type(bad, True)
    with pytest.raises(TypeError):
        validate_type(bad)


def test_source_contract_names_missing_capability():
    validate_source_contract(NormalSource())
    with pytest.raises(ContractError) as ei:
        validate_source_contract({})
    assert ei.value.capability == "can_drag"
    assert "can_drag" in str(ei.value)

    with pytest.raises(ContractError) as ei:
        validate_source_contract(SourceWithoutEndDrag())
    assert ei.value.capability == "end_drag"


def test_target_contract_checks_each_method():
    validate_target_contract(NormalTarget())

    class NoDrop:
        def can_drop(self, monitor=None, handle=None):
            return True

        def hover(self, monitor=None, handle=None):
            pass

        drop = "not callable"

    with pytest.raises(ContractError) as ei:
        validate_target_contract(NoDrop())
    assert ei.value.capability == "drop"
    assert isinstance(ei.value, RegistryError)


def test_source_is_not_a_target():
    with pytest.raises(ContractError):
        validate_target_contract(NormalSource())
