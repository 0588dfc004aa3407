import uuid

import pytest

from clinicsvc.core import (
    NIL_ID,
    BaseEntity,
    ErrorType,
    RecordNotFoundError,
    UseCaseError,
)


def test_use_case_error_keeps_kind_and_message():
    err = UseCaseError(ErrorType.NOT_FOUND, "patient not found")
    assert err.kind is ErrorType.NOT_FOUND
    assert err.message == "patient not found"
    assert str(err) == "patient not found"
    assert isinstance(err, Exception)


def test_use_case_error_accepts_kind_value():
    err = UseCaseError(ErrorType.CONFLICT.value, "clash")
    assert err.kind is ErrorType.CONFLICT


def test_use_case_error_rejects_unknown_kind():
    with pytest.raises(ValueError):
        UseCaseError("no-such-kind", "boom")


def test_record_not_found_carries_message():
    err = RecordNotFoundError("entity not found")
    assert str(err) == "entity not found"
    assert isinstance(err, LookupError)


@pytest.mark.parametrize("kind", list(ErrorType))
def test_every_kind_round_trips_through_its_value(kind):
    err = UseCaseError(kind.value, "message")
    assert err.kind is kind


def test_base_entity_defaults_are_unset():
    entity = BaseEntity()
    assert entity.id == NIL_ID
    assert entity.created_at is None
    assert entity.updated_at is None
    assert entity.deleted_at is None


def test_default_id_is_all_zero():
    assert BaseEntity().id.int == 0


def test_touch_sets_updated_at():
    entity = BaseEntity(id=uuid.uuid4())
    entity.touch()
    first = entity.updated_at
    assert first is not None and first.tzinfo is not None
    entity.touch()
    assert entity.updated_at >= first