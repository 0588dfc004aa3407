import uuid
from dataclasses import dataclass

import pytest

from clinicsvc.core import NIL_ID, BaseEntity, RecordNotFoundError
from clinicsvc.store import FilterOptions, InMemoryRepository, PaginationResult


@dataclass(kw_only=True)
class Item(BaseEntity):
    name: str = ""
    rank: int = 0


@pytest.fixture
def repo():
    return InMemoryRepository()


def make(repo, name, rank=0):
    item = Item(name=name, rank=rank)
    repo.create(item)
    return item


def test_create_assigns_id_and_timestamps(repo):
    item = make(repo, "alpha")
    assert item.id != NIL_ID
    assert item.created_at is not None
    assert item.updated_at == item.created_at


def test_find_by_id_returns_copy(repo):
    item = make(repo, "alpha")
    found = repo.find_by_id(item.id)
    assert found == item
    assert found is not item
    found.name = "changed"
    assert repo.find_by_id(item.id).name == "alpha"


def test_create_stores_a_copy(repo):
    item = make(repo, "alpha")
    item.name = "mutated"
    assert repo.find_by_id(item.id).name == "alpha"


def test_create_duplicate_id_rejected(repo):
    item = make(repo, "alpha")
    with pytest.raises(ValueError):
        repo.create(Item(id=item.id, name="beta"))


def test_find_missing_raises(repo):
    with pytest.raises(RecordNotFoundError, match="entity not found"):
        repo.find_by_id(uuid.uuid4())


def test_update_persists_and_keeps_created_at(repo):
    item = make(repo, "alpha")
    created = item.created_at
    item.name = "beta"
    repo.update(item)
    found = repo.find_by_id(item.id)
    assert found.name == "beta"
    assert found.created_at == created
    assert found.updated_at >= created


def test_update_missing_raises(repo):
    with pytest.raises(RecordNotFoundError):
        repo.update(Item(id=uuid.uuid4(), name="ghost"))


def test_soft_delete_hides_entity(repo):
    item = make(repo, "alpha")
    make(repo, "beta")
    repo.delete(item.id)
    with pytest.raises(RecordNotFoundError):
        repo.find_by_id(item.id)
    assert repo.count() == 1
    every = repo.find_all(FilterOptions(include_deleted=True))
    assert item.id in {i.id for i in every.items}
    deleted = next(i for i in every.items if i.id == item.id)
    assert deleted.deleted_at is not None


def test_hard_delete_removes_entity(repo):
    item = make(repo, "alpha")
    repo.delete(item.id, hard_delete=True)
    every = repo.find_all(FilterOptions(include_deleted=True))
    assert every.items == []
    assert every.total_items == 0


def test_delete_missing_raises(repo):
    with pytest.raises(RecordNotFoundError):
        repo.delete(uuid.uuid4())


def test_find_all_paginates(repo):
    names = [f"item{n}" for n in range(5)]
    for name in names:
        make(repo, name)
    last = repo.find_all(FilterOptions(page=3, page_size=2))
    assert [i.name for i in last.items] == names[4:]
    assert last.total_items == len(names)
    assert last.total_pages == 3
    first = repo.find_all(FilterOptions(page=1, page_size=2))
    assert [i.name for i in first.items] == names[:2]


def test_find_all_without_page_size_returns_everything(repo):
    for rank in range(4):
        make(repo, "x", rank)
    result = repo.find_all()
    assert isinstance(result, PaginationResult)
    assert len(result.items) == result.total_items
    assert result.total_pages == 1


def test_empty_result_has_no_pages(repo):
    assert repo.find_all().total_pages == 0


def test_sort_descending(repo):
    for rank in (2, 7, 4):
        make(repo, "x", rank)
    result = repo.find_all(FilterOptions(sort_by="rank", sort_desc=True))
    ranks = [i.rank for i in result.items]
    assert ranks == sorted(ranks, reverse=True)


def test_filter_and_count(repo):
    make(repo, "a", 1)
    make(repo, "b", 1)
    make(repo, "c", 2)
    result = repo.find_with_filter({"rank": 1})
    assert {i.name for i in result.items} == {"a", "b"}
    assert repo.count({"rank": 1}) == result.total_items
    assert repo.count({"rank": 99}) == 0


def test_filter_unknown_field_rejected(repo):
    make(repo, "a")
    with pytest.raises(ValueError):
        repo.find_with_filter({"colour": "red"})
    with pytest.raises(ValueError):
        repo.find_all(FilterOptions(sort_by="colour"))


@pytest.mark.parametrize("kwargs", [{"page": 0}, {"page_size": 0}])
def test_filter_options_validation(kwargs):
    with pytest.raises(ValueError):
        FilterOptions(**kwargs)