import pytest

from errors import StorageError
from models import RequestState, RequestType
from schemas import StatusRecord


def stub(entry_id, title="Solo Leveling"):
    return {
        "type": "manga_asura",
        "id": entry_id,
        "phase": "stub",
        "title": title,
        "url": f"https://www.asurascans.com/manga/{entry_id}/",
        "scraped_at": "2023-03-01T10:00:00+00:00",
    }


def test_entry_roundtrip(store):
    assert store.get_entry("manga_asura", "solo-leveling") is None

    store.create_entry(stub("solo-leveling"))

    assert store.get_entry("manga_asura", "solo-leveling") == stub("solo-leveling")
    assert store.get_entry("manga_flame", "solo-leveling") is None


def test_duplicate_entry_is_a_storage_error(store):
    store.create_entry(stub("solo-leveling"))
    with pytest.raises(StorageError):
        store.create_entry(stub("solo-leveling"))


def test_get_collection(store):
    assert store.get_collection("manga_asura") is None

    store.create_entry(stub("solo-leveling"))
    store.create_entry(stub("swordmasters-youngest-son", "Swordmaster's Youngest Son"))

    collection = store.get_collection("manga_asura")
    assert sorted(e["id"] for e in collection) == ["solo-leveling", "swordmasters-youngest-son"]


def test_update_entry_merges(store):
    store.create_entry(stub("solo-leveling"))

    merged = store.update_entry("manga_asura", "solo-leveling", {
        "phase": "full",
        "cover": "https://www.asurascans.com/cover.jpg",
        "scraped_at": "2023-03-02T10:00:00+00:00",
    })

    assert merged["url"] == "https://www.asurascans.com/manga/solo-leveling/"
    assert merged["cover"] == "https://www.asurascans.com/cover.jpg"
    assert merged["phase"] == "full"
    assert store.get_entry("manga_asura", "solo-leveling") == merged


def test_update_missing_entry(store):
    with pytest.raises(StorageError):
        store.update_entry("manga_asura", "solo-leveling", {"phase": "full"})


def test_status_lifecycle(store):
    assert store.get_status("asura") is None

    status = store.create_status(
        StatusRecord(id="asura", request_type=RequestType.MANGA_LIST)
    )
    assert status.state == RequestState.PENDING
    assert status.failed_items == []
    assert status.created_at is not None

    status.state = RequestState.COMPLETED
    status.failed_items = ["solo-leveling"]
    store.update_status(status)

    stored = store.get_status("asura")
    assert stored.state == RequestState.COMPLETED
    assert stored.failed_items == ["solo-leveling"]
    assert stored.request_type == RequestType.MANGA_LIST


def test_create_status_resets_previous_run(store):
    store.create_status(StatusRecord(id="asura", state=RequestState.COMPLETED, failed_items=["a"]))

    status = store.create_status(StatusRecord(id="asura"))

    assert status.state == RequestState.PENDING
    assert status.failed_items == []


def test_update_missing_status(store):
    with pytest.raises(StorageError):
        store.update_status(StatusRecord(id="asura", state=RequestState.COMPLETED))
