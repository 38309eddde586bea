import os

from services.storage_service import StorageService


def test_creates_base_directory(tmp_path):
    base = tmp_path / "nested" / "data"

    StorageService(str(base))

    assert base.is_dir()


def test_set_and_get_item(storage):
    assert storage.get_item("missing") is None

    assert storage.set_item("key", "value") is True
    assert storage.get_item("key") == "value"

    storage.set_item("key", "replaced")
    assert storage.get_item("key") == "replaced"


def test_remove_item(storage):
    storage.set_item("key", "value")

    storage.remove_item("key")
    storage.remove_item("key")

    assert storage.get_item("key") is None
    assert not os.path.exists(storage.get_path("key"))


def test_json_round_trip_keeps_unicode(storage):
    data = [{"title": "二分探索", "tags": ["a", "b"]}]

    storage.save_json("items", data)

    assert storage.load_json("items") == data
    assert "二分探索" in storage.get_item("items")


def test_load_json_returns_none_for_invalid_json(storage):
    storage.set_item("broken", "{not json")

    assert storage.load_json("broken") is None


def test_set_item_reports_write_failure(storage, tmp_path):
    # 保存先のパスをディレクトリにして書き込みを失敗させる
    os.makedirs(storage.get_path("blocked"))

    assert storage.set_item("blocked", "value") is False
