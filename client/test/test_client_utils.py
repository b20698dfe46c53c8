from datetime import timezone

import pytest

from client.local.demo_store import DemoError, DemoStore
from client.utils.format import format_date, format_file_size


@pytest.mark.parametrize("size, expected", [
    (0, "0 Bytes"),
    (None, "0 Bytes"),
    (512, "512 Bytes"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (5 * 1024 * 1024, "5 MB"),
    (1234567, "1.18 MB"),
    (3 * 1024 ** 3, "3 GB"),
])
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_format_date():
    assert format_date("2024-01-02T03:04:05.678Z", tz=timezone.utc) == "2024-01-02 03:04"
    assert format_date(None) == "—"
    assert format_date("yesterday") == "yesterday"


class TestDemoStore:
    def test_create_and_login(self, tmp_path):
        store = DemoStore(str(tmp_path / "demo.json"))
        store.create("alice", "pw")
        assert store.current_user is None

        store.login("alice", "pw")
        assert store.current_user == "alice"
        assert store.get_storage()["files"] == []

        store.logout()
        assert store.current_user is None
        with pytest.raises(DemoError):
            store.get_storage()

    def test_password_not_stored_plain(self, tmp_path):
        path = tmp_path / "demo.json"
        DemoStore(str(path)).create("alice", "secret-pw")
        assert "secret-pw" not in path.read_text()

    def test_login_failures(self, tmp_path):
        store = DemoStore(str(tmp_path / "demo.json"))
        with pytest.raises(DemoError):
            store.login("nobody", "pw")
        store.create("alice", "pw")
        with pytest.raises(DemoError):
            store.login("alice", "nope")

    def test_logout_without_file(self, tmp_path):
        path = tmp_path / "demo.json"
        DemoStore(str(path)).logout()
        assert not path.exists()
