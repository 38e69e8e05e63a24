"""
Tests for the state store adapters.
"""

import json

import pytest
import requests

from meetingplanner.adapters import HttpStateStore, JsonFileStateStore, LocalCacheStore
from meetingplanner.domain.exceptions import InvalidIdentifierError, StoreError

WEEK_KEY = "1738537200000"


class TestJsonFileStateStore:
    """Tests for the single-file JSON store."""

    def test_missing_file_reads_empty(self, tmp_path):
        store = JsonFileStateStore(tmp_path / "data" / "meetings.json")

        assert store.read("team", WEEK_KEY) == {}

    def test_write_then_read(self, tmp_path):
        store = JsonFileStateStore(tmp_path / "data" / "meetings.json")

        stored = store.write("team", WEEK_KEY, {"0-10": [0, 1]})

        assert stored == {"0-10": [0, 1]}
        assert store.read("team", WEEK_KEY) == {"0-10": [0, 1]}

    def test_file_layout(self, tmp_path):
        """Meetings and weeks nest inside one JSON document."""
        data_file = tmp_path / "meetings.json"
        store = JsonFileStateStore(data_file)

        store.write("team", WEEK_KEY, {"0-10": [0]})
        store.write("team", "0", {"1-12": [3]})
        store.write("other", WEEK_KEY, {})

        assert json.loads(data_file.read_text(encoding="utf-8")) == {
            "team": {WEEK_KEY: {"0-10": [0]}, "0": {"1-12": [3]}},
            "other": {WEEK_KEY: {}},
        }

    def test_last_write_wins(self, tmp_path):
        store = JsonFileStateStore(tmp_path / "meetings.json")

        store.write("team", WEEK_KEY, {"0-10": [0]})
        store.write("team", WEEK_KEY, {"2-15": [4]})

        assert store.read("team", WEEK_KEY) == {"2-15": [4]}

    def test_none_payload_stores_empty_state(self, tmp_path):
        store = JsonFileStateStore(tmp_path / "meetings.json")

        assert store.write("team", WEEK_KEY, None) == {}

    def test_non_object_payload_raises(self, tmp_path):
        store = JsonFileStateStore(tmp_path / "meetings.json")

        with pytest.raises(StoreError, match="JSON object"):
            store.write("team", WEEK_KEY, ["0-10"])

    def test_corrupt_file_raises(self, tmp_path):
        data_file = tmp_path / "meetings.json"
        data_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreError):
            JsonFileStateStore(data_file).read("team", WEEK_KEY)

    @pytest.mark.parametrize(
        "meeting_id,week_start",
        [
            ("", WEEK_KEY),
            ("bad id", WEEK_KEY),
            ("a" * 65, WEEK_KEY),
            ("../etc", WEEK_KEY),
            ("team", ""),
            ("team", "-5"),
            ("team", "12.5"),
            ("team\n", WEEK_KEY),
            ("team", "1\n"),
            ("team", "\u0661\u0662\u0663"),
        ]
    )
    def test_invalid_identifiers_are_rejected(self, tmp_path, meeting_id, week_start):
        """Malformed keys never reach the file."""
        data_file = tmp_path / "meetings.json"
        store = JsonFileStateStore(data_file)

        with pytest.raises(InvalidIdentifierError):
            store.write(meeting_id, week_start, {})
        with pytest.raises(InvalidIdentifierError):
            store.read(meeting_id, week_start)

        assert not data_file.exists()

    def test_longest_valid_meeting_id(self, tmp_path):
        store = JsonFileStateStore(tmp_path / "meetings.json")
        meeting_id = "A-z_0" * 12 + "abcd"

        store.write(meeting_id, WEEK_KEY, {"0-10": [0]})

        assert store.read(meeting_id, WEEK_KEY) == {"0-10": [0]}

    @pytest.mark.parametrize("content", [{"team": ["oops"]}, {"team": "x"}, {"team": None}])
    def test_malformed_meeting_entry_raises(self, tmp_path, content):
        """A meeting entry that is not an object is reported, not crashed on."""
        data_file = tmp_path / "meetings.json"
        data_file.write_text(json.dumps(content), encoding="utf-8")
        store = JsonFileStateStore(data_file)

        with pytest.raises(StoreError, match="meeting team"):
            store.read("team", WEEK_KEY)
        with pytest.raises(StoreError, match="meeting team"):
            store.write("team", WEEK_KEY, {"0-10": [0]})

        assert json.loads(data_file.read_text(encoding="utf-8")) == content

    def test_malformed_week_entry_raises(self, tmp_path):
        data_file = tmp_path / "meetings.json"
        data_file.write_text(json.dumps({"team": {WEEK_KEY: [1, 2]}}), encoding="utf-8")
        store = JsonFileStateStore(data_file)

        with pytest.raises(StoreError, match="JSON object"):
            store.read("team", WEEK_KEY)

        assert store.write("team", WEEK_KEY, {"0-10": [0]}) == {"0-10": [0]}
        assert store.read("team", WEEK_KEY) == {"0-10": [0]}

    def test_other_meetings_survive_a_write(self, tmp_path):
        data_file = tmp_path / "meetings.json"
        data_file.write_text(json.dumps({"other": {"0": {"1-12": [3]}}}), encoding="utf-8")

        JsonFileStateStore(data_file).write("team", WEEK_KEY, {})

        assert json.loads(data_file.read_text(encoding="utf-8")) == {
            "other": {"0": {"1-12": [3]}},
            "team": {WEEK_KEY: {}},
        }


class TestLocalCacheStore:
    """Tests for the per-week on-device cache."""

    def test_cache_key_prefix(self, tmp_path):
        assert LocalCacheStore(tmp_path).cache_key("team", WEEK_KEY) == f"meeting-planner-{WEEK_KEY}"
        assert (
            LocalCacheStore(tmp_path, per_meeting=True).cache_key("team", WEEK_KEY)
            == f"meeting-planner-team-{WEEK_KEY}"
        )

    def test_write_then_read(self, tmp_path):
        store = LocalCacheStore(tmp_path / "cache")

        store.write("team", WEEK_KEY, {"0-10": [1]})

        assert store.read("team", WEEK_KEY) == {"0-10": [1]}
        assert (tmp_path / "cache" / f"meeting-planner-{WEEK_KEY}.json").exists()

    def test_missing_entry_reads_empty(self, tmp_path):
        assert LocalCacheStore(tmp_path).read("team", WEEK_KEY) == {}

    def test_corrupt_entry_reads_empty(self, tmp_path):
        (tmp_path / f"meeting-planner-{WEEK_KEY}.json").write_text("[[[", encoding="utf-8")

        assert LocalCacheStore(tmp_path).read("team", WEEK_KEY) == {}

    def test_non_object_entry_reads_empty(self, tmp_path):
        (tmp_path / f"meeting-planner-{WEEK_KEY}.json").write_text("[1, 2]", encoding="utf-8")

        assert LocalCacheStore(tmp_path).read("team", WEEK_KEY) == {}

    def test_meetings_are_separate_when_keyed_per_meeting(self, tmp_path):
        store = LocalCacheStore(tmp_path, per_meeting=True)

        store.write("a", WEEK_KEY, {"0-10": [0]})

        assert store.read("b", WEEK_KEY) == {}

    def test_clear(self, tmp_path):
        store = LocalCacheStore(tmp_path)
        store.write("team", WEEK_KEY, {"0-10": [0]})
        store.write("team", "0", {})
        (tmp_path / "unrelated.json").write_text("{}", encoding="utf-8")

        assert store.clear() == 2
        assert store.read("team", WEEK_KEY) == {}
        assert (tmp_path / "unrelated.json").exists()

    def test_invalid_identifier(self, tmp_path):
        with pytest.raises(InvalidIdentifierError):
            LocalCacheStore(tmp_path).read("team/../x", WEEK_KEY)

    @pytest.mark.parametrize(
        "meeting_id,week_start",
        [("team\n", WEEK_KEY), ("team", "1\n"), ("team", "\u0661\u0662\u0663")]
    )
    def test_trailing_newline_and_non_ascii_digits_are_rejected(self, tmp_path, meeting_id, week_start):
        store = LocalCacheStore(tmp_path / "cache")

        with pytest.raises(InvalidIdentifierError):
            store.write(meeting_id, week_start, {"0-10": [0]})

        assert not (tmp_path / "cache").exists()


class FakeResponse:
    """Just enough of requests.Response for the store."""

    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self._payload


class FakeSession:
    """Records calls and replays a canned response."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def _request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        return self._request("GET", url, **kwargs)

    def put(self, url, **kwargs):
        return self._request("PUT", url, **kwargs)


class TestHttpStateStore:
    """Tests for the REST client store."""

    def test_read_requests_week_state(self):
        session = FakeSession(FakeResponse({"0-10": [0]}))
        store = HttpStateStore("http://planner.local/", session=session, timeout=5)

        assert store.read("team", WEEK_KEY) == {"0-10": [0]}
        assert session.calls == [
            (
                "GET",
                "http://planner.local/api/meetings/team/state",
                {"params": {"weekStart": WEEK_KEY}, "timeout": 5},
            )
        ]

    def test_write_puts_json_body(self):
        session = FakeSession(FakeResponse({"1-12": [2]}))
        store = HttpStateStore("http://planner.local", session=session)

        stored = store.write("team", WEEK_KEY, {"1-12": [2]})

        method, url, kwargs = session.calls[0]
        assert stored == {"1-12": [2]}
        assert method == "PUT"
        assert url == "http://planner.local/api/meetings/team/state"
        assert kwargs["json"] == {"1-12": [2]}
        assert kwargs["params"] == {"weekStart": WEEK_KEY}

    def test_null_response_reads_empty(self):
        store = HttpStateStore("http://planner.local", session=FakeSession(FakeResponse(None)))

        assert store.read("team", WEEK_KEY) == {}

    def test_http_error_raises_store_error(self):
        session = FakeSession(FakeResponse({"error": "Invalid meeting ID"}, status_code=400))
        store = HttpStateStore("http://planner.local", session=session)

        with pytest.raises(StoreError, match="Failed to load"):
            store.read("team", WEEK_KEY)

    def test_connection_error_raises_store_error(self):
        session = FakeSession(error=requests.exceptions.ConnectionError("refused"))
        store = HttpStateStore("http://planner.local", session=session)

        with pytest.raises(StoreError, match="Failed to save"):
            store.write("team", WEEK_KEY, {})

    def test_non_object_response_raises(self):
        store = HttpStateStore("http://planner.local", session=FakeSession(FakeResponse([1])))

        with pytest.raises(StoreError):
            store.read("team", WEEK_KEY)

    def test_invalid_identifier_skips_request(self):
        session = FakeSession(FakeResponse({}))
        store = HttpStateStore("http://planner.local", session=session)

        with pytest.raises(InvalidIdentifierError):
            store.read("team", "abc")

        assert session.calls == []
