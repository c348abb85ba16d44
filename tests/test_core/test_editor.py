"""Tests for the editor session."""

import pytest

from whenkit.config import EditorConfig
from whenkit.editor import EditorSession, editor_text, parse_editor_text
from whenkit.provider import ProviderRegistry
from whenkit.query import Query, QueryOptions
from whenkit.validation import StatusKind
from whenkit.values import ConditionValue


FAST = EditorConfig(debounce_seconds=0.01)


class RecordingValidator:
    def __init__(self):
        self.calls = []

    async def validate_condition(self, bucket, entry, condition):
        self.calls.append((bucket, entry, condition))
        return {"valid": True}


class FakeHost:
    def __init__(self):
        self.registrations = 0

    def register_completion_item_provider(self, language, provider):
        self.registrations += 1


def make_session(query=None, validator=None, registry=None):
    return EditorSession(
        query or Query(bucket="b", entry="e"),
        validator or RecordingValidator(),
        registry=registry if registry is not None else ProviderRegistry(),
        config=FAST,
    )


class TestEditorText:
    def test_absent(self):
        assert editor_text(None) == ""

    def test_raw_string_verbatim(self):
        assert editor_text("{ broken") == "{ broken"

    def test_structured_pretty_printed(self):
        text = editor_text(ConditionValue.from_json({"&a": {"$eq": 1}}))
        assert text == '{\n  "&a": {\n    "$eq": 1\n  }\n}'

    def test_parse_blank(self):
        assert parse_editor_text("   \n") is None

    def test_parse_json(self):
        assert parse_editor_text(' {"&a": 1} ').to_json() == {"&a": 1}

    def test_parse_oversized_integer_kept_verbatim(self):
        text = '{"&a": ' + "1" * 5000 + "}"
        assert parse_editor_text(text) == text

    def test_parse_invalid_kept_verbatim(self):
        assert parse_editor_text('{ "$each_t": $__interval }') == '{ "$each_t": $__interval }'


class TestEditorSession:
    @pytest.mark.asyncio
    async def test_on_change_updates_query_and_validates(self):
        validator = RecordingValidator()
        session = make_session(validator=validator)
        query = session.on_change('{"&a": 1}')
        assert query.when.to_json() == {"&a": 1}
        assert session.query is query
        await session.coordinator.drain()
        assert len(validator.calls) == 1
        assert session.status.kind == StatusKind.VALID
        await session.close()

    @pytest.mark.asyncio
    async def test_text_reflects_condition(self):
        session = make_session()
        session.on_change("not json")
        assert session.text == "not json"
        session.on_change("")
        assert session.text == ""
        assert session.query.when is None
        await session.close()

    @pytest.mark.asyncio
    async def test_set_entry_clears_prerequisite(self):
        validator = RecordingValidator()
        query = Query(bucket="b", options=QueryOptions(when=ConditionValue.from_json({"&a": 1})))
        session = make_session(query=query, validator=validator)
        assert session.status.kind == StatusKind.MISSING_ENTRY
        session.set_entry("e")
        await session.coordinator.drain()
        assert session.query.entry == "e"
        assert session.status.kind == StatusKind.VALID
        assert validator.calls[0][:2] == ("b", "e")
        await session.close()

    @pytest.mark.asyncio
    async def test_set_bucket_to_none(self):
        session = make_session()
        session.set_bucket(None)
        await session.coordinator.drain()
        assert session.status.kind == StatusKind.MISSING_BUCKET
        await session.close()

    @pytest.mark.asyncio
    async def test_status_listener(self):
        seen = []
        session = make_session()
        session.on_status(seen.append)
        session.on_change('{"&a": 1}')
        await session.coordinator.drain()
        assert [s.kind for s in seen] == [StatusKind.LOADING, StatusKind.VALID]
        await session.close()

    def test_mount_registers_once_per_host(self):
        registry = ProviderRegistry()
        host = FakeHost()
        make_session(registry=registry).mount(host)
        make_session(registry=registry).mount(host)
        assert host.registrations == 1

    def test_host_given_at_construction(self):
        host = FakeHost()
        session = EditorSession(Query(), RecordingValidator(), registry=ProviderRegistry(), host=host)
        assert session.host is host
        assert host.registrations == 1

    @pytest.mark.asyncio
    async def test_close_detaches_host(self):
        session = make_session()
        session.mount(FakeHost())
        await session.close()
        assert session.host is None

    def test_complete_uses_document(self):
        session = make_session()
        labels = [item.label for item in session.complete("", 1)]
        assert "Simple label comparison" in labels

    def test_complete_in_non_empty_document(self):
        query = Query(bucket="b", entry="e", options=QueryOptions(when="{\n\n}"))
        session = make_session(query=query)
        assert session.complete("", 1, line_number=2) == []
