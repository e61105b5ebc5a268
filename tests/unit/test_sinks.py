"""Tests for the reference sinks and the sink registry."""

from __future__ import annotations

import logging
from pathlib import Path

from ingestflow.config import IngestConfig
from ingestflow.models.records import SerializedRecord
from ingestflow.routing.fanout import FanOutPersister
from ingestflow.routing.registry import build_sink_set
from ingestflow.routing.sinks import BaseSink
from ingestflow.routing.sinks.local_file import LocalFileSink
from ingestflow.routing.sinks.logging_sink import LoggingSink
from ingestflow.routing.sinks.memory import InMemorySink


class TestLocalFileSink:
    def test_write_read_round_trip(self, tmp_path: Path):
        sink = LocalFileSink("history", tmp_path)
        record = SerializedRecord(message_id="m1", fields={"OtherValue": "v"})
        sink.save(record)

        files = sink.list_records()
        assert [f.name for f in files] == ["m1.json"]
        assert sink.read_record(files[0]) == record

    def test_redelivery_overwrites_same_file(self, tmp_path: Path):
        sink = LocalFileSink("history", tmp_path)
        sink.save(SerializedRecord(message_id="m1", fields={"OtherValue": "old"}))
        sink.save(SerializedRecord(message_id="m1", fields={"OtherValue": "new"}))

        files = sink.list_records()
        assert len(files) == 1
        assert sink.read_record(files[0]).fields["OtherValue"] == "new"

    def test_writes_under_sink_name(self, tmp_path: Path):
        sink = LocalFileSink("excluded", tmp_path)
        assert sink.directory == tmp_path / "excluded"
        assert sink.sink_name == "excluded"

    def test_empty_record_gets_generated_name(self, tmp_path: Path):
        sink = LocalFileSink("unknown", tmp_path)
        sink.save(SerializedRecord())
        sink.save(SerializedRecord())
        names = [f.name for f in sink.list_records()]
        assert len(names) == 2
        assert all(name.startswith("anonymous-") for name in names)

    def test_message_id_cannot_escape_directory(self, tmp_path: Path):
        sink = LocalFileSink("history", tmp_path)
        sink.save(SerializedRecord(message_id="../../etc/passwd"))
        files = sink.list_records()
        assert len(files) == 1
        assert files[0].parent == tmp_path / "history"

    def test_canonical_json_on_disk(self, tmp_path: Path):
        sink = LocalFileSink("history", tmp_path)
        sink.save(SerializedRecord(message_id="m1", fields={"b": "2", "a": "1"}))
        raw = (tmp_path / "history" / "m1.json").read_bytes()
        assert raw == b'{"fields":{"a":"1","b":"2"},"message_id":"m1"}'


class TestLoggingSink:
    def test_logs_record(self, caplog):
        sink = LoggingSink("unknown")
        with caplog.at_level(logging.WARNING, logger="ingestflow.routing.sinks.logging_sink"):
            sink.save(SerializedRecord(message_id="x1"))
        assert "Sink unknown received record message_id='x1'" in caplog.text


class TestSinkProtocol:
    def test_reference_sinks_satisfy_protocol(self, tmp_path: Path):
        for sink in (
            LocalFileSink("a", tmp_path),
            LoggingSink(),
            InMemorySink("m"),
        ):
            assert isinstance(sink, BaseSink)


class TestBuildSinkSet:
    def test_default_wiring(self, tmp_path: Path):
        sinks = build_sink_set(IngestConfig(sink_base_path=tmp_path))

        assert isinstance(sinks.success, FanOutPersister)
        assert [s.sink_name for s in sinks.success.sinks] == ["history", "external"]
        assert sinks.excluded.sink_name == "excluded"
        assert isinstance(sinks.unknown, LoggingSink)

    def test_success_fan_out_writes_each_sink(self, tmp_path: Path):
        sinks = build_sink_set(IngestConfig(sink_base_path=tmp_path))
        sinks.success.save(SerializedRecord(message_id="m3"))
        assert (tmp_path / "history" / "m3.json").exists()
        assert (tmp_path / "external" / "m3.json").exists()

    def test_custom_success_sinks(self, tmp_path: Path):
        config = IngestConfig(sink_base_path=tmp_path, success_sinks=["archive"])
        sinks = build_sink_set(config)
        assert [s.sink_name for s in sinks.success.sinks] == ["archive"]

    def test_persist_unknown(self, tmp_path: Path):
        config = IngestConfig(sink_base_path=tmp_path, persist_unknown=True)
        sinks = build_sink_set(config)
        sinks.unknown.save(SerializedRecord())
        assert len(list((tmp_path / "unknown").glob("*.json"))) == 1

    def test_base_path_argument_wins(self, tmp_path: Path):
        config = IngestConfig(sink_base_path=tmp_path / "ignored")
        build_sink_set(config, tmp_path / "used")
        assert (tmp_path / "used" / "excluded").is_dir()
        assert not (tmp_path / "ignored").exists()

    def test_as_dict(self, sink_set):
        assert set(sink_set.as_dict()) == {"success", "excluded", "unknown"}
