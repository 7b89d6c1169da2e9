"""
Tests for single-file upload orchestration.
"""

from pathlib import Path
from unittest.mock import Mock

import pytest

from resumable_uploader.core.domain.files import FileHandle
from resumable_uploader.core.domain.upload import ProgressEvent, UploadState
from resumable_uploader.core.exceptions import ServerRejected, TransportError
from resumable_uploader.core.interfaces.upload import IProgressSink
from resumable_uploader.core.services.orchestrator import UploadOrchestrator
from resumable_uploader.presentation.sinks import RecordingProgressSink

from conftest import StubNegotiator, StubTransmitter


def make_file(tmp_path: Path, name: str, size: int) -> FileHandle:
    path = tmp_path / name
    path.write_bytes(bytes(i % 251 for i in range(size)))
    return FileHandle.from_path(path)


class TestUploadOrchestrator:
    """Test cases for UploadOrchestrator."""

    @pytest.fixture
    def negotiator(self) -> StubNegotiator:
        return StubNegotiator()

    @pytest.fixture
    def transmitter(self) -> StubTransmitter:
        return StubTransmitter(step=100_000)

    @pytest.fixture
    def sink(self) -> RecordingProgressSink:
        return RecordingProgressSink()

    @pytest.fixture
    def orchestrator(
        self,
        negotiator: StubNegotiator,
        transmitter: StubTransmitter,
        sink: RecordingProgressSink
    ) -> UploadOrchestrator:
        return UploadOrchestrator(negotiator, transmitter, sink, chunk_size=512_000)

    async def test_three_chunk_scenario(
        self,
        tmp_path: Path,
        orchestrator: UploadOrchestrator,
        negotiator: StubNegotiator,
        transmitter: StubTransmitter,
        sink: RecordingProgressSink
    ) -> None:
        """1.5 MB file goes out as three chunks in order."""
        file = make_file(tmp_path, "big.bin", 1_500_000)

        outcome = await orchestrator.upload(file)

        assert outcome.state == UploadState.COMPLETE
        assert outcome.succeeded
        assert outcome.chunks_sent == 3
        assert outcome.bytes_confirmed == 1_500_000
        assert negotiator.calls == ["big.bin"]
        assert transmitter.sent == [
            ("big.bin", 0, 512_000),
            ("big.bin", 512_000, 512_000),
            ("big.bin", 1_024_000, 476_000),
        ]
        final = sink.last("big.bin")
        assert final is not None
        assert final.percentage == 100.0
        assert final.status_text == "Done!"
        assert final.state == UploadState.COMPLETE

    async def test_progress_is_monotonic_and_bounded(
        self,
        tmp_path: Path,
        orchestrator: UploadOrchestrator,
        sink: RecordingProgressSink
    ) -> None:
        """Percentages never decrease and stay within [0, 100]."""
        file = make_file(tmp_path, "big.bin", 1_500_000)

        await orchestrator.upload(file)

        percentages = sink.percentages("big.bin")
        assert len(percentages) > 3
        assert percentages == sorted(percentages)
        assert all(0.0 <= p <= 100.0 for p in percentages)
        assert percentages[-1] == 100.0

    async def test_progress_uses_chunk_offset(
        self,
        tmp_path: Path,
        orchestrator: UploadOrchestrator,
        sink: RecordingProgressSink
    ) -> None:
        """Progress inside the second chunk counts the first chunk's bytes."""
        file = make_file(tmp_path, "f.bin", 1_024_000)

        await orchestrator.upload(file)

        expected = ProgressEvent.compute("f.bin", 512_000, 100_000, 1_024_000)
        assert expected in sink.events

    async def test_resume_sends_only_remaining_chunks(
        self,
        tmp_path: Path,
        orchestrator: UploadOrchestrator,
        negotiator: StubNegotiator,
        transmitter: StubTransmitter,
        sink: RecordingProgressSink
    ) -> None:
        """Negotiated offset skips chunks the server already holds."""
        file = make_file(tmp_path, "big.bin", 1_500_000)
        negotiator.offsets["big.bin"] = 512_000

        outcome = await orchestrator.upload(file)

        assert outcome.resume_offset == 512_000
        assert transmitter.starts_for("big.bin") == [512_000, 1_024_000]
        first = sink.for_file("big.bin")[0]
        assert first.percentage == pytest.approx(512_000 / 1_500_000 * 100)

    async def test_interrupted_then_resumed(
        self,
        tmp_path: Path,
        negotiator: StubNegotiator,
        transmitter: StubTransmitter
    ) -> None:
        """Interrupt after the first chunk, resume from the next chunk's start."""
        file = make_file(tmp_path, "big.bin", 1_500_000)
        transmitter.failures["big.bin"] = TransportError("connection reset")
        transmitter.fail_at["big.bin"] = 512_000
        orchestrator = UploadOrchestrator(negotiator, transmitter, chunk_size=512_000)

        first = await orchestrator.upload(file)
        assert first.state == UploadState.FAILED
        assert transmitter.starts_for("big.bin") == [0]

        del transmitter.failures["big.bin"]
        negotiator.offsets["big.bin"] = 512_000
        second = await orchestrator.upload(file)

        assert second.succeeded
        assert transmitter.starts_for("big.bin") == [0, 512_000, 1_024_000]

    async def test_file_already_complete(
        self,
        tmp_path: Path,
        orchestrator: UploadOrchestrator,
        negotiator: StubNegotiator,
        transmitter: StubTransmitter,
        sink: RecordingProgressSink
    ) -> None:
        """Nothing is sent when the server holds the whole file."""
        file = make_file(tmp_path, "done.bin", 1000)
        negotiator.offsets["done.bin"] = 1000

        outcome = await orchestrator.upload(file)

        assert outcome.succeeded
        assert transmitter.sent == []
        assert [e.status_text for e in sink.events] == ["Done!"]

    async def test_offset_beyond_size_is_clamped(
        self,
        tmp_path: Path,
        orchestrator: UploadOrchestrator,
        negotiator: StubNegotiator,
        transmitter: StubTransmitter
    ) -> None:
        """A server offset past the end counts as complete."""
        file = make_file(tmp_path, "f.bin", 1000)
        negotiator.offsets["f.bin"] = 5000

        outcome = await orchestrator.upload(file)

        assert outcome.succeeded
        assert outcome.resume_offset == 1000
        assert transmitter.sent == []

    async def test_zero_byte_file(
        self,
        tmp_path: Path,
        orchestrator: UploadOrchestrator,
        transmitter: StubTransmitter,
        sink: RecordingProgressSink
    ) -> None:
        """Empty file completes without sending anything."""
        file = make_file(tmp_path, "empty.bin", 0)

        outcome = await orchestrator.upload(file)

        assert outcome.succeeded
        assert transmitter.sent == []
        assert sink.percentages("empty.bin") == [100.0]

    async def test_server_rejection_stops_upload(
        self,
        tmp_path: Path,
        orchestrator: UploadOrchestrator,
        transmitter: StubTransmitter,
        sink: RecordingProgressSink
    ) -> None:
        """A rejected chunk fails the file; later chunks are not attempted."""
        file = make_file(tmp_path, "big.bin", 1_500_000)
        transmitter.failures["big.bin"] = ServerRejected("Failed to write chunk", 500)
        transmitter.fail_at["big.bin"] = 512_000

        outcome = await orchestrator.upload(file)

        assert outcome.state == UploadState.FAILED
        assert outcome.error == "Upload failed: Failed to write chunk"
        assert outcome.bytes_confirmed == 512_000
        assert transmitter.starts_for("big.bin") == [0]
        final = sink.last("big.bin")
        assert final is not None
        assert final.state == UploadState.FAILED
        assert final.status_text == "Upload failed: Failed to write chunk"

    async def test_failure_event_does_not_regress(
        self,
        tmp_path: Path,
        orchestrator: UploadOrchestrator,
        transmitter: StubTransmitter,
        sink: RecordingProgressSink
    ) -> None:
        """The failure event keeps the highest percentage already shown."""
        file = make_file(tmp_path, "big.bin", 1_500_000)
        transmitter.failures["big.bin"] = TransportError("reset")
        transmitter.fail_at["big.bin"] = 512_000

        await orchestrator.upload(file)

        percentages = sink.percentages("big.bin")
        assert percentages == sorted(percentages)

    async def test_transport_error_reports_network_error(
        self,
        tmp_path: Path,
        orchestrator: UploadOrchestrator,
        transmitter: StubTransmitter
    ) -> None:
        """Transport failures surface as "Network error"."""
        file = make_file(tmp_path, "f.bin", 100)
        transmitter.failures["f.bin"] = TransportError("Cannot connect")

        outcome = await orchestrator.upload(file)

        assert outcome.state == UploadState.FAILED
        assert outcome.error == "Network error"
        assert outcome.chunks_sent == 0

    async def test_out_of_order_progress_is_ignored(
        self,
        tmp_path: Path,
        negotiator: StubNegotiator,
        sink: RecordingProgressSink
    ) -> None:
        """Regressing or out-of-range byte counts do not produce events."""
        file = make_file(tmp_path, "f.bin", 1000)

        class NoisyTransmitter(StubTransmitter):
            async def send(self, filename, start, data, total_size, on_progress):  # type: ignore[no-untyped-def]
                for count in (500, 200, 500, 5000, -1, 1000):
                    on_progress(count)

        orchestrator = UploadOrchestrator(negotiator, NoisyTransmitter(), sink, chunk_size=1000)
        await orchestrator.upload(file)

        assert sink.percentages("f.bin") == [0.0, 50.0, 100.0, 100.0]

    async def test_sink_errors_do_not_abort_upload(
        self,
        tmp_path: Path,
        negotiator: StubNegotiator,
        transmitter: StubTransmitter
    ) -> None:
        """A failing sink is logged and ignored."""
        file = make_file(tmp_path, "f.bin", 1000)
        sink = Mock(spec=IProgressSink)
        sink.publish.side_effect = RuntimeError("widget gone")
        orchestrator = UploadOrchestrator(negotiator, transmitter, sink, chunk_size=300)

        outcome = await orchestrator.upload(file)

        assert outcome.succeeded
        assert sink.publish.called

    async def test_unreadable_file_fails_upload(
        self,
        tmp_path: Path,
        orchestrator: UploadOrchestrator,
        transmitter: StubTransmitter
    ) -> None:
        """A file that disappears mid-upload fails with a read error."""
        file = make_file(tmp_path, "gone.bin", 100)
        file.path.unlink()

        outcome = await orchestrator.upload(file)

        assert outcome.state == UploadState.FAILED
        assert outcome.error is not None
        assert "Cannot read" in outcome.error
        assert transmitter.sent == []

    async def test_works_without_sink(
        self,
        tmp_path: Path,
        negotiator: StubNegotiator,
        transmitter: StubTransmitter
    ) -> None:
        orchestrator = UploadOrchestrator(negotiator, transmitter, chunk_size=64)

        outcome = await orchestrator.upload(make_file(tmp_path, "f.bin", 200))

        assert outcome.succeeded
        assert transmitter.starts_for("f.bin") == [0, 64, 128, 192]

    def test_invalid_chunk_size(self, negotiator: StubNegotiator, transmitter: StubTransmitter) -> None:
        with pytest.raises(ValueError):
            UploadOrchestrator(negotiator, transmitter, chunk_size=0)
