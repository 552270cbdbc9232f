"""Tests for the snapshot value and its publisher."""

import dataclasses
import threading

import pytest

from livescope.core.snapshot import FeatureSnapshot, PresentationFrame, SnapshotPublisher


class TestFeatureSnapshot:
    def test_empty_is_all_zero(self):
        snap = FeatureSnapshot.empty(16)
        assert snap.rms == 0.0
        assert snap.frequency == 0.0
        assert snap.bands == (0.0,) * 16
        assert snap.is_empty

    def test_is_immutable(self):
        snap = FeatureSnapshot(rms=0.5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.rms = 0.1

    def test_presentation_frame_exposes_snapshot_fields(self):
        snap = FeatureSnapshot(rms=0.25, frequency=440.0, bands=(0.1, 0.2), block_index=3)
        frame = PresentationFrame(snapshot=snap, track="a.wav", index=1, total=3)
        assert frame.rms == 0.25
        assert frame.frequency == 440.0
        assert frame.bands == (0.1, 0.2)


class TestSnapshotPublisher:
    def test_initial_read_is_nothing_yet(self):
        pub = SnapshotPublisher(band_count=8)
        snap = pub.read()
        assert snap == FeatureSnapshot.empty(8)
        assert pub.version == 0

    def test_publish_replaces_wholesale(self):
        pub = SnapshotPublisher(4)
        first = FeatureSnapshot(rms=0.1, bands=(1.0,) * 4, block_index=1)
        second = FeatureSnapshot(rms=0.2, bands=(2.0,) * 4, block_index=2)
        pub.publish(first)
        pub.publish(second)
        assert pub.read() is second
        assert pub.version == 2

    def test_reset_labels_new_track(self):
        pub = SnapshotPublisher(4)
        pub.publish(FeatureSnapshot(rms=0.9, bands=(1.0,) * 4, block_index=5, track="old.mp3"))
        pub.reset(track="new.mp3")
        snap = pub.read()
        assert snap.track == "new.mp3"
        assert snap.rms == 0.0
        assert snap.is_empty

    def test_read_versioned(self):
        pub = SnapshotPublisher(2)
        snap = FeatureSnapshot(rms=0.3, block_index=1)
        pub.publish(snap)
        assert pub.read_versioned() == (1, snap)

    def test_concurrent_reads_never_mix_blocks(self):
        """Every field a reader sees comes from the same published block."""
        pub = SnapshotPublisher(8)
        n_writes = 20000
        errors = []
        done = threading.Event()

        def writer():
            for i in range(1, n_writes + 1):
                pub.publish(
                    FeatureSnapshot(
                        rms=float(i),
                        frequency=float(i),
                        bands=(float(i),) * 8,
                        frames=i,
                        block_index=i,
                    )
                )
            done.set()

        def reader():
            while not done.is_set():
                snap = pub.read()
                i = snap.block_index
                if i == 0:
                    continue
                if not (snap.rms == snap.frequency == float(i) and snap.frames == i
                        and all(b == float(i) for b in snap.bands)):
                    errors.append(snap)

        readers = [threading.Thread(target=reader) for _ in range(3)]
        for t in readers:
            t.start()
        writer()
        for t in readers:
            t.join(timeout=10)

        assert errors == []
        assert pub.read().block_index == n_writes
