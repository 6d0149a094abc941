"""
Tests for nexus_match.core.matching.snapshot: versioned candidate snapshots.
"""

import dataclasses
import time

import pytest

from nexus_match.core.matching import CandidateSnapshot, CandidateSnapshotProvider
from nexus_match.data.repositories import InMemoryCandidateDirectory


# ── CandidateSnapshot ───────────────────────────────────────────────────────


class TestCandidateSnapshot:
    def test_is_immutable(self, make_candidate):
        snapshot = CandidateSnapshot(version=1, candidates=(make_candidate(),))
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.version = 2

    def test_len_and_get(self, make_candidate):
        snapshot = CandidateSnapshot(version=1, candidates=(make_candidate("a"), make_candidate("b")))
        assert len(snapshot) == 2
        assert snapshot.get("b").professional_id == "b"
        assert snapshot.get("zzz") is None

    def test_chunks(self, make_candidate):
        candidates = tuple(make_candidate(str(i)) for i in range(5))
        chunks = CandidateSnapshot(version=1, candidates=candidates).chunks(2)
        assert [len(c) for c in chunks] == [2, 2, 1]
        assert sum(chunks, ()) == candidates

    def test_empty_chunks(self):
        assert CandidateSnapshot(version=1).chunks(4) == []


# ── CandidateSnapshotProvider ───────────────────────────────────────────────


class TestSnapshotProvider:
    def test_first_snapshot_is_version_one(self, snapshot_provider):
        assert snapshot_provider.current().version == 1

    def test_current_is_stable_between_refreshes(self, snapshot_provider):
        assert snapshot_provider.current() is snapshot_provider.current()

    def test_refresh_bumps_version(self, snapshot_provider):
        first = snapshot_provider.current()
        second = snapshot_provider.refresh()
        assert second.version == first.version + 1
        assert snapshot_provider.current() is second

    def test_candidates_sorted_by_id(self, make_candidate):
        provider = CandidateSnapshotProvider.from_candidates(
            [make_candidate("c"), make_candidate("a"), make_candidate("b")]
        )
        assert [c.professional_id for c in provider.current().candidates] == ["a", "b", "c"]

    def test_held_snapshot_unaffected_by_directory_change(
        self, snapshot_provider, candidate_directory, make_candidate
    ):
        held = snapshot_provider.current()
        candidate_directory.upsert(make_candidate("new"))
        candidate_directory.remove("A")
        snapshot_provider.refresh()

        assert [c.professional_id for c in held.candidates] == ["A", "B"]
        assert [c.professional_id for c in snapshot_provider.current().candidates] == ["B", "new"]

    def test_directory_property(self, snapshot_provider, candidate_directory):
        assert snapshot_provider.directory is candidate_directory

    def test_auto_refresh(self, make_candidate):
        provider = CandidateSnapshotProvider(
            InMemoryCandidateDirectory([make_candidate()]), refresh_interval_seconds=0.02
        )
        provider.current()
        provider.start_auto_refresh()
        try:
            deadline = time.monotonic() + 5.0
            while provider.current().version < 3 and time.monotonic() < deadline:
                time.sleep(0.01)
            assert provider.current().version >= 3
        finally:
            provider.stop_auto_refresh()

    def test_stop_without_start(self, snapshot_provider):
        snapshot_provider.stop_auto_refresh()
