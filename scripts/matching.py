#!/usr/bin/env python3
"""
Demo script for requirement-trainer matching.
Basic terminal output for trying the engine against sample data.
"""

import argparse
import json
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def load_candidates(path):
    """Load a JSON list of candidate profiles."""
    from nexus_match.data.models import Candidate

    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    candidates = [Candidate.model_validate(item) for item in data]
    print(f"  Loaded {len(candidates)} candidates from {path.name}")
    return candidates


def seed_directory(candidates):
    """Write candidates to the professionals collection."""
    from nexus_match.data.repositories import MongoCandidateDirectory

    directory = MongoCandidateDirectory()
    for candidate in candidates:
        directory.upsert(candidate)
    print(f"  Seeded {len(candidates)} professionals")


def run_batch(requirements_dir, candidates, top):
    """Match every requirement file in a directory against the candidates."""
    from nexus_match.core.matching import CandidateSnapshotProvider, MatchingEngine, summarize

    engine = MatchingEngine(snapshot_provider=CandidateSnapshotProvider.from_candidates(candidates))
    requirement_files = sorted(requirements_dir.glob("*.json"))
    print(f"\nFound {len(requirement_files)} requirements")

    try:
        for idx, path in enumerate(requirement_files, 1):
            print("\n" + "="*60)
            print(f"REQUIREMENT {idx}/{len(requirement_files)}: {path.name}")
            print("="*60)

            with open(path, encoding="utf-8") as f:
                requirement = json.load(f)
            print(f"Sector: {requirement.get('sector')}  Training: {requirement.get('trainingType') or requirement.get('training_type')}")

            response = engine.match(requirement, top)
            if not response.is_ok:
                print(f"  Match {response.status.value}")
                continue

            print(f"\n{'Rank':<5} {'Trainer':<25} {'Score':<8} {'Strength':<12} {'Top reason'}")
            print("-"*70)
            for r in response.results:
                reason = r.reasons[0] if r.reasons else "-"
                print(f"{r.rank:<5} {(r.name or r.professional_id)[:24]:<25} {r.score:.0%}     {r.strength.value:<12} {reason}")

            insights = response.insights
            print(f"\nAverage score: {insights.average_score:.0%}, strongest factor: {insights.strongest_factor}")
            if response.results:
                print(f"Top match: {summarize(response.results[0], requirement.get('trainingType'))}")
    finally:
        engine.close()

    print("\n" + "="*60)
    print("BATCH MATCHING COMPLETE")
    print("="*60)


def run_reverse(professional_id, candidates):
    """List live jobs for one professional."""
    from nexus_match.core.matching import CandidateSnapshotProvider, MatchingEngine

    engine = MatchingEngine(snapshot_provider=CandidateSnapshotProvider.from_candidates(candidates))
    try:
        matches = engine.match_jobs_for_candidate(professional_id)
    finally:
        engine.close()

    if not matches:
        print("  No live jobs matched.")
        return
    for m in matches:
        print(f"{m.rank:<5} {m.title[:40]:<41} {m.score:.0%}  {m.strength.value}")


def main():
    parser = argparse.ArgumentParser(description="Trainer Matching Demo")
    parser.add_argument("--candidates", type=Path,
                       default=project_root / "data" / "samples" / "candidates.json")
    parser.add_argument("--requirements-dir", type=Path,
                       default=project_root / "data" / "samples" / "requirements")
    parser.add_argument("--top", type=int, default=5, help="Results per requirement")
    parser.add_argument("--professional", help="Reverse-match live jobs for this professional id")
    parser.add_argument("--seed", action="store_true", help="Also write candidates to MongoDB")

    args = parser.parse_args()

    print("\n" + "="*60)
    print("Nexus Match: Trainer Matching Demo")
    print("="*60)

    from nexus_match.utils.logger import setup_logging

    setup_logging()

    try:
        candidates = load_candidates(args.candidates)
        if args.seed:
            seed_directory(candidates)

        if args.professional:
            run_reverse(args.professional, candidates)
        else:
            run_batch(args.requirements_dir, candidates, args.top)

    except KeyboardInterrupt:
        print("\nInterrupted.")
    except Exception as e:
        print(f"Error: {e}")
        raise


if __name__ == "__main__":
    main()
