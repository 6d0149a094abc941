"""
Core business logic modules for Nexus Match.

Submodules:
- exceptions: Error taxonomy shared by every component
- matching: Scoring, ranking, explanation and real-time match sessions
- jobs: Job posting lifecycle state machine
"""
