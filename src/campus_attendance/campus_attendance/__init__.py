"""Campus attendance core.

Feature modules (attendance, term, stats, jobs) keep a pure domain layer
(status resolution, rollups, rate calculation) behind thin repository and
CLI layers.
"""
