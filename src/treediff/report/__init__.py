"""Report module for difference records.

This package contains:
- record: DifferenceRecord, DifferenceType and ItemKind, with msgpack serialization
- writer: ReportWriter for the text report, msgpack record dumps and report launching
"""
