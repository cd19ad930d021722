"""Tests for command implementation modules.

Test Files and Coverage:
========================

| Test File          | Test Classes              | Tested Constructs              | Tested Functionalities                        |
|--------------------|---------------------------|--------------------------------|-----------------------------------------------|
| test_diff_tree.py  | TreeDifferTest            | TreeDiffer.diff(), summarize() | Added/removed/modified, subtrees, ordering    |
|                    | TreeDifferFailureTest     | TreeDiffer.diff()              | Missing roots, unreadable files, races        |
|                    | TreeDifferLoggingTest     | TreeDiffer logger              | Events on an injected logger                  |
|                    | DiffTreeIntegrationTest   | diff_trees(), do_diff_tree()   | Real directories, report and record output    |
"""
