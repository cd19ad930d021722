"""Tests for report module.

Test Files and Coverage:
========================

| Test File                  | Test Classes                 | Tested Constructs                          | Tested Functionalities              |
|----------------------------|------------------------------|--------------------------------------------|-------------------------------------|
| test_difference_record.py  | DifferenceRecordTest         | DifferenceRecord                           | Invariants, immutability, msgpack   |
| test_report_writer.py      | ReportWriterRenderTest       | ReportWriter.render()                      | Line layout per kind and type       |
|                            | ReportWriterWriteTest        | ReportWriter.write()                       | Overwrite, UTF-8, write failures    |
|                            | RecordDumpTest               | write_records(), read_records()            | Order, empty dumps, failures        |
|                            | OpenReportTest               | open_report()                              | Viewer selection, missing report    |
"""
