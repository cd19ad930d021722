import contextlib
import io
import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from treediff import cli
from treediff.cli import treediff_main
from treediff.report.writer import read_records

from .test_utils import write_tree


class TreediffMainTest(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        self.saved_handlers = root.handlers[:]
        self.saved_level = root.level
        self.console = io.StringIO()
        # Keep console output out of the test runner's stderr
        patcher = mock.patch.object(cli, 'configure_logging', side_effect=self._configure_logging)
        self.configure_logging = patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        for handler in self.saved_handlers:
            root.addHandler(handler)
        root.setLevel(self.saved_level)

    def _configure_logging(self, level, log_file=None):
        from treediff.utils.logs import configure_logging
        configure_logging(level, log_file, stream=self.console, use_color=False)

    def _make_trees(self, tmpdir: str) -> tuple[Path, Path]:
        baseline = Path(tmpdir) / 'baseline'
        modified = Path(tmpdir) / 'modified'
        write_tree(baseline, {'a': {'x.txt': b'hi', 'b': {'y.txt': b'y'}}})
        write_tree(modified, {'a': {'x.txt': b'ho', 'c': {'z.txt': b'z'}}})
        return baseline, modified

    def test_writes_report(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)
            output = Path(tmpdir) / 'out.txt'

            status = treediff_main([str(baseline), str(modified), '--output', str(output)])

            self.assertEqual(0, status)
            report = output.read_text(encoding='utf-8')
            self.assertIn(f"File: {baseline / 'a' / 'x.txt'}", report)
            self.assertIn(f"Directory: {baseline / 'a' / 'b'}", report)
            self.assertIn(f"Directory: {modified / 'a' / 'c'}", report)
            self.assertIn('[SUCCESS] Baseline path:', self.console.getvalue())
            self.configure_logging.assert_called_once_with('INFO', None)

    def test_writes_records(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)
            output = Path(tmpdir) / 'out.txt'
            records = Path(tmpdir) / 'out.msgpack'

            status = treediff_main([str(baseline), str(modified), '--output', str(output),
                                    '--records', str(records)])

            self.assertEqual(0, status)
            self.assertEqual(5, len(list(read_records(records))))

    def test_missing_baseline(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / 'out.txt'

            status = treediff_main([str(Path(tmpdir) / 'missing'), tmpdir, '--output', str(output)])

            self.assertEqual(1, status)
            self.assertFalse(output.exists())
            self.assertIn('[ERROR] Baseline path does not exist:', self.console.getvalue())

    def test_missing_arguments_is_usage_error(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as cm:
                treediff_main(['only-one-path'])

        self.assertEqual(2, cm.exception.code)
        self.assertIn('MODIFIED', stderr.getvalue())

    def test_unknown_algorithm(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)
            output = Path(tmpdir) / 'out.txt'

            status = treediff_main([str(baseline), str(modified), '--output', str(output),
                                    '--algorithm', 'no-such-hash'])

            self.assertEqual(1, status)
            self.assertIn('Unknown hash algorithm: no-such-hash', self.console.getvalue())

    def test_unwritable_report(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)

            status = treediff_main([str(baseline), str(modified), '--output', str(Path(tmpdir) / 'no' / 'out.txt')])

            self.assertEqual(1, status)
            self.assertIn('[ERROR] Failed to write results to', self.console.getvalue())

    def test_settings_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)
            output = Path(tmpdir) / 'configured.txt'
            config = Path(tmpdir) / 'treediff.toml'
            config.write_text(
                '[report]\n'
                f'path = {str(output)!r}\n'
                '\n'
                '[logging]\n'
                'level = "WARNING"\n',
                encoding='utf-8')

            status = treediff_main([str(baseline), str(modified), '--config', str(config)])

            self.assertEqual(0, status)
            self.assertTrue(output.exists())
            self.configure_logging.assert_called_once_with('WARNING', None)

    def test_command_line_overrides_settings(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)
            configured = Path(tmpdir) / 'configured.txt'
            output = Path(tmpdir) / 'explicit.txt'
            config = Path(tmpdir) / 'treediff.toml'
            config.write_text(f'[report]\npath = {str(configured)!r}\n', encoding='utf-8')

            status = treediff_main([str(baseline), str(modified), '--config', str(config),
                                    '--output', str(output), '--verbose'])

            self.assertEqual(0, status)
            self.assertTrue(output.exists())
            self.assertFalse(configured.exists())
            self.configure_logging.assert_called_once_with('DEBUG', None)

    def test_invalid_settings_file_is_usage_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = Path(tmpdir) / 'treediff.toml'
            config.write_text('this is [not toml', encoding='utf-8')

            with contextlib.redirect_stderr(io.StringIO()):
                with self.assertRaises(SystemExit) as cm:
                    treediff_main([tmpdir, tmpdir, '--config', str(config)])

            self.assertEqual(2, cm.exception.code)

    def test_open_report(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)
            output = Path(tmpdir) / 'out.txt'

            with mock.patch('treediff.commands.diff_tree.open_report') as open_report:
                status = treediff_main([str(baseline), str(modified), '--output', str(output), '--open'])

            self.assertEqual(0, status)
            open_report.assert_called_once_with(output)

    def test_open_report_from_settings(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)
            output = Path(tmpdir) / 'out.txt'
            config = Path(tmpdir) / 'treediff.toml'
            config.write_text('[report]\nopen = true\n', encoding='utf-8')

            with mock.patch('treediff.commands.diff_tree.open_report') as open_report:
                status = treediff_main([str(baseline), str(modified), '--output', str(output),
                                        '--config', str(config)])

            self.assertEqual(0, status)
            open_report.assert_called_once_with(output)

    def test_open_setting_must_be_boolean(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)
            output = Path(tmpdir) / 'out.txt'
            config = Path(tmpdir) / 'treediff.toml'
            config.write_text('[report]\nopen = "false"\n', encoding='utf-8')
            stderr = io.StringIO()

            with mock.patch('treediff.commands.diff_tree.open_report') as open_report:
                with contextlib.redirect_stderr(stderr):
                    with self.assertRaises(SystemExit) as cm:
                        treediff_main([str(baseline), str(modified), '--output', str(output),
                                       '--config', str(config)])

            self.assertEqual(2, cm.exception.code)
            self.assertIn('report.open must be true or false', stderr.getvalue())
            open_report.assert_not_called()
            self.assertFalse(output.exists())

    def test_unknown_log_level_setting_is_usage_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)
            config = Path(tmpdir) / 'treediff.toml'
            config.write_text('[logging]\nlevel = "LOUD"\n', encoding='utf-8')
            stderr = io.StringIO()

            with contextlib.redirect_stderr(stderr):
                with self.assertRaises(SystemExit) as cm:
                    treediff_main([str(baseline), str(modified), '--config', str(config)])

            self.assertEqual(2, cm.exception.code)
            self.assertIn('logging.level must be one of', stderr.getvalue())
            self.configure_logging.assert_not_called()

    def test_log_level_setting_is_case_insensitive(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)
            output = Path(tmpdir) / 'out.txt'
            config = Path(tmpdir) / 'treediff.toml'
            config.write_text('[logging]\nlevel = "debug"\n', encoding='utf-8')

            status = treediff_main([str(baseline), str(modified), '--output', str(output),
                                    '--config', str(config)])

            self.assertEqual(0, status)
            self.configure_logging.assert_called_once_with('debug', None)

    def test_unopenable_log_file_is_usage_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            baseline, modified = self._make_trees(tmpdir)
            output = Path(tmpdir) / 'out.txt'
            log_file = Path(tmpdir) / 'no' / 'such' / 'dir' / 'treediff.log'
            stderr = io.StringIO()

            with contextlib.redirect_stderr(stderr):
                with self.assertRaises(SystemExit) as cm:
                    treediff_main([str(baseline), str(modified), '--output', str(output),
                                   '--log-file', str(log_file)])

            self.assertEqual(2, cm.exception.code)
            self.assertIn('cannot open log file', stderr.getvalue())
            self.assertFalse(output.exists())


if __name__ == '__main__':
    unittest.main()
