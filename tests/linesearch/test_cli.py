import os
import shutil
import tempfile
import textwrap
from unittest import TestCase

import click
from click.testing import CliRunner, Result

from linesearch import cli

LOG = textwrap.dedent(
    """\
    2000-01-01 00:00:00 - Starting
    2000-01-01 12:30:00 - Working
    2000-01-02 15:46:40 - Still working
    2000-01-03 08:00:00 - Done
    """
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class CliUsageErrorTestCase(TestCase):
    result: Result

    def setUp(self) -> None:
        runner = CliRunner()
        self.result = runner.invoke(cli.main, [])

    def test_exit_code(self) -> None:
        self.assertTrue(self.result.exit_code > 0)

    def test_error_message(self) -> None:
        self.assertIn(
            "Usage: main [OPTIONS] FILE KEY_FORMAT DELIMITER TARGET", self.result.output
        )


class CliFileNotFoundTestCase(TestCase):
    result: Result

    def setUp(self) -> None:
        runner = CliRunner()
        self.result = runner.invoke(
            cli.main,
            ["/nonexistent/nonexistent", DATE_FORMAT, " - ", "2000-01-01 00:00:00"],
        )

    def test_exit_code(self) -> None:
        self.assertEqual(self.result.exit_code, 1)

    def test_error_message(self) -> None:
        self.assertIn("No such file or directory", self.result.output)


class CliMixin:
    result: Result
    configuration = ""
    log = LOG

    def _execute(self, target: str, *extra_args: str) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            with open("log.txt", "w", encoding="utf-8", newline="\n") as f:
                f.write(self.log)
            args = list(extra_args)
            if self.configuration:
                with open("linesearch.conf", "w") as f:
                    f.write(self.configuration)
                args = ["--config", "linesearch.conf"] + args
            args += ["log.txt", DATE_FORMAT, " - ", target]
            self.result = runner.invoke(cli.main, args)
            if os.path.exists("linesearch.log"):
                with open("linesearch.log") as f:
                    self.logfile_contents = f.read()


class CliFoundTestCase(CliMixin, TestCase):
    def setUp(self) -> None:
        self._execute("2000-01-02 15:46:40")

    def test_exit_code(self) -> None:
        self.assertEqual(self.result.exit_code, 0)

    def test_file_path(self) -> None:
        self.assertIn("File path: log.txt", self.result.output)

    def test_file_size(self) -> None:
        self.assertIn("File size: {}".format(len(LOG)), self.result.output)

    def test_execution_time(self) -> None:
        self.assertRegex(self.result.output, r"Execution took \d+ ms")

    def test_match(self) -> None:
        self.assertIn(
            "Found match '2000-01-02 15:46:40 - Still working'", self.result.output
        )


class CliNotFoundTestCase(CliMixin, TestCase):
    def setUp(self) -> None:
        self._execute("2000-01-02 15:46:41")

    def test_exit_code(self) -> None:
        self.assertEqual(self.result.exit_code, 0)

    def test_message(self) -> None:
        self.assertIn(
            "Match not found for pattern '2000-01-02 15:46:41'", self.result.output
        )


class CliEmptyFileTestCase(CliMixin, TestCase):
    log = ""

    def setUp(self) -> None:
        self._execute("2000-01-01 00:00:00")

    def test_exit_code(self) -> None:
        self.assertEqual(self.result.exit_code, 0)

    def test_file_size(self) -> None:
        self.assertIn("File size: 0", self.result.output)

    def test_message(self) -> None:
        self.assertIn("Match not found", self.result.output)


class CliMalformedTargetTestCase(CliMixin, TestCase):
    def setUp(self) -> None:
        self._execute("2000-01-02")

    def test_exit_code(self) -> None:
        self.assertEqual(self.result.exit_code, 1)

    def test_error_message(self) -> None:
        self.assertIn("Key '2000-01-02' does not match format", self.result.output)


class CliMalformedLineTestCase(CliMixin, TestCase):
    log = "2000-01-01 00:00:00 - a\nsomething else\n2000-01-03 00:00:00 - c\n"

    def setUp(self) -> None:
        self._execute("2000-01-03 00:00:00")

    def test_exit_code(self) -> None:
        self.assertEqual(self.result.exit_code, 1)

    def test_error_message(self) -> None:
        self.assertIn("badly formatted line", self.result.output)


class CliUnsupportedEncodingTestCase(CliMixin, TestCase):
    def setUp(self) -> None:
        self._execute("2000-01-01 00:00:00", "--encoding", "utf-16")

    def test_exit_code(self) -> None:
        self.assertEqual(self.result.exit_code, 1)

    def test_error_message(self) -> None:
        self.assertIn("neither UTF-8 nor a single-byte encoding", self.result.output)


class CliConfigFileTestCase(CliMixin, TestCase):
    configuration = textwrap.dedent(
        """\
        [General]
        logfile = linesearch.log
        loglevel = DEBUG
        encoding = latin-1
        """
    )

    def setUp(self) -> None:
        self._execute("2000-01-01 12:30:00")

    def test_exit_code(self) -> None:
        self.assertEqual(self.result.exit_code, 0)

    def test_match(self) -> None:
        self.assertIn("Found match '2000-01-01 12:30:00 - Working'", self.result.output)

    def test_logged_start(self) -> None:
        self.assertIn("Starting linesearch", self.logfile_contents)

    def test_logged_finish(self) -> None:
        self.assertIn("Finished linesearch", self.logfile_contents)

    def test_logged_search_steps(self) -> None:
        self.assertIn("is EQUAL", self.logfile_contents)


class CliWrongLogLevelTestCase(CliMixin, TestCase):
    configuration = textwrap.dedent(
        """\
        [General]
        loglevel = HELLO
        """
    )

    def setUp(self) -> None:
        self._execute("2000-01-01 12:30:00")

    def test_exit_code(self) -> None:
        self.assertEqual(self.result.exit_code, 1)

    def test_error_message(self) -> None:
        self.assertIn(
            "loglevel must be one of ERROR, WARNING, INFO, DEBUG", self.result.output
        )


class CliConfigFileNotFoundTestCase(TestCase):
    def test_error_message(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli.main,
            ["--config", "/nonexistent/linesearch.conf", "log.txt", DATE_FORMAT, " - ", "x"],
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("No such file or directory", result.output)


class AppConfigDefaultsTestCase(TestCase):
    def test_without_config_file(self) -> None:
        config = cli.AppConfig(None)
        config.read()
        self.assertEqual(config.logfile, "")
        self.assertEqual(config.loglevel, "WARNING")
        self.assertEqual(config.encoding, "utf-8")


class CliUnknownEncodingInConfigFileTestCase(CliMixin, TestCase):
    configuration = textwrap.dedent(
        """\
        [General]
        encoding = no-such-encoding
        """
    )

    def setUp(self) -> None:
        self._execute("2000-01-01 12:30:00")

    def test_exit_code(self) -> None:
        self.assertEqual(self.result.exit_code, 1)

    def test_error_message(self) -> None:
        self.assertIn("Invalid encoding no-such-encoding", self.result.output)


class CliByteOrderMarkTestCase(CliMixin, TestCase):
    log = "\ufeff" + LOG

    def setUp(self) -> None:
        self._execute("2000-01-01 00:00:00", "--encoding", "utf-8-sig")

    def test_exit_code(self) -> None:
        self.assertEqual(self.result.exit_code, 0)

    def test_match(self) -> None:
        self.assertIn("Found match '2000-01-01 00:00:00 - Starting'", self.result.output)


class AppConfigTestCase(TestCase):
    def setUp(self) -> None:
        self.tempdir = tempfile.mkdtemp()
        self.configfilename = os.path.join(self.tempdir, "linesearch.conf")

    def tearDown(self) -> None:
        shutil.rmtree(self.tempdir)

    def _write_config(self, contents: str) -> None:
        with open(self.configfilename, "w") as f:
            f.write(textwrap.dedent(contents))

    def test_without_general_section(self) -> None:
        self._write_config("")
        config = cli.AppConfig(self.configfilename)
        config.read()
        self.assertEqual(config.loglevel, "WARNING")
        self.assertEqual(config.encoding, "utf-8")

    def test_values(self) -> None:
        self._write_config(
            """\
            [General]
            logfile = /tmp/linesearch.log
            loglevel = info
            encoding = cp1253
            """
        )
        config = cli.AppConfig(self.configfilename)
        config.read()
        self.assertEqual(config.logfile, "/tmp/linesearch.log")
        self.assertEqual(config.loglevel, "INFO")
        self.assertEqual(config.encoding, "cp1253")

    def test_encoding_argument_overrides_config_file(self) -> None:
        self._write_config(
            """\
            [General]
            encoding = cp1253
            """
        )
        config = cli.AppConfig(self.configfilename)
        config.read("latin-1")
        self.assertEqual(config.encoding, "latin-1")

    def test_unsupported_encoding_argument(self) -> None:
        config = cli.AppConfig(None)
        with self.assertRaisesRegex(click.ClickException, "Invalid encoding utf-16"):
            config.read("utf-16")
