from __future__ import annotations

import configparser
import datetime as dt
import logging
import sys
import time
import traceback
from typing import Optional

import click

from linesearch import DatetimeComparator, FileSource, search_line
from linesearch._version import __version__


class WrongValueError(configparser.Error):
    pass


class App:
    def __init__(
        self,
        filename: str,
        key_format: str,
        delimiter: str,
        target: str,
        configfilename: Optional[str] = None,
        encoding: Optional[str] = None,
    ) -> None:
        self.filename = filename
        self.key_format = key_format
        self.delimiter = delimiter
        self.target = target
        self.configfilename = configfilename
        self.encoding = encoding
        self.logger: logging.Logger = logging.getLogger("linesearch")
        self.config: AppConfig | None = None
        self.result: Optional[str] = None

    def run(self) -> None:
        self.config = AppConfig(self.configfilename)
        self.config.read(self.encoding)
        handler = self._setup_logger()
        try:
            self._execute_with_error_handling()
        finally:
            self.logger.removeHandler(handler)
            handler.close()

    def _execute_with_error_handling(self) -> None:
        self.logger.info("Starting linesearch, " + dt.datetime.today().isoformat())
        try:
            self._execute()
        except Exception as e:
            self.logger.error(str(e))
            self.logger.debug(traceback.format_exc())
            self.logger.info(
                "linesearch terminated with error, " + dt.datetime.today().isoformat()
            )
            raise click.ClickException(str(e)) from e
        else:
            self.logger.info("Finished linesearch, " + dt.datetime.today().isoformat())

    def _setup_logger(self) -> logging.Handler:
        if self.config is None:
            raise RuntimeError("Configuration has not been loaded")
        handler = self._create_logger_handler(self.config)
        self.logger.addHandler(handler)
        self.logger.setLevel(self.config.loglevel)
        return handler

    def _create_logger_handler(self, config: AppConfig) -> logging.Handler:
        if config.logfile:
            return logging.FileHandler(config.logfile)
        return logging.StreamHandler()

    def _execute(self) -> None:
        if self.config is None:
            raise RuntimeError("Configuration has not been loaded")
        comparator = DatetimeComparator(self.delimiter, self.target, self.key_format)
        with FileSource.open(self.filename, self.config.encoding) as source:
            click.echo("File path: {}".format(self.filename))
            click.echo("File size: {}".format(len(source)))
            start_time = time.perf_counter()
            self.result = search_line(source, len(source), comparator)
            elapsed_time = int((time.perf_counter() - start_time) * 1000)
        click.echo("Execution took {} ms".format(elapsed_time))
        if self.result is None:
            click.echo("Match not found for pattern '{}'".format(self.target))
        else:
            click.echo("Found match '{}'".format(self.result))


class AppConfig:
    log_levels = ("ERROR", "WARNING", "INFO", "DEBUG")

    def __init__(self, configfilename: Optional[str]) -> None:
        self.configfilename = configfilename
        self.logfile: str = ""
        self.loglevel: str = "WARNING"
        self.encoding: str = "utf-8"

    def read(self, encoding: Optional[str] = None) -> None:
        """Read the configuration file, if there is one. If encoding is
        specified, it overrides the encoding of the configuration file."""
        try:
            if self.configfilename:
                self._parse_general_section(self._read_general_section())
            if encoding:
                self.encoding = encoding
            self._check_encoding()
        except (OSError, configparser.Error) as e:
            raise click.ClickException(str(e)) from e

    def _read_general_section(self) -> configparser.SectionProxy:
        if not self.configfilename:
            raise RuntimeError("No configuration file has been specified")
        config = configparser.ConfigParser(interpolation=None)
        with open(self.configfilename) as f:
            config.read_file(f)
        if not config.has_section("General"):
            config.add_section("General")
        return config["General"]

    def _parse_general_section(self, section: configparser.SectionProxy) -> None:
        self.logfile = section.get("logfile", fallback="")
        self.loglevel = section.get("loglevel", fallback="warning").upper()
        self.encoding = section.get("encoding", fallback=self.encoding)
        if self.loglevel not in self.log_levels:
            raise WrongValueError(
                "loglevel must be one of " + ", ".join(self.log_levels)
            )

    def _check_encoding(self) -> None:
        try:
            FileSource.check_encoding(self.encoding)
        except (LookupError, ValueError) as e:
            raise WrongValueError(
                "Invalid encoding {}: {}".format(self.encoding, e)
            ) from None


@click.command()
@click.argument("file")
@click.argument("key_format")
@click.argument("delimiter")
@click.argument("target")
@click.option(
    "-c",
    "--config",
    "configfile",
    default=None,
    help="Configuration file with a [General] section.",
)
@click.option("--encoding", default=None, help="Encoding of FILE (default utf-8).")
@click.version_option(version=__version__, message="%(prog)s v.%(version)s")
def main(
    file: str,
    key_format: str,
    delimiter: str,
    target: str,
    configfile: Optional[str],
    encoding: Optional[str],
) -> None:
    """Find the line of a sorted text file whose key is TARGET.

    Each line of FILE must start with a date, followed by DELIMITER. The date
    is parsed with KEY_FORMAT, a strptime format such as "%Y-%m-%d %H:%M:%S",
    or "iso8601"."""

    app = App(file, key_format, delimiter, target, configfile, encoding)
    app.run()


if __name__ == "__main__":
    sys.exit(main())
