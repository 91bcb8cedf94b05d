import json
import logging
import os
import sys
from logging import CRITICAL, DEBUG, ERROR, INFO, WARNING, Formatter, StreamHandler, basicConfig, getLogger
from typing import Dict, Mapping, Optional

from cloudfront_provider.args import ArgumentParser
from cloudfront_provider.types import Json

TRACE = DEBUG - 5
LOGGER_NAME = "cloudfront_provider"
ENV_PREFIX = "CLOUDFRONT_PROVIDER_"

getLogger().setLevel(ERROR)
getLogger(LOGGER_NAME).setLevel(INFO)


def add_args(arg_parser: ArgumentParser) -> None:
    group = arg_parser.add_mutually_exclusive_group()
    group.add_argument("--verbose", "-v", help="Verbose logging", dest="verbose", action="store_true", default=False)
    group.add_argument("--trace", help="Trace logging", dest="trace", action="store_true", default=False)
    group.add_argument("--quiet", help="Only log errors", dest="quiet", action="store_true", default=False)


def env_flag(name: str) -> bool:
    return os.environ.get(ENV_PREFIX + name, "false").lower() == "true"


class JsonFormatter(Formatter):
    """
    Renders every log record as a single line json object.
    """

    def __init__(
        self,
        fmt_dict: Mapping[str, str],
        time_format: str = "%Y-%m-%dT%H:%M:%S",
        static_values: Optional[Dict[str, str]] = None,
    ):
        super().__init__()
        self.fmt_dict = fmt_dict
        self.time_format = time_format
        self.static_values = static_values or {}
        self.__use_time = "asctime" in self.fmt_dict.values()

    def usesTime(self) -> bool:  # noqa: N802
        return self.__use_time

    def formatMessage(self, record) -> dict:  # noqa: N802
        return {fmt_key: record.__dict__[fmt_val] for fmt_key, fmt_val in self.fmt_dict.items()}

    def formatJsonMessage(self, record) -> Json:  # noqa: N802
        record.message = record.getMessage()
        if self.__use_time:
            record.asctime = self.formatTime(record, self.time_format)
        message_dict = self.formatMessage(record)
        message_dict.update(self.static_values)
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            message_dict["exception"] = record.exc_text
        if record.stack_info:
            message_dict["stack_info"] = self.formatStack(record.stack_info)
        return message_dict

    def format(self, record) -> str:
        return json.dumps(self.formatJsonMessage(record), default=str)


def setup_logger(
    proc: str,
    *,
    force: bool = True,
    verbose: bool = False,
    trace: bool = False,
    quiet: bool = False,
    level: Optional[str] = None,
    json_format: bool = True,
) -> None:
    # logs go to stderr: stdout is reserved for the json output of the cli
    if json_format and not env_flag("LOG_TEXT"):
        handler = StreamHandler()
        formatter = JsonFormatter(
            {
                "timestamp": "asctime",
                "level": "levelname",
                "message": "message",
                "pid": "process",
                "thread": "threadName",
            },
            static_values={"process": proc},
        )
        handler.setFormatter(formatter)
        basicConfig(handlers=[handler], force=force, level=level)
    else:
        log_format = f"%(asctime)s|{proc}|%(levelname)5s|%(process)d|%(threadName)10s  %(message)s"
        log_format = os.environ.get(ENV_PREFIX + "LOG_FORMAT", log_format)
        basicConfig(format=log_format, datefmt="%y-%m-%d %H:%M:%S", force=force)
    argv = sys.argv[1:]
    if level:
        getLogger(LOGGER_NAME).setLevel(level)
    elif trace or "--trace" in argv or env_flag("TRACE"):
        getLogger(LOGGER_NAME).setLevel(TRACE)
    elif verbose or "-v" in argv or "--verbose" in argv or env_flag("VERBOSE"):
        getLogger(LOGGER_NAME).setLevel(DEBUG)
    elif quiet or "--quiet" in argv or env_flag("QUIET"):
        getLogger().setLevel(WARNING)
        getLogger(LOGGER_NAME).setLevel(CRITICAL)


def add_trace_level() -> None:
    """
    Adds the TRACE level to the logging module: logging.TRACE, logger.trace(...) and logging.trace(...).
    """
    if hasattr(logging, "TRACE"):
        return

    def log_for_level(self, message, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, message, args, **kwargs)

    def log_to_root(message, *args, **kwargs):
        logging.log(TRACE, message, *args, **kwargs)

    logging.addLevelName(TRACE, "TRACE")
    setattr(logging, "TRACE", TRACE)
    setattr(logging.getLoggerClass(), "trace", log_for_level)
    setattr(logging, "trace", log_to_root)


add_trace_level()

log = getLogger(LOGGER_NAME)
