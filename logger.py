import os
import sys
import inspect
import datetime
from pathlib import Path
from typing import TypedDict, Literal

LoggerSeverity = Literal["trace", "debug", "info", "warn", "error"]


class FunctionCallInfo(TypedDict):
    function: str
    file: str
    line: str


DEFAULT_LOG_FILE_PATH = Path(__file__).resolve().parent / "logs" / "lsf.log"

LEVELS = {
    "trace": 0,
    "debug": 1,
    "info": 2,
    "warn": 3,
    "error": 4,
}

COLORS = {
    "trace": "\033[90m",
    "debug": "\033[94m",
    "warn": "\033[33m",
    "error": "\033[31m",
    "reset": "\033[0m",
}


def get_timestamp() -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.strftime("%Y-%m-%d-%H:%M:%S.%f")[:-3]


def get_call_info() -> FunctionCallInfo:
    # 0 = get_call_info, 1 = format_message, 2 = _log, 3 = Logger method, 4 = caller
    stack = inspect.stack()
    if len(stack) <= 4:
        return {
            "function": "<unknown>",
            "file": "<unknown>",
            "line": "<unknown>",
        }

    frame = stack[4]
    file_path = frame.filename or "<unknown>"
    function_name = frame.function or "<anonymous>"
    line_number = str(frame.lineno) if frame.lineno else "<unknown>"

    return {
        "file": os.path.basename(file_path),
        "function": function_name,
        "line": line_number,
    }


def should_log(level: LoggerSeverity) -> bool:
    log_level = os.getenv("LOG_LEVEL", "debug").lower()
    return LEVELS.get(level, 0) >= LEVELS.get(log_level, 0)


def use_color() -> bool:
    return os.getenv("LOG_COLOR", "on").lower() not in ("0", "off", "false", "no")


def get_log_file_path() -> Path:
    override = os.getenv("LOG_FILE")
    return Path(override) if override else DEFAULT_LOG_FILE_PATH


def format_message(level: LoggerSeverity, message: str) -> str:
    timestamp = get_timestamp()
    verbosity = os.getenv("LOG_VERBOSITY", "detailed").lower()

    if verbosity == "detailed":
        info = get_call_info()
        return (
            f"[{timestamp}] {level.upper()} "
            f"[{info['function']}@{info['file']}:{info['line']}]: {message}"
        )
    return f"[{timestamp}] {level.upper()}: {message}"


def _log(level: LoggerSeverity, message: str) -> None:
    env = os.getenv("ENV", "development").lower()
    if env == "test" or not should_log(level):
        return

    log_message = format_message(level, message)

    if env == "development":
        if level in COLORS and use_color():
            print(COLORS[level] + log_message + COLORS["reset"])
        else:
            print(log_message)
        return

    log_file = get_log_file_path()
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(log_message + "\n")
    except OSError as err:
        print(f"Failed to write log to file: {err}", file=sys.stderr)
        print(log_message)


class Logger:
    @staticmethod
    def trace(message: str) -> None:
        _log("trace", message)

    @staticmethod
    def debug(message: str) -> None:
        _log("debug", message)

    @staticmethod
    def info(message: str) -> None:
        _log("info", message)

    @staticmethod
    def warn(message: str) -> None:
        _log("warn", message)

    @staticmethod
    def error(message: str) -> None:
        _log("error", message)


logger = Logger()
