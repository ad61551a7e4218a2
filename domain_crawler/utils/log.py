"""
Logging for the crawler.

Every module logs through the one ``domain-crawler`` logger.  Messages
start with a ``[CATEGORY]`` tag (``[QUEUE]``, ``[PAGE]``, ``[DRAIN]`` …)
that is coloured on a terminal and turned into a workflow annotation
under GitHub Actions.  With several worker threads the thread name is
added so interleaved pages can be told apart.
"""

import contextlib
import logging
import os
from pathlib import Path

try:
    import colorlog
    _COLORLOG_AVAILABLE = True
except ImportError:
    _COLORLOG_AVAILABLE = False

log = logging.getLogger("domain-crawler")

_DATEFMT = "%H:%M:%S"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

_CI: bool = os.environ.get("GITHUB_ACTIONS") == "true"

_ANSI_RESET = "\033[0m"
_TAG_STYLES: dict[str, str] = {
    "[QUEUE]": "\033[37m",
    "[PAGE]":  "\033[1;32m",
    "[DUP]":   "\033[90m",
    "[LIMIT]": "\033[33m",
    "[DRAIN]": "\033[36m",
    "[RETRY]": "\033[36m",
    "[DONE]":  "\033[1;32m",
    "[ERR]":   "\033[1;31m",
}

_LOG_COLORS = {
    "DEBUG":    "cyan",
    "INFO":     "green",
    "WARNING":  "yellow",
    "ERROR":    "red",
    "CRITICAL": "bold_red",
}


def _style_tag(msg: str) -> str:
    """Colour the leading ``[CATEGORY]`` tag of *msg*, if it has one."""
    if msg.startswith("["):
        tag = msg[:msg.find("]") + 1]
        style = _TAG_STYLES.get(tag)
        if style:
            return f"{style}{tag}{_ANSI_RESET}{msg[len(tag):]}"
    return msg


@contextlib.contextmanager
def ci_section(title: str):
    """Fold the output logged inside the block into a GitHub Actions group."""
    if _CI:
        print(f"::group::{title}", flush=True)
    try:
        yield
    finally:
        if _CI:
            print("::endgroup::", flush=True)


class TagFormatter(logging.Formatter):
    """Colour ``[CATEGORY]`` tags; with *annotate*, prefix warnings and
    errors with the matching workflow command."""

    _ANNOTATIONS = {
        logging.WARNING:  "::warning::",
        logging.ERROR:    "::error::",
        logging.CRITICAL: "::error::",
    }

    def __init__(self, fmt: str, datefmt: str = _DATEFMT, annotate: bool = False) -> None:
        super().__init__(fmt, datefmt=datefmt)
        self.annotate = annotate

    def formatMessage(self, record: logging.LogRecord) -> str:
        record.message = _style_tag(record.message)
        formatted = super().formatMessage(record)
        if self.annotate:
            return self._ANNOTATIONS.get(record.levelno, "") + formatted
        return formatted


if _COLORLOG_AVAILABLE:
    class _ColorTagFormatter(colorlog.ColoredFormatter):
        def formatMessage(self, record: logging.LogRecord) -> str:
            record.message = _style_tag(record.message)
            return super().formatMessage(record)


def _console_format(show_threads: bool, colour: bool) -> str:
    level = "%(log_color)s[%(levelname)s]%(reset)s" if colour else "[%(levelname)s]"
    thread = " %(threadName)s" if show_threads else ""
    return f"%(asctime)s {level}{thread} %(message)s"


def setup_logging(
    debug: bool = False,
    log_file: str | None = None,
    show_threads: bool = False,
) -> None:
    """Attach console (and optionally file) handlers to the package logger.

    *debug* also turns on urllib3's connection and retry messages.
    *show_threads* adds the worker thread name to console lines.  The
    file log always records DEBUG with thread names.
    """
    log.setLevel(logging.DEBUG if debug else logging.INFO)
    log.handlers.clear()
    logging.getLogger("urllib3").setLevel(logging.DEBUG if debug else logging.WARNING)

    if _CI:
        handler = logging.StreamHandler()
        handler.setFormatter(TagFormatter(_console_format(show_threads, False), annotate=True))
    elif _COLORLOG_AVAILABLE:
        handler = colorlog.StreamHandler()
        handler.setFormatter(_ColorTagFormatter(
            _console_format(show_threads, True), datefmt=_DATEFMT, log_colors=_LOG_COLORS,
        ))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(TagFormatter(_console_format(show_threads, False)))
    log.addHandler(handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(threadName)s %(message)s", datefmt=_FILE_DATEFMT,
        ))
        log.addHandler(fh)
        log.info("Logging to file: %s", log_path.resolve())
