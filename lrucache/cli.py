"""Command-line interface to replay operation traces against a cache.

Each input line is a JSON object describing one cache operation::

    {"op": "set", "key": "a", "value": 1}
    {"op": "get", "key": "a"}
    {"op": "remove", "key": "a"}
    {"op": "exists", "key": "a"}
    {"op": "size"}

One JSON result line is written to stdout per operation, followed by a
summary line with the surviving keys in recency order (most recent first).

JSON keys are tagged with their JSON type before they reach the cache, so
`1`, `1.0` and `true` name three different entries even though they are
equal as Python values.

Bytes that are not valid UTF-8 are replaced while reading; the affected line
then fails to parse and is reported like any other malformed line.

Usage
-----
    python -m lrucache.cli --capacity 3 trace.jsonl
    cat trace.jsonl | lrucache-replay --config config.json -
"""

from __future__ import annotations

import argparse
import io
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, TextIO, Tuple

from pydantic import ValidationError

from .cache import BoundedLRUCache, CacheError, ErrorCode, build_cache
from .config.models import DEFAULT_CAPACITY, AppConfig, EnvSettings
from .observability import setup_logging

logger = logging.getLogger(__name__)

OPERATIONS = ("set", "get", "remove", "exists", "size")


class TraceError(ValueError):
    """Raised for a trace line that cannot be applied."""


def _cache_key(key: Any) -> Tuple[str, Any]:
    return type(key).__name__, key


def _parse_line(line: str) -> Dict[str, Any]:
    try:
        record = json.loads(line)
    except json.JSONDecodeError as e:
        raise TraceError(f"invalid JSON: {e.msg}") from e
    if not isinstance(record, dict):
        raise TraceError("expected a JSON object")
    op = record.get("op")
    if op not in OPERATIONS:
        raise TraceError(f"unknown op: {op!r}")
    if op != "size" and "key" not in record:
        raise TraceError(f"op {op!r} requires a key")
    if op == "set" and "value" not in record:
        raise TraceError("op 'set' requires a value")
    return record


def apply_op(cache: BoundedLRUCache, record: Dict[str, Any]) -> Dict[str, Any]:
    """Apply one parsed trace record to ``cache`` and describe the outcome.

    Cache errors are reported in the result under ``error``; they do not stop
    the replay.
    """
    op = record["op"]
    result: Dict[str, Any] = {"op": op}
    if op != "size":
        result["key"] = record["key"]

    try:
        if op == "set":
            cache.set(_cache_key(record["key"]), record["value"])
        elif op == "get":
            value, found = cache.get(_cache_key(record["key"]))
            result["found"] = found
            result["value"] = value
        elif op == "remove":
            cache.remove(_cache_key(record["key"]))
        elif op == "exists":
            result["exists"] = cache.exists(_cache_key(record["key"]))
        else:
            result["size"] = cache.size()
    except CacheError as e:
        result["ok"] = False
        result["error"] = e.code.value
        result["message"] = str(e)
        return result
    except TypeError as e:
        # Unhashable keys such as JSON arrays or objects.
        raise TraceError(f"invalid key: {e}") from e

    result["ok"] = True
    return result


def replay(cache: BoundedLRUCache, lines: Iterable[str]) -> Iterator[Dict[str, Any]]:
    """Yield one result per non-blank trace line, then a summary record."""
    applied = 0
    rejected = 0
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            record = _parse_line(line)
            result = apply_op(cache, record)
        except TraceError as e:
            rejected += 1
            logger.warning(
                "replay.invalid_line", extra={"line": lineno, "reason": str(e)}
            )
            yield {
                "line": lineno,
                "ok": False,
                "error": ErrorCode.INVALID_REQUEST.value,
                "message": str(e),
            }
            continue
        applied += 1
        logger.debug("replay.op", extra={"line": lineno, "result": result})
        yield result

    logger.info(
        "replay.done",
        extra={"applied": applied, "rejected": rejected, "size": cache.size()},
    )
    yield {
        "summary": True,
        "capacity": cache.capacity,
        "size": cache.size(),
        "keys": [key for _, key in cache.keys()],
    }


def resolve_capacity(
    cli_capacity: Optional[int],
    config_path: Optional[Path],
    settings: EnvSettings,
) -> int:
    """Pick the capacity: CLI flag, then config file, then env, then default."""
    if cli_capacity is not None:
        return cli_capacity
    if config_path is not None:
        return AppConfig.load(config_path).cache.capacity
    if settings.capacity is not None:
        return settings.capacity
    return DEFAULT_CAPACITY


def _write(stream: TextIO, record: Dict[str, Any]) -> None:
    stream.write(json.dumps(record, default=repr) + "\n")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint for replaying a trace against a fresh cache."""
    parser = argparse.ArgumentParser(description="Replay cache operation traces")
    parser.add_argument(
        "trace",
        nargs="?",
        default="-",
        help="Path to a JSON-lines trace, or '-' for stdin (default)",
    )
    parser.add_argument("--capacity", type=int, help="Cache capacity")
    parser.add_argument("--config", help="Path to JSON app config")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
        ],
        help="Logging level (overrides environment)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (once sets DEBUG)",
    )
    args = parser.parse_args(argv)

    try:
        settings = EnvSettings()  # type: ignore[call-arg]
    except ValidationError as e:
        parser.error(f"invalid LRUCACHE_* environment settings: {e}")
    effective_level = args.log_level or (
        "DEBUG" if args.verbose > 0 else settings.log_level.upper()
    )
    setup_logging(effective_level)

    config_path = Path(args.config) if args.config else None
    try:
        capacity = resolve_capacity(args.capacity, config_path, settings)
        cache = build_cache(capacity)
    except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
        parser.error(str(e))

    if args.trace == "-":
        stdin = sys.stdin
        if isinstance(stdin, io.TextIOWrapper):
            stdin.reconfigure(errors="replace")
        for record in replay(cache, stdin):
            _write(sys.stdout, record)
    else:
        try:
            with open(args.trace, encoding="utf-8", errors="replace") as f:
                for record in replay(cache, f):
                    _write(sys.stdout, record)
        except OSError as e:
            parser.error(f"cannot read trace {args.trace}: {e}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
