"""Command-line interface for the Gladia Transcriber.

WHY: Users need a way to upload audio, start transcription jobs, and
fetch job results from the terminal without a workflow host. The CLI
plays the host's part: it builds work items from arguments, injects the
authenticated transport, and picks the failure policy.

HOW: argparse subcommands (upload, start, get) each turn their
positional arguments into one work item per value. The batch runs via
asyncio.run() against a GladiaClient. Results are printed as a JSON
array on stdout; status messages go to stderr.

RULES:
- upload FILE...: one item per file, payload read from disk
- start AUDIO_URL...: --options JSON file supplies toggles and configs
  shared by every item; shortcut flags override it
- get ID...: one item per transcription ID
- --continue-on-fail records per-item errors instead of aborting
- Exit code 1 on configuration errors or an aborted batch
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from gladia_transcriber.api.client import GladiaClient
from gladia_transcriber.api.models import PreRecordedJob
from gladia_transcriber.config import DEFAULT_BINARY_PROPERTY, DEFAULT_CONTINUE_ON_FAIL
from gladia_transcriber.core.dispatcher import OperationError, run_batch
from gladia_transcriber.core.items import BinaryData, Operation, WorkItem, make_items
from gladia_transcriber.core.operations import OperationResult


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def _load_options(path: Optional[str]) -> Dict[str, Any]:
    """Read the shared start options from a JSON file.

    RULES:
    - No path means no options
    - The file must hold a JSON object
    """
    if not path:
        return {}
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Options file must contain a JSON object: {}".format(path))
    return data


def _start_parameters(args: argparse.Namespace) -> Dict[str, Any]:
    params = _load_options(args.options)
    for flag in ("diarization", "subtitles", "summarization"):
        value = getattr(args, flag)
        if value is not None:
            params[flag] = value
    if args.language:
        language_config = dict(params.get("language_config") or {})
        language_config["languages"] = list(args.language)
        params["language_config"] = language_config
    if args.callback_url:
        params["callback"] = True
        callback_config = dict(params.get("callback_config") or {})
        callback_config["url"] = args.callback_url
        params["callback_config"] = callback_config
    return params


def build_items(args: argparse.Namespace) -> List[WorkItem]:
    """Turn parsed arguments into work items, one per positional value.

    Raises:
        ValueError: If an upload file does not exist or options are invalid.
    """
    operation = Operation(args.operation)

    if operation is Operation.UPLOAD_FILE:
        parameter_sets = []
        binaries = []
        for name in args.files:
            path = Path(name)
            if not path.is_file():
                raise ValueError("File not found: {}".format(path))
            mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
            parameter_sets.append({"operation": operation.value, "file": DEFAULT_BINARY_PROPERTY})
            binaries.append({
                DEFAULT_BINARY_PROPERTY: BinaryData(
                    data=path.read_bytes(),
                    file_name=path.name,
                    mime_type=mime_type,
                ),
            })
        return make_items(parameter_sets, binaries)

    if operation is Operation.START_TRANSCRIPTION:
        shared = _start_parameters(args)
        return make_items([
            dict(shared, operation=operation.value, audio_url=url)
            for url in args.audio_urls
        ])

    return make_items([
        {"operation": operation.value, "id": transcription_id}
        for transcription_id in args.ids
    ])


def _report(results: List[OperationResult], operation: Operation) -> None:
    for result in results:
        if result.is_error:
            _status("  Item {}: error: {}".format(result.item_index, result.json["error"]))
            continue
        _status("  Item {}: HTTP {}".format(result.item_index, result.status_code))
        if operation is Operation.START_TRANSCRIPTION and "id" in result.json and "result_url" in result.json:
            job = PreRecordedJob.from_dict(result.json)
            _status("    Job {} → {}".format(job.id, job.result_url))


async def _run(args: argparse.Namespace) -> None:
    """Build items, run the batch, print results."""
    operation = Operation(args.operation)
    try:
        items = build_items(args)
        _status("Running {} on {} item(s)...".format(operation.value, len(items)))
        async with GladiaClient() as client:
            results = await run_batch(items, client, continue_on_fail=args.continue_on_fail)
    except OperationError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except (OSError, ValueError) as e:
        # Config errors (missing API key, unreadable or bad options file, missing upload file)
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _report(results, operation)
    print(json.dumps([r.json for r in results], indent=2, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running a batch.

    RULES:
    - Global: --continue-on-fail/--no-continue-on-fail, --verbose
    - Subcommands: upload, start, get
    """
    parser = argparse.ArgumentParser(
        prog="gladia-transcriber",
        description="Upload audio, start transcription jobs, and fetch results "
                    "from the Gladia pre-recorded API.",
    )
    parser.add_argument(
        "--continue-on-fail",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_CONTINUE_ON_FAIL,
        help="Record per-item errors and keep going (default: %(default)s).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    upload = subparsers.add_parser("upload", help="Upload audio files.")
    upload.add_argument("files", nargs="+", help="Audio/video files to upload.")
    upload.set_defaults(operation=Operation.UPLOAD_FILE.value)

    start = subparsers.add_parser("start", help="Start transcription jobs.")
    start.add_argument("audio_urls", nargs="+", help="Audio URLs (e.g. from upload).")
    start.add_argument(
        "--options",
        default=None,
        help="JSON file with feature toggles and configs applied to every job.",
    )
    for flag in ("diarization", "subtitles", "summarization"):
        start.add_argument(
            "--{}".format(flag),
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Enable {} (overrides --options).".format(flag),
        )
    start.add_argument(
        "--language",
        action="append",
        default=None,
        help="Expected language ISO 639-1 code. Can be specified multiple times.",
    )
    start.add_argument(
        "--callback-url",
        default=None,
        help="URL Gladia calls when the job finishes.",
    )
    start.set_defaults(operation=Operation.START_TRANSCRIPTION.value)

    get = subparsers.add_parser("get", help="Fetch transcription jobs.")
    get.add_argument("ids", nargs="+", help="Transcription job IDs.")
    get.set_defaults(operation=Operation.GET_TRANSCRIPTION.value)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
