"""Command line interface for gltfcodec."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import inspect_document, open_document, open_document_framed, save_document
from .config import load_quotas, quotas_from_env
from .errors import GltfError
from .logging import configure_logging, get_logger, section, step
from .quotas import ReadQuotas
from .reporting import (
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)


def _quotas(args: argparse.Namespace) -> ReadQuotas:
    base = load_quotas(args.quotas) if args.quotas else None
    return quotas_from_env(base)


def _inspect_cmd(args: argparse.Namespace) -> int:
    step(f"inspecting {args.file}")
    doc, framed = open_document_framed(args.file, _quotas(args))
    summary = inspect_document(doc, framed)
    rep = get_reporter()
    rep.flush()
    if args.json:
        print(json.dumps(summary, indent=2, sort_keys=True))
        return 0
    with section("Document"):
        counts = " ".join(f"{k}={v}" for k, v in summary["counts"].items() if v)
        rep.status(
            f"asset version={summary['asset']['version']} "
            f"generator={summary['asset']['generator'] or '-'} "
            f"scene={summary['scene']}"
        )
        rep.status(f"counts: {counts or 'empty'}")
        for buf in summary["buffers"]:
            rep.status(
                f"buffer[{buf['index']}] {buf['source']} "
                f"byteLength={buf['byte_length']} {buf['uri']}".rstrip()
            )
        if "container" in summary:
            chunks = ",".join(
                f"{c['type']}:{c['length']}" for c in summary["container"]["chunks"]
            )
            rep.status(
                f"container v{summary['container']['version']} "
                f"length={summary['container']['total_length']} chunks={chunks}"
            )
    return 0


def _convert_cmd(args: argparse.Namespace) -> int:
    step(f"converting {args.src} -> {args.dst}")
    doc = open_document(args.src, _quotas(args))
    save_document(doc, args.dst, as_binary=args.binary, embed_external=args.embed)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="gltfcodec", description="glTF 2.0 / GLB codec tool"
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, silent",
    )
    p.add_argument(
        "--quotas",
        type=Path,
        help="YAML or JSON file with read quotas",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    i = sub.add_parser("inspect", help="Decode a document and summarize it")
    i.add_argument("file", type=Path)
    i.add_argument("--json", action="store_true", help="Emit JSON summary")
    i.set_defaults(func=_inspect_cmd)

    c = sub.add_parser("convert", help="Re-encode a document")
    c.add_argument("src", type=Path)
    c.add_argument("dst", type=Path)
    form = c.add_mutually_exclusive_group()
    form.add_argument(
        "--binary",
        dest="binary",
        action="store_true",
        default=None,
        help="Write a GLB container (default: by DST suffix)",
    )
    form.add_argument(
        "--json",
        dest="binary",
        action="store_false",
        help="Write plain JSON (default: by DST suffix)",
    )
    c.add_argument(
        "--embed",
        action="store_true",
        help="Inline external buffers as data URIs",
    )
    c.set_defaults(func=_convert_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    requested = args.reporter
    if requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # rich falls back to plain without a TTY
        set_reporter(PlainReporter())
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except GltfError as e:
        get_reporter().flush()
        get_logger().error(str(e))
        return 1
    except (OSError, ValueError) as e:
        # bad --quotas file or unreadable input
        get_reporter().flush()
        get_logger().error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
