from __future__ import annotations

import argparse
import logging
import sys

from .config import CardsetConfig, load_config
from .images import ImageResolver
from .pipeline import CardsetPipeline
from .validator import validate_assets
from .wordlist import read_wordlist


class CardsetArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1 like every other failure."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    p = CardsetArgumentParser(
        prog="cardset_engine",
        description="Generate printable flashcard sets from a word list and an image folder",
    )
    sub = p.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Write the HTML card sets (and optionally a PDF)")
    _add_input_args(run)
    run.add_argument("--out-dir", default=None, help="Output folder (overrides outputDir)")
    run.add_argument("--pdf", action="store_true", default=None, help="Also render the image card set to PDF")

    validate = sub.add_parser("validate", help="Cross-check word list entries against image files")
    _add_input_args(validate)
    validate.add_argument("--strict", action="store_true", help="Exit 1 when anything is reported")

    return p


def _add_input_args(sp: argparse.ArgumentParser) -> None:
    sp.add_argument("-c", "--config", required=True, help="Path to config.json")
    sp.add_argument("-t", "--tsv", default=None, help="Path to wordlist.tsv (overrides wordlistPath)")
    sp.add_argument("-p", "--path", default=None, help="Folder of images (overrides images.directory)")
    sp.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def _load(args: argparse.Namespace, **overrides) -> CardsetConfig:
    return load_config(args.config, wordlist_path=args.tsv, images_dir=args.path, **overrides)


def cmd_run(args: argparse.Namespace) -> int:
    try:
        cfg = _load(args, output_dir=args.out_dir, pdf=args.pdf)
        stats = CardsetPipeline(cfg).run()
    except (OSError, ValueError, RuntimeError) as e:
        print(f"run_failed: {e}", file=sys.stderr)
        return 1

    for path in stats.files_written:
        print(str(path))
    print(
        f"records={stats.records_parsed} dropped={stats.lines_dropped} "
        f"in_range={stats.records_in_range} with_image={stats.records_with_image}"
    )
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    try:
        cfg = _load(args)
        resolver = ImageResolver(root=cfg.images_dir, default_size=cfg.default_size)
        records = read_wordlist(cfg.wordlist_path, cfg.target_language, resolver)
    except (OSError, ValueError) as e:
        print(f"validate_failed: {e}", file=sys.stderr)
        return 1

    report = validate_assets(records, resolver)
    print(f"records={report.records}")
    print(f"missing_images={len(report.missing_images)}")
    print(f"orphan_images={len(report.orphan_images)}")
    for m in report.findings:
        print(m)

    if args.strict and not report.ok:
        return 1
    if report.ok:
        print("OK")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.command == "run":
        return cmd_run(args)

    if args.command == "validate":
        return cmd_validate(args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
