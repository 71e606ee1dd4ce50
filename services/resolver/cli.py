import argparse
import json
import sys

from services.config.env import get_audio_clip_config
from services.config.logging_config import configure_logging
from services.mapper.store import ConfigError, load_store
from .core import resolve_sequences, split_sequence_payload


def main(argv=None) -> int:
    cfg = get_audio_clip_config()
    parser = argparse.ArgumentParser(
        prog="python -m services.resolver.cli",
        description="Resolve colon-separated sequences to audio file paths.",
    )
    parser.add_argument("sequence", help='e.g. "AB12CD34:WA1"')
    parser.add_argument("--config", default=cfg.config_path, help="AudioClipConfig XML file")
    parser.add_argument("--mappings", default=cfg.mapping_base_dir, help="directory holding mapping XML files")
    # logs share stdout with the JSON output
    parser.add_argument("--log-level", default="WARNING")
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return int(exc.code or 0)

    configure_logging(args.log_level)
    try:
        store = load_store(args.config, args.mappings)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    paths = resolve_sequences(store, split_sequence_payload(args.sequence))
    print(json.dumps(paths, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
