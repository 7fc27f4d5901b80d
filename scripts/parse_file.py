"""
Demo script: parse a flat file with a YAML schema and export it.

Usage:
    uv run python scripts/parse_file.py SCHEMA.yaml INPUT.txt OUTPUT.parquet
    uv run python scripts/parse_file.py SCHEMA.yaml INPUT.csv OUTPUT.csv --header

A schema whose columns declare widths parses INPUT as fixed-width;
otherwise INPUT is parsed as comma-separated. ``--header`` skips the
first line of a delimited file. The output format follows the OUTPUT
file extension (.csv or .parquet).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("parse_file")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    import flat_file_readers
    from flat_file_readers import DelimitedOptions, FlatFileReadersError

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    header = "--header" in sys.argv
    if len(args) != 3:
        print(__doc__)
        return 2

    schema_path, input_path, output_path = args
    schema = flat_file_readers.load_schema(schema_path)
    options = None
    if not isinstance(schema, flat_file_readers.FixedWidthSchema):
        options = DelimitedOptions(is_first_record_schema=header)

    try:
        df = flat_file_readers.read_dataframe(input_path, schema, options)
    except FlatFileReadersError as exc:
        log.error("Parsing failed: %s", exc)
        return 1

    output_format = Path(output_path).suffix.lstrip(".").lower()
    flat_file_readers.export_table(df, output_path, output_format)  # type: ignore[arg-type]
    log.info("Parsed %s rows x %d cols from %s", f"{len(df):,}", len(df.columns), input_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
