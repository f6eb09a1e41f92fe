"""Logic for writing emitted documents and navigation to disk."""

from pathlib import Path

from rustdoc_md.errors import OutputWriteError
from rustdoc_md.output_unit import OutputUnit


def output_file_for_unit(out_root: Path, package: str, unit: OutputUnit) -> Path:
    """Determine the output file for a document, creating its directory."""
    # out_root/<package>/geometry/Point.md
    p = out_root / package / unit.path
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def write_text(path: Path, text: str) -> None:
    """Write one file, surfacing any failure with the path that failed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(path, str(e)) from e


def write_output(out_root: Path, package: str, units: list[OutputUnit]) -> int:
    """Write all documents of a package."""
    total = len(units)
    print(f"Writing {total} pages...")
    written = 0
    for unit in units:
        try:
            out_file = output_file_for_unit(out_root, package, unit)
        except OSError as e:
            raise OutputWriteError(out_root / package / unit.path, str(e)) from e
        write_text(out_file, unit.body)
        written += 1
        if written % 50 == 0:
            print(f"  ... wrote {written}/{total} pages")
    return written
