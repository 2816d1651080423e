"""
Utility script to verify and summarize a saved multipart body.
"""
import json
import sys
from collections import Counter
from pathlib import Path
from typing import Dict, List

from requests_toolbelt.multipart.decoder import MultipartDecoder

import config


def _disposition(part) -> Dict[str, str]:
    """Parse a part's Content-Disposition header into its parameters."""
    header = part.headers.get(b"Content-Disposition", b"").decode("utf-8")
    params = {}
    for item in header.split(";")[1:]:
        key, _, value = item.strip().partition("=")
        params[key] = value.strip('"')
    return params


def read_parts(file_path: Path) -> List[Dict]:
    """Decode the body saved by main.py into a list of part summaries."""
    content_type_file = file_path.with_suffix(file_path.suffix + ".content-type")
    content_type = content_type_file.read_text(encoding='utf-8').strip()
    decoder = MultipartDecoder(file_path.read_bytes(), content_type)

    parts = []
    for part in decoder.parts:
        params = _disposition(part)
        parts.append({
            "name": params.get("name", ""),
            "filename": params.get("filename"),
            "size": len(part.content),
            "content": part.content,
        })
    return parts


def analyze_output(file_path: Path):
    """Analyze the saved body and print statistics."""
    if not file_path.exists():
        print(f"Error: Output file not found at {file_path}")
        return

    print(f"Reading {file_path}...")
    parts = read_parts(file_path)
    if not parts:
        print("No parts found in output file.")
        return

    print("\n" + "=" * 60)
    print("OUTPUT ANALYSIS")
    print("=" * 60)
    print(f"\nTotal parts: {len(parts)}")

    files = [p for p in parts if p["filename"] is not None]
    fields = [p for p in parts if p["filename"] is None]
    print(f"Text fields: {len(fields)}")
    print(f"Files: {len(files)}")

    # Repeated names come from collections
    names = Counter(p["name"] for p in fields)
    print("\nFields:")
    for name, count in names.items():
        print(f"  {name}: {count} value(s)")

    json_fields = 0
    for p in fields:
        try:
            if isinstance(json.loads(p["content"]), (dict, list)):
                json_fields += 1
        except ValueError:
            pass
    print(f"\nJSON object fields: {json_fields}")

    if files:
        print("\nFiles:")
        for p in files:
            print(f"  {p['name']}: {p['filename']} ({p['size']} bytes)")


if __name__ == "__main__":
    output_path = Path(sys.argv[1]) if len(sys.argv) > 1 else config.OUTPUT_FILE
    analyze_output(output_path)
