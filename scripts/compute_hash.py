"""Compute the base64 SHA-256 model_hash for a model file and print a manifest."""

import base64
import hashlib
import sys
from pathlib import Path


def compute_hash(file_path: Path) -> str:
    sha256 = hashlib.sha256()
    with open(file_path, "rb") as f:
        while chunk := f.read(8192):
            sha256.update(chunk)
    return base64.b64encode(sha256.digest()).decode("ascii")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(
            "Usage: python scripts/compute_hash.py <file_path> "
            "[version] [model_url] [report_url]"
        )
        sys.exit(1)

    path = Path(sys.argv[1])
    if not path.exists():
        print(f"File not found: {path}")
        sys.exit(1)

    model_hash = compute_hash(path)
    if len(sys.argv) < 5:
        print(model_hash)
        sys.exit(0)

    print(f"version: {int(sys.argv[2])}")
    print(f"model_url: {sys.argv[3]}")
    print(f"model_hash: {model_hash}")
    print(f"report_url: {sys.argv[4]}")
