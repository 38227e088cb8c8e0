#!/usr/bin/env python3
"""
Bump btf-slice version.

Usage:
  bump_version.py [major|minor|patch]

Examples:
  bump_version.py patch    # 1.0.0 → 1.0.1
  bump_version.py minor    # 1.0.0 → 1.1.0
  bump_version.py major    # 1.0.0 → 2.0.0
"""

import re
import sys
from pathlib import Path

INIT_FILE = Path("btfslice/__init__.py")
PYPROJECT_FILE = Path("pyproject.toml")


def get_current_version():
    with open(INIT_FILE) as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return None


def bump_version(current, level):
    major, minor, patch = map(int, current.split("."))

    if level == "patch":
        patch += 1
    elif level == "minor":
        minor += 1
        patch = 0
    elif level == "major":
        major += 1
        minor = 0
        patch = 0

    return f"{major}.{minor}.{patch}"


def update_files(new_version):
    content = INIT_FILE.read_text()
    content = re.sub(r'__version__\s*=\s*["\'].*?["\']',
                     f'__version__ = "{new_version}"', content)
    INIT_FILE.write_text(content)

    # Only the [project] version line starts at column 0
    content = PYPROJECT_FILE.read_text()
    content = re.sub(r'(?m)^version\s*=\s*"\d+\.\d+\.\d+"',
                     f'version = "{new_version}"', content, count=1)
    PYPROJECT_FILE.write_text(content)

    print(f"Version updated to {new_version}")


if __name__ == "__main__":
    if len(sys.argv) != 2 or sys.argv[1] not in ["major", "minor", "patch"]:
        print(__doc__)
        sys.exit(1)

    current = get_current_version()
    if not current:
        print("Could not find current version")
        sys.exit(1)

    new_version = bump_version(current, sys.argv[1])
    update_files(new_version)
