#!/usr/bin/env python3
"""
Validate a mod manifest file before publishing it on a mirror.
Checks that it parses and that every node is installable.
"""

import sys
from collections import Counter
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from core.errors import ManifestParseError
from core.manifest_parser import read_install_file
from core.mod_node import walk_all, find_duplicate_tree_names
from utils.network_utils import is_valid_url


def validate_manifest(manifest_path):
    """Check a manifest file and print a report. Returns True if it has no errors."""

    print(f"📋 Validating {manifest_path}")
    print("-" * 60)

    try:
        nodes = read_install_file(manifest_path)
    except ManifestParseError as e:
        print(f"❌ Parse error: {e}")
        return False
    except FileNotFoundError:
        print(f"❌ File not found: {manifest_path}")
        return False

    all_nodes = list(walk_all(nodes))
    print(f"✓ {len(nodes)} top-level mod(s), {len(all_nodes)} node(s) in total")
    print()

    depth_counts = Counter(node.tree_name.count(".") for node in all_nodes)
    print("Nodes per level:")
    for depth, count in sorted(depth_counts.items()):
        print(f"  - level {depth}: {count} node(s)")
    print()

    errors = []
    warnings = []

    # 1. Duplicate tree names share one installed-version entry
    duplicates = find_duplicate_tree_names(nodes)
    if duplicates:
        errors.append("❌ Duplicate mod names:")
        for name in duplicates:
            errors.append(f"   - {name}")

    # 2. Leaves must have something to download
    no_urls = [node.tree_name for node in all_nodes if node.is_leaf and not node.urls]
    if no_urls:
        errors.append("❌ Mods without URL:")
        for name in no_urls:
            errors.append(f"   - {name}")

    # 3. URLs must be http(s)
    bad_urls = [(node.tree_name, url) for node in all_nodes for url in node.urls if not is_valid_url(url)]
    if bad_urls:
        errors.append("❌ Invalid URLs:")
        for name, url in bad_urls:
            errors.append(f"   - {name}: {url}")

    # 4. Versions are needed to detect updates
    no_version = [node.tree_name for node in all_nodes if node.urls and not node.version]
    if no_version:
        warnings.append("⚠️  Mods without VERSION:")
        for name in no_version:
            warnings.append(f"   - {name}")

    print()
    if warnings:
        for line in warnings:
            print(line)
        print()

    if errors:
        for line in errors:
            print(line)
        print()
        print("❌ Validation failed - errors were found")
        return False
    else:
        print("✅ No errors found - manifest is valid!")
        return True


if __name__ == '__main__':
    if len(sys.argv) < 2:
        print(f"Usage: {sys.argv[0]} <manifest file>")
        sys.exit(2)

    success = validate_manifest(Path(sys.argv[1]))
    sys.exit(0 if success else 1)
