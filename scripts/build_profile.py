#!/usr/bin/env python3
"""Build a composite style profile from a reference library and save it as JSON."""

import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from humanizer.corpus.library import ReferenceLibrary
from humanizer.style.composite import CompositeProfileBuilder


def build_profile(library_dir: str, output_file: str):
    """Profile every document in library_dir and write the composite."""
    documents = ReferenceLibrary(library_dir).documents()
    if not documents:
        print(f"Error: No documents found in {library_dir}")
        return

    profile = CompositeProfileBuilder().build([d.text for d in documents], [d.weight for d in documents])

    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(profile.to_dict(), f, indent=2)

    print(f"✓ Built composite profile from {len(documents)} documents")
    print(f"  sentence_length_mean: {profile.sentence_length_mean:.1f}")
    print(f"  sentence_length_stddev: {profile.sentence_length_stddev:.1f}")
    print(f"  type_token_ratio: {profile.type_token_ratio:.3f}")

if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python build_profile.py <library_dir> <output_file>")
        print("Example: python build_profile.py library/ profiles/composite.json")
        sys.exit(1)

    build_profile(sys.argv[1], sys.argv[2])
