"""
Command line entry point: compare two text files.

    python -m paragraph_diff original.txt revised.txt [--json]
"""

import sys
import json
import logging
import argparse
from pathlib import Path

from .differ import ParagraphDiffer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='paragraph_diff',
        description='Word-level paragraph diff with move detection'
    )
    parser.add_argument('original', type=str, help='Path to the original text file')
    parser.add_argument('revised', type=str, help='Path to the revised text file')
    parser.add_argument('--json', action='store_true', help='Print the full diff as JSON')
    parser.add_argument('--indent', type=int, default=2, help='JSON indentation (default: 2)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    if args.verbose:
        logging.getLogger('paragraph_diff.differ').setLevel(logging.DEBUG)

    try:
        original = Path(args.original).read_text(encoding='utf-8')
        revised = Path(args.revised).read_text(encoding='utf-8')
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    result = ParagraphDiffer().compare(original, revised)

    if args.json:
        print(json.dumps(result.to_dict(), indent=args.indent, ensure_ascii=False))
        return 0

    stats = result.stats
    print("Statistics:")
    print(f"  Paragraphs:      {len(result.paragraphs)}")
    print(f"  Words original:  {stats.words_original}")
    print(f"  Words revised:   {stats.words_revised}")
    print(f"  Words added:     {stats.words_added}")
    print(f"  Words deleted:   {stats.words_deleted}")
    print(f"  Words unchanged: {stats.words_unchanged}")
    print(f"  Moved:           {stats.paragraphs_moved}")

    changed = [p for p in result.paragraphs if p.is_change]
    if changed:
        print("\nChanged paragraphs:")
        for para in changed:
            print(f"  {para.alignment_type:<9} original={para.original_index} "
                  f"revised={para.revised_index}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
