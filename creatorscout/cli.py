"""
CreatorScout - Bundle CLI
===========================
Runs the statistics pipeline over a bundle directory holding videos.json
and writes stats_bundle.json next to it.

Usage:
    python -m creatorscout.cli <bundle_dir> [target_category]
"""

import sys
from pathlib import Path

from . import config
from .pipeline.analyze import OUTPUT_FILE, VIDEOS_FILE, analyze_bundle, configured_oracles
from .pipeline.errors import EmptyInputError


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(__doc__)
        return 1

    config.setup_logging()
    bundle_dir = Path(argv[0])
    target_category = argv[1] if len(argv) > 1 else None

    if not (bundle_dir / VIDEOS_FILE).exists():
        print(f"No {VIDEOS_FILE} in {bundle_dir}")
        return 1

    classifier, _ = configured_oracles()
    try:
        result = analyze_bundle(bundle_dir, classifier, target_category)
    except EmptyInputError as e:
        print(f"Nothing to analyze: {e}")
        return 1

    bundle = result.bundle
    perf = bundle.performance
    print(f"Analyzed {bundle.overview.total_videos} videos "
          f"({bundle.overview.category_videos} in {bundle.target_category}, "
          f"source={result.classification.source})")
    print(f"   ER overall {perf.overall_er:.2%}, category {perf.category_er:.2%}, uplift {perf.uplift:+.1%}")
    print(f"   Explosive rate {perf.explosive_rate:.1%}, CTA rate {bundle.cta_rate:.1%}")
    if bundle.flags:
        print(f"   Flags: {', '.join(bundle.flags)}")
    print(f"   Selected: {', '.join(r.id for r in result.selected)}")
    print(f"Saved {bundle_dir / OUTPUT_FILE}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
