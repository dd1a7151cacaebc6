"""
Print headline numbers for the housing listings and optionally render charts.

    housing-insights --county Kiambu --sort-by units --out-dir reports
"""
import argparse
import logging
import sys
from pathlib import Path

from . import config
from .data_prep import load_listings, load_seed_text
from .filters import FilterSpec, filter_listings, filter_options
from .metrics import (
    COUNTY_SORT_KEYS, availability_analysis, bedroom_analysis, county_distribution,
    price_by_category, rank_counties,
)
from .viz import (
    plot_availability, plot_bedroom_analysis, plot_county_distribution,
    plot_dashboard, plot_price_by_category, stats_table,
)

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Housing project listing summaries")
    ap.add_argument("--data", default=None,
                    help=f"Listings CSV (default: {config.DATA_PATH})")
    ap.add_argument("--county", default="", help="Exact county name")
    ap.add_argument("--category", default="", help="Social / Affordable / Market / Other")
    ap.add_argument("--status", default="", help="Availability label, e.g. 'Sold Out'")
    ap.add_argument("--project-status", default="", help="e.g. Ongoing, Completed")
    ap.add_argument("--search", default="", help="Substring of project name or location")
    ap.add_argument("--sort-by", choices=sorted(COUNTY_SORT_KEYS), default="projects",
                    help="County ranking key")
    ap.add_argument("--top-n", type=int, default=config.TOP_N_COUNTIES,
                    help="Counties to show")
    ap.add_argument("--out-dir", default=str(config.OUTPUT_DIR),
                    help="Write charts (PNG) and aggregated views (CSV) here "
                         "(default: HOUSING_OUTPUT_DIR or %(default)s)")
    ap.add_argument("--no-reports", action="store_true",
                    help="Only print the summary, write no report files")
    ap.add_argument("--show", action="store_true", help="Open chart windows")
    ap.add_argument("--list-options", action="store_true",
                    help="Print the available filter values and exit")
    ap.add_argument("--log-level", default=config.LOG_LEVEL)
    return ap.parse_args(argv)


def write_reports(filtered, out_dir: Path, sort_by: str, top_n: int, show: bool = False):
    views = {
        "price_by_category": price_by_category(filtered),
        "county_distribution": county_distribution(filtered),
        "bedroom_analysis": bedroom_analysis(filtered),
        "availability": availability_analysis(filtered),
    }
    out_dir.mkdir(parents=True, exist_ok=True)
    for name, view in views.items():
        view.to_csv(out_dir / f"{name}.csv", index=False)

    saved = [
        plot_price_by_category(views["price_by_category"], str(out_dir / "price_by_category.png"))[2],
        plot_county_distribution(views["county_distribution"], str(out_dir / "county_distribution.png"),
                                 sort_by=sort_by, top_n=top_n)[2],
        plot_bedroom_analysis(views["bedroom_analysis"], str(out_dir / "bedroom_analysis.png"))[2],
        plot_availability(views["availability"], str(out_dir / "availability.png"))[2],
        plot_dashboard(filtered, str(out_dir / "dashboard.png"), show=show,
                       sort_by=sort_by, top_n=top_n)[2],
    ]
    for p in saved:
        logger.info("wrote %s", p)
    return saved


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        text = load_seed_text(args.data)
    except FileNotFoundError as e:
        print(f"error: listings file not found: {e.filename}", file=sys.stderr)
        return 1
    listings = load_listings(text)
    logger.info("loaded %d listings", len(listings))

    if args.list_options:
        for key, values in filter_options(listings).items():
            print(f"{key}: {', '.join(values)}")
        return 0

    spec = FilterSpec(
        county=args.county,
        category=args.category,
        status=args.status,
        search=args.search,
        project_status=args.project_status,
    )
    filtered = filter_listings(listings, spec)

    print(stats_table(filtered).to_string(index=False))
    print()
    print(f"Top counties by {args.sort_by}:")
    top = rank_counties(county_distribution(filtered), sort_by=args.sort_by, top_n=args.top_n)
    print(top.to_string(index=False) if not top.empty else "  (none)")

    if args.out_dir and not args.no_reports:
        write_reports(filtered, Path(args.out_dir), args.sort_by, args.top_n, show=args.show)
    return 0


if __name__ == "__main__":
    sys.exit(main())
