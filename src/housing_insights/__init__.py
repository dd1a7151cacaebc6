"""Parse housing project listings and summarise them for charts."""

from .records import (
    Availability, Category, HousingRecord, availability_color, category_color,
)
from .classify import bedroom_bucket, classify_bedrooms, classify_category
from .data_prep import (
    as_frame, listings_frame, load_listings, load_seed_text, parse_listings, to_records,
)
from .filters import FilterSpec, filter_listings, filter_options, matches
from .metrics import (
    availability_analysis, bedroom_analysis, county_distribution, largest_project,
    most_active_county, price_by_category, rank_counties, summary_stats,
)

__version__ = "0.1.0"
