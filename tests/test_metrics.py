"""Aggregated views over the sample listings."""
import math

import pytest

from housing_insights.data_prep import load_listings, load_seed_text, parse_listings
from housing_insights.filters import FilterSpec, filter_listings
from housing_insights.metrics import (
    availability_analysis, bedroom_analysis, county_distribution, largest_project,
    most_active_county, price_by_category, rank_counties, summary_stats,
)

from listings_sample import HEADER, SAMPLE_CSV


def _df():
    return load_listings(SAMPLE_CSV)

def _empty():
    return filter_listings(_df(), FilterSpec(county="Nowhere"))


def test_summary_stats():
    stats = summary_stats(_df())
    assert stats["total_projects"] == 5
    assert stats["total_units"] == 1205          # 1200 declared + 5 rows counted as one
    assert stats["average_price"] == pytest.approx(18_100_000 / 6)
    assert stats["available_units"] == 4
    assert stats["sold_out_units"] == 1
    assert stats["avg_monthly_payment"] == pytest.approx(5_500)
    assert stats["total_counties"] == 3


def test_summary_stats_accepts_records():
    assert summary_stats(parse_listings(SAMPLE_CSV)) == summary_stats(_df())


def test_summary_stats_empty():
    for empty in (_empty(), []):
        stats = summary_stats(empty)
        assert stats["total_projects"] == 0
        assert stats["total_units"] == 0
        assert math.isnan(stats["average_price"])
        assert math.isnan(stats["avg_monthly_payment"])
        assert stats["available_units"] == 0


def test_price_by_category():
    out = price_by_category(_df())
    assert out["category"].tolist() == ["Social", "Affordable", "Other"]
    assert out["avg_price"].tolist() == pytest.approx([800_000, 1_000_000, 15_500_000 / 3])
    assert out["count"].tolist() == [2, 1, 3]
    assert out["color"].tolist() == ["#2563EB", "#059669", "#6B7280"]


def test_county_distribution_unsorted():
    out = county_distribution(_df())
    assert out["county"].tolist() == ["Kiambu", "Nairobi", "Kilifi"]
    assert out["total_projects"].tolist() == [2, 2, 1]
    assert out["total_units"].tolist() == [1202, 2, 1]
    assert out["avg_price"].tolist() == pytest.approx([1_380_000, 4_980_000, 4_000_000])


def test_rank_counties():
    dist = county_distribution(_df())
    assert rank_counties(dist, "projects")["county"].tolist() == ["Kiambu", "Nairobi", "Kilifi"]
    assert rank_counties(dist, "units", top_n=2)["county"].tolist() == ["Kiambu", "Nairobi"]
    assert rank_counties(dist, "price")["county"].tolist() == ["Nairobi", "Kilifi", "Kiambu"]
    # ranking never touches the distribution itself
    assert dist["county"].tolist() == ["Kiambu", "Nairobi", "Kilifi"]
    with pytest.raises(ValueError):
        rank_counties(dist, "name")


def test_most_active_and_largest():
    df = _df()
    assert most_active_county(county_distribution(df)) == ("Kiambu", 2)
    assert largest_project(df) == 1200
    assert most_active_county(county_distribution(_empty())) == (None, 0)
    nairobi = filter_listings(df, FilterSpec(county="Nairobi"))
    assert largest_project(nairobi) is None


def test_bedroom_analysis():
    out = bedroom_analysis(_df())
    assert out["bucket"].tolist() == ["2 Bedrooms", "Studio", "1 Bedroom", "4+ Bedrooms"]
    assert out["count"].tolist() == [2, 1, 1, 1]
    assert out["avg_price"].tolist() == pytest.approx([1_730_000, 1_000_000, 640_000, 4_000_000])
    # only present payments are averaged; none present gives 0
    assert out["avg_monthly_payment"].tolist() == pytest.approx([5_350, 7_250, 3_900, 0])
    assert "Unknown" not in out["bucket"].tolist()


ZERO_CSV = "\n".join([
    HEADER,
    'Kisumu, Kisumu, Lakeside Estate, Ongoing, 0, 2 Bedroom Unit Affordable, Available, "KES 2,000,000.00", "KES 0.00"',
    'Kisumu, Kisumu, Lakeside Estate, Ongoing,, 2 Bedroom Unit Market, Available, "KES 3,000,000.00", "KES 20,000.00"',
    'Kisumu, Kisumu, Lakeside Estate, Ongoing, -5, Studio Unit Social, Available, "KES 640,000.00", "KES 0.00"',
]) + "\n"


def test_zero_units_count_as_one_and_negative_totals_are_kept():
    df = load_listings(ZERO_CSV)
    assert summary_stats(df)["total_units"] == 1 + 1 - 5
    assert county_distribution(df)["total_units"].tolist() == [-3]


def test_zero_payments_are_left_out_of_averages():
    df = load_listings(ZERO_CSV)
    assert summary_stats(df)["avg_monthly_payment"] == pytest.approx(20_000)
    out = bedroom_analysis(df)
    assert out["bucket"].tolist() == ["2 Bedrooms", "Studio"]
    assert out["count"].tolist() == [2, 1]
    assert out["avg_monthly_payment"].tolist() == pytest.approx([20_000, 0])


def test_availability_analysis():
    out = availability_analysis(_df())
    assert out["status"].tolist() == ["Available", "Sold Out", "Reserved"]
    assert out["count"].tolist() == [4, 1, 1]
    assert out["color"].tolist() == ["#059669", "#DC2626", "#6B7280"]
    assert out["percentage"].sum() == pytest.approx(100, abs=1e-6)


def test_availability_percentages_on_seed():
    df = load_listings(load_seed_text())
    for spec in [FilterSpec(), FilterSpec(county="Kiambu"), FilterSpec(category="Market")]:
        out = availability_analysis(filter_listings(df, spec))
        assert abs(out["percentage"].sum() - 100) < 1e-6


def test_empty_views_have_columns():
    empty = _empty()
    assert list(price_by_category(empty).columns) == ["category", "avg_price", "count", "color"]
    assert list(county_distribution(empty).columns) == ["county", "total_projects", "total_units", "avg_price"]
    assert list(bedroom_analysis(empty).columns) == ["bucket", "count", "avg_price", "avg_monthly_payment"]
    assert list(availability_analysis(empty).columns) == ["status", "count", "percentage", "color"]
    assert largest_project(empty) is None
