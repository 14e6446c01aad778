import pytest

from reports.config import get_report_configs
from reports.models import Report, ReportItem, ReportSet, Tier
from reports.scoring import (
    calculate_percentage,
    calculate_tier,
    recalculate_report_score,
    recalculate_report_set_score,
    tier_label,
)


class TestTiers:
    @pytest.mark.parametrize(
        ("score", "max_score", "expected"),
        [
            (35, 50, Tier.PASS),
            (34.9, 50, Tier.FAIR),
            (20, 50, Tier.FAIR),
            (19, 50, Tier.FAIL),
            (0, 50, Tier.FAIL),
            (10, 0, Tier.FAIL),
            (10, None, Tier.FAIL),
        ],
    )
    def test_calculate_tier(self, score, max_score, expected):
        assert calculate_tier(score, max_score) == expected

    def test_calculate_percentage(self):
        assert calculate_percentage(37, 50) == 74
        assert calculate_percentage(1, 3) == 33
        assert calculate_percentage(5, 0) == 0

    def test_tier_label(self):
        assert tier_label(Tier.PASS) == "Pass"
        assert tier_label("fair") == "Fair"
        assert tier_label("") == ""


class TestReportConfigs:
    def test_report_configs_per_industry(self):
        assert [c.type for c in get_report_configs(None)] == [
            "online_reviews", "website", "brand_logo", "competitors",
        ]
        assert [c.type for c in get_report_configs("dental")][4:] == ["patient", "patient_comms"]
        assert [c.type for c in get_report_configs("real-estate")][4:] == ["guest", "guest_comms"]

    def test_online_review_platforms_follow_industry(self):
        dental = get_report_configs("dental")[0]
        rentals = get_report_configs("real-estate")[0]

        assert "Healthgrades" in [c.category for c in dental.categories]
        assert "Zillow" in [c.category for c in rentals.categories]
        assert dental.max_score == 7


@pytest.fixture
def report_set(company):
    return ReportSet.objects.create(company=company)


def _report(report_set, report_type, status, items):
    report = Report.objects.create(report_set=report_set, report_type=report_type, status=status)
    for index, (category, score, metadata) in enumerate(items):
        ReportItem.objects.create(
            report=report, category=category, score=score, metadata=metadata, sort_order=index,
        )
    return report


@pytest.mark.django_db
class TestRecalculate:
    def test_report_score_uses_item_max_then_category_max(self, report_set):
        report = _report(report_set, "website", Report.Status.COMPLETED, [
            ("Navigation", 4, {}),
            ("Trust Signals", 5, {"maxScore": 10}),
            ("Overall Design", None, {}),
        ])

        report = recalculate_report_score(report)

        assert report.score == 9
        assert report.max_score == 20
        assert report.tier == Tier.FAIR

    def test_report_without_scores_has_no_tier(self, report_set):
        report = _report(report_set, "website", Report.Status.DRAFT, [("Navigation", None, {})])

        report = recalculate_report_score(report)

        assert report.score is None
        assert report.max_score == 5
        assert report.tier == ""

    def test_report_set_rolls_up_completed_reports_only(self, report_set):
        Report.objects.create(
            report_set=report_set, report_type="website", status=Report.Status.COMPLETED, score=40, max_score=50,
        )
        Report.objects.create(
            report_set=report_set, report_type="brand_logo", status=Report.Status.COMPLETED, score=10, max_score=50,
        )
        Report.objects.create(
            report_set=report_set, report_type="competitors", status=Report.Status.IN_PROGRESS, score=3, max_score=3,
        )

        report_set = recalculate_report_set_score(report_set)

        assert report_set.overall_score == 50
        assert report_set.overall_max_score == 100
        assert report_set.overall_tier == Tier.FAIR
        assert report_set.status == ReportSet.Status.COMPLETED

    def test_report_set_with_a_draft_needs_review(self, report_set):
        Report.objects.create(
            report_set=report_set, report_type="website", status=Report.Status.COMPLETED, score=45, max_score=50,
        )
        Report.objects.create(report_set=report_set, report_type="patient", status=Report.Status.DRAFT)

        report_set = recalculate_report_set_score(report_set)

        assert report_set.overall_tier == Tier.PASS
        assert report_set.status == ReportSet.Status.NEEDS_REVIEW

    def test_all_draft_report_set_clears_overall(self, report_set):
        ReportSet.objects.filter(pk=report_set.pk).update(overall_score=10, overall_max_score=20, overall_tier="fair")
        Report.objects.create(report_set=report_set, report_type="website", status=Report.Status.DRAFT)

        report_set = recalculate_report_set_score(report_set)

        assert report_set.overall_score is None
        assert report_set.overall_max_score is None
        assert report_set.overall_tier == ""
        assert report_set.status == ReportSet.Status.NEEDS_REVIEW
