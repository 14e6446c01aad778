import pytest

from integrations.exceptions import IntegrationError
from integrations.web import FetchedPage
from reports.analysis import DEFAULT_OPPORTUNITIES, generate_opportunities, run_analyzer
from reports.analyzers import CheckResult
from reports.analyzers.brand import analyze_brand, analyze_brand_html
from reports.analyzers.competitors import analyze_competitors, haversine_distance, is_same_business
from reports.analyzers.reviews import analyze_reviews, build_search_url
from reports.analyzers.website import analyze_html, analyze_website

RICH_HTML = """
<html><head>
<title>Bright Smiles Dental | Springfield Dentist</title>
<meta name="viewport" content="width=device-width">
<meta name="description" content="Family dentistry in Springfield">
<meta property="og:image" content="/og.png">
<link rel="icon" href="/favicon.ico">
<style>@media (max-width: 600px) { body { font-family: "Inter", sans-serif; } }</style>
<script type="application/ld+json">{}</script>
</head><body>
<nav><a href="/">Home</a><a href="/a">A</a><a href="/b">B</a><a href="/c">C</a><a href="/d">D</a><a href="/e">E</a></nav>
<h1>Welcome</h1>
<img src="logo.png" alt="Bright Smiles logo">
<img src="1.jpg" alt="Office"><img src="2.jpg" alt="Team"><img src="3.jpg" alt="Chair"><img src="4.jpg" alt="Smile">
<form><button>Book an appointment</button></form>
<p>Call (217) 555-0100 or email hello@brightsmiles.example.com</p>
<a href="https://facebook.com/brightsmiles">fb</a><a href="https://instagram.com/brightsmiles">ig</a>
<footer>Footer</footer>
</body></html>
"""


def by_category(results):
    return {r.category: r for r in results}


class TestWebsiteAnalyzer:
    def test_analyze_html_scores_automatable_categories(self):
        results = by_category(analyze_html(RICH_HTML, 450, True))

        assert len(results) == 10
        assert results["Overall Design"].score is None
        assert results["Content Clarity"].metadata == {"automatable": False}
        assert results["Mobile Responsiveness"].score == 4
        assert results["Navigation"].score == 4
        assert results["Booking/Inquiries"].score == 4
        assert results["Photos & Media"].score == 4
        assert results["SEO Optimization"].score == 5
        assert results["Speed & Performance"].score == 5
        assert results["Trust Signals"].score == 5
        assert results["Trust Signals"].status == "pass"

    def test_bare_page_scores_low(self):
        results = by_category(analyze_html("<html><body>Hello</body></html>", 6000, False))

        assert results["Mobile Responsiveness"].score == 1
        assert results["Booking/Inquiries"].score == 1
        assert results["SEO Optimization"].score == 1
        assert results["Speed & Performance"].score == 1
        assert results["Trust Signals"].feedback_summary == "No SSL, no phone, no email, no social links."
        assert results["Trust Signals"].status == "error"

    def test_unreachable_site_returns_unscored_placeholders(self, monkeypatch):
        def boom(url):
            raise IntegrationError("HTTP 503", status_code=503)

        monkeypatch.setattr("reports.analyzers.website.fetch_page", boom)

        results = analyze_website("brightsmiles.example.com")

        assert len(results) == 10
        assert all(r.score is None for r in results)
        navigation = by_category(results)["Navigation"]
        assert navigation.metadata["fetchFailed"] is True
        assert navigation.notes == "HTTP 503"
        assert by_category(results)["Overall Design"].notes == "Could not fetch website: HTTP 503"

    def test_analyze_website_uses_fetched_page(self, monkeypatch):
        monkeypatch.setattr(
            "reports.analyzers.website.fetch_page",
            lambda url: FetchedPage(url=url, html=RICH_HTML, response_time_ms=1500, is_https=True),
        )

        results = by_category(analyze_website("https://brightsmiles.example.com"))

        assert results["Speed & Performance"].score == 4
        assert results["Speed & Performance"].metadata["responseTimeMs"] == 1500


class TestBrandAnalyzer:
    def test_brand_analysis_of_rich_page(self):
        results = by_category(analyze_brand_html(RICH_HTML))

        assert results["Logo Usage"].score == 4
        assert results["Social Media Branding"].score == 3
        assert results["Social Media Branding"].metadata["foundPlatforms"] == ["Facebook", "Instagram"]
        assert results["Typography"].metadata["fontFamilies"] == ["inter"]
        assert results["Logo Consistency"].score is None

    def test_brand_analysis_when_unreachable(self, monkeypatch):
        def boom(url):
            raise IntegrationError("timed out")

        monkeypatch.setattr("reports.analyzers.brand.fetch_page", boom)

        results = by_category(analyze_brand("https://brightsmiles.example.com"))

        assert results["Logo Usage"].metadata["fetchFailed"] is True
        assert results["Overall Brand Cohesion"].metadata == {"automatable": False}


class TestReviewsAnalyzer:
    def test_reviews_without_keys_fall_back_to_search_urls(self):
        results = by_category(analyze_reviews("Bright Smiles", "Springfield", ["Google", "Yelp", "Healthgrades"]))

        assert results["Google"].metadata["apiKeyMissing"] is True
        assert results["Yelp"].metadata["searchUrl"].startswith("https://www.yelp.com/search?find_desc=Bright+Smiles")
        assert results["Healthgrades"].metadata["manualCheck"] is True
        assert all(r.score is None for r in results.values())

    def test_google_listing_found(self, monkeypatch, settings):
        settings.GOOGLE_PLACES_API_KEY = "test-key"
        monkeypatch.setattr(
            "integrations.places.text_search",
            lambda query: {"name": "Bright Smiles", "rating": 4.8, "user_ratings_total": 120, "place_id": "abc"},
        )

        google = analyze_reviews("Bright Smiles", "", ["Google"])[0]

        assert google.score == 1
        assert google.status == "pass"
        assert google.metadata["rating"] == 4.8
        assert google.metadata["total_reviews"] == 120

    def test_build_search_url(self):
        assert build_search_url("Vrbo", "Lake House") == "https://www.vrbo.com/search?q=Lake%20House"
        assert build_search_url("Nextdoor", "Lake House") == "https://www.google.com/search?q=Lake%20House%20Nextdoor"


class TestCompetitorsAnalyzer:
    def test_competitors_without_places_key(self):
        results = analyze_competitors("Bright Smiles", "12 Main St", "dental")

        assert [r.category for r in results] == ["Competitor 1", "Competitor 2", "Competitor 3"]
        assert "not configured" in results[0].notes
        assert results[0].metadata["competitor_name"] == ""

    def test_competitor_helpers(self):
        assert is_same_business("Bright Smiles Dental", "Bright Smiles")
        assert not is_same_business("Bright Smiles", "Lakeside Dental")
        assert haversine_distance(0, 0, 0, 1) == pytest.approx(111195, rel=1e-3)


class TestOpportunities:
    def test_generate_opportunities(self):
        results = [
            CheckResult("Navigation", "error", 2, "No nav."),
            CheckResult("SEO Optimization", "pass", 5, "Great."),
            CheckResult("Overall Design"),
        ]

        text = generate_opportunities(results)

        assert text == (
            "**Navigation:** No nav.\n\n"
            "**Manual review needed:** Overall Design. These categories require manual assessment."
        )
        assert generate_opportunities([CheckResult("SEO Optimization", "pass", 5, "Great.")]) == DEFAULT_OPPORTUNITIES

    @pytest.mark.django_db
    def test_run_analyzer_skips_website_types_without_url(self, company):
        company.website_url = ""

        assert run_analyzer("website", company, []) is None
        assert run_analyzer("patient", company, []) is None
