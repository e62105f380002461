"""
Shared test configuration for SeoLens.

Provides sample pages and a document factory so each test can build the
exact tree it needs.
"""

from typing import Callable

import pytest

from seolens.config import ExtractionSettings
from seolens.extraction.document import PageDocument

PAGE_URL = "https://example.com/blog/post"

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: End-to-end extraction over full pages")


# ============================================================================
# Core Test Fixtures
# ============================================================================


@pytest.fixture
def make_document() -> Callable[..., PageDocument]:
    """Build a PageDocument from an HTML string."""

    def _make(html: str, url: str = PAGE_URL) -> PageDocument:
        return PageDocument.from_html(html, url)

    return _make


@pytest.fixture
def extraction_settings() -> ExtractionSettings:
    return ExtractionSettings()


@pytest.fixture
def sample_html() -> str:
    """A blog page exercising every extractor."""
    return """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Machine Learning Algorithms: A Comprehensive Guide</title>
    <meta name="description" content="A comprehensive guide to machine learning algorithms">
    <meta name="keywords" content="machine learning, AI, algorithms">
    <meta name="robots" content="index, follow">
    <meta name="generator" content="WordPress 6.4; Yoast SEO v21.5">
    <meta name="reply-to" content="Editor@Example.com">
    <meta property="og:title" content="Machine Learning Algorithms Guide">
    <meta property="og:image" content="https://example.com/ml-guide.jpg">
    <meta name="twitter:card" content="summary_large_image">
    <link rel="canonical" href="/blog/post">
    <link rel="icon" href="/static/favicon.png">
    <link rel="alternate" hreflang="de" href="https://example.com/de/blog/post">
    <script type="application/ld+json">
    {
        "@context": "https://schema.org",
        "@type": "Article",
        "headline": "Machine Learning Algorithms Guide",
        "author": {"@type": "Person", "name": "Dr. Jane Smith"},
        "publisher": {"@type": "Organization", "name": "AI Research Blog"},
        "datePublished": "2023-12-01"
    }
    </script>
</head>
<body>
    <header>
        <h1>Machine Learning Algorithms: A Comprehensive Guide</h1>
        <nav>
            <a href="/">Home</a>
            <a href="https://other.org/resource" rel="nofollow noopener" target="_blank">Resource</a>
            <a href="mailto:editor@example.com?subject=Hi">Email us</a>
            <a href="tel:+1-234-567-8900">Call us</a>
        </nav>
    </header>
    <main>
        <h2>Supervised Learning</h2>
        <img src="/img/chart.png" alt="Chart" width="640" height="480">
        <img src="/img/pixel.gif" width="1" height="1">
        <picture>
            <source srcset="/img/hero-small.webp 480w, /img/hero-large.webp 1200w">
            <img src="/img/hero.jpg" alt="Hero image">
        </picture>
        <p>Questions? Write to Support@Example.com or call (234) 567-8901.</p>
        <div itemscope itemtype="https://schema.org/Organization">
            <span itemprop="name">AI Research Blog</span>
        </div>
    </main>
</body>
</html>
"""
