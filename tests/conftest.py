"""
Pytest configuration and shared fixtures for pagewright tests.

Most tests drive pages through the in-memory doubles in fakes.py; tests
marked ``browser`` use a real Playwright browser and skip without one.
"""

from typing import Generator

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, sync_playwright

from fakes import FakeDriver, FakeNode
from pagewright import Session


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests that sleep while polling")
    config.addinivalue_line("markers", "browser: marks tests that launch a real browser")


@pytest.fixture
def driver() -> FakeDriver:
    """Fake browser sitting on the root of the test host."""
    return FakeDriver(current_url="http://example.com/")


@pytest.fixture
def session(driver) -> Session:
    return Session(driver, base_url="http://example.com")


@pytest.fixture
def clickable() -> FakeNode:
    return FakeNode("button", verbs=("click",), text="Go")


@pytest.fixture(scope="session")
def playwright_browser():
    """Session-scoped browser for faster tests."""
    with sync_playwright() as p:
        try:
            browser = p.chromium.launch(headless=True)
        except PlaywrightError as e:
            pytest.skip(f"Chromium is not available: {e}")
        yield browser
        browser.close()


@pytest.fixture
def browser_page(playwright_browser) -> Generator[Page, None, None]:
    """Page fixture that creates a fresh page for each test."""
    page = playwright_browser.new_page()
    yield page
    page.close()
