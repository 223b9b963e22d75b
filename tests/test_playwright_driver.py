"""
Tests for the Playwright driver against real pages.

These tests launch Chromium and are skipped when it is not installed
(run `playwright install chromium` first).
"""

import pytest

from pagewright import Element, Page, Session, after_events, button, checkbox, element, section, select_list, text_field
from pagewright.drivers import AmbiguousMatchError, ElementNotFoundError
from pagewright.drivers.playwright import PlaywrightDriver

pytestmark = pytest.mark.browser

FORM_HTML = """
<html>
<body>
  <h1>Sign up</h1>
  <form id="signup">
    <label for="email">Email</label>
    <input id="email" name="email" placeholder="you@example.com">
    <label><input type="checkbox" name="terms"> Accept terms</label>
    <select id="plan" name="plan">
      <option value="free">Free</option>
      <option value="pro">Pro</option>
    </select>
    <button type="button" id="submit" onclick="document.getElementById('status').textContent = 'Sent ' + document.getElementById('email').value">
      Sign up
    </button>
  </form>
  <p id="status">Idle</p>
  <ul id="links">
    <li><a href="#a">Help</a></li>
    <li><a href="#b">About</a></li>
  </ul>
</body>
</html>
"""


class LoggingButton(Element):
    @after_events
    def record(self):
        self.parent_element.clicks = getattr(self.parent_element, "clicks", 0) + 1


class SignupPage(Page):
    email = text_field(label="Email")
    terms = checkbox(name="terms")
    plan = select_list(id="plan")
    submit = button(LoggingButton, text="Sign up")
    status = element(css="#status")
    missing = element(css="#nope")
    items = element(css="#links li")

    @section(css="#links")
    def links(links):
        links.link("help", text="Help")


@pytest.fixture
def driver(browser_page):
    browser_page.set_content(FORM_HTML)
    return PlaywrightDriver(browser_page, find_timeout=0.5)


@pytest.fixture
def page(driver):
    return SignupPage(Session(driver))


class TestPlaywrightElements:
    """Tests for resolving and driving elements in Chromium."""

    def test_fill_and_click(self, page):
        page.email.set("ada@example.com")
        page.submit.click()

        assert page.email.value == "ada@example.com"
        assert page.status.text == "Sent ada@example.com"
        assert page.clicks == 1

    def test_checkbox(self, page):
        page.terms.set(True)
        assert page.terms.checked is True

    def test_select(self, page):
        page.plan.select("pro")
        assert page.plan.value == "pro"

    def test_nested_link(self, page):
        assert page.links.help.get_attribute("href") == "#a"

    def test_not_found(self, page):
        with pytest.raises(ElementNotFoundError):
            page.missing.browser_element

    def test_ambiguous(self, page):
        with pytest.raises(AmbiguousMatchError):
            page.items.browser_element

    def test_first_match(self, page):
        page.element("first_item", css="#links li", match="first")
        assert page.first_item.text == "Help"

    def test_multiple_results(self, page):
        page.element("all_items", css="#links li", options={"multiple_results": True})
        assert [item.text for item in page.all_items.browser_element] == ["Help", "About"]

    def test_count_option(self, page):
        page.element("two_items", css="#links li", count=2, options={"multiple_results": True})
        assert len(page.two_items.browser_element) == 2

    def test_locator_delegation(self, page):
        assert page.status.is_visible()

    def test_count_on_single_lookup(self, page):
        """A count option is checked for single lookups too."""
        page.element("heading", xpath="//h1", count=1)
        assert page.heading.text == "Sign up"

    def test_count_too_many(self, page):
        page.element("one_item", css="#links li", count=1, match="first")
        with pytest.raises(AmbiguousMatchError):
            page.one_item.browser_element

    def test_count_too_few(self, page):
        page.element("three_items", css="#links li", count=3)
        with pytest.raises(ElementNotFoundError):
            page.three_items.browser_element


class TestPlaywrightSession:
    """Tests for the driver's document-level operations."""

    def test_execute_script(self, driver):
        assert Session(driver).execute_script("1 + 1") == 2

    def test_current_url(self, driver, browser_page):
        assert driver.current_url == browser_page.url


class TestLaunch:
    """Tests for PlaywrightDriver.launch cleanup."""

    def test_failed_launch_stops_playwright(self, monkeypatch):
        stopped = []

        class FailingBrowserType:
            def launch(self, headless):
                raise RuntimeError("no browser")

        class FakePlaywright:
            chromium = FailingBrowserType()

            def stop(self):
                stopped.append(True)

        class Starter:
            def start(self):
                return FakePlaywright()

        monkeypatch.setattr("pagewright.drivers.playwright.sync_playwright", Starter)

        with pytest.raises(RuntimeError, match="no browser"):
            PlaywrightDriver.launch()
        assert stopped == [True]
