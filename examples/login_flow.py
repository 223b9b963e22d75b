#!/usr/bin/env python3
"""
pagewright Example: Log in and check the dashboard

This example demonstrates how to:
1. Describe pages as trees of named elements
2. Map URLs to page classes and let the session track the current page
3. Wrap clicks with hooks that wait for the page to settle
4. Watch a value and detect when it changes

Configure via environment variables:
  TEST_URL - The application URL (default: http://localhost:8888)
  TEST_EMAIL - Login email
  TEST_PASSWORD - Login password
  PAGEWRIGHT_BROWSER / PAGEWRIGHT_HEADLESS - see pagewright.config
"""

import logging
import os
import re
import sys

# Add package to path if running directly
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from pagewright import Element, Page, after_events, button, create_session, element, on_load, section, text_field

BASE_URL = os.environ.get("TEST_URL", "http://localhost:8888")
TEST_EMAIL = os.environ.get("TEST_EMAIL", "")
TEST_PASSWORD = os.environ.get("TEST_PASSWORD", "")


class SettlingButton(Element):
    """Button that waits for in-flight fetches after every click."""

    @after_events
    def wait_for_idle(self):
        self.wait_until(lambda: self.session.execute_script("document.readyState === 'complete'") is True)


class LoginPage(Page):
    url = "/login"

    email = text_field(label="Email")
    password = text_field(label="Password")
    submit = button(SettlingButton, text="Log in")

    def log_in(self, email, password):
        self.email.set(email)
        self.password.set(password)
        self.submit.click()


class DashboardPage(Page):
    notifications = element(css="[data-testid=notification-count]")

    @section(css="nav")
    def menu(menu):
        menu.link("settings", text="Settings")
        menu.link("log_out", text="Log out")

    @on_load
    def wait_for_menu(self):
        self.wait_until(lambda: self.menu.visible is True)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if not TEST_EMAIL or not TEST_PASSWORD:
        print("Set TEST_EMAIL and TEST_PASSWORD to run this example")
        return 1

    mappings = {
        "/login": LoginPage,
        re.compile(r"^/(dashboard|home)"): DashboardPage,
    }
    with create_session(page=LoginPage, mappings=mappings, base_url=BASE_URL) as session:
        session.log_in(TEST_EMAIL, TEST_PASSWORD)

        dashboard = session.current_page()
        if not isinstance(dashboard, DashboardPage):
            print(f"Login failed, still on {session.current_path}")
            return 1

        dashboard.watch("notifications", "text")
        dashboard.menu.settings.click()
        print(f"Settings opened at {session.current_path}")
        print(f"Notifications changed: {dashboard.changed('notifications')}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
