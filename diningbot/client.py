"""HTTP client that drives the dining hall menu form and extracts food items."""

from urllib.parse import urlsplit

import requests

from diningbot.cache import MenuCache
from diningbot.config import (
    DEFAULT_BASE_URL,
    get_location_value,
    is_valid_location,
    is_valid_meal_type,
)
from diningbot.parser import (
    extract_event_validation,
    extract_view_state,
    extract_view_state_generator,
    parse_food_items,
)

_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/141.0.0.0 Safari/537.36"
)
_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
_TIMEOUT = 30.0
_CACHE_TTL = 3600.0
_DEFAULT_ORIGIN = "{0.scheme}://{0.netloc}".format(urlsplit(DEFAULT_BASE_URL))
_ERROR_HINTS = ("error", "not found", "no menu")


class DiningHallClient:
    """Fetches dining hall menus, keeping form state and cookies across requests."""

    def __init__(self, base_url=DEFAULT_BASE_URL, debug=False):
        self.base_url = base_url
        self.debug = debug
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": _USER_AGENT, "Accept": _ACCEPT})
        self.cache = MenuCache(_CACHE_TTL)
        self.view_state = ""
        self.event_validation = ""
        self.view_state_generator = ""

    def _page_url(self, page: str) -> str:
        return self.base_url.removesuffix("/") + "/" + page

    def _debug(self, message: str) -> None:
        if self.debug:
            print(f"DEBUG: {message}")

    def _debug_cookies(self) -> None:
        for cookie in self.session.cookies:
            self._debug(f"  {cookie.name}={cookie.value}")

    def _save_debug_file(self, filename: str, content: bytes) -> None:
        try:
            with open(filename, "wb") as handle:
                handle.write(content)
        except OSError:
            return
        self._debug(f"Saved {filename}")

    def initialize_session(self):
        """Load the menu page and capture its form state fields."""
        response = self.session.get(self._page_url("Menu.aspx"), timeout=_TIMEOUT)
        if response.status_code != 200:
            raise RuntimeError(f"unexpected status code: {response.status_code}")
        html = response.text

        if self.debug:
            self._debug("Initial session cookies:")
            self._debug_cookies()
            self._save_debug_file("debug_initial_page.html", response.content)

        self.view_state = extract_view_state(html)
        self.event_validation = extract_event_validation(html)
        self.view_state_generator = extract_view_state_generator(html)

        if self.debug:
            self._debug(f"Extracted ViewState length: {len(self.view_state)}")
            self._debug(f"Extracted EventValidation length: {len(self.event_validation)}")
            self._debug(f"Extracted ViewStateGenerator: {self.view_state_generator}")
            if not self.view_state:
                self._debug(f"HTML snippet: {html[:500]}")

    def renew_session(self):
        """Ping the session renewal page so the server keeps the session alive."""
        response = self.session.get(
            self._page_url("RenewSession.aspx"), timeout=_TIMEOUT
        )
        if self.debug:
            self._debug(f"Session renewed (status {response.status_code})")
            self._debug_cookies()

    def _ensure_session(self) -> None:
        steps = (
            (self.initialize_session, "failed to initialize session"),
            (self.renew_session, "failed to renew session"),
            (self.initialize_session, "failed to re-initialize session"),
        )
        for step, context in steps:
            try:
                step()
            except (requests.RequestException, RuntimeError) as exc:
                raise RuntimeError(f"{context}: {exc}") from exc

    def get_menu(self, location, date, meal_type):
        """Return the food items for a location, M/D/YYYY date and meal type."""
        if not is_valid_location(location):
            raise ValueError(f"invalid location: {location}")
        if not is_valid_meal_type(meal_type):
            raise ValueError(f"invalid meal type: {meal_type}")

        cached = self.cache.get(location, date, meal_type)
        if cached is not None:
            self._debug(f"Cache hit for {location} {date} {meal_type}")
            return cached
        self._debug(
            f"Cache miss for {location} {date} {meal_type}, fetching from server"
        )

        if not self.view_state:
            self._ensure_session()

        menu_url = self._page_url("Menu.aspx")
        form = {
            "__EVENTTARGET": "GetMenulstDay",
            "__EVENTARGUMENT": "",
            "__VIEWSTATE": self.view_state,
            "__VIEWSTATEGENERATOR": self.view_state_generator,
            "__EVENTVALIDATION": self.event_validation,
            "ctl00$MainContent$lstLocations": get_location_value(location),
            "ctl00$MainContent$lstDay": date,
            "ctl00$MainContent$lstMealType": meal_type,
        }
        self._debug(f"Posting to {menu_url}")
        self._debug(f"Form data: {form}")

        response = self.session.post(
            menu_url,
            data=form,
            headers={"Origin": _DEFAULT_ORIGIN, "Referer": self.base_url},
            timeout=_TIMEOUT,
        )

        if self.debug:
            self._debug(f"Response status: {response.status_code} {response.reason}")
            self._debug("Response headers:")
            for key, value in response.headers.items():
                self._debug(f"  {key}: {value}")
            self._debug("Cookies received:")
            self._debug_cookies()

        if response.status_code != 200:
            self._debug(f"Error response body: {response.text}")
            raise RuntimeError(f"unexpected status code: {response.status_code}")

        html = response.text
        self.view_state = extract_view_state(html)
        self.event_validation = extract_event_validation(html)

        if self.debug:
            self._debug(f"Response HTML length: {len(html)} bytes")
            self._debug("Looking for menu items...")
            filename = "debug_response_{}_{}.html".format(
                location.replace(" ", "_"), date.replace("/", "_")
            )
            self._save_debug_file(filename, response.content)
            self._debug(f"HTML preview (first 5000 chars):\n{html[:5000]}")

        foods = parse_food_items(html, self.debug)

        if self.debug:
            self._debug(f"Found {len(foods)} food items")
            if not foods:
                lower = html.lower()
                if any(hint in lower for hint in _ERROR_HINTS):
                    self._debug("HTML appears to contain error messages")

        # Cache even empty results so repeated failures do not hit the server.
        self.cache.set(location, date, meal_type, foods)
        return foods

    def get_breakfast_menu(self, location, date):
        """Return the breakfast menu; same as get_menu with meal type Breakfast."""
        return self.get_menu(location, date, "Breakfast")