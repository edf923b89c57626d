"""Extraction of form state and food items from dining hall menu pages."""

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

_VALUE_MARKER = 'value="'
_VALUE_WINDOW = 200

_TD_CLASS_HINTS = ("menu", "item", "food", "dish", "entry")
_TD_SKIP_PREFIXES = ("menu", "breakfast", "lunch", "dinner", "brunch", "dining hall")
_TD_SKIP_WORDS = (
    "select",
    "choose",
    "location",
    "date",
    "ingredient",
    "allergen",
    "allergy",
    "made on shared",
)
_LI_SKIP_PREFIXES = ("menu", "breakfast", "lunch", "dinner", "brunch")
_LI_SKIP_WORDS = ("select", "location", "date")
_LI_FORBIDDEN_CHARS = frozenset("{}[]()|\\/")
_INGREDIENT_WORDS = frozenset({"ingredients", "allergens", "allergy"})


def extract_hidden_field(html_content: str, field_name: str) -> str:
    """Return the value of a hidden form field, or an empty string if absent."""
    name_start = html_content.find(f'name="{field_name}"')
    if name_start == -1:
        return ""
    # The value must sit close by, inside the same tag.
    marker = html_content.find(_VALUE_MARKER, name_start, name_start + _VALUE_WINDOW)
    if marker == -1:
        return ""
    value_start = marker + len(_VALUE_MARKER)
    value_end = html_content.find('"', value_start)
    if value_end == -1:
        return ""
    return html_content[value_start:value_end]


def extract_view_state(html_content: str) -> str:
    """Return the __VIEWSTATE field value."""
    return extract_hidden_field(html_content, "__VIEWSTATE")


def extract_event_validation(html_content: str) -> str:
    """Return the __EVENTVALIDATION field value."""
    return extract_hidden_field(html_content, "__EVENTVALIDATION")


def extract_view_state_generator(html_content: str) -> str:
    """Return the __VIEWSTATEGENERATOR field value."""
    return extract_hidden_field(html_content, "__VIEWSTATEGENERATOR")


def _is_text(element) -> bool:
    return isinstance(element, NavigableString) and not isinstance(
        element, PreformattedString
    )


def extract_text_from_node(node) -> str:
    """Join the stripped, non-empty text pieces under ``node`` with single spaces."""
    if _is_text(node):
        return node.strip()
    pieces = (s.strip() for s in node.descendants if _is_text(s))
    return " ".join(piece for piece in pieces if piece)


def _strip_ingredient_info(text: str) -> str:
    text = text.partition(" Ingredients:")[0]
    text = text.partition(" Allergens:")[0]
    return text.strip()


def _looks_like_ingredient_text(text: str) -> bool:
    lower = text.lower()
    return lower in _INGREDIENT_WORDS or lower.startswith("made on shared")


def _class_of(node: Tag):
    value = node.get("class")
    if isinstance(value, list):
        return " ".join(value)
    return value


def _td_excluded(name: str) -> bool:
    lower = name.lower()
    return (
        lower.startswith(_TD_SKIP_PREFIXES)
        or any(word in lower for word in _TD_SKIP_WORDS)
        or len(name) <= 2
    )


def _li_acceptable(name: str) -> bool:
    lower = name.lower()
    return (
        3 < len(name) < 100
        and not lower.startswith(_LI_SKIP_PREFIXES)
        and not any(word in lower for word in _LI_SKIP_WORDS)
        and not _LI_FORBIDDEN_CHARS.intersection(name)
    )


def parse_food_items(html_content: str, debug: bool = False) -> list[str]:
    """Return the distinct food item names found in a menu page, in document order."""
    soup = BeautifulSoup(html_content, "html5lib", multi_valued_attributes=None)
    foods: list[str] = []
    seen: set[str] = set()

    def add(name: str) -> None:
        foods.append(name)
        seen.add(name)

    for node in soup.descendants:
        if not isinstance(node, Tag):
            continue
        css = _class_of(node)

        if node.name == "td":
            has_class = css is not None and (
                "MenuItem" in css or any(h in css.lower() for h in _TD_CLASS_HINTS)
            )
            name = _strip_ingredient_info(extract_text_from_node(node).strip())
            if has_class and not _td_excluded(name) and name not in seen:
                if not _looks_like_ingredient_text(name):
                    if debug:
                        print(f"DEBUG: Found food item via class '{css}': {name}")
                    add(name)
                elif debug:
                    print(f"DEBUG: Skipped ingredient-like text: {name}")

        elif node.name == "div":
            if css is not None and (
                "MenuItem" in css
                or "menu-item" in css.lower()
                or "food-item" in css.lower()
            ):
                name = extract_text_from_node(node).strip()
                if len(name) > 2 and name not in seen:
                    add(name)

        elif node.name == "span":
            if css is not None and "item" in css.lower():
                name = extract_text_from_node(node).strip()
                if len(name) > 2 and name not in seen:
                    add(name)

        elif node.name == "h3":
            if css is not None and "clsLabel_Name" in css:
                name = _strip_ingredient_info(extract_text_from_node(node).strip())
                if (
                    len(name) > 2
                    and not _looks_like_ingredient_text(name)
                    and name not in seen
                ):
                    if debug:
                        print(f"DEBUG: Found food item in h3: {name}")
                    add(name)

        elif node.name == "li":
            name = _strip_ingredient_info(extract_text_from_node(node).strip())
            if _li_acceptable(name) and name not in seen:
                if debug:
                    print(f"DEBUG: Found food item in list: {name}")
                add(name)

    return foods