import pytest
from bs4 import BeautifulSoup

from diningbot.parser import (
    extract_event_validation,
    extract_hidden_field,
    extract_text_from_node,
    extract_view_state,
    extract_view_state_generator,
    parse_food_items,
)


@pytest.mark.parametrize(
    "html, field_name, expected",
    [
        ('<input type="hidden" name="__VIEWSTATE" value="test_value_123" />', "__VIEWSTATE", "test_value_123"),
        ('<input name="__EVENTVALIDATION" value="validation_token" />', "__EVENTVALIDATION", "validation_token"),
        ("<html><body>No viewstate here</body></html>", "__VIEWSTATE", ""),
        ('<input name="__VIEWSTATE" value="" />', "__VIEWSTATE", ""),
        ('<input name="__VIEWSTATE" value="encoded%2Fvalue+test" />', "__VIEWSTATE", "encoded%2Fvalue+test"),
        (
            '<input name="__VIEWSTATE" value="wrong" /><input name="__EVENTVALIDATION" value="correct" />',
            "__EVENTVALIDATION",
            "correct",
        ),
    ],
)
def test_extract_hidden_field(html, field_name, expected):
    assert extract_hidden_field(html, field_name) == expected


def test_extract_hidden_field_value_too_far_away():
    html = '<input name="__VIEWSTATE"' + " " * 250 + 'value="far" />'
    assert extract_hidden_field(html, "__VIEWSTATE") == ""


def test_extract_hidden_field_unterminated_value():
    assert extract_hidden_field('<input name="__VIEWSTATE" value="abc', "__VIEWSTATE") == ""


def test_extract_view_state():
    html = '<input name="__VIEWSTATE" value="test_viewstate_123" />'
    assert extract_view_state(html) == "test_viewstate_123"


def test_extract_event_validation():
    html = '<input name="__EVENTVALIDATION" value="test_validation_456" />'
    assert extract_event_validation(html) == "test_validation_456"


def test_extract_view_state_generator():
    html = '<input name="__VIEWSTATEGENERATOR" value="generator_789" />'
    assert extract_view_state_generator(html) == "generator_789"


def test_extract_text_from_node():
    soup = BeautifulSoup("<div>Simple text</div>", "html5lib")
    assert extract_text_from_node(soup.find("div")) == "Simple text"


def test_extract_text_from_node_joins_nested_text_and_ignores_comments():
    soup = BeautifulSoup("<div> A <b>B</b><!-- hidden --> <i> C </i></div>", "html5lib")
    assert extract_text_from_node(soup.find("div")) == "A B C"


@pytest.mark.parametrize(
    "html, expected",
    [
        ('<table><tr><td class="MenuItem">Scrambled Eggs</td></tr></table>', ["Scrambled Eggs"]),
        (
            """<table>
                <tr><td class="MenuItem">Scrambled Eggs</td></tr>
                <tr><td class="MenuItem">Bacon</td></tr>
                <tr><td class="MenuItem">Toast</td></tr>
            </table>""",
            ["Scrambled Eggs", "Bacon", "Toast"],
        ),
        ('<div class="menu-item">Pancakes</div>', ["Pancakes"]),
        ('<span class="food-item">Waffles</span>', ["Waffles"]),
        ('<table><tr><td class="food">Oatmeal</td></tr></table>', ["Oatmeal"]),
        (
            """<table>
                <tr><td class="MenuItem">Breakfast Menu</td></tr>
                <tr><td class="MenuItem">Eggs</td></tr>
            </table>""",
            ["Eggs"],
        ),
        (
            """<table>
                <tr><td class="MenuItem">Ab</td></tr>
                <tr><td class="MenuItem">Eggs</td></tr>
            </table>""",
            ["Eggs"],
        ),
        ("<html><body><div>No menu here</div></body></html>", []),
        (
            """<table>
                <tr><td class="MenuItem">Eggs</td></tr>
                <tr><td class="MenuItem">Eggs</td></tr>
            </table>""",
            ["Eggs"],
        ),
        (
            '<table><tr><td class="MenuItem">Scrambled <strong>Eggs</strong> with <em>Cheese</em></td></tr></table>',
            ["Scrambled Eggs with Cheese"],
        ),
        (
            '<div class="MenuItem">Item1</div><div class="menu-item">Item2</div><div class="food-item">Item3</div>',
            ["Item1", "Item2", "Item3"],
        ),
        ('<td class="MenuItem"></td>', []),
    ],
    ids=[
        "td-menuitem",
        "multiple",
        "div-menu-item",
        "span-item",
        "td-food",
        "filter-menu-text",
        "filter-short",
        "no-items",
        "duplicates",
        "nested-text",
        "mixed-classes",
        "empty-text",
    ],
)
def test_parse_food_items(html, expected):
    got = parse_food_items(html, False)
    assert len(got) == len(expected)
    assert set(got) == set(expected)


def test_parse_food_items_unusual_structure():
    html = '<html><body><div><td class="MenuItem">Eggs</td></body></html>'
    assert parse_food_items(html, False) == []


def test_parse_food_items_complex_html():
    html = """<html>
        <head><title>Menu</title></head>
        <body>
            <div class="menu-container">
                <h2>Breakfast Menu</h2>
                <table class="menu-table">
                    <tr>
                        <td class="MenuItem">Scrambled Eggs</td>
                        <td class="MenuItem">Bacon</td>
                    </tr>
                    <tr>
                        <td class="MenuItem">French Toast</td>
                        <td class="MenuItem">Hash Browns</td>
                    </tr>
                </table>
                <div class="menu-item">Fresh Fruit</div>
                <span class="food-item">Orange Juice</span>
            </div>
        </body>
    </html>"""
    foods = parse_food_items(html, False)
    expected = ["Scrambled Eggs", "Bacon", "French Toast", "Hash Browns", "Fresh Fruit", "Orange Juice"]
    assert len(foods) >= len(expected)
    for item in expected:
        assert item in foods
    assert foods.index("Scrambled Eggs") < foods.index("Orange Juice")


def test_parse_food_items_with_whitespace():
    html = """<table><tr><td class="MenuItem">
        Scrambled Eggs
        with
        Cheese
    </td></tr></table>"""
    foods = parse_food_items(html, False)
    assert len(foods) == 1
    assert "Scrambled" in foods[0]
    assert "Eggs" in foods[0]


def test_h3_label_strips_ingredients(capsys):
    html = '<h3 class="clsLabel_Name">Grilled Chicken Ingredients: salt, pepper</h3>'
    assert parse_food_items(html, True) == ["Grilled Chicken"]
    assert "DEBUG: Found food item in h3: Grilled Chicken" in capsys.readouterr().out


def test_td_strips_allergens():
    html = '<table><tr><td class="MenuItem">Tofu Bowl Allergens: soy</td></tr></table>'
    assert parse_food_items(html) == ["Tofu Bowl"]


def test_td_ingredient_only_text_is_skipped():
    html = '<table><tr><td class="MenuItem">Made on shared equipment</td></tr></table>'
    assert parse_food_items(html) == []


def test_list_items_filtered():
    html = """<ul>
        <li>Caesar Salad</li>
        <li>Select a date</li>
        <li>Soup (vegan)</li>
        <li>Lunch specials</li>
        <li>Pie</li>
    </ul>"""
    assert parse_food_items(html) == ["Caesar Salad"]


def test_td_without_matching_class_is_ignored():
    html = '<table><tr><td class="price">Chicken Curry</td><td>Rice Pilaf</td></tr></table>'
    assert parse_food_items(html) == []