# diningbot

Fetches dining hall menus from the campus dining menu site and serves them
as tools over the Model Context Protocol (MCP), so an assistant can ask what
is being served at a given hall, date and meal.

## Install

```
pip install .
```

## Running the server

```
diningbot
```

With no port given, the server reads newline-delimited JSON-RPC messages
from standard input and writes responses to standard output, which is how
most MCP clients start local tools.

Give a port with `--port` (or set `PORT`) to run it as an HTTP server
instead. It binds to `127.0.0.1` unless `--bind` (or `BIND_ADDR`) says
otherwise:

```
diningbot --port 8080
PORT=8080 BIND_ADDR=0.0.0.0 diningbot
```

JSON-RPC requests are POSTed to `/mcp`; any other path answers with a short
plain-text notice.

## Tools

- `get_menu` — `location`, `mealType` and an optional `date` (M/D/YYYY,
  today if left out). Returns the location, date, meal type and the list of
  menu items.
- `get_menus_range` — `location`, `mealType`, optional `days` (default 7,
  at most 30) and optional `startDate` (M/D/YYYY, today if left out).
  Returns one item list per date; a day that could not be fetched comes back
  as an empty list.

Arguments are checked against each tool's input schema; an unknown location
or meal type is rejected as invalid parameters.

Locations: Arrillaga Family Dining Commons, Branner Dining, EVGR Dining,
Florence Moore Dining, Gerhard Casper Dining, Lakeside Dining, Ricker Dining,
Stern Dining, Wilbur Dining.

Meal types: Breakfast, Lunch, Dinner, Brunch.

## Using the client from Python

```python
import datetime

from diningbot.client import DiningHallClient
from diningbot.dates import format_date

client = DiningHallClient()
items = client.get_menu("Branner Dining", format_date(datetime.date.today()), "Lunch")
for item in items:
    print(item)
```

`get_menu` raises `ValueError` for an unknown location or meal type and
`RuntimeError` when the site answers with an unexpected status.
`get_breakfast_menu(location, date)` is a shorthand for the Breakfast meal.

Results are cached for an hour per location, date and meal (see
`diningbot.cache.MenuCache`). Pass `debug=True` to print request details and
save the fetched pages to `debug_*.html` files in the working directory.

The page parsing helpers live in `diningbot.parser` (`parse_food_items`,
`extract_view_state` and friends), and `diningbot.dates` has `format_date`
and `parse_date` for the M/D/YYYY form.

## Limitations

The HTTP mode answers JSON-RPC POSTs only. It does not open server-initiated
event streams: a GET on `/mcp` is answered with 405 Method Not Allowed, and
there is no session tracking between requests.

## Tests

```
pip install .[test]
pytest
```