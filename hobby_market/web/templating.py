from pathlib import Path

from fastapi.templating import Jinja2Templates

from hobby_market.views.detail import host_display_name
from hobby_market.views.formatting import card_span_class, price_per_hour_label, price_whole_dollars, short_host_id

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["per_hour"] = price_per_hour_label
templates.env.filters["whole_dollars"] = price_whole_dollars
templates.env.filters["short_host"] = short_host_id
templates.env.filters["host_name"] = host_display_name
templates.env.globals["card_span_class"] = card_span_class
