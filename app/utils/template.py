import re
from typing import Mapping

_PLACEHOLDER = re.compile(r"\{([A-Za-z0-9_]+)\}")

DEFAULT_TELEGRAM_TEMPLATE = (
    "Booking {booking_id}: {title}\n"
    "Unit: {unit}\n"
    "Bay: {bay_name}\n"
    "Start: {start}\n"
    "Status: {status}"
)


def render_template(template: str, data: Mapping[str, str]) -> str:
    """Replace `{key}` tokens with values from `data`. Unknown tokens stay as written."""
    if not template:
        return ""

    def _sub(match: re.Match) -> str:
        key = match.group(1)
        if key in data:
            return str(data[key])
        return match.group(0)

    return _PLACEHOLDER.sub(_sub, template)
