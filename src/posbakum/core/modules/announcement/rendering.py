"""Announcement phrase rendering."""

from liquid import Environment

from posbakum.core.modules.announcement.models import ANNOUNCEMENT_TEMPLATE
from posbakum.core.modules.sequencer.models import parse_queue_number

_env = Environment()
_template = _env.from_string(ANNOUNCEMENT_TEMPLATE)


def render_announcement(queue_number: str, counter_name: str = "satu") -> str:
    """Render the spoken phrase for a queue number.

    Leading zeros are dropped from the number so it is read naturally ("A... 7").
    """
    parsed = parse_queue_number(queue_number)
    if parsed is None:
        letter, number = queue_number, ""
    else:
        letter, number = parsed[0], str(parsed[1])
    return _template.render(letter=letter, number=number, counter_name=counter_name)
