import re
from urllib.parse import parse_qs, urlparse

_DRIVE_PATH_ID_RE = re.compile(r"/d/([a-zA-Z0-9_-]+)")


def convert_drive_link(url: str) -> str:
    """Turn a Google Drive sharing link into a direct thumbnail URL usable in <img> tags.

    Non-Drive URLs are returned unchanged.
    """
    if not url or ("drive.google.com" not in url and "docs.google.com" not in url):
        return url

    file_id = ""
    match = _DRIVE_PATH_ID_RE.search(url)
    if match:
        file_id = match.group(1)
    else:
        file_id = parse_qs(urlparse(url).query).get("id", [""])[0]

    if not file_id:
        return url
    return f"https://drive.google.com/thumbnail?id={file_id}&sz=w1000"
