"""Tests for branding settings."""

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from posbakum.core.modules.settings.models import DEFAULT_LOGO_URL, AppSettings
from posbakum.core.modules.settings.utils import convert_drive_link


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (
            "https://drive.google.com/file/d/1IbJtyAL5lX7v28DE8yXp_iY-Qg4Sqza1/view?usp=sharing",
            "https://drive.google.com/thumbnail?id=1IbJtyAL5lX7v28DE8yXp_iY-Qg4Sqza1&sz=w1000",
        ),
        (
            "https://drive.google.com/open?id=abc_DEF-123",
            "https://drive.google.com/thumbnail?id=abc_DEF-123&sz=w1000",
        ),
        ("https://example.org/logo.png", "https://example.org/logo.png"),
        ("https://drive.google.com/drive/my-drive", "https://drive.google.com/drive/my-drive"),
        ("", ""),
    ],
)
def test_convert_drive_link(url, expected):
    assert convert_drive_link(url) == expected


async def test_defaults_when_nothing_stored(core):
    assert await core.services.settings.get_settings() == AppSettings()


async def test_stored_values_override_defaults(core, database):
    await database["app_settings"].insert_one(
        {
            "lbh_name": "LBH CONTOH",
            "logo_url": "https://drive.google.com/file/d/LOGO123/view",
            "court_name": "",
        }
    )

    settings = await core.services.settings.get_settings()

    assert settings.lbh_name == "LBH CONTOH"
    assert settings.logo_url == "https://drive.google.com/thumbnail?id=LOGO123&sz=w1000"
    assert settings.court_name == AppSettings().court_name


async def test_defaults_served_until_store_recovers(core, database):
    await database["app_settings"].insert_one({"lbh_name": "LBH CONTOH"})
    database["app_settings"].fail(ServerSelectionTimeoutError("no servers"), times=1)

    first = await core.services.settings.get_settings()
    second = await core.services.settings.get_settings()

    assert first.logo_url == DEFAULT_LOGO_URL
    assert second.lbh_name == "LBH CONTOH"
