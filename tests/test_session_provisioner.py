"""
Tests for browser session provisioning in padel_booker/providers/session_provisioner.py.

WebDriver construction is patched out; no browser is started.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from padel_booker.config import Settings
from padel_booker.providers.selenium_page import SeleniumPage
from padel_booker.providers.session_provisioner import (
    LocalChromeProvisioner,
    RemoteWebDriverProvisioner,
    _chrome_options,
    get_provisioner,
)


class TestChromeOptions:
    """Tests for _chrome_options."""

    def test_headless_with_profile(self) -> None:
        options = _chrome_options(True, "/tmp/profiles/p1")
        assert "--headless=new" in options.arguments
        assert "--user-data-dir=/tmp/profiles/p1" in options.arguments

    def test_headed_without_profile(self) -> None:
        options = _chrome_options(False, None)
        assert "--headless=new" not in options.arguments
        assert not any(arg.startswith("--user-data-dir") for arg in options.arguments)


class TestLocalChromeProvisioner:
    """Tests for LocalChromeProvisioner."""

    @pytest.fixture
    def driver(self) -> MagicMock:
        driver = MagicMock()
        driver.session_id = "chrome-123"
        return driver

    def test_create_with_profile(
        self, tmp_path: Path, driver: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that a profile gets its own user-data directory."""
        monkeypatch.delenv("CHROMEDRIVER_PATH", raising=False)
        provisioner = LocalChromeProvisioner(str(tmp_path))

        with (
            patch("padel_booker.providers.session_provisioner.ChromeDriverManager") as manager,
            patch("padel_booker.providers.session_provisioner.Service"),
            patch(
                "padel_booker.providers.session_provisioner.webdriver.Chrome",
                return_value=driver,
            ) as chrome,
        ):
            session = provisioner.create("member-1")

        manager.return_value.install.assert_called_once()
        assert (tmp_path / "member-1").is_dir()
        options = chrome.call_args.kwargs["options"]
        assert f"--user-data-dir={(tmp_path / 'member-1').resolve()}" in options.arguments
        assert session.id == "chrome-123"
        assert session.profile_id == "member-1"
        assert isinstance(session.page, SeleniumPage)
        driver.execute_cdp_cmd.assert_called_once()

    def test_chromedriver_path_from_environment(
        self, tmp_path: Path, driver: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that CHROMEDRIVER_PATH skips the driver download."""
        chromedriver = tmp_path / "chromedriver"
        chromedriver.write_text("")
        monkeypatch.setenv("CHROMEDRIVER_PATH", str(chromedriver))
        provisioner = LocalChromeProvisioner(str(tmp_path / "profiles"))

        with (
            patch("padel_booker.providers.session_provisioner.ChromeDriverManager") as manager,
            patch("padel_booker.providers.session_provisioner.Service") as service,
            patch(
                "padel_booker.providers.session_provisioner.webdriver.Chrome",
                return_value=driver,
            ),
        ):
            provisioner.create()

        service.assert_called_once_with(str(chromedriver))
        manager.assert_not_called()
        assert not (tmp_path / "profiles").exists()

    def test_stop_quits_driver(self, driver: MagicMock) -> None:
        provisioner = LocalChromeProvisioner("./profiles")
        session = MagicMock()

        provisioner.stop(session)

        session.page.close.assert_called_once()


class TestRemoteWebDriverProvisioner:
    """Tests for RemoteWebDriverProvisioner."""

    def test_create_reports_live_url(self) -> None:
        driver = MagicMock()
        driver.session_id = "remote-9"
        provisioner = RemoteWebDriverProvisioner("http://grid:4444/wd/hub/")

        with patch(
            "padel_booker.providers.session_provisioner.webdriver.Remote", return_value=driver
        ) as remote:
            session = provisioner.create("member-2")

        assert remote.call_args.kwargs["command_executor"] == "http://grid:4444/wd/hub"
        assert session.live_url == "http://grid:4444/wd/hub/session/remote-9"
        assert session.profile_id == "member-2"


class TestGetProvisioner:
    """Tests for get_provisioner."""

    def test_local_by_default(self) -> None:
        config = Settings(_env_file=None, remote_webdriver_url="")
        assert isinstance(get_provisioner(config), LocalChromeProvisioner)

    def test_remote_when_configured(self) -> None:
        config = Settings(_env_file=None, remote_webdriver_url="http://grid:4444/wd/hub")
        assert isinstance(get_provisioner(config), RemoteWebDriverProvisioner)
