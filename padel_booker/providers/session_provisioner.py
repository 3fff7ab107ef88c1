import logging
import os
import uuid
from pathlib import Path

from selenium import webdriver
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from webdriver_manager.chrome import ChromeDriverManager

from padel_booker.config import Settings
from padel_booker.providers.base import BrowserSession, SessionProvisioner
from padel_booker.providers.selenium_page import SeleniumPage

logger = logging.getLogger(__name__)


def _chrome_options(headless: bool, user_data_dir: str | None) -> Options:
    options = Options()
    if headless:
        options.add_argument("--headless=new")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-setuid-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--disable-gpu")
    options.add_argument("--window-size=1920,1080")
    options.add_argument("--disable-blink-features=AutomationControlled")
    options.add_experimental_option("excludeSwitches", ["enable-automation"])
    options.add_experimental_option("useAutomationExtension", False)
    if user_data_dir:
        options.add_argument(f"--user-data-dir={user_data_dir}")
    return options


class LocalChromeProvisioner(SessionProvisioner):
    """
    Headless Chrome on this machine.

    A profile is a Chrome user-data directory under profiles_dir, so cookies
    from an earlier login survive between runs.
    """

    def __init__(self, profiles_dir: str, headless: bool = True) -> None:
        self.profiles_dir = Path(profiles_dir)
        self.headless = headless

    def profile_path(self, profile_id: str) -> Path:
        return self.profiles_dir / profile_id

    def create(self, profile_id: str | None = None) -> BrowserSession:
        profile_dir = None
        if profile_id:
            profile_dir = self.profile_path(profile_id)
            profile_dir.mkdir(parents=True, exist_ok=True)
        options = _chrome_options(
            self.headless, str(profile_dir.resolve()) if profile_dir else None
        )

        # Check for ChromeDriver path from environment variable first,
        # then fall back to ChromeDriverManager for automatic version management
        chromedriver_path = os.environ.get("CHROMEDRIVER_PATH")
        if chromedriver_path and os.path.exists(chromedriver_path):
            service = Service(chromedriver_path)
        else:
            service = Service(ChromeDriverManager().install())
        driver = webdriver.Chrome(service=service, options=options)

        driver.execute_cdp_cmd(
            "Page.addScriptToEvaluateOnNewDocument",
            {"source": "Object.defineProperty(navigator, 'webdriver', {get: () => undefined})"},
        )

        session_id = driver.session_id or uuid.uuid4().hex
        logger.info(f"Local Chrome session started: {session_id}")
        return BrowserSession(id=session_id, page=SeleniumPage(driver), profile_id=profile_id)

    def stop(self, session: BrowserSession) -> None:
        logger.info(f"Stopping local Chrome session {session.id}")
        session.page.close()


class RemoteWebDriverProvisioner(SessionProvisioner):
    """Chrome on a remote Selenium endpoint (Selenium Grid or a hosted browser service)."""

    def __init__(self, command_executor: str, headless: bool = True) -> None:
        self.command_executor = command_executor.rstrip("/")
        self.headless = headless

    def create(self, profile_id: str | None = None) -> BrowserSession:
        # Remote profiles live on the browser host; the id is used as its user-data path there
        options = _chrome_options(self.headless, profile_id)
        driver = webdriver.Remote(command_executor=self.command_executor, options=options)
        live_url = f"{self.command_executor}/session/{driver.session_id}"
        logger.info(f"Remote session started: {driver.session_id}")
        return BrowserSession(
            id=driver.session_id,
            page=SeleniumPage(driver),
            live_url=live_url,
            profile_id=profile_id,
        )

    def stop(self, session: BrowserSession) -> None:
        logger.info(f"Stopping remote session {session.id}")
        session.page.close()


def get_provisioner(config: Settings) -> SessionProvisioner:
    if config.remote_webdriver_url:
        return RemoteWebDriverProvisioner(config.remote_webdriver_url, headless=config.headless)
    return LocalChromeProvisioner(config.profiles_dir, headless=config.headless)
