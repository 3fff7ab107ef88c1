import os

from pydantic_settings import BaseSettings

WEEKDAY_TIMES = ["12:00", "13:00", "14:00", "11:00", "15:00", "16:00", "19:00", "17:00", "20:00"]
WEEKEND_TIMES = ["16:00", "17:00", "15:00", "14:00", "18:00", "19:00", "20:00"]


class Settings(BaseSettings):
    hello_club_email: str = ""
    hello_club_password: str = ""
    base_url: str = "https://harboroughcsc.helloclub.com"
    sport: str = "padel"

    timezone: str = "Europe/London"
    days_in_advance: int = 14
    weekday_times: list[str] = WEEKDAY_TIMES
    weekend_times: list[str] = WEEKEND_TIMES
    preferred_court: str = "1"
    max_booking_attempts: int = 3

    debug_mode: bool = False
    start_delay_seconds: float = 0.0

    profile_id: str | None = None
    profiles_dir: str = "./profiles"
    account_suffixes: list[str] = []
    headless: bool = True
    remote_webdriver_url: str = ""

    grid_timeout_seconds: float = 30.0
    grid_settle_seconds: float = 3.0
    button_timeout_seconds: float = 5.0
    second_click_settle_seconds: float = 2.5
    modal_poll_interval_seconds: float = 0.5
    modal_poll_attempts: int = 20

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def credentials_for(self, suffix: str | None = None) -> tuple[str, str]:
        """Return (email, password) for the default account or a suffixed one.

        Suffixed accounts are read from HELLO_CLUB_EMAIL_<SUFFIX> and
        HELLO_CLUB_PASSWORD_<SUFFIX>.
        """
        if not suffix:
            return self.hello_club_email, self.hello_club_password
        key = suffix.upper()
        return (
            os.environ.get(f"HELLO_CLUB_EMAIL_{key}", ""),
            os.environ.get(f"HELLO_CLUB_PASSWORD_{key}", ""),
        )

    def profile_for(self, suffix: str | None = None) -> str | None:
        """Browser profile for an account; PROFILE_ID_<SUFFIX> for suffixed accounts."""
        if not suffix:
            return self.profile_id
        return os.environ.get(f"PROFILE_ID_{suffix.upper()}") or None


settings = Settings()
