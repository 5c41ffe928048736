"""Shared pytest fixtures for wallit tests."""

import os
import tempfile
from datetime import date, datetime, timedelta, UTC

import pytest
from click.testing import CliRunner

from wallit.database.factories import create_sqlite_database
from wallit.domain.account import AccountService
from wallit.domain.balance import BalanceService
from wallit.domain.category import CategoryService
from wallit.domain.exchange_rate import ExchangeRateService, RateSourceError
from wallit.domain.movement import MovementService
from wallit.domain.receivable import ReceivableService
from wallit.domain.report import ReportService
from wallit.domain.split import SplitService
from wallit.domain.transfer import TransferService

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


class StubRateSource:
    """Rate source returning a fixed rate, optionally failing."""

    name = "stub"

    def __init__(self, rate: float = 950.0):
        self.rate = rate
        self.fail = False
        self.calls = 0

    def fetch_rate(self, from_currency, to_currency) -> float:
        self.calls += 1
        if self.fail:
            raise RateSourceError("rate source is down")
        return self.rate


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_id():
    return USER_ID


@pytest.fixture
def other_user_id():
    return OTHER_USER_ID


@pytest.fixture
def clock():
    """Clock frozen at 2025-03-10 15:30 UTC (12:30 in Santiago)."""
    return FrozenClock(datetime(2025, 3, 10, 15, 30, tzinfo=UTC))


@pytest.fixture
def rate_source():
    """Stub source answering 950.00 CLP per USD."""
    return StubRateSource(950.0)


@pytest.fixture
def rates(temp_db, rate_source, clock):
    """Exchange rate cache backed by the stub source."""
    return ExchangeRateService(temp_db, source=rate_source, clock=clock)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def movement_service(temp_db, rates, clock):
    """Create a MovementService with a temporary database."""
    return MovementService(temp_db, rates=rates, clock=clock)


@pytest.fixture
def transfer_service(temp_db, rates):
    """Create a TransferService with a temporary database."""
    return TransferService(temp_db, rates=rates)


@pytest.fixture
def receivable_service(temp_db, rates, clock):
    """Create a ReceivableService with a temporary database."""
    return ReceivableService(temp_db, rates=rates, clock=clock)


@pytest.fixture
def split_service(temp_db, clock):
    """Create a SplitService with a temporary database."""
    return SplitService(temp_db, clock=clock)


@pytest.fixture
def balance_service(temp_db, rates):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db, rates=rates)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def clp_account(account_service, user_id):
    """CLP account opened with 100000."""
    return account_service.create_account(
        user_id=user_id,
        bank_name="Banco Estado",
        account_type="Vista",
        last_four_digits="1234",
        currency="CLP",
        initial_balance=100000,
    )


@pytest.fixture
def usd_account(account_service, user_id):
    """USD account opened empty."""
    return account_service.create_account(
        user_id=user_id,
        bank_name="Santander",
        account_type="Corriente",
        last_four_digits="9876",
        currency="USD",
    )


@pytest.fixture
def other_account(account_service, other_user_id):
    """Account owned by another user."""
    return account_service.create_account(
        user_id=other_user_id,
        bank_name="BCI",
        account_type="Corriente",
        last_four_digits="5555",
        currency="CLP",
    )


@pytest.fixture
def food_category(category_service, user_id):
    return category_service.create_category(user_id, name="Food", emoji="🍔")


@pytest.fixture
def movement_date():
    return date(2025, 3, 5)


@pytest.fixture
def cli_runner():
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def cli_obj(temp_db, rates):
    """Factory for the click context object used by CLI tests."""

    def make():
        return {"db": temp_db, "rates": rates, "timezone": "America/Santiago"}

    return make
