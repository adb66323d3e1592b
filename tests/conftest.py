"""Pytest configuration and shared fixtures."""

import os
import time

import pytest

# Set test environment BEFORE any signalist imports so config picks it up
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_BASE_URL", "https://signalist.test")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from signalist import models  # noqa: E402, F401
from signalist.auth import AuthSession  # noqa: E402
from signalist.database import Base  # noqa: E402
from signalist.domain.accounts.providers import AuthProvider  # noqa: E402
from signalist.domain.accounts.schemas import SignUpRequest  # noqa: E402
from signalist.domain.events.dispatcher import EventDispatcher  # noqa: E402
from signalist.domain.generation.client import GeneratedContent, OutputFormat  # noqa: E402
from signalist.domain.generation.validation import validate_symbol_mapping  # noqa: E402
from signalist.services.finnhub_service import NewsArticle  # noqa: E402

WELCOME_INTRO_HTML = (
    '<p class="mobile-text" style="margin: 0 0 30px 0; font-size: 16px; line-height: 1.6; color: #CCDADC;">'
    "Danke, dass du bei Signalist dabei bist! Als jemand, der sich auf "
    "<strong>Technologie-Wachstumsaktien</strong> konzentriert, wirst du unsere Echtzeit-Alarme "
    "für die Unternehmen lieben, die du verfolgst, und wir helfen dir dabei, Chancen zu erkennen, "
    "bevor sie zur Mainstream-Nachricht werden.</p>"
)

NEWS_SUMMARY_HTML = """
<h3 class="mobile-news-title dark-text">📊 Marktüberblick</h3>
<div class="dark-info-box">
<h4 class="dark-text">Apple übertrifft die Erwartungen</h4>
<ul>
  <li>Apple hat mehr verdient als erwartet.</li>
  <li>iPhones verkaufen sich weiter gut.</li>
  <li>Services wachsen schnell.</li>
</ul>
<div style="background-color: #141414;">
<p>💡 <strong>Fazit:</strong> Apple bleibt eine solide Aktie.</p>
</div>
<a href="https://example.com/apple">Ganze Geschichte lesen →</a>
</div>
"""


# =============================================================================
# Fakes
# =============================================================================


class FakeArqPool:
    """Stands in for an ARQ redis pool. Records enqueued jobs."""

    def __init__(self, fail: bool = False, duplicate: bool = False):
        self.fail = fail
        self.duplicate = duplicate
        self.jobs = []
        self.closed = False

    async def enqueue_job(self, function, *args, _job_id=None, **kwargs):
        if self.fail:
            raise ConnectionError("redis unavailable")
        if self.duplicate or any(job["job_id"] == _job_id for job in self.jobs):
            return None
        self.jobs.append({"function": function, "args": args, "job_id": _job_id})
        return object()

    async def close(self):
        self.closed = True


def dispatcher_for(pool: FakeArqPool) -> EventDispatcher:
    async def factory():
        return pool

    return EventDispatcher(pool_factory=factory)


class FakeAuthProvider(AuthProvider):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    async def sign_up(self, email, password, name):
        self.calls.append(("sign_up", email, name))
        if self.fail:
            raise RuntimeError("email already in use")
        return {"uid": "uid-123", "email": email, "name": name}

    async def sign_in(self, email, password):
        self.calls.append(("sign_in", email))
        if self.fail:
            raise RuntimeError("INVALID_LOGIN_CREDENTIALS")
        return {"uid": "uid-123", "email": email, "idToken": "token"}

    async def sign_out(self, session):
        self.calls.append(("sign_out", session.uid))
        if self.fail:
            raise RuntimeError("revoke failed")

    async def send_delete_account_verification(self, session, callback_url):
        self.calls.append(("delete", session.uid, callback_url))
        if self.fail:
            raise RuntimeError("smtp down")

    async def delete_account(self, session):
        self.calls.append(("delete_account", session.uid))
        if self.fail:
            raise RuntimeError("firebase unavailable")


class FakeGenerationClient:
    """Returns canned replies and records every rendered prompt"""

    def __init__(self, reply: str = "", error: Exception = None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def generate(self, prompt, expected_format=OutputFormat.HTML):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if expected_format == OutputFormat.SYMBOL_MAPPING_JSON:
            result = validate_symbol_mapping(self.reply)
            return GeneratedContent(format=expected_format, text=self.reply, symbol_mapping=result.mapping)
        return GeneratedContent(format=expected_format, text=self.reply)


class FakeNewsSource:
    def __init__(self, articles=None, profile=None, error: Exception = None):
        self.articles = articles or []
        self.profile = profile or {}
        self.error = error
        self.requested_symbols = []

    async def get_news(self, symbols=None, max_articles=6):
        self.requested_symbols.append(symbols)
        if self.error is not None:
            raise self.error
        return list(self.articles)

    async def get_company_profile(self, symbol):
        if self.error is not None:
            raise self.error
        return dict(self.profile)


class EmailRecorder:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def __call__(self, **kwargs):
        if self.fail:
            raise RuntimeError("resend rejected the message")
        self.sent.append(kwargs)
        return {"id": f"email-{len(self.sent)}"}


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def arq_pool():
    return FakeArqPool()


@pytest.fixture
def dispatcher(arq_pool):
    return dispatcher_for(arq_pool)


@pytest.fixture
def auth_provider():
    return FakeAuthProvider()


@pytest.fixture
def session():
    return AuthSession(uid="uid-123", email="max@example.com", name="Max Mustermann")


@pytest.fixture
def fresh_session():
    """Session from a sign-in that just happened, as after following an email link"""
    return AuthSession(
        uid="uid-123", email="max@example.com", name="Max Mustermann", auth_time=int(time.time())
    )


@pytest.fixture
def max_sign_up():
    """Sign-up request for the reference growth/technology investor"""
    return SignUpRequest(
        fullName="Max Mustermann",
        email="max@example.com",
        password="pw12345678",
        country="US",
        investmentGoals="Growth",
        riskTolerance="Medium",
        preferredIndustry="Technology",
    )


@pytest.fixture
def sample_article():
    return NewsArticle(
        id=1,
        headline="Apple beats expectations",
        summary="Apple reported record services revenue.",
        source="Reuters",
        url="https://example.com/apple",
        datetime=1718000000,
        related="AAPL",
    )


@pytest.fixture
def db_session():
    """In-memory SQLite session with all tables created"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
