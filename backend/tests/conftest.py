"""
Report Portal - Test Configuration and Fixtures
"""
import os
from io import BytesIO
from typing import AsyncGenerator, Callable, Dict, Optional
import pytest
import httpx
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker
from PIL import Image

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_report_portal.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['LOG_FILE'] = ''
os.environ['LOG_LEVEL'] = 'WARNING'

from report_portal.main import app
from report_portal.core.database import Base, get_db
from report_portal.core.security import create_access_token
from report_portal.core.types import utc_now_iso
from report_portal.models.user import User, UserLevel, UserStatus
from report_portal.models.report import Report
from report_portal.modules.export.images import ImageLoader

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test_report_portal.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable:
    """Factory for persisted users"""
    async def _make(
        level: UserLevel = UserLevel.MEMBER,
        department: str = 'Marketing',
        team_id: str = 'Planning & PR',
        name: Optional[str] = None,
        status: UserStatus = UserStatus.APPROVED,
        **kwargs
    ) -> User:
        user = User(
            email=fake.unique.email(),
            name=name or fake.name(),
            department=department,
            team_id=team_id,
            level=level.value,
            status=status.value,
            **kwargs
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_report(db_session: AsyncSession) -> Callable:
    """Factory for persisted reports authored by ``author``"""
    async def _make(author: User, title: Optional[str] = None, blocks: Optional[list] = None,
                    created_at: Optional[str] = None, **kwargs) -> Report:
        report = Report(
            author_id=author.id,
            author_name=author.name,
            department=author.department,
            team_id=author.team_id,
            title=title or fake.sentence(nb_words=4),
            content={'blocks': blocks if blocks is not None else [
                {'id': f'b-{fake.uuid4()}', 'type': 'text', 'content': f'<p>{fake.sentence()}</p>'}
            ]},
            created_at=created_at or utc_now_iso(),
            **kwargs
        )
        db_session.add(report)
        await db_session.commit()
        await db_session.refresh(report)
        return report

    return _make


@pytest.fixture
async def member_user(make_user) -> User:
    return await make_user(UserLevel.MEMBER)


@pytest.fixture
async def leader_user(make_user) -> User:
    return await make_user(UserLevel.LEADER)


@pytest.fixture
async def admin_user(make_user) -> User:
    return await make_user(UserLevel.ADMIN, department='Management Planning', team_id='General Affairs')


def headers_for(user: User) -> Dict[str, str]:
    """Generate authentication headers for a user"""
    token = create_access_token({'sub': str(user.id), 'email': user.email})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def auth_headers(member_user: User) -> dict:
    return headers_for(member_user)


@pytest.fixture
def leader_auth_headers(leader_user: User) -> dict:
    return headers_for(leader_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    return headers_for(admin_user)


# ==================== Images ====================

def make_image_bytes(width: int = 80, height: int = 60, fmt: str = 'PNG', color=(79, 70, 229)) -> bytes:
    buffer = BytesIO()
    Image.new('RGB', (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def image_routes(png_bytes) -> Dict[str, tuple]:
    """URL -> (status, body) served by the mocked image host"""
    return {
        'https://img.test/ok.png': (200, png_bytes),
        'https://img.test/wide.png': (200, make_image_bytes(320, 80)),
        'https://img.test/photo.webp': (200, make_image_bytes(60, 60, fmt='WEBP')),
        'https://img.test/missing.png': (404, b'not found'),
        'https://img.test/garbage.png': (200, b'definitely not an image'),
    }


@pytest.fixture
async def image_loader(image_routes) -> AsyncGenerator[ImageLoader, None]:
    """ImageLoader backed by httpx.MockTransport (no real network)"""
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url == 'https://img.test/unreachable.png':
            raise httpx.ConnectError('connection refused', request=request)
        status, body = image_routes.get(url, (404, b''))
        return httpx.Response(status, content=body)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as mock_client:
        yield ImageLoader(client=mock_client)


@pytest.fixture
def make_headers() -> Callable[[User], Dict[str, str]]:
    """Auth headers for users created inside a test"""
    return headers_for
