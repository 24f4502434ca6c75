"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.api.deps import get_collections, get_image_resizer
from src.auth import AuthScheme, create_user, issue_token
from src.db.database import get_db
from src.main import app
from src.models.base import Base
from src.models.user import AccessToken, User
from src.services.imaging import ImageResizer
from src.services.library import CollectionRepo

# Test database URL (uses SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

MOVIES_COLLECTION_ID = "c1"
SHOWS_COLLECTION_ID = "c2"

TEST_SCHEME = AuthScheme(client="Test", version="1.0", device="dev", device_id="d1")

MOVIE_NFO = """<?xml version="1.0" encoding="UTF-8"?>
<movie>
  <title>Casablanca</title>
  <plot>A cynical nightclub owner protects an old flame.</plot>
  <mpaa>PG</mpaa>
  <rating>8.5</rating>
  <runtime>102</runtime>
  <genre>Drama / Romance</genre>
  <studio>Warner Bros.</studio>
  <director>Michael Curtiz</director>
  <actor><name>Humphrey Bogart</name><role>Rick Blaine</role></actor>
  <actor><name>Ingrid Bergman</name><role>Ilsa Lund</role></actor>
  <uniqueid type="imdb" default="true">tt0034583</uniqueid>
  <fileinfo>
    <streamdetails>
      <video><codec>h264</codec><width>1920</width><height>1080</height><durationinseconds>6120</durationinseconds></video>
      <audio><codec>aac</codec><channels>2</channels><language>eng</language></audio>
    </streamdetails>
  </fileinfo>
</movie>
"""

SECOND_MOVIE_NFO = """<movie>
  <title>The Maltese Falcon</title>
  <genre>Drama</genre>
  <genre>Film-Noir</genre>
  <studio>Warner Bros.</studio>
  <actor><name>Humphrey Bogart</name><role>Sam Spade</role></actor>
  <premiered>1941-10-18</premiered>
</movie>
"""

SHOW_NFO = """<tvshow>
  <title>Fargo</title>
  <plot>Crime in the Midwest.</plot>
  <genre>Crime</genre>
  <studio>FX</studio>
</tvshow>
"""


def write_image(path: Path, size: tuple[int, int] = (400, 600)) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, (200, 30, 30)).save(path, format="JPEG")


def write_file(path: Path, content: str | bytes = b"\x00" * 64) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        path.write_text(content, encoding="utf-8")
    else:
        path.write_bytes(content)


@pytest.fixture
def library_dir(tmp_path: Path) -> Path:
    """A small Kodi style library: two movies and one show with specials."""
    movies = tmp_path / "movies"
    casablanca = movies / "Casablanca (1942)"
    write_file(casablanca / "casablanca.mp4")
    write_file(casablanca / "casablanca.nfo", MOVIE_NFO)
    write_image(casablanca / "poster.jpg")
    write_image(casablanca / "fanart.jpg", (1280, 720))

    falcon = movies / "The Maltese Falcon (1941)"
    write_file(falcon / "falcon.mkv")
    write_file(falcon / "falcon.nfo", SECOND_MOVIE_NFO)

    # Hidden and incomplete directories are ignored
    write_file(movies / ".trash" / "old.mp4")
    (movies / "Empty (2000)").mkdir()

    shows = tmp_path / "shows"
    fargo = shows / "Fargo"
    write_file(fargo / "tvshow.nfo", SHOW_NFO)
    write_image(fargo / "poster.jpg")
    write_image(fargo / "season01-poster.jpg")
    for name in ("Fargo.S01E01.mp4", "Fargo.S01E02.mp4", "Fargo.S01E03.mp4"):
        write_file(fargo / "S01" / name)
    write_image(fargo / "S01" / "Fargo.S01E01-thumb.jpg", (640, 360))
    write_file(fargo / "Season 2" / "Fargo.S02E01.mp4")
    write_file(fargo / "Specials" / "Fargo.S00E01.mp4")
    return tmp_path


@pytest.fixture
def collections(library_dir: Path) -> CollectionRepo:
    """The scanned test library."""
    repo = CollectionRepo()
    repo.add_collection("Movies", "movies", str(library_dir / "movies"), MOVIES_COLLECTION_ID)
    repo.add_collection("Shows", "shows", str(library_dir / "shows"), SHOWS_COLLECTION_ID)
    repo.scan()
    return repo


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user. Being the first user, it is an administrator."""
    user = await create_user(db_session, "alice", "secret")
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession, test_user: User) -> User:
    """Create another, non-admin, user for isolation tests."""
    user = await create_user(db_session, "bob", "hunter2")
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def access_token(db_session: AsyncSession, test_user: User) -> AccessToken:
    token = await issue_token(db_session, test_user, TEST_SCHEME, "127.0.0.1")
    await db_session.commit()
    return token


def auth_header(token: str = "", device_id: str = "d1") -> dict[str, str]:
    """MediaBrowser authorization header, with a token when given."""
    value = f'MediaBrowser Client="Test", Device="dev", DeviceId="{device_id}", Version="1.0"'
    if token:
        value += f', Token="{token}"'
    return {"Authorization": value}


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, collections: CollectionRepo, tmp_path: Path
) -> AsyncGenerator[AsyncClient, None]:
    """Create an unauthenticated test client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    resizer = ImageResizer(os.path.join(tmp_path, "image-cache"), 90)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_collections] = lambda: collections
    app.dependency_overrides[get_image_resizer] = lambda: resizer
    app.state.collections = collections

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def authenticated_client(
    client: AsyncClient, access_token: AccessToken
) -> AsyncClient:
    """Create a test client sending the test user's access token."""
    client.headers.update(auth_header(access_token.token))
    return client
