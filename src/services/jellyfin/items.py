"""Projection of library entities into Jellyfin item documents.

An ItemProjector is created per request for one user. It reads the
library, and the user's play state, playlists, uploaded images and
person details from the database, and turns all of it into JFItem
documents.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.constants import (
    ASPECT_RATIO_POSTER,
    ASPECT_RATIO_WIDE,
    COLLECTION_TYPE_MOVIES,
    COLLECTION_TYPE_PLAYLISTS,
    COLLECTION_TYPE_TVSHOWS,
    ITEM_TYPE_COLLECTION_FOLDER,
    ITEM_TYPE_EPISODE,
    ITEM_TYPE_GENRE,
    ITEM_TYPE_MOVIE,
    ITEM_TYPE_PERSON,
    ITEM_TYPE_PLAYLIST,
    ITEM_TYPE_SEASON,
    ITEM_TYPE_SHOW,
    ITEM_TYPE_STUDIO,
    ITEM_TYPE_USER_ROOT_FOLDER,
    ITEM_TYPE_USER_VIEW,
    MEDIA_TYPE_UNKNOWN,
    MEDIA_TYPE_VIDEO,
    SPECIALS_SEASON_INDEX,
    SPECIALS_SORT_NAME,
    TAG_PREFIX_REDIRECT,
    TICKS_PER_SECOND,
)
from src.db import crud
from src.db.errors import NotFoundError
from src.models.base import as_utc, utcnow
from src.models.jellyfin import (
    JFImageTags,
    JFItem,
    JFNameId,
    JFPeople,
    JFProviderIds,
    JFUserData,
)
from src.models.playlist import Playlist
from src.models.user_data import UserData
from src.services.jellyfin.ids import (
    IdKind,
    decode_name,
    detect_kind,
    favorites_collection_id,
    make_genre_id,
    make_id,
    make_person_id,
    make_studio_id,
    playlist_collection_id,
    root_id,
    trim_prefix,
)
from src.services.jellyfin.streams import (
    is_4k,
    is_hd,
    make_media_source,
    runtime_ticks,
)
from src.services.library import (
    Collection,
    CollectionRepo,
    Episode,
    Item,
    Movie,
    Season,
    Show,
)
from src.services.library.models import make_sort_name
from src.utils.idhash import id_hash

logger = logging.getLogger(__name__)

CONTAINER_VIDEO = "mov,mp4,m4a"
VIDEO_TYPE_FILE = "VideoFile"
LOCATION_FILESYSTEM = "FileSystem"
PLAY_ACCESS_FULL = "Full"
IMAGE_TYPE_PRIMARY = "Primary"

_COLLECTION_TYPES = {
    "movies": COLLECTION_TYPE_MOVIES,
    "shows": COLLECTION_TYPE_TVSHOWS,
}


def collection_type_of(collection: Collection) -> str:
    """Jellyfin CollectionType of a library collection."""
    return _COLLECTION_TYPES.get(collection.type, collection.type)


def wire_id(item: Item) -> str:
    """External ID of a library item. Movies and shows carry no prefix."""
    if isinstance(item, Season):
        return make_id(IdKind.SEASON, item.id)
    if isinstance(item, Episode):
        return make_id(IdKind.EPISODE, item.id)
    return item.id


class ItemProjector:
    """Builds JFItem documents for one user."""

    def __init__(
        self,
        db: AsyncSession,
        collections: CollectionRepo,
        user_id: str,
        server_id: str,
    ) -> None:
        self.db = db
        self.collections = collections
        self.user_id = user_id
        self.server_id = server_id
        self._records: dict[str, UserData] | None = None
        self._playlists: list[Playlist] | None = None

    # ==================== USER DATA ====================

    async def records(self) -> dict[str, UserData]:
        """Play state of every item of the user, keyed by raw item ID.

        Loaded once per projector.
        """
        if self._records is None:
            self._records = await crud.get_all_user_data(self.db, self.user_id)
        return self._records

    def make_user_data(self, item_id: str, record: UserData | None) -> JFUserData:
        """User data document of a raw item ID. A missing record means never touched."""
        data = JFUserData(key=f"{self.user_id}/{item_id}")
        if record is None:
            return data
        data.is_favorite = record.favorite
        data.last_played_date = as_utc(record.timestamp)
        data.playback_position_ticks = record.position * TICKS_PER_SECOND
        data.played_percentage = record.played_percentage
        data.played = record.played
        data.play_count = record.play_count
        return data

    async def user_data(self, item_id: str) -> JFUserData:
        records = await self.records()
        return self.make_user_data(item_id, records.get(item_id))

    async def _aggregate_user_data(
        self, key_id: str, own_id: str, episodes: list[Episode]
    ) -> JFUserData:
        """User data of a show or season, summarized over its episodes."""
        records = await self.records()
        data = self.make_user_data(own_id, records.get(own_id))
        data.key = key_id
        total = len(episodes)
        played = [
            records[e.id] for e in episodes if e.id in records and records[e.id].played
        ]
        data.unplayed_item_count = total - len(played)
        data.played_percentage = 100 * len(played) // total if total else 0
        data.played = total > 0 and len(played) == total
        stamps = [as_utc(r.timestamp) for r in played if r.timestamp is not None]
        if stamps:
            data.last_played_date = max(stamps)
        return data

    # ==================== VIRTUAL FOLDERS ====================

    async def _uploaded_image_tags(self, owner_id: str) -> JFImageTags | None:
        image = await crud.has_image(self.db, owner_id, IMAGE_TYPE_PRIMARY)
        if image is None:
            return None
        return JFImageTags(primary=image.etag)

    async def playlists(self) -> list[Playlist]:
        if self._playlists is None:
            self._playlists = list(await crud.get_playlists(self.db, self.user_id))
        return self._playlists

    async def make_root(self) -> JFItem:
        """The top level folder holding all collections."""
        genres = self.collections.details().genres
        return JFItem(
            id=root_id(),
            name="Media Folders",
            server_id=self.server_id,
            etag=id_hash(root_id()),
            type=ITEM_TYPE_USER_ROOT_FOLDER,
            is_folder=True,
            sort_name="media folders",
            path="/root",
            play_access=PLAY_ACCESS_FULL,
            date_created=utcnow(),
            genres=genres,
            genre_items=[JFNameId(name=g, id=make_genre_id(g)) for g in genres],
            child_count=len(self.collections.get_collections()) + 2,
            display_preferences_id=make_id(IdKind.DISPLAY_PREFERENCES, root_id()),
            primary_image_aspect_ratio=ASPECT_RATIO_WIDE,
            location_type=LOCATION_FILESYSTEM,
            media_type=MEDIA_TYPE_UNKNOWN,
        )

    async def make_collection(self, collection: Collection) -> JFItem:
        collection_id = make_id(IdKind.COLLECTION, collection.id)
        genres = collection.genres()
        collection_type = collection_type_of(collection)
        now = utcnow()
        return JFItem(
            id=collection_id,
            parent_id=root_id(),
            name=collection.name,
            server_id=self.server_id,
            etag=id_hash(collection.id),
            date_created=now,
            premiere_date=now,
            type=ITEM_TYPE_COLLECTION_FOLDER,
            collection_type=collection_type,
            sort_name=collection_type,
            is_folder=True,
            path="/collection",
            can_download=True,
            child_count=len(collection.items),
            genres=genres,
            genre_items=[JFNameId(name=g, id=make_genre_id(g)) for g in genres],
            image_tags=await self._uploaded_image_tags(collection_id),
            display_preferences_id=make_id(IdKind.DISPLAY_PREFERENCES, collection.id),
            primary_image_aspect_ratio=ASPECT_RATIO_WIDE,
            location_type=LOCATION_FILESYSTEM,
            play_access=PLAY_ACCESS_FULL,
            enable_media_source_display=True,
        )

    def _user_view(self, view_id: str, name: str, child_count: int) -> JFItem:
        now = utcnow()
        return JFItem(
            id=view_id,
            parent_id=root_id(),
            name=name,
            server_id=self.server_id,
            etag=id_hash(view_id),
            date_created=now,
            premiere_date=now,
            type=ITEM_TYPE_USER_VIEW,
            collection_type=COLLECTION_TYPE_PLAYLISTS,
            sort_name=COLLECTION_TYPE_PLAYLISTS,
            is_folder=True,
            child_count=child_count,
            display_preferences_id=make_id(IdKind.DISPLAY_PREFERENCES, trim_prefix(view_id)),
            primary_image_aspect_ratio=ASPECT_RATIO_WIDE,
            location_type=LOCATION_FILESYSTEM,
            play_access=PLAY_ACCESS_FULL,
        )

    async def make_favorites_collection(self) -> JFItem:
        """Virtual folder listing the user's favorite movies and shows."""
        favorites = await self.favorites_overview()
        item = self._user_view(favorites_collection_id(), "Favorites", len(favorites))
        item.image_tags = await self._uploaded_image_tags(item.id)
        return item

    async def make_playlist_collection(self) -> JFItem:
        """Virtual folder listing the user's playlists."""
        playlists = await self.playlists()
        count = sum(len(p.item_ids or []) for p in playlists)
        item = self._user_view(playlist_collection_id(), "Playlists", count)
        item.image_tags = await self._uploaded_image_tags(item.id)
        return item

    def make_playlist(self, playlist: Playlist) -> JFItem:
        playlist_id = make_id(IdKind.PLAYLIST, playlist.id)
        count = len(playlist.item_ids or [])
        return JFItem(
            id=playlist_id,
            parent_id=playlist_collection_id(),
            name=playlist.name,
            sort_name=playlist.name,
            server_id=self.server_id,
            etag=id_hash(playlist_id),
            date_created=as_utc(playlist.created_at),
            type=ITEM_TYPE_PLAYLIST,
            is_folder=True,
            path="/playlist",
            can_delete=True,
            child_count=count,
            recursive_item_count=count,
            media_type=MEDIA_TYPE_VIDEO,
            location_type=LOCATION_FILESYSTEM,
            play_access=PLAY_ACCESS_FULL,
        )

    # ==================== LIBRARY ITEMS ====================

    def _base_item(self, collection: Collection, item: Movie | Show) -> JFItem:
        """Fields movies and shows have in common."""
        meta = item.metadata
        premiered = as_utc(meta.premiered) or as_utc(item.created)
        doc = JFItem(
            id=item.id,
            parent_id=make_id(IdKind.COLLECTION, collection.id),
            server_id=self.server_id,
            name=meta.title or item.name,
            original_title=meta.original_title or meta.title or item.name,
            sort_name=item.sort_name,
            forced_sort_name=item.sort_name,
            etag=id_hash(item.id),
            date_created=as_utc(item.created),
            premiere_date=premiered,
            can_download=True,
            play_access=PLAY_ACCESS_FULL,
            location_type=LOCATION_FILESYSTEM,
            primary_image_aspect_ratio=ASPECT_RATIO_POSTER,
            overview=meta.plot or None,
            official_rating=meta.official_rating or None,
            community_rating=meta.rating or None,
            production_year=item.production_year or None,
            genres=list(meta.genres),
            genre_items=[JFNameId(name=g, id=make_genre_id(g)) for g in meta.genres],
            studios=[JFNameId(name=s, id=make_studio_id(s)) for s in meta.studios],
            tags=list(meta.tags),
            people=self._make_people(item),
            provider_ids=_make_provider_ids(meta.provider_ids),
            image_tags=_make_image_tags(item),
        )
        if meta.tagline:
            doc.taglines = [meta.tagline]
        if item.fanart:
            doc.backdrop_image_tags = [item.id]
        return doc

    async def make_movie(self, collection: Collection, movie: Movie) -> JFItem:
        doc = self._base_item(collection, movie)
        doc.type = ITEM_TYPE_MOVIE
        doc.media_type = MEDIA_TYPE_VIDEO
        doc.video_type = VIDEO_TYPE_FILE
        doc.container = CONTAINER_VIDEO
        doc.is_hd = is_hd(movie)
        doc.is_4k = is_4k(movie)
        doc.run_time_ticks = runtime_ticks(movie.duration)
        doc.width = movie.video.width or None
        doc.height = movie.video.height or None
        doc.path = movie.file_name
        source = make_media_source(movie)
        doc.media_sources = [source]
        doc.media_streams = source.media_streams
        doc.user_data = await self.user_data(movie.id)
        return doc

    async def make_show(self, collection: Collection, show: Show) -> JFItem:
        doc = self._base_item(collection, show)
        episodes = show.episodes
        doc.type = ITEM_TYPE_SHOW
        doc.is_folder = True
        doc.media_type = MEDIA_TYPE_UNKNOWN
        doc.child_count = len(show.seasons)
        doc.recursive_item_count = len(episodes)
        doc.run_time_ticks = runtime_ticks(show.duration) or None
        doc.user_data = await self._aggregate_user_data(show.id, show.id, episodes)
        return doc

    async def make_season(self, collection: Collection, show: Show, season: Season) -> JFItem:
        season_id = make_id(IdKind.SEASON, season.id)
        show_meta = show.metadata
        if season.is_specials:
            index, name, sort_name = SPECIALS_SEASON_INDEX, "Specials", SPECIALS_SORT_NAME
        else:
            index, name, sort_name = season.number, f"Season {season.number}", f"{season.number:04d}"
        premiered = None
        if season.episodes:
            premiered = as_utc(season.episodes[0].premiered)
        image_tags = None
        if season.poster or show.season_all_poster:
            image_tags = JFImageTags(primary=season_id)
        return JFItem(
            id=season_id,
            parent_id=show.id,
            series_id=show.id,
            series_name=show_meta.title or show.name,
            parent_logo_item_id=show.id if show.logo else None,
            server_id=self.server_id,
            name=name,
            sort_name=sort_name,
            index_number=index,
            etag=id_hash(season_id),
            date_created=as_utc(show.created),
            premiere_date=premiered,
            type=ITEM_TYPE_SEASON,
            is_folder=True,
            media_type=MEDIA_TYPE_UNKNOWN,
            location_type=LOCATION_FILESYSTEM,
            play_access=PLAY_ACCESS_FULL,
            primary_image_aspect_ratio=ASPECT_RATIO_POSTER,
            child_count=len(season.episodes),
            recursive_item_count=len(season.episodes),
            image_tags=image_tags,
            user_data=await self._aggregate_user_data(season_id, season.id, season.episodes),
        )

    async def make_episode(
        self, collection: Collection, show: Show, season: Season, episode: Episode
    ) -> JFItem:
        """Episode document. Genres and studios fall back to the show's."""
        meta = episode.metadata
        show_meta = show.metadata
        genres = meta.genres or show_meta.genres
        studios = meta.studios or show_meta.studios
        premiered = (
            as_utc(episode.premiered) or as_utc(show.premiered) or as_utc(episode.created)
        )
        season_name = "Specials" if season.is_specials else f"Season {season.number}"
        source = make_media_source(episode)
        doc = JFItem(
            id=make_id(IdKind.EPISODE, episode.id),
            parent_id=make_id(IdKind.SEASON, season.id),
            season_id=make_id(IdKind.SEASON, season.id),
            season_name=season_name,
            series_id=show.id,
            series_name=show_meta.title or show.name,
            parent_logo_item_id=show.id if show.logo else None,
            server_id=self.server_id,
            name=episode.title,
            sort_name=episode.sort_name,
            parent_index_number=episode.season_no,
            index_number=episode.episode_no,
            etag=id_hash(episode.id),
            date_created=as_utc(episode.created),
            premiere_date=premiered,
            type=ITEM_TYPE_EPISODE,
            media_type=MEDIA_TYPE_VIDEO,
            video_type=VIDEO_TYPE_FILE,
            container=CONTAINER_VIDEO,
            location_type=LOCATION_FILESYSTEM,
            play_access=PLAY_ACCESS_FULL,
            can_download=True,
            has_subtitles=True,
            path=episode.file_name,
            overview=meta.plot or None,
            community_rating=meta.rating or None,
            production_year=meta.year or None,
            is_hd=is_hd(episode),
            is_4k=is_4k(episode),
            run_time_ticks=runtime_ticks(episode.duration),
            width=episode.video.width or None,
            height=episode.video.height or None,
            primary_image_aspect_ratio=ASPECT_RATIO_WIDE,
            genres=list(genres),
            genre_items=[JFNameId(name=g, id=make_genre_id(g)) for g in genres],
            studios=[JFNameId(name=s, id=make_studio_id(s)) for s in studios],
            people=self._make_people(episode),
            provider_ids=_make_provider_ids(meta.provider_ids),
            media_sources=[source],
            media_streams=source.media_streams,
            user_data=await self.user_data(episode.id),
        )
        if episode.thumb:
            doc.image_tags = JFImageTags(primary=doc.id)
        return doc

    # ==================== GENRES, STUDIOS, PERSONS ====================

    async def make_genre(self, name: str, count: int | None = None) -> JFItem:
        if count is None:
            count = self.collections.genre_item_count().get(name, 1)
        return await self._make_named(make_genre_id(name), name, ITEM_TYPE_GENRE, count)

    async def make_studio(self, name: str, count: int | None = None) -> JFItem:
        if count is None:
            count = self.collections.studio_item_count().get(name, 1)
        return await self._make_named(make_studio_id(name), name, ITEM_TYPE_STUDIO, count)

    async def _make_named(self, item_id: str, name: str, item_type: str, count: int) -> JFItem:
        return JFItem(
            id=item_id,
            server_id=self.server_id,
            name=name,
            sort_name=make_sort_name(name),
            etag=item_id,
            type=item_type,
            media_type=MEDIA_TYPE_UNKNOWN,
            child_count=count,
            location_type=LOCATION_FILESYSTEM,
            image_tags=await self._uploaded_image_tags(item_id),
        )

    async def make_person(self, name: str, count: int | None = None) -> JFItem:
        """Person document, enriched with stored biographical details if any."""
        person_id = make_person_id(name)
        if count is None:
            count = self.collections.person_item_count().get(name, 1)
        user_data = JFUserData(key=f"Person-{name}", item_id=person_id)
        doc = JFItem(
            id=person_id,
            server_id=self.server_id,
            name=name,
            sort_name=make_sort_name(name),
            etag=person_id,
            type=ITEM_TYPE_PERSON,
            media_type=MEDIA_TYPE_UNKNOWN,
            location_type=LOCATION_FILESYSTEM,
            play_access=PLAY_ACCESS_FULL,
            child_count=count,
            user_data=user_data,
        )
        try:
            person = await crud.get_person_by_name(self.db, name, self.user_id)
        except NotFoundError:
            return doc
        doc.overview = person.bio or None
        doc.premiere_date = as_utc(person.date_of_birth)
        if person.place_of_birth:
            doc.production_locations = [person.place_of_birth]
        if person.poster_url:
            doc.image_tags = JFImageTags(primary=TAG_PREFIX_REDIRECT + person.poster_url)
        return doc

    def _make_people(self, item: Movie | Show | Episode) -> list[JFPeople]:
        meta = item.metadata
        people = []
        for actor in meta.actors:
            person_id = make_person_id(actor.name)
            people.append(JFPeople(
                name=actor.name,
                id=person_id,
                role=actor.role,
                type="Actor",
                primary_image_tag=person_id,
            ))
        for name in meta.directors:
            person_id = make_person_id(name)
            people.append(JFPeople(
                name=name, id=person_id, role="Director", type="Director", primary_image_tag=person_id
            ))
        for name in meta.writers:
            person_id = make_person_id(name)
            people.append(JFPeople(
                name=name, id=person_id, role="Screenplay", type="Writer", primary_image_tag=person_id
            ))
        return people

    # ==================== DISPATCH ====================

    async def make_item(self, collection: Collection, item: Item) -> JFItem:
        """Project any library item."""
        if isinstance(item, Movie):
            return await self.make_movie(collection, item)
        if isinstance(item, Show):
            return await self.make_show(collection, item)
        if isinstance(item, Season):
            found = self.collections.get_show_by_id(item.show_id)
            if found is None:
                raise NotFoundError(f"show {item.show_id} not found")
            return await self.make_season(collection, found[1], item)
        found_episode = self.collections.get_episode_by_id(item.id)
        if found_episode is None:
            raise NotFoundError(f"episode {item.id} not found")
        _, show, season, episode = found_episode
        return await self.make_episode(collection, show, season, episode)

    async def make_item_by_id(self, item_id: str) -> JFItem:
        """Project the entity behind any external ID.

        Raises NotFoundError for unknown IDs.
        """
        kind = detect_kind(item_id)
        if kind == IdKind.ROOT:
            return await self.make_root()
        if kind == IdKind.COLLECTION_FAVORITES:
            return await self.make_favorites_collection()
        if kind == IdKind.COLLECTION_PLAYLIST:
            return await self.make_playlist_collection()
        if kind == IdKind.COLLECTION:
            collection = self.collections.get_collection(trim_prefix(item_id))
            if collection is None:
                raise NotFoundError(f"collection {item_id} not found")
            return await self.make_collection(collection)
        if kind == IdKind.PLAYLIST:
            playlist = await crud.get_playlist(self.db, self.user_id, trim_prefix(item_id))
            return self.make_playlist(playlist)
        if kind == IdKind.PERSON:
            return await self.make_person(decode_name(IdKind.PERSON, item_id))
        if kind == IdKind.GENRE:
            return await self.make_genre(decode_name(IdKind.GENRE, item_id))
        if kind == IdKind.STUDIO:
            return await self.make_studio(decode_name(IdKind.STUDIO, item_id))
        if kind in (IdKind.SEASON, IdKind.EPISODE, IdKind.ITEM):
            found = self.collections.find(trim_prefix(item_id))
            if found is not None:
                return await self.make_item(*found)
        raise NotFoundError(f"item {item_id} not found")

    async def make_items_by_ids(self, item_ids: list[str]) -> list[JFItem]:
        """Project several IDs, skipping the ones that do not resolve."""
        items = []
        for item_id in item_ids:
            try:
                items.append(await self.make_item_by_id(item_id))
            except NotFoundError:
                logger.debug(f"Skipping unknown item {item_id}")
        return items

    # ==================== LISTS ====================

    async def root_overview(self) -> list[JFItem]:
        """Children of the root folder: collections, then favorites and playlists."""
        items = [await self.make_collection(c) for c in self.collections.get_collections()]
        items.append(await self.make_favorites_collection())
        items.append(await self.make_playlist_collection())
        return items

    async def all_items(self, collection_id: str | None = None) -> list[JFItem]:
        """Every movie and show, of one collection or of all of them."""
        items = []
        for collection in self.collections.get_collections():
            if collection_id is not None and collection.id != collection_id:
                continue
            for item in collection.items:
                items.append(await self.make_item(collection, item))
        return items

    async def favorites_overview(self) -> list[JFItem]:
        """The user's favorite movies and shows, most recently marked first."""
        items = []
        for item_id in await crud.get_favorites(self.db, self.user_id):
            found = self.collections.get_item_by_id(item_id)
            if found is not None:
                items.append(await self.make_item(*found))
        return items

    async def playlist_overview(self) -> list[JFItem]:
        return [self.make_playlist(p) for p in await self.playlists()]

    async def playlist_items(self, playlist_id: str) -> list[JFItem]:
        """Items of a playlist in playlist order."""
        playlist = await crud.get_playlist(self.db, self.user_id, trim_prefix(playlist_id))
        items = await self.make_items_by_ids(list(playlist.item_ids or []))
        for item in items:
            item.parent_id = make_id(IdKind.PLAYLIST, playlist.id)
        return items

    async def seasons_overview(self, collection: Collection, show: Show) -> list[JFItem]:
        """Seasons of a show ordered by index number, specials last."""
        seasons = [await self.make_season(collection, show, s) for s in show.seasons]
        return sorted(seasons, key=lambda s: s.index_number or 0)

    async def episodes_overview(self, collection: Collection, show: Show, season: Season) -> list[JFItem]:
        return [await self.make_episode(collection, show, season, e) for e in season.episodes]

    async def with_descendants(self, items: list[JFItem]) -> list[JFItem]:
        """The items followed by the seasons and episodes of every show among them."""
        result = []
        for item in items:
            result.append(item)
            if item.type != ITEM_TYPE_SHOW:
                continue
            found = self.collections.get_show_by_id(item.id)
            if found is None:
                continue
            collection, show = found
            for season in show.seasons:
                result.append(await self.make_season(collection, show, season))
                result.extend(await self.episodes_overview(collection, show, season))
        return result

    async def items_by_parent(self, parent_id: str) -> list[JFItem]:
        """Children of any folder-like ID.

        Raises NotFoundError if the parent does not exist.
        """
        kind = detect_kind(parent_id)
        if kind == IdKind.COLLECTION_FAVORITES:
            return await self.favorites_overview()
        if kind == IdKind.COLLECTION_PLAYLIST:
            return await self.playlist_overview()
        if kind == IdKind.PLAYLIST:
            return await self.playlist_items(parent_id)
        if kind == IdKind.GENRE:
            return [i for i in await self.all_items() if any(g.id == parent_id for g in i.genre_items)]
        if kind == IdKind.STUDIO:
            return [i for i in await self.all_items() if any(s.id == parent_id for s in i.studios)]
        if kind == IdKind.PERSON:
            return [i for i in await self.all_items() if any(p.id == parent_id for p in i.people)]
        if kind == IdKind.COLLECTION:
            collection_id = trim_prefix(parent_id)
            if self.collections.get_collection(collection_id) is None:
                raise NotFoundError(f"collection {parent_id} not found")
            return await self.all_items(collection_id)
        if kind == IdKind.ROOT:
            return await self.root_overview()
        if kind == IdKind.SEASON:
            found_season = self.collections.get_season_by_id(trim_prefix(parent_id))
            if found_season is not None:
                return await self.episodes_overview(*found_season)
        found_show = self.collections.get_show_by_id(parent_id)
        if found_show is not None:
            return await self.seasons_overview(*found_show)
        raise NotFoundError(f"parentID {parent_id} not found")


def _make_image_tags(item: Movie | Show) -> JFImageTags | None:
    tags = JFImageTags()
    if item.poster:
        tags.primary = item.id
    if item.fanart:
        tags.backdrop = item.id
    if item.logo:
        tags.logo = item.id
    if tags.primary is None and tags.backdrop is None and tags.logo is None:
        return None
    return tags


def _make_provider_ids(provider_ids: dict[str, str]) -> JFProviderIds | None:
    if not provider_ids:
        return None
    ids = JFProviderIds(
        imdb=provider_ids.get("imdb"),
        tmdb=provider_ids.get("tmdb") or provider_ids.get("themoviedb"),
        tvdb=provider_ids.get("tvdb"),
    )
    if ids.imdb is None and ids.tmdb is None and ids.tvdb is None:
        return None
    return ids
