"""Application constants - centralized configuration values."""

# =============================================================================
# Server identity
# =============================================================================
PRODUCT_NAME = "Jellyfin Server"  # Brand-checked by some clients
SERVER_VERSION = "10.10.3"
OPERATING_SYSTEM = "Linux"

# =============================================================================
# Fixed virtual IDs
# =============================================================================
COLLECTION_ROOT_ID = "e9d5075a555c1cbc394eec4cef295274"
PLAYLIST_COLLECTION_ID = "2f0340563593c4d98b97c9bfa21ce23c"
FAVORITES_COLLECTION_ID = "f4a0b1c2d3e5c4b8a9e6f7d8e9a0b1c2"
ZERO_ID = "00000000000000000000000000000000"
SESSION_ID = "e3a869b7a901f8894de8ee65688db6c0"

# =============================================================================
# External ID prefixes
# =============================================================================
PREFIX_SEPARATOR = "_"
PREFIX_ROOT = "root_"
PREFIX_COLLECTION = "collection_"
PREFIX_COLLECTION_FAVORITES = "collectionfavorites_"
PREFIX_COLLECTION_PLAYLIST = "collectionplaylist_"
PREFIX_SHOW = "show_"
PREFIX_SEASON = "season_"
PREFIX_EPISODE = "episode_"
PREFIX_PLAYLIST = "playlist_"
PREFIX_GENRE = "genre_"
PREFIX_STUDIO = "studio_"
PREFIX_PERSON = "person_"
PREFIX_DISPLAY_PREFERENCES = "dp_"

# Image tag prefix that results in an HTTP redirect
TAG_PREFIX_REDIRECT = "redirect_"

# =============================================================================
# Item and collection types
# =============================================================================
COLLECTION_TYPE_MOVIES = "movies"
COLLECTION_TYPE_TVSHOWS = "tvshows"
COLLECTION_TYPE_PLAYLISTS = "playlists"

ITEM_TYPE_USER_ROOT_FOLDER = "UserRootFolder"
ITEM_TYPE_COLLECTION_FOLDER = "CollectionFolder"
ITEM_TYPE_USER_VIEW = "UserView"
ITEM_TYPE_MOVIE = "Movie"
ITEM_TYPE_SHOW = "Series"
ITEM_TYPE_SEASON = "Season"
ITEM_TYPE_EPISODE = "Episode"
ITEM_TYPE_PLAYLIST = "Playlist"
ITEM_TYPE_GENRE = "Genre"
ITEM_TYPE_STUDIO = "Studio"
ITEM_TYPE_PERSON = "Person"
ITEM_TYPE_MUSIC_ALBUM = "MusicAlbum"
ITEM_TYPE_AUDIO = "Audio"

MEDIA_TYPE_VIDEO = "Video"
MEDIA_TYPE_UNKNOWN = "Unknown"

ASPECT_RATIO_POSTER = 0.6666666666666666
ASPECT_RATIO_WIDE = 1.7777777777777777

# =============================================================================
# Playback
# =============================================================================
TICKS_PER_SECOND = 10_000_000
DEFAULT_DURATION_SECONDS = 3600  # Assumed when an item has no known duration
PLAYED_THRESHOLD_PERCENT = 98

# Season number 0 holds specials and is remapped to sort last
SPECIALS_SEASON_INDEX = 99
SPECIALS_SORT_NAME = "9999"

# =============================================================================
# Limits
# =============================================================================
DEFAULT_LATEST_LIMIT = 50
MAX_SEARCH_RESULTS = 15
NEXT_UP_RECENT_WINDOW = 10
NEXT_UP_SERIES_HISTORY = 100_000
MAX_IMAGE_UPLOAD_BYTES = 40 * 1024 * 1024
BITRATE_TEST_DEFAULT_BYTES = 100 * 1024
BITRATE_TEST_MAX_BYTES = 20 * 1024 * 1024
QUICK_CONNECT_CODE_VALIDITY_MINUTES = 10

# =============================================================================
# Cache headers (in seconds)
# =============================================================================
CACHE_MAX_AGE_IMAGE_REDIRECT = 2592000  # 30 days
CACHE_MAX_AGE_IMAGE = 2592000
CACHE_MAX_AGE_LOCALIZATION = 3600  # 1 hour
