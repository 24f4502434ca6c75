"""Pydantic models for the Jellyfin wire format.

Field names are snake_case in Python and PascalCase on the wire. Fields
left as None are dropped when serializing, so optional values are absent
rather than null.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class JFModel(BaseModel):
    """Base for all wire models."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON shape clients expect."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ==================== ITEMS ====================


class JFImageTags(JFModel):
    primary: str | None = None
    backdrop: str | None = None
    logo: str | None = None
    thumb: str | None = None


class JFUserData(JFModel):
    """Per user play state of an item."""

    playback_position_ticks: int = 0
    played_percentage: int = 0
    play_count: int = 0
    is_favorite: bool = False
    last_played_date: datetime | None = None
    played: bool = False
    key: str = ""
    item_id: str = "00000000000000000000000000000000"
    unplayed_item_count: int = 0


class JFNameId(JFModel):
    """Genre or studio reference inside an item."""

    name: str
    id: str


class JFPeople(JFModel):
    name: str
    id: str
    role: str | None = None
    type: str
    primary_image_tag: str | None = None


class JFProviderIds(JFModel):
    tmdb: str | None = None
    tvdb: str | None = None
    imdb: str | None = None


class JFMediaStream(JFModel):
    title: str = ""
    codec: str = ""
    codec_tag: str | None = None
    language: str | None = None
    time_base: str = ""
    video_range: str = ""
    video_range_type: str = ""
    audio_spatial_format: str = ""
    display_title: str | None = None
    is_interlaced: bool = False
    is_avc: bool = Field(default=False, alias="IsAVC")
    bit_rate: int | None = None
    bit_depth: int | None = None
    ref_frames: int | None = None
    is_default: bool = False
    is_forced: bool = False
    is_hearing_impaired: bool = False
    height: int | None = None
    width: int | None = None
    average_frame_rate: float | None = None
    real_frame_rate: float | None = None
    profile: str | None = None
    type: str
    aspect_ratio: str | None = None
    index: int
    is_external: bool = False
    is_text_subtitle_stream: bool = False
    supports_external_stream: bool = False
    level: int = 0
    localized_default: str | None = None
    localized_external: str | None = None
    channel_layout: str | None = None
    channels: int | None = None
    sample_rate: int | None = None


class JFMediaSource(JFModel):
    protocol: str = "File"
    id: str
    path: str
    type: str = "Default"
    container: str = "mp4"
    size: int = 0
    name: str
    is_remote: bool = False
    e_tag: str = Field(alias="ETag")
    run_time_ticks: int = 0
    read_at_native_framerate: bool = False
    has_segments: bool = False
    ignore_dts: bool = False
    ignore_index: bool = False
    gen_pts_input: bool = False
    supports_transcoding: bool = False
    supports_direct_stream: bool = True
    supports_direct_play: bool = True
    is_infinite_stream: bool = False
    requires_opening: bool = False
    requires_closing: bool = False
    requires_looping: bool = False
    supports_probing: bool = True
    video_type: str = "VideoFile"
    media_streams: list[JFMediaStream] = []
    media_attachments: list[dict] = []
    formats: list[str] = []
    bitrate: int = 0
    required_http_headers: dict[str, str] = {}
    transcoding_sub_protocol: str = "http"
    default_audio_stream_index: int = 1


class JFItem(JFModel):
    """The polymorphic item document."""

    id: str
    parent_id: str | None = None
    series_id: str | None = None
    season_id: str | None = None
    server_id: str = ""
    index_number: int | None = None
    parent_index_number: int | None = None
    type: str | None = None
    name: str = ""
    sort_name: str | None = None
    forced_sort_name: str | None = None
    series_name: str | None = None
    season_name: str | None = None
    original_title: str | None = None
    etag: str = ""
    date_created: datetime | None = None
    can_delete: bool = False
    can_download: bool = False
    container: str | None = None
    premiere_date: datetime | None = None
    media_sources: list[JFMediaSource] | None = None
    critic_rating: int | None = None
    media_type: str | None = None
    path: str | None = None
    enable_media_source_display: bool = True
    official_rating: str | None = None
    child_count: int | None = None
    collection_type: str | None = None
    media_streams: list[JFMediaStream] | None = None
    overview: str | None = None
    taglines: list[str] | None = None
    genres: list[str] = []
    community_rating: float | None = None
    run_time_ticks: int | None = None
    play_access: str | None = None
    production_year: int | None = None
    location_type: str | None = None
    user_data: JFUserData | None = None
    image_tags: JFImageTags | None = None
    backdrop_image_tags: list[str] | None = None
    width: int | None = None
    height: int | None = None
    is_folder: bool = False
    is_hd: bool = Field(default=False, alias="IsHD")
    is_4k: bool = Field(default=False, alias="Is4K")
    lock_data: bool = False
    has_subtitles: bool | None = None
    people: list[JFPeople] = []
    studios: list[JFNameId] = []
    genre_items: list[JFNameId] = []
    provider_ids: JFProviderIds | None = None
    tags: list[str] = []
    locked_fields: list[str] = []
    production_locations: list[str] | None = None
    external_urls: list[dict[str, str]] | None = None
    remote_trailers: list[dict[str, str]] | None = None
    chapters: list[dict[str, Any]] | None = None
    local_trailer_count: int | None = None
    special_feature_count: int | None = None
    display_preferences_id: str | None = None
    primary_image_aspect_ratio: float | None = None
    video_type: str | None = None
    parent_logo_item_id: str | None = None
    recursive_item_count: int | None = None


class JFUserItemsResponse(JFModel):
    items: list[JFItem] = []
    total_record_count: int = 0
    start_index: int = 0


class JFSearchHintsResponse(JFModel):
    search_hints: list[JFItem] = []
    total_record_count: int = 0


class JFPlaybackInfoResponse(JFModel):
    media_sources: list[JFMediaSource] = []
    play_session_id: str = ""


class JFItemCountResponse(JFModel):
    movie_count: int = 0
    series_count: int = 0
    episode_count: int = 0
    artist_count: int = 0
    program_count: int = 0
    trailer_count: int = 0
    song_count: int = 0
    album_count: int = 0
    music_video_count: int = 0
    box_set_count: int = 0
    book_count: int = 0
    item_count: int = 0


class JFItemFilterResponse(JFModel):
    genres: list[str] = []
    tags: list[str] = []
    official_ratings: list[str] = []
    years: list[int] = []


class JFItemFilter2Response(JFModel):
    genres: list[JFNameId] = []
    tags: list[str] = []


class JFThemeMediaResult(JFModel):
    items: list[JFItem] = []
    total_record_count: int = 0
    start_index: int = 0
    owner_id: str = ""


class JFThemeMediaResponse(JFModel):
    theme_videos_result: JFThemeMediaResult
    theme_songs_result: JFThemeMediaResult
    soundtrack_songs_result: JFThemeMediaResult


# ==================== USERS & SESSIONS ====================


class JFUserConfiguration(JFModel):
    grouped_folders: list[str] = []
    subtitle_mode: str = "Default"
    ordered_views: list[str] = []
    my_media_excludes: list[str] = []
    latest_items_excludes: list[str] = []
    subtitle_language_preference: str = ""
    cast_receiver_id: str = "F007D354"
    play_default_audio_track: bool = True
    display_missing_episodes: bool = False
    display_collections_view: bool = False
    enable_local_password: bool = False
    hide_played_in_latest: bool = True
    remember_audio_selections: bool = True
    remember_subtitle_selections: bool = True
    enable_next_episode_auto_play: bool = True


class JFUserPolicy(JFModel):
    is_administrator: bool = False
    is_hidden: bool = False
    enable_collection_management: bool = False
    enable_subtitle_management: bool = False
    enable_lyric_management: bool = False
    is_disabled: bool = False
    blocked_tags: list[str] = []
    allowed_tags: list[str] = []
    enable_user_preference_access: bool = True
    access_schedules: list[str] = []
    block_unrated_items: list[str] = []
    enable_remote_control_of_other_users: bool = False
    enable_shared_device_control: bool = False
    enable_remote_access: bool = True
    enable_live_tv_management: bool = False
    enable_live_tv_access: bool = False
    enable_media_playback: bool = True
    enable_audio_playback_transcoding: bool = False
    enable_video_playback_transcoding: bool = False
    enable_playback_remuxing: bool = False
    force_remote_source_transcoding: bool = False
    enable_content_deletion: bool = False
    enable_content_deletion_from_folders: list[str] = []
    enable_content_downloading: bool = True
    enable_sync_transcoding: bool = False
    enable_media_conversion: bool = False
    enabled_devices: list[str] = []
    enable_all_devices: bool = True
    enabled_channels: list[str] = []
    enable_all_channels: bool = True
    enabled_folders: list[str] = []
    enable_all_folders: bool = True
    invalid_login_attempt_count: int = 0
    login_attempts_before_lockout: int = -1
    max_active_sessions: int = 0
    enable_public_sharing: bool = False
    blocked_media_folders: list[str] = []
    blocked_channels: list[str] = []
    remote_client_bitrate_limit: int = 0
    authentication_provider_id: str = (
        "Jellyfin.Server.Implementations.Users.DefaultAuthenticationProvider"
    )
    password_reset_provider_id: str = (
        "Jellyfin.Server.Implementations.Users.DefaultPasswordResetProvider"
    )
    sync_play_access: str = "CreateAndJoinGroups"


class JFUser(JFModel):
    name: str
    server_id: str
    id: str
    primary_image_tag: str | None = None
    has_password: bool = True
    has_configured_password: bool = True
    has_configured_easy_password: bool = False
    enable_auto_login: bool = False
    last_login_date: datetime | None = None
    last_activity_date: datetime | None = None
    configuration: JFUserConfiguration = JFUserConfiguration()
    policy: JFUserPolicy = JFUserPolicy()


class JFSessionPlayState(JFModel):
    can_seek: bool = False
    is_paused: bool = False
    is_muted: bool = False
    repeat_mode: str = "RepeatNone"
    playback_order: str = "Default"


class JFSessionCapabilities(JFModel):
    playable_media_types: list[str] = []
    supported_commands: list[str] = []
    supports_media_control: bool = False
    supports_persistent_identifier: bool = True


class JFSessionInfo(JFModel):
    play_state: JFSessionPlayState = JFSessionPlayState()
    additional_users: list[str] = []
    capabilities: JFSessionCapabilities = JFSessionCapabilities()
    remote_end_point: str = ""
    playable_media_types: list[str] = []
    id: str
    user_id: str
    user_name: str
    client: str = ""
    last_activity_date: datetime | None = None
    last_playback_check_in: datetime | None = None
    device_name: str = ""
    device_id: str = ""
    application_version: str = ""
    is_active: bool = True
    supports_media_control: bool = False
    supports_remote_control: bool = False
    now_playing_queue: list[str] = []
    now_playing_queue_full_items: list[str] = []
    has_custom_device_name: bool = False
    server_id: str = ""
    supported_commands: list[str] = []


class JFAuthenticateByNameResponse(JFModel):
    user: JFUser
    session_info: JFSessionInfo
    access_token: str
    server_id: str


class JFDeviceItem(JFModel):
    id: str
    name: str
    app_name: str
    app_version: str
    date_last_activity: datetime | None = None
    last_user_id: str
    last_user_name: str
    capabilities: JFSessionCapabilities = JFSessionCapabilities()


class JFDeviceInfoResponse(JFModel):
    items: list[JFDeviceItem] = []
    total_record_count: int = 0
    start_index: int = 0


class JFQuickConnectResult(JFModel):
    """State of a QuickConnect pairing request."""

    authenticated: bool
    secret: str
    code: str
    device_id: str
    device_name: str
    app_name: str
    app_version: str
    date_added: datetime


# ==================== SYSTEM ====================


class JFSystemInfoPublicResponse(JFModel):
    local_address: str
    server_name: str
    version: str
    product_name: str
    operating_system: str
    id: str
    startup_wizard_completed: bool = True


class JFSystemInfoResponse(JFSystemInfoPublicResponse):
    operating_system_display_name: str = ""
    has_pending_restart: bool = False
    is_shutting_down: bool = False
    supports_library_monitor: bool = False
    web_socket_port_number: int = 0
    completed_installations: list[str] = []
    can_self_restart: bool = False
    can_launch_web_browser: bool = False
    program_data_path: str = ""
    web_path: str = ""
    items_by_name_path: str = ""
    cache_path: str = ""
    log_path: str = ""
    internal_metadata_path: str = ""
    transcoding_temp_path: str = ""
    cast_receiver_applications: list[dict[str, str]] = []
    has_update_available: bool = False
    encoder_location: str = "System"
    system_architecture: str = "X64"


class JFMediaLibrary(JFModel):
    name: str
    locations: list[str] | None = None
    collection_type: str | None = None
    library_options: dict[str, Any] = {}
    item_id: str | None = None
    primary_image_item_id: str | None = None
    refresh_status: str | None = None


# ==================== REQUEST BODIES ====================


class JFAuthenticateUserByNameRequest(JFModel):
    username: str = ""
    pw: str = ""


class JFQuickConnectAuthRequest(JFModel):
    secret: str = ""


class JFPlayStateRequest(JFModel):
    """Body of a playback start, progress or stop report."""

    item_id: str = ""
    position_ticks: int | None = None
    is_paused: bool | None = None
    play_session_id: str | None = None


class JFCreatePlaylistRequest(JFModel):
    name: str = ""
    ids: list[str] = []
    user_id: str = ""
    media_type: str | None = None


class JFUpdatePlaylistRequest(JFModel):
    name: str | None = None
    ids: list[str] | None = None


class JFCreateUserRequest(JFModel):
    name: str = ""
    password: str = ""


class JFUpdatePasswordRequest(JFModel):
    current_pw: str = ""
    new_pw: str = ""
    reset_password: bool = False
