"""Media source and stream documents for playable items.

Clients direct-play the file on disk, so every item exposes exactly one
media source with one video stream (index 0) and one audio stream
(index 1). Stream details come from the NFO sidecar, normalized to the
codec names Jellyfin clients recognise.
"""

import logging

from src.constants import TICKS_PER_SECOND
from src.models.jellyfin import JFMediaSource, JFMediaStream
from src.services.library import Episode, Movie
from src.utils.idhash import id_hash

logger = logging.getLogger(__name__)

# codec as found in sidecars -> (codec, codec tag)
VIDEO_CODECS = {
    "avc": ("h264", "avc1"),
    "x264": ("h264", "avc1"),
    "h264": ("h264", "avc1"),
    "x265": ("hevc", "hvc1"),
    "h265": ("hevc", "hvc1"),
    "hevc": ("hevc", "hvc1"),
    "vc1": ("vc1", "wvc1"),
}

AUDIO_CODECS = {
    "ac3": ("ac3", "ac-3"),
    "aac": ("aac", "mp4a"),
    "eac3": ("eac3", "ec-3"),
    "wma": ("wmapro", None),
}

# channel count -> (title, layout)
CHANNEL_LAYOUTS = {
    1: ("Mono", "mono"),
    2: ("Stereo", "stereo"),
    3: ("2.1 Channel", "3.0"),
    4: ("3.1 Channel", "4.0"),
    5: ("4.1 Channel", "5.0"),
    6: ("5.1 Channel", "5.1"),
    8: ("7.1 Channel", "7.1"),
}

HD_MIN_HEIGHT = 720
UHD_MIN_HEIGHT = 1500


def runtime_ticks(seconds: int) -> int:
    """Convert a duration in seconds to Jellyfin ticks (100ns units)."""
    return seconds * TICKS_PER_SECOND


def is_hd(item: Movie | Episode) -> bool:
    return item.video.height >= HD_MIN_HEIGHT


def is_4k(item: Movie | Episode) -> bool:
    return item.video.height >= UHD_MIN_HEIGHT


def make_video_stream(item: Movie | Episode) -> JFMediaStream:
    video = item.video
    codec, codec_tag = VIDEO_CODECS.get(video.codec.lower(), ("unknown", "unknown"))
    if codec == "unknown":
        logger.warning(f"Item {item.id}/{item.file_name} has unknown video codec {video.codec}")
    title = codec.upper()
    return JFMediaStream(
        index=0,
        type="Video",
        title=title,
        display_title=f"{title} - SDR",
        codec=codec,
        codec_tag=codec_tag,
        is_default=True,
        language=video.audio_language or None,
        average_frame_rate=video.frame_rate,
        real_frame_rate=video.frame_rate,
        ref_frames=1,
        time_base="1/16000",
        height=video.height,
        width=video.width,
        aspect_ratio="2.35:1",
        video_range="SDR",
        video_range_type="SDR",
        profile="High",
        bit_depth=8,
        bit_rate=video.bitrate,
        audio_spatial_format="None",
    )


def make_audio_stream(item: Movie | Episode) -> JFMediaStream:
    video = item.video
    channels = video.audio_channels
    title, layout = CHANNEL_LAYOUTS.get(channels, ("Unknown", "unknown"))
    if layout == "unknown":
        logger.warning(
            f"Item {item.id}/{item.file_name} has unknown audio channel configuration {channels}"
        )
    codec, codec_tag = AUDIO_CODECS.get(video.audio_codec.lower(), ("unknown", None))
    if codec == "unknown":
        logger.warning(f"Item {item.id}/{item.file_name} has unknown audio codec {video.audio_codec}")
    return JFMediaStream(
        index=1,
        type="Audio",
        title=title,
        display_title=f"{title} - {codec.upper()}",
        codec=codec,
        codec_tag=codec_tag,
        language=video.audio_language or None,
        time_base="1/48000",
        sample_rate=48000,
        channels=channels,
        channel_layout=layout,
        audio_spatial_format="None",
        localized_default="Default",
        localized_external="External",
        is_default=True,
        video_range="Unknown",
        video_range_type="Unknown",
        profile="LC",
        bit_rate=video.audio_bitrate,
    )


def make_media_streams(item: Movie | Episode) -> list[JFMediaStream]:
    return [make_video_stream(item), make_audio_stream(item)]


def make_media_source(item: Movie | Episode) -> JFMediaSource:
    """Describe the file of a movie or episode as a direct-play media source."""
    return JFMediaSource(
        id=item.id,
        e_tag=id_hash(item.file_name),
        name=item.file_name,
        path=item.file_name,
        size=item.file_size,
        run_time_ticks=runtime_ticks(item.duration),
        bitrate=item.video.bitrate + item.video.audio_bitrate,
        media_streams=make_media_streams(item),
    )
