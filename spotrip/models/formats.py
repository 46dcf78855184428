"""
Audio encodings offered by the catalog, their preference order and the
constants derived from each of them.
"""

import math
from collections.abc import Mapping
from enum import Enum


class AudioFormat(str, Enum):
    """An encoding (codec + bitrate tier) a track may be available in."""

    OGG_VORBIS_96 = "OGG_VORBIS_96"
    OGG_VORBIS_160 = "OGG_VORBIS_160"
    OGG_VORBIS_320 = "OGG_VORBIS_320"
    MP3_256 = "MP3_256"
    MP3_320 = "MP3_320"
    MP3_160 = "MP3_160"
    MP3_96 = "MP3_96"
    MP3_160_ENC = "MP3_160_ENC"
    AAC_24 = "AAC_24"
    AAC_48 = "AAC_48"
    AAC_160 = "AAC_160"
    AAC_320 = "AAC_320"
    MP4_128 = "MP4_128"
    OTHER5 = "OTHER5"
    FLAC_FLAC = "FLAC_FLAC"
    XHE_AAC_24 = "XHE_AAC_24"
    XHE_AAC_16 = "XHE_AAC_16"
    XHE_AAC_12 = "XHE_AAC_12"
    FLAC_FLAC_24BIT = "FLAC_FLAC_24BIT"


# Highest quality first.
FORMAT_PREFERENCE: tuple[AudioFormat, ...] = (
    AudioFormat.FLAC_FLAC_24BIT,  # lossless, 24-bit
    AudioFormat.FLAC_FLAC,
    AudioFormat.AAC_320,
    AudioFormat.MP3_320,
    AudioFormat.MP3_256,
    AudioFormat.OGG_VORBIS_320,
    AudioFormat.AAC_160,
    AudioFormat.MP3_160_ENC,
    AudioFormat.MP3_160,
    AudioFormat.OGG_VORBIS_160,
    AudioFormat.MP4_128,  # AAC in an MP4 container
    AudioFormat.AAC_48,
    AudioFormat.AAC_24,
    AudioFormat.XHE_AAC_24,
    AudioFormat.XHE_AAC_16,
    AudioFormat.XHE_AAC_12,  # speech quality only
    AudioFormat.OGG_VORBIS_96,
    AudioFormat.MP3_96,
    AudioFormat.OTHER5,  # unknown legacy format, last resort
)

# Format -> metadata. "kbps" is an assumed average in kilobytes per second,
# only used as a buffering hint for the remote stream.
FORMAT_INFO = {
    AudioFormat.OGG_VORBIS_96: {"ext": "ogg", "kbps": 12.0},
    AudioFormat.OGG_VORBIS_160: {"ext": "ogg", "kbps": 20.0},
    AudioFormat.OGG_VORBIS_320: {"ext": "ogg", "kbps": 40.0},
    AudioFormat.MP3_256: {"ext": "mp3", "kbps": 32.0},
    AudioFormat.MP3_320: {"ext": "mp3", "kbps": 40.0},
    AudioFormat.MP3_160: {"ext": "mp3", "kbps": 20.0},
    AudioFormat.MP3_96: {"ext": "mp3", "kbps": 12.0},
    AudioFormat.MP3_160_ENC: {"ext": "mp3", "kbps": 20.0},
    AudioFormat.AAC_24: {"ext": "aac", "kbps": 3.0},
    AudioFormat.AAC_48: {"ext": "aac", "kbps": 6.0},
    AudioFormat.AAC_160: {"ext": "aac", "kbps": 20.0},
    AudioFormat.AAC_320: {"ext": "aac", "kbps": 40.0},
    AudioFormat.MP4_128: {"ext": "aac", "kbps": 16.0},
    AudioFormat.OTHER5: {"ext": "bin", "kbps": 40.0},
    AudioFormat.FLAC_FLAC: {"ext": "flac", "kbps": 112.0},  # ~900 kbit/s
    AudioFormat.XHE_AAC_12: {"ext": "aac", "kbps": 1.5},
    AudioFormat.XHE_AAC_16: {"ext": "aac", "kbps": 2.0},
    AudioFormat.XHE_AAC_24: {"ext": "aac", "kbps": 3.0},
    AudioFormat.FLAC_FLAC_24BIT: {"ext": "flac", "kbps": 3.0},
}

OGG_VORBIS_FORMATS = frozenset(
    {
        AudioFormat.OGG_VORBIS_96,
        AudioFormat.OGG_VORBIS_160,
        AudioFormat.OGG_VORBIS_320,
    }
)

# The decrypted vorbis stream starts with a proprietary header that precedes
# the first Ogg page.
OGG_HEADER_END = 0xA7


def select_format(
    files: Mapping[AudioFormat, str],
) -> tuple[AudioFormat, str] | None:
    """
    Picks the highest-priority format available for a track.

    Args:
        files: The track's available formats mapped to their remote file IDs.

    Returns:
        A (format, file_id) tuple, or None if no preferred format is available.
    """
    for audio_format in FORMAT_PREFERENCE:
        if audio_format in files:
            return audio_format, files[audio_format]
    return None


def get_extension(audio_format: AudioFormat) -> str:
    """Returns the file extension used when saving the given format."""
    return FORMAT_INFO.get(audio_format, {}).get("ext", "bin")


def get_bytes_per_second(audio_format: AudioFormat) -> int:
    """Returns the assumed average data rate of a format in bytes per second."""
    kbps = FORMAT_INFO.get(audio_format, {}).get("kbps", 40.0)
    return math.ceil(kbps * 1024)


def is_ogg_vorbis(audio_format: AudioFormat) -> bool:
    return audio_format in OGG_VORBIS_FORMATS


def get_stream_offset(audio_format: AudioFormat) -> int:
    """Number of leading bytes to skip in the decrypted stream of a format."""
    return OGG_HEADER_END if is_ogg_vorbis(audio_format) else 0
