"""
Builds the tag set for a track and writes it into the downloaded file.
"""

import base64
import logging
import os
from dataclasses import dataclass

import mutagen.id3 as id3
from mutagen.flac import FLAC, Picture
from mutagen.id3 import ID3NoHeaderError
from mutagen.oggvorbis import OggVorbis

from spotrip.models.catalog import TrackDescriptor

log = logging.getLogger(__name__)

FLAC_MAX_BLOCKSIZE = 16777215  # ~16.7MB, max size for a FLAC metadata block
PICTURE_TYPE_COVER_FRONT = 3

# Extensions whose containers carry Vorbis comments; everything else gets ID3v2.
VORBIS_COMMENT_EXTENSIONS = ("ogg", "flac")


@dataclass
class TagBundle:
    """The tags written into a single audio file."""

    title: str
    album: str
    artist: str
    tracknumber: str
    isrc: str
    cover_data: bytes | None = None
    cover_mime: str = "image/jpeg"

    @classmethod
    def from_track(
        cls,
        track: TrackDescriptor,
        cover: tuple[bytes, str] | None = None,
    ) -> "TagBundle":
        cover_data, cover_mime = cover if cover else (None, "image/jpeg")
        return cls(
            title=track.name,
            album=track.album.name,
            artist=track.artist_string,
            tracknumber=str(track.number),
            isrc=track.uri,
            cover_data=cover_data,
            cover_mime=cover_mime,
        )

    def text_fields(self) -> dict[str, str]:
        return {
            "title": self.title,
            "album": self.album,
            "artist": self.artist,
            "tracknumber": self.tracknumber,
            "isrc": self.isrc,
        }

    def to_picture(self) -> Picture:
        pic = Picture()
        pic.type = PICTURE_TYPE_COVER_FRONT
        pic.mime = self.cover_mime
        pic.desc = "cover"
        pic.data = self.cover_data
        return pic


def get_tag_format(file_extension: str) -> str:
    """Returns 'vorbis' or 'id3' depending on the file extension."""
    return "vorbis" if file_extension in VORBIS_COMMENT_EXTENSIONS else "id3"


class Tagger:
    """Writes metadata tags to Ogg Vorbis, FLAC and ID3-tagged files."""

    def __init__(self, embed_art: bool = True):
        self.embed_art = embed_art

    def tag_file(self, file_path: str, file_extension: str, tags: TagBundle) -> None:
        """
        Writes the tags into the file at file_path.

        Raises:
            mutagen.MutagenError: If the file cannot be parsed or saved.
            OSError: If the file cannot be read or written.
        """
        if file_extension == "ogg":
            self._tag_ogg(file_path, tags)
        elif file_extension == "flac":
            self._tag_flac(file_path, tags)
        else:
            self._tag_id3(file_path, tags)
        log.debug(f"Metadata written to '{os.path.basename(file_path)}'")

    def _tag_ogg(self, path: str, tags: TagBundle):
        audio = OggVorbis(path)
        if audio.tags is None:
            audio.add_tags()

        for key, value in tags.text_fields().items():
            if value:
                audio[key.upper()] = [value]

        if self.embed_art and tags.cover_data:
            encoded = base64.b64encode(tags.to_picture().write()).decode("ascii")
            audio["METADATA_BLOCK_PICTURE"] = [encoded]

        audio.save()

    def _tag_flac(self, path: str, tags: TagBundle):
        audio = FLAC(path)
        if audio.tags is None:
            audio.add_tags()

        for key, value in tags.text_fields().items():
            if value:
                audio[key.upper()] = [value]

        if self.embed_art and tags.cover_data:
            if len(tags.cover_data) > FLAC_MAX_BLOCKSIZE:
                log.warning("Cover art is too large to embed in FLAC.")
            else:
                audio.clear_pictures()
                audio.add_picture(tags.to_picture())

        audio.save()

    def _tag_id3(self, path: str, tags: TagBundle):
        try:
            audio = id3.ID3(path)
        except ID3NoHeaderError:
            audio = id3.ID3()

        audio.add(id3.TIT2(encoding=3, text=tags.title))
        audio.add(id3.TALB(encoding=3, text=tags.album))
        audio.add(id3.TPE1(encoding=3, text=tags.artist))
        audio.add(id3.TRCK(encoding=3, text=tags.tracknumber))
        if tags.isrc:
            audio.add(id3.TSRC(encoding=3, text=tags.isrc))

        if self.embed_art and tags.cover_data:
            if "APIC:cover" in audio:
                del audio["APIC:cover"]
            audio.add(
                id3.APIC(
                    encoding=3,
                    mime=tags.cover_mime,
                    type=PICTURE_TYPE_COVER_FRONT,
                    desc="cover",
                    data=tags.cover_data,
                )
            )

        audio.save(filename=path, v2_version=3)
