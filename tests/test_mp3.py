"""Test MP3 tag writer"""

from unittest.mock import patch

import pytest
from mutagen.id3 import ID3, COMM, TALB, TIT2, TPE1, Encoding
from mutagen.mp3 import MP3

from ncmtag.audio.mp3 import write_mp3_tags
from ncmtag.exceptions import ContainerParseError, PersistError, TagMarshalError
from ncmtag.ncm.models import ArtistInfo, TrackMetadata


def tag_existing(path, *frames):
    audio = MP3(path)
    audio.add_tags()
    for frame in frames:
        audio.tags.add(frame)
    audio.save()


def text_of(tags, frame_id):
    return [value for frame in tags.getall(frame_id) for value in frame.text]


class TestWriteMp3Tags:
    """Test merging metadata into MP3 files"""

    def test_fills_untagged_file(self, mp3_file, sample_metadata, jpeg_bytes):
        write_mp3_tags(mp3_file, jpeg_bytes, sample_metadata)

        tags = ID3(mp3_file)
        assert text_of(tags, 'TIT2') == ['Test Song']
        assert text_of(tags, 'TALB') == ['Test Album']
        assert text_of(tags, 'TPE1') == ['A', 'B']
        assert tags.getall('TIT2')[0].encoding == Encoding.UTF8

        comments = tags.getall('COMM')
        assert len(comments) == 1
        assert comments[0].text == [sample_metadata.comment]
        assert comments[0].lang == 'XXX'
        assert comments[0].desc == ''
        assert comments[0].encoding == Encoding.LATIN1

    def test_existing_frames_are_kept(self, mp3_file, sample_metadata):
        tag_existing(
            mp3_file,
            TIT2(encoding=Encoding.UTF8, text=['Original']),
            TALB(encoding=Encoding.UTF8, text=['Original Album']),
            TPE1(encoding=Encoding.UTF8, text=['Somebody']),
            COMM(encoding=Encoding.UTF8, lang='eng', desc='note', text=['keep me']),
        )

        write_mp3_tags(mp3_file, b'\xff\xd8', sample_metadata)

        tags = ID3(mp3_file)
        assert text_of(tags, 'TIT2') == ['Original']
        assert text_of(tags, 'TPE1') == ['Somebody']
        assert text_of(tags, 'TALB') == ['Original Album']
        assert text_of(tags, 'COMM') == ['keep me']

    def test_only_missing_frames_are_filled(self, mp3_file, sample_metadata):
        tag_existing(mp3_file, TIT2(encoding=Encoding.UTF8, text=['Original']))

        write_mp3_tags(mp3_file, b'\xff\xd8', sample_metadata)

        tags = ID3(mp3_file)
        assert text_of(tags, 'TIT2') == ['Original']
        assert text_of(tags, 'TALB') == ['Test Album']
        assert text_of(tags, 'TPE1') == ['A', 'B']

    def test_blank_frame_is_filled(self, mp3_file):
        tag_existing(mp3_file, TIT2(encoding=Encoding.UTF8, text=['']))

        write_mp3_tags(mp3_file, None, TrackMetadata(name='New Title'))

        assert text_of(ID3(mp3_file), 'TIT2') == ['New Title']

    def test_embedded_picture(self, mp3_file, sample_metadata, png_bytes):
        write_mp3_tags(mp3_file, png_bytes, sample_metadata)

        pictures = ID3(mp3_file).getall('APIC')
        assert len(pictures) == 1
        assert pictures[0].mime == 'image/png'
        assert pictures[0].type == 3
        assert pictures[0].desc == 'Front cover'
        assert pictures[0].data == png_bytes

    def test_picture_is_always_appended(self, mp3_file, sample_metadata, jpeg_bytes, png_bytes):
        write_mp3_tags(mp3_file, jpeg_bytes, sample_metadata)
        write_mp3_tags(mp3_file, png_bytes, sample_metadata)

        tags = ID3(mp3_file)
        pictures = tags.getall('APIC')
        assert len(pictures) == 2
        assert {p.data for p in pictures} == {jpeg_bytes, png_bytes}
        assert len(tags.getall('TIT2')) == 1
        assert len(tags.getall('COMM')) == 1

    def test_replace_policy_drops_old_pictures(self, mp3_file, sample_metadata, jpeg_bytes, png_bytes):
        write_mp3_tags(mp3_file, jpeg_bytes, sample_metadata)
        write_mp3_tags(mp3_file, png_bytes, sample_metadata, cover_policy='replace')

        pictures = ID3(mp3_file).getall('APIC')
        assert len(pictures) == 1
        assert pictures[0].data == png_bytes

    def test_link_only_fallback(self, mp3_file, sample_metadata, offline_session):
        write_mp3_tags(mp3_file, None, sample_metadata, session=offline_session)

        picture = ID3(mp3_file).getall('APIC')[0]
        assert picture.mime == '-->'
        assert picture.data == b'https://p1.music.126.net/cover.jpg'

    def test_nothing_to_write(self, mp3_file, empty_metadata):
        write_mp3_tags(mp3_file, None, empty_metadata)

        tags = ID3(mp3_file)
        for frame_id in ('TIT2', 'TALB', 'TPE1', 'COMM', 'APIC'):
            assert tags.getall(frame_id) == []

    def test_artists_share_one_frame(self, mp3_file):
        metadata = TrackMetadata(artists=(ArtistInfo(name='A'), ArtistInfo(name='B')))

        write_mp3_tags(mp3_file, None, metadata)

        tags = ID3(mp3_file)
        assert len(tags.getall('TPE1')) == 1
        assert tags['TPE1'].text == ['A', 'B']

    def test_id3v23(self, mp3_file, sample_metadata, offline_session):
        write_mp3_tags(mp3_file, None, sample_metadata, id3_version="2.3", session=offline_session)

        tags = ID3(mp3_file)
        assert tags.version[:2] == (2, 3)
        assert text_of(tags, 'TIT2') == ['Test Song']

    def test_audio_stream_untouched(self, mp3_file, sample_metadata):
        original = mp3_file.read_bytes()

        write_mp3_tags(mp3_file, b'\xff\xd8', sample_metadata)

        assert mp3_file.read_bytes().endswith(original)

    def test_invalid_file(self, temp_dir, sample_metadata):
        path = temp_dir / "broken.mp3"
        path.write_bytes(b'\x00' * 64)

        with pytest.raises(ContainerParseError):
            write_mp3_tags(path, None, sample_metadata)

    def test_missing_file(self, temp_dir, sample_metadata):
        with pytest.raises(ContainerParseError):
            write_mp3_tags(temp_dir / "missing.mp3", None, sample_metadata)

    def test_non_latin1_comment(self, mp3_file):
        metadata = TrackMetadata(name='歌', comment='网易云音乐')
        original = mp3_file.read_bytes()

        with pytest.raises(TagMarshalError):
            write_mp3_tags(mp3_file, None, metadata)

        assert mp3_file.read_bytes() == original

    def test_save_failure(self, mp3_file, sample_metadata, offline_session):
        with patch.object(MP3, 'save', side_effect=OSError("read-only file system")):
            with pytest.raises(PersistError):
                write_mp3_tags(mp3_file, None, sample_metadata, session=offline_session)


    def test_write_protected_file(self, mp3_file, sample_metadata, write_protected):
        """Test a valid but read-only file parses and fails on write"""
        original = mp3_file.read_bytes()

        with pytest.raises(PersistError) as exc_info:
            write_mp3_tags(mp3_file, b'\xff\xd8', sample_metadata)

        assert exc_info.value.details['file_path'] == str(mp3_file)
        assert mp3_file.read_bytes() == original

    def test_write_protected_invalid_file(self, temp_dir, sample_metadata, write_protected):
        path = temp_dir / "broken.mp3"
        path.write_bytes(b'\x00' * 64)

        with pytest.raises(ContainerParseError):
            write_mp3_tags(path, b'\xff\xd8', sample_metadata)

    @pytest.mark.parametrize("options", [
        {'cover_policy': 'replce'},
        {'cover_policy': 'overwrite'},
        {'id3_version': '2.2'},
        {'id3_version': 'v2.4'},
    ])
    def test_unknown_options(self, mp3_file, sample_metadata, options):
        original = mp3_file.read_bytes()

        with pytest.raises(ValueError):
            write_mp3_tags(mp3_file, b'\xff\xd8', sample_metadata, **options)

        assert mp3_file.read_bytes() == original

    def test_cover_policy_is_case_insensitive(self, mp3_file, sample_metadata, jpeg_bytes, png_bytes):
        write_mp3_tags(mp3_file, jpeg_bytes, sample_metadata)
        write_mp3_tags(mp3_file, png_bytes, sample_metadata, cover_policy='REPLACE')

        pictures = ID3(mp3_file).getall('APIC')
        assert len(pictures) == 1
        assert pictures[0].data == png_bytes
