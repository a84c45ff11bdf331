"""
Tests pour le service d'empreinte XXH3-128.

Verifie que l'empreinte depend du contenu seul, pas du nom ni de
l'emplacement, et que la lecture par blocs donne le meme resultat
que la lecture d'un seul tenant.
"""

import builtins
import threading
from pathlib import Path

import pytest
import xxhash

from src.infrastructure.persistence import hash_service
from src.infrastructure.persistence.hash_service import compute_fingerprint


class TestComputeFingerprint:
    """Tests pour compute_fingerprint."""

    @pytest.mark.asyncio
    async def test_matches_xxh3_128_of_content(self, tmp_path: Path) -> None:
        content = b"PlexOrg" * 1000
        file_path = tmp_path / "movie.mkv"
        file_path.write_bytes(content)

        fingerprint = await compute_fingerprint(file_path)

        assert fingerprint.hash == xxhash.xxh3_128(content).hexdigest()
        assert fingerprint.size_bytes == len(content)
        assert len(fingerprint.hash) == 32

    @pytest.mark.asyncio
    async def test_same_content_different_names(self, tmp_path: Path) -> None:
        (tmp_path / "a.mkv").write_bytes(b"identical bytes")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.mp4").write_bytes(b"identical bytes")

        first = await compute_fingerprint(tmp_path / "a.mkv")
        second = await compute_fingerprint(tmp_path / "sub" / "b.mp4")

        assert first == second

    @pytest.mark.asyncio
    async def test_different_content(self, tmp_path: Path) -> None:
        (tmp_path / "a.mkv").write_bytes(b"content one")
        (tmp_path / "b.mkv").write_bytes(b"content two")

        assert await compute_fingerprint(tmp_path / "a.mkv") != await compute_fingerprint(
            tmp_path / "b.mkv"
        )

    @pytest.mark.asyncio
    async def test_chunked_read_is_equivalent(self, tmp_path: Path) -> None:
        content = bytes(range(256)) * 50
        file_path = tmp_path / "chunked.mkv"
        file_path.write_bytes(content)

        small_chunks = await compute_fingerprint(file_path, chunk_size=7)
        one_chunk = await compute_fingerprint(file_path, chunk_size=len(content) + 1)

        assert small_chunks == one_chunk

    @pytest.mark.asyncio
    async def test_empty_file(self, tmp_path: Path) -> None:
        file_path = tmp_path / "empty.mkv"
        file_path.write_bytes(b"")

        fingerprint = await compute_fingerprint(file_path)

        assert fingerprint.size_bytes == 0

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            await compute_fingerprint(tmp_path / "missing.mkv")

    @pytest.mark.asyncio
    async def test_file_opened_outside_event_loop_thread(
        self, tmp_path: Path, monkeypatch
    ) -> None:
        opened_in: list[threading.Thread] = []

        def recording_open(*args, **kwargs):
            opened_in.append(threading.current_thread())
            return builtins.open(*args, **kwargs)

        monkeypatch.setattr(hash_service, "open", recording_open, raising=False)
        file_path = tmp_path / "movie.mkv"
        file_path.write_bytes(b"content")

        await compute_fingerprint(file_path)

        assert len(opened_in) == 1
        assert opened_in[0] is not threading.main_thread()
