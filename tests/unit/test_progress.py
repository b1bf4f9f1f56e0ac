from __future__ import annotations

from unittest.mock import patch

from vocab_import.services.progress import ChunkProgress


def test_progress_disabled_without_tty():
    with patch("vocab_import.services.progress.is_tty_enabled", return_value=False):
        with ChunkProgress(100) as progress:
            assert progress.pbar is None
            progress.advance(1, 50)
            progress.advance(2, 50)
    assert progress.committed_rows == 100


def test_progress_bar_with_tty():
    with patch("vocab_import.services.progress.is_tty_enabled", return_value=True):
        with patch("vocab_import.services.progress.tqdm") as mock_tqdm:
            progress = ChunkProgress(120)
            progress.advance(1, 50)
            bar = mock_tqdm.return_value
            bar.update.assert_called_once_with(50)
            progress.close()
            bar.close.assert_called_once()
            assert progress.pbar is None


def test_progress_no_bar_for_zero_rows():
    with patch("vocab_import.services.progress.is_tty_enabled", return_value=True):
        with patch("vocab_import.services.progress.tqdm") as mock_tqdm:
            progress = ChunkProgress(0)
            assert progress.pbar is None
            mock_tqdm.assert_not_called()
