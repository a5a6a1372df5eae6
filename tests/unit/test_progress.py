from __future__ import annotations

from unittest.mock import Mock, patch

from office_import.services.progress import ProgressTracker, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    """Test that is_tty_enabled returns sys.stdout.isatty()."""
    with patch('sys.stdout.isatty', return_value=True):
        assert is_tty_enabled() is True

    with patch('sys.stdout.isatty', return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:
    """Test cases for ProgressTracker class."""

    def test_init_with_tty_enabled(self):
        with patch('office_import.services.progress.is_tty_enabled', return_value=True), \
             patch('office_import.services.progress.tqdm') as mock_tqdm:

            tracker = ProgressTracker(5)

            assert tracker.total_rows == 5
            assert tracker.description == "Importing offices"
            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=5,
                desc="Importing offices",
                unit="row",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch('office_import.services.progress.is_tty_enabled', return_value=False):
            tracker = ProgressTracker(5, description="Rows")

            assert tracker.enabled is False
            assert tracker.pbar is None

    def test_advance_counts_and_updates_bar(self):
        mock_pbar = Mock()
        with patch('office_import.services.progress.is_tty_enabled', return_value=True), \
             patch('office_import.services.progress.tqdm', return_value=mock_pbar):

            tracker = ProgressTracker(3)
            tracker.advance(True)
            tracker.advance(False)
            tracker.advance()

            assert tracker.succeeded == 2
            assert tracker.failed == 1
            assert mock_pbar.update.call_count == 3
            mock_pbar.set_postfix.assert_called_with(ok=2, failed=1)

    def test_advance_without_tty_only_counts(self):
        with patch('office_import.services.progress.is_tty_enabled', return_value=False):
            tracker = ProgressTracker(2)
            tracker.advance(False)
            assert tracker.failed == 1

    def test_context_manager_closes_bar(self):
        mock_pbar = Mock()
        with patch('office_import.services.progress.is_tty_enabled', return_value=True), \
             patch('office_import.services.progress.tqdm', return_value=mock_pbar):

            with ProgressTracker(1) as tracker:
                tracker.advance()

            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None
            # second close is a no-op
            tracker.close()
            mock_pbar.close.assert_called_once()
