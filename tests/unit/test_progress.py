from __future__ import annotations

from unittest.mock import Mock, call, patch

from caneflow.core.mapper import build_preview
from caneflow.models.cable_record import CableRecord
from caneflow.models.export_options import ProgressEvent
from caneflow.services.progress import RowProgressBar, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    with patch("sys.stdout.isatty", return_value=True):
        assert is_tty_enabled() is True
    with patch("sys.stdout.isatty", return_value=False):
        assert is_tty_enabled() is False


class TestRowProgressBar:
    def test_tty_disabled_creates_no_bar(self):
        with patch("caneflow.services.progress.is_tty_enabled", return_value=False), \
             patch("caneflow.services.progress.tqdm") as mock_tqdm:
            bar = RowProgressBar("Conversion")
            bar(ProgressEvent(current=1, total=4, percent=25))

            assert bar.enabled is False
            assert bar.pbar is None
            assert bar.last_event == ProgressEvent(current=1, total=4, percent=25)
            mock_tqdm.assert_not_called()

    def test_first_event_creates_bar_with_total(self):
        mock_pbar = Mock()
        mock_pbar.n = 0
        with patch("caneflow.services.progress.is_tty_enabled", return_value=True), \
             patch("caneflow.services.progress.tqdm", return_value=mock_pbar) as mock_tqdm:
            bar = RowProgressBar("Conversion")
            bar(ProgressEvent(current=1, total=4, percent=25))

            mock_tqdm.assert_called_once_with(
                total=4,
                desc="Conversion",
                unit="row",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
            mock_pbar.update.assert_called_once_with(1)

    def test_updates_by_delta(self):
        mock_pbar = Mock()
        mock_pbar.n = 0
        with patch("caneflow.services.progress.is_tty_enabled", return_value=True), \
             patch("caneflow.services.progress.tqdm", return_value=mock_pbar):
            bar = RowProgressBar()
            bar(ProgressEvent(current=2, total=10, percent=20))
            mock_pbar.n = 2
            bar(ProgressEvent(current=5, total=10, percent=50))

            assert mock_pbar.update.call_args_list == [call(2), call(3)]

    def test_context_manager_closes_bar(self):
        mock_pbar = Mock()
        mock_pbar.n = 0
        with patch("caneflow.services.progress.is_tty_enabled", return_value=True), \
             patch("caneflow.services.progress.tqdm", return_value=mock_pbar):
            with RowProgressBar() as bar:
                bar(ProgressEvent(current=1, total=1, percent=100))
            mock_pbar.close.assert_called_once()
            assert bar.pbar is None

    def test_close_without_events(self):
        with patch("caneflow.services.progress.is_tty_enabled", return_value=True):
            bar = RowProgressBar()
            bar.close()
            assert bar.pbar is None

    def test_works_as_transform_callback(self):
        with patch("caneflow.services.progress.is_tty_enabled", return_value=False):
            bar = RowProgressBar()
            build_preview([CableRecord(repere="Q1", longueur=1)] * 3, on_progress=bar)
            assert bar.last_event == ProgressEvent(current=3, total=3, percent=100)
