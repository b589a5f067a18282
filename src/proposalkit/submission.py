"""Busy flags guarding proposal submission.

Draft and signed submissions each have their own flag so a presentation
layer can show progress on the trigger that was used.  Either flag blocks
both kinds of submission, and both are cleared when the attempt ends, no
matter how it ends.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from proposalkit.errors import AlreadyInProgress

__all__ = ["SubmissionController"]


class SubmissionController:
    def __init__(self) -> None:
        self.is_loading_draft = False
        self.is_loading_signed_proposal = False

    @property
    def is_loading(self) -> bool:
        return self.is_loading_draft or self.is_loading_signed_proposal

    @contextmanager
    def begin(self, is_draft: bool) -> Iterator[None]:
        """Hold the matching busy flag for the duration of the block.

        Raises:
            AlreadyInProgress: If a submission is already running.
        """
        if self.is_loading:
            raise AlreadyInProgress()
        if is_draft:
            self.is_loading_draft = True
        else:
            self.is_loading_signed_proposal = True
        try:
            yield
        finally:
            self.turn_off_loaders()

    def turn_off_loaders(self) -> None:
        self.is_loading_draft = False
        self.is_loading_signed_proposal = False
