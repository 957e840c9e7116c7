"""Editor autosave scheduling.

An `AutosaveSession` owns two timers for one open editor:

- an idle timer, restarted on every edit, that saves once the author has
  stopped typing for `idle_seconds`;
- an interval timer that saves every `interval_seconds` while the session is
  open, whether or not the author keeps typing.

Both timers are asyncio tasks owned by the session and are cancelled by
`close()` (or on leaving `async with`), so no save can fire after the editor
has gone away. Saves are serialised with a lock: the first successful save of
a new post allocates its id, and every later save updates that id.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from quillpress.core.errors import Forbidden, QuillError, ValidationFailed
from quillpress.core.settings import settings
from quillpress.models.post import PostStatus
from quillpress.utils.markup import has_text, normalize_tags

logger = logging.getLogger(__name__)


class DraftSink(Protocol):
    """Destination of editor saves (usually the HTTP API)."""

    async def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a post and return its representation (must include `id`)."""
        ...

    async def update(self, post_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        """Apply a sparse update to an existing post."""
        ...


@dataclass
class EditorDraft:
    """Local state of the post being edited."""

    title: str = ""
    content: str = ""
    tags: list[str] = field(default_factory=list)
    image_url: str | None = None
    post_id: int | None = None
    owner_id: int | None = None

    def payload(self) -> dict[str, Any]:
        return {
            "title": self.title.strip(),
            "content": self.content,
            "tags": normalize_tags(self.tags),
            "image_url": self.image_url or None,
        }


class AutosaveSession:
    """Debounced and periodic saving of one editor's draft."""

    EDITABLE = ("title", "content", "tags", "image_url")

    def __init__(
        self,
        sink: DraftSink,
        account_id: int,
        draft: EditorDraft | None = None,
        *,
        idle_seconds: float | None = None,
        interval_seconds: float | None = None,
    ) -> None:
        self.sink = sink
        self.account_id = account_id
        self.draft = draft or EditorDraft()
        self.idle_seconds = (
            settings.autosave_idle_seconds if idle_seconds is None else idle_seconds
        )
        self.interval_seconds = (
            settings.autosave_interval_seconds if interval_seconds is None else interval_seconds
        )
        self.save_count = 0
        self._lock = asyncio.Lock()
        self._idle_task: asyncio.Task[None] | None = None
        self._interval_task: asyncio.Task[None] | None = None
        self._closed = False

    async def __aenter__(self) -> AutosaveSession:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def is_open(self) -> bool:
        return not self._closed

    def can_save(self) -> bool:
        """Return True when a save would be sent.

        The author must own the post (or be creating a new one), the title
        must be non-blank and the content must have text once tags are removed.
        """
        if self.draft.post_id is not None and self.draft.owner_id != self.account_id:
            return False
        if not self.draft.title.strip():
            return False
        return has_text(self.draft.content)

    async def start(self) -> None:
        """Start the interval timer."""
        if self._closed:
            raise RuntimeError("Autosave session is closed")
        if self._interval_task is None or self._interval_task.done():
            self._interval_task = asyncio.create_task(self._run_interval())

    def edit(self, **changes: Any) -> None:
        """Apply editor changes and restart the idle timer."""
        if self._closed:
            raise RuntimeError("Autosave session is closed")
        unknown = set(changes) - set(self.EDITABLE)
        if unknown:
            raise TypeError(f"Unknown draft fields: {', '.join(sorted(unknown))}")
        for key, value in changes.items():
            setattr(self.draft, key, value)

        if self._idle_task is not None:
            self._idle_task.cancel()
        self._idle_task = asyncio.create_task(self._run_idle())

    async def save_now(self) -> dict[str, Any] | None:
        """Save the draft if eligible; skipped or failed saves return None."""
        async with self._lock:
            if self._closed:
                logger.debug("Autosave skipped: session is closed")
                return None
            if not self.can_save():
                logger.debug("Autosave skipped: draft is not savable yet")
                return None
            try:
                return await self._send(self.draft.payload(), create_status=PostStatus.DRAFT)
            except QuillError as err:
                logger.warning("Autosave failed: %s", err)
            except Exception:
                logger.exception("Autosave failed")
            return None

    async def publish(self) -> dict[str, Any]:
        """Save and publish the draft.

        Unlike autosave, an ineligible draft raises instead of being skipped.
        """
        async with self._lock:
            if self.draft.post_id is not None and self.draft.owner_id != self.account_id:
                raise Forbidden("Not authorized to publish this post")
            if not self.draft.title.strip() or not has_text(self.draft.content):
                raise ValidationFailed("Title and content are required")
            payload = self.draft.payload()
            payload["status"] = PostStatus.PUBLISHED.value
            return await self._send(payload, create_status=PostStatus.PUBLISHED)

    async def close(self) -> None:
        """Cancel both timers and wait for them to finish."""
        self._closed = True
        tasks = [t for t in (self._idle_task, self._interval_task) if t is not None]
        self._idle_task = None
        self._interval_task = None
        current = asyncio.current_task()
        for task in tasks:
            if task is not current:
                task.cancel()
        for task in tasks:
            if task is not current:
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    async def _send(self, payload: dict[str, Any], *, create_status: PostStatus) -> dict[str, Any]:
        if self.draft.post_id is None:
            # Only new posts get an explicit status here; autosave of an
            # existing post never flips a published post back to draft.
            payload.setdefault("status", create_status.value)
            result = await self.sink.create(payload)
            self.draft.post_id = int(result["id"])
            self.draft.owner_id = self.account_id
        else:
            result = await self.sink.update(self.draft.post_id, payload)
        self.save_count += 1
        return result

    async def _run_idle(self) -> None:
        await asyncio.sleep(self.idle_seconds)
        # A save already in flight must finish even if a new edit cancels us.
        await asyncio.shield(self.save_now())

    async def _run_interval(self) -> None:
        while not self._closed:
            await asyncio.sleep(self.interval_seconds)
            await asyncio.shield(self.save_now())
