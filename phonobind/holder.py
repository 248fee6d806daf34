"""
phonobind Ownership Holder

Bridges a native instance's lifetime convention to the lifetime of the Python
wrapper object that exposes it.

Responsibilities:
- Lifetime conventions of the native library (manual release, intrusive
  reference counting, arena scope)
- Owning holders whose release action is driven by the garbage collector
- Non-owning borrowed views over memory owned elsewhere

Invariants:
- At most one owning Holder exists per native instance at a time
- A Holder's release action runs at most once, on any thread
- release() never raises; failures are logged and swallowed
- A Borrowed view never runs a release action
"""

import logging
import threading
import weakref

from phonobind.errors import ObjectReleasedError, OwnershipError

logger = logging.getLogger(__name__)


# =============================================================================
# Lifetime Conventions
# =============================================================================


class Lifetime:
    """
    Native lifetime convention for one family of native types.

    Subclasses define what "taking ownership" and "releasing" mean for the
    native memory model.
    """

    def acquire(self, instance) -> None:
        """Mark `instance` as host-owned. Default: nothing to do."""

    def release(self, instance) -> None:
        raise NotImplementedError


class ManualRelease(Lifetime):
    """Unique ownership; the instance is freed by a native release function."""

    def __init__(self, release_fn):
        self.release_fn = release_fn

    def release(self, instance) -> None:
        self.release_fn(instance)

    def __repr__(self) -> str:
        return f"ManualRelease({getattr(self.release_fn, '__name__', self.release_fn)!r})"


class RefCounted(Lifetime):
    """Intrusive reference counting through the instance's retain()/release()."""

    def acquire(self, instance) -> None:
        instance.retain()

    def release(self, instance) -> None:
        instance.release()

    def __repr__(self) -> str:
        return "RefCounted()"


class ArenaScoped(Lifetime):
    """The instance lives as long as its arena; releasing a holder frees nothing."""

    def release(self, instance) -> None:
        pass

    def __repr__(self) -> str:
        return "ArenaScoped()"


# =============================================================================
# Holder - Owning
# =============================================================================


class Holder:
    """
    Owning handle over exactly one native instance.

    Created with Holder.acquire(); bound to its host wrapper with attach(),
    after which the wrapper's collection triggers release().
    """

    owning = True

    # ids of native instances that currently have an owning holder
    _live: set[int] = set()
    _live_lock = threading.Lock()

    def __init__(self, instance, lifetime: Lifetime):
        self._instance = instance
        self._type_name = type(instance).__name__
        self._lifetime = lifetime
        self._released = False
        self._lock = threading.Lock()
        self._finalizer: weakref.finalize | None = None
        self._tracked = False

    @classmethod
    def acquire(cls, instance, lifetime: Lifetime, track: bool = __debug__) -> "Holder":
        """
        Take ownership of a native instance.

        Args:
            instance: Raw native instance
            lifetime: Lifetime convention of the instance's native type
            track: Check that no other owning holder exists for `instance`

        Returns:
            A new owning Holder.

        Raises:
            OwnershipError: If `track` is set and `instance` is already owned.
        """
        if track:
            with cls._live_lock:
                if id(instance) in cls._live:
                    raise OwnershipError(
                        f"{type(instance).__name__} instance at {id(instance):#x} "
                        "already has an owning holder"
                    )
                cls._live.add(id(instance))

        holder = cls(instance, lifetime)
        holder._tracked = track
        try:
            lifetime.acquire(instance)
        except Exception:
            holder._untrack(id(instance))
            raise
        return holder

    @staticmethod
    def borrow(instance) -> "Borrowed":
        """Return a non-owning view of `instance`."""
        return Borrowed(instance)

    def attach(self, wrapper) -> "Holder":
        """Run release() when `wrapper` becomes unreachable."""
        self._finalizer = weakref.finalize(wrapper, self.release)
        return self

    @property
    def released(self) -> bool:
        return self._released

    def get(self):
        """
        Return the native instance.

        Raises:
            ObjectReleasedError: In debug runs, if the holder was released.
                Unchecked under `python -O`; callers must not reach this path.
        """
        if __debug__ and self._released:
            raise ObjectReleasedError(self._type_name)
        return self._instance

    def release(self) -> None:
        """
        Run the lifetime's release action exactly once.

        Safe to call from the collector's thread. Never raises.
        """
        with self._lock:
            if self._released:
                return
            self._released = True
            instance, self._instance = self._instance, None

        try:
            self._lifetime.release(instance)
        except Exception:
            logger.exception("Releasing %s instance failed", self._type_name)
        finally:
            self._untrack(id(instance))
            if self._finalizer is not None:
                self._finalizer.detach()

    def _untrack(self, key: int) -> None:
        if self._tracked:
            with self._live_lock:
                self._live.discard(key)
            self._tracked = False

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"<Holder {self._type_name} {state} {self._lifetime!r}>"


# =============================================================================
# Borrowed - Non-owning
# =============================================================================


class Borrowed:
    """Non-owning view; the native instance is owned elsewhere."""

    owning = False
    released = False

    def __init__(self, instance):
        self._instance = instance

    def attach(self, wrapper) -> "Borrowed":
        return self

    def get(self):
        return self._instance

    def release(self) -> None:
        # Nothing to release
        pass

    def __repr__(self) -> str:
        return f"<Borrowed {type(self._instance).__name__}>"
