"""
Profile store: the only mutation path for profiles, intervals and daily logs.

The store owns one StoreDocument and writes it through the injected storage
port after every successful mutation. A mutation whose write fails is rolled
back, so memory and storage never disagree. Invalid input is rejected with a
failure value and leaves state untouched; no public operation raises for it.

Typical usage:
    store = ProfileStore(get_storage())
    store.add_profile("Ana", "2024-01-01")
    store.log_period_end("2024-01-05")
    store.save_daily_log("2024-01-02", mood="tired", symptoms=["cramps"])
"""
import json
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from cyclesync.models.cycle import CycleInterval
from cyclesync.models.log import DailyLog
from cyclesync.models.profile import Profile
from cyclesync.models.store import ImportResult, StoreDocument, parse_store_document
from cyclesync.services.exceptions import InvalidInputError, StorageError
from cyclesync.services.utils import DateLike, latest_interval, to_date
from cyclesync.utils.logging import log_exception, log_rejection, logger
from cyclesync.utils.storage import StoragePort, get_storage


def _millisecond_id() -> str:
    return f"u{int(time.time() * 1000)}"


class ProfileStore:
    """Write-through store of all profiles and the active profile index."""

    def __init__(
        self,
        storage: Optional[StoragePort] = None,
        id_factory: Callable[[], str] = _millisecond_id
    ):
        """
        Load the persisted document from storage.

        Args:
            storage: Persistence backend; the configured singleton when omitted
            id_factory: Generates opaque profile ids
        """
        self.storage = storage if storage is not None else get_storage()
        self._id_factory = id_factory
        self._document = self._load()

    def _load(self) -> StoreDocument:
        try:
            raw = self.storage.load()
        except StorageError:
            log_exception(logger, "Failed to load persisted store, starting empty")
            return StoreDocument(users=[])

        if raw is None:
            return StoreDocument(users=[])

        result = parse_store_document(raw)
        if not result.success:
            logger.warning("Persisted store is invalid, starting empty", extra={
                "error": result.error
            })
            return StoreDocument(users=[])

        logger.info("Loaded store", extra={
            "profiles": len(result.document.users),
            "version": result.version
        })
        return result.document

    def _commit(self, mutation: Callable[[StoreDocument], None], message: str, **context: Any) -> bool:
        """
        Apply a mutation and persist the whole document.

        Returns:
            True when the document was written, False when the write failed
            and the mutation was rolled back
        """
        snapshot = self._document.model_copy(deep=True)
        mutation(self._document)
        try:
            self.storage.save(self._document.to_document())
        except StorageError:
            self._document = snapshot
            log_exception(logger, "Failed to persist store, change rolled back", extra={
                "operation": message,
                **context
            })
            return False

        logger.info(message, extra=context)
        return True

    def _active(self) -> Profile:
        index = self._document.current_user_index
        if index is None or not 0 <= index < len(self._document.users):
            raise InvalidInputError("No active profile")
        return self._document.users[index]

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidInputError(f"Profile index must be an integer, got {index!r}")
        if not 0 <= index < len(self._document.users):
            raise InvalidInputError(
                f"Profile index {index} out of range for {len(self._document.users)} profile(s)"
            )

    def _new_profile_id(self) -> str:
        existing = {profile.id for profile in self._document.users}
        base = self._id_factory()
        candidate = base
        suffix = 1
        while candidate in existing:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    @property
    def active_index(self) -> Optional[int]:
        """Index of the active profile; None when no profiles exist."""
        return self._document.current_user_index

    @property
    def profiles(self) -> List[Profile]:
        """Copies of all profiles in store order."""
        return [profile.model_copy(deep=True) for profile in self._document.users]

    def get_active_profile(self) -> Optional[Profile]:
        """Copy of the active profile, or None before onboarding."""
        try:
            return self._active().model_copy(deep=True)
        except InvalidInputError:
            return None

    def get_log(self, day: DateLike) -> Optional[DailyLog]:
        """Copy of the active profile's log for a day, if one was saved."""
        try:
            entry = self._active().logs.get(to_date(day))
        except InvalidInputError:
            return None
        return entry.model_copy(deep=True) if entry is not None else None

    def add_profile(self, name: str, last_period_start: Optional[DateLike] = None) -> Optional[Profile]:
        """
        Create a profile and make it active.

        Args:
            name: Display name; empty names are rejected
            last_period_start: Optional start of the current or last period,
                seeded as an open interval

        Returns:
            Copy of the new profile, or None if the input was rejected or
            could not be persisted
        """
        try:
            if not isinstance(name, str) or not name.strip():
                raise InvalidInputError("Profile name must not be empty")
            start = to_date(last_period_start) if last_period_start else None
        except InvalidInputError as e:
            log_rejection(logger, "new profile", e)
            return None

        profile = Profile(id=self._new_profile_id(), name=name)
        if start is not None:
            profile.cycles.append(CycleInterval(start_date=start))

        def mutation(document: StoreDocument) -> None:
            document.users.append(profile)
            document.current_user_index = len(document.users) - 1

        if not self._commit(mutation, "Added profile", profile_id=profile.id, seeded=start is not None):
            return None
        return profile.model_copy(deep=True)

    def switch_active(self, index: int) -> bool:
        """
        Make another profile active.

        Returns:
            False if the index is out of range
        """
        try:
            self._check_index(index)
        except InvalidInputError as e:
            log_rejection(logger, "profile switch", e)
            return False

        def mutation(document: StoreDocument) -> None:
            document.current_user_index = index

        return self._commit(mutation, "Switched active profile", index=index)

    def delete_profile(self, index: int) -> bool:
        """
        Remove a profile and re-anchor the active index.

        A deletion before the active profile shifts the index down by one;
        deleting the active profile makes the first profile active. An empty
        store has no active profile.

        Returns:
            False if the index is out of range
        """
        try:
            self._check_index(index)
        except InvalidInputError as e:
            log_rejection(logger, "profile deletion", e)
            return False

        def mutation(document: StoreDocument) -> None:
            active = document.current_user_index
            del document.users[index]
            if not document.users:
                document.current_user_index = None
            elif active is not None and index < active:
                document.current_user_index = active - 1
            elif index == active:
                document.current_user_index = 0

        return self._commit(mutation, "Deleted profile", index=index)

    def log_period_start(self, day: DateLike) -> bool:
        """
        Start a period on the active profile.

        Any open interval is closed on ``day`` before the new open interval is
        added. Past dates are accepted as they are; ordering is derived on read.

        Returns:
            False if there is no active profile or the date is invalid
        """
        try:
            profile = self._active()
            start = to_date(day)
        except InvalidInputError as e:
            log_rejection(logger, "period start", e)
            return False

        def mutation(document: StoreDocument) -> None:
            active = document.users[document.current_user_index]
            for interval in active.cycles:
                if interval.is_open:
                    interval.end_date = start
            active.cycles.append(CycleInterval(start_date=start))

        return self._commit(mutation, "Logged period start", profile_id=profile.id, date=start.isoformat())

    def log_period_end(self, day: DateLike) -> bool:
        """
        End the most recent period if it is still open.

        Returns:
            False if there is nothing open to close or the input is invalid
        """
        try:
            profile = self._active()
            end = to_date(day)
        except InvalidInputError as e:
            log_rejection(logger, "period end", e)
            return False

        latest = latest_interval(profile)
        if latest is None or not latest.is_open:
            logger.info("No open period to end", extra={"profile_id": profile.id})
            return False

        def mutation(document: StoreDocument) -> None:
            latest_interval(document.users[document.current_user_index]).end_date = end

        return self._commit(mutation, "Logged period end", profile_id=profile.id, date=end.isoformat())

    def save_daily_log(
        self,
        day: DateLike,
        mood: Optional[str] = None,
        flow: Optional[str] = None,
        symptoms: Optional[Iterable[str]] = None
    ) -> bool:
        """
        Save the daily log for a day, replacing any earlier entry for it.

        Returns:
            False if there is no active profile or a value is invalid
        """
        try:
            profile = self._active()
            log_date = to_date(day)
            entry = DailyLog(mood=mood, flow=flow, symptoms=list(symptoms or []))
        except InvalidInputError as e:
            log_rejection(logger, "daily log", e)
            return False
        except ValidationError as e:
            log_rejection(logger, "daily log", f"{e.error_count()} invalid field(s)")
            return False

        def mutation(document: StoreDocument) -> None:
            document.users[document.current_user_index].logs[log_date] = entry

        return self._commit(
            mutation,
            "Saved daily log",
            profile_id=profile.id,
            date=log_date.isoformat(),
            symptoms=len(entry.symptoms)
        )

    def replace_all(self, candidate: Any) -> ImportResult:
        """
        Replace the whole store with an imported document.

        Args:
            candidate: JSON text or mapping in the export shape

        Returns:
            ImportResult; on failure the current store is left untouched
        """
        result = parse_store_document(candidate)
        if not result.success:
            log_rejection(logger, "store import", result.error)
            return result

        imported = result.document.model_copy(deep=True)

        def mutation(document: StoreDocument) -> None:
            document.users = imported.users
            document.current_user_index = imported.current_user_index

        if not self._commit(mutation, "Imported store", profiles=len(imported.users), version=result.version):
            return ImportResult(success=False, version=result.version, error="Failed to persist imported store")
        return result

    def export_document(self) -> Dict[str, Any]:
        """The whole store in its persisted shape."""
        return self._document.to_document()

    def export_json(self) -> str:
        """The whole store as JSON text, suitable for a backup file."""
        return json.dumps(self.export_document(), ensure_ascii=False)
